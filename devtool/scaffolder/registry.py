"""Artifact kinds and their default generation settings.

Each ``ArtifactType`` maps to an ``ArtifactProfile``: the default
``ArtifactSpec`` plus an optional specialization hook that adjusts the
generation context once the artifact name is known (route prefixes, template
variants).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from devtool.errors import UnknownArtifactType

if TYPE_CHECKING:
    from devtool.scaffolder.generator import GenerationContext, GenerationOptions


class ArtifactType(str, Enum):
    """Closed set of artifact kinds, keyed by their type-key string."""

    TASK = "task"
    TASK_CRONTAB = "taskCrontab"
    CLI_COMMAND = "cliCommand"
    EVT_LISTENER = "evtListener"
    HTTP_CONTROLLER = "httpController"
    HTTP_MIDDLEWARE = "httpMiddleware"
    WS_MODULE = "wsModule"
    WS_CONTROLLER = "wsController"
    WS_MIDDLEWARE = "wsMiddleware"
    RPC_CONTROLLER = "rpcController"
    RPC_MIDDLEWARE = "rpcMiddleware"
    TCP_CONTROLLER = "tcpController"
    TCP_MIDDLEWARE = "tcpMiddleware"
    USER_PROCESS = "userProcess"


# Declared but without templates yet.
RESERVED_TYPES = frozenset({ArtifactType.WS_MIDDLEWARE, ArtifactType.TCP_MIDDLEWARE})


class ArtifactSpec(BaseModel):
    """Default generation parameters for one artifact kind."""

    model_config = ConfigDict(frozen=True)

    type_key: ArtifactType
    suffix: str
    namespace: str
    template_name: str
    output_dir: str

    def merge(self, overrides: Mapping[str, Any]) -> "ArtifactSpec":
        """Return a copy with non-empty *overrides* applied.

        Empty strings and ``None`` are dropped so absent CLI flags never
        clobber a default.  ``type_key`` cannot be overridden.
        """
        updates = {
            key: value
            for key, value in overrides.items()
            if value not in (None, "") and key in type(self).model_fields and key != "type_key"
        }
        if not updates:
            return self
        return self.model_copy(update=updates)


Specializer = Callable[["GenerationContext", "GenerationOptions"], None]


@dataclass(frozen=True)
class ArtifactProfile:
    """An artifact kind's default spec and its optional specialization."""

    spec: ArtifactSpec
    specialize: Specializer | None = None


# ---------------------------------------------------------------------------
# Specializations
# ---------------------------------------------------------------------------


def _route_prefix(ctx: "GenerationContext", opts: "GenerationOptions") -> None:
    ctx.set("prefix", opts.prefix or "/" + ctx.name)


def _http_controller(ctx: "GenerationContext", opts: "GenerationOptions") -> None:
    _route_prefix(ctx, opts)
    if not opts.rest and not opts.tpl_file:
        ctx.template_filename = "http-controller"


def _tcp_controller(ctx: "GenerationContext", opts: "GenerationOptions") -> None:
    ctx.set("prefix", opts.prefix or ctx.name)


def _cli_command(ctx: "GenerationContext", opts: "GenerationOptions") -> None:
    ctx.set("command_group", opts.prefix or ctx.name)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


def _spec(type_key: ArtifactType, suffix: str, namespace: str, template: str, out_dir: str) -> ArtifactSpec:
    return ArtifactSpec(
        type_key=type_key,
        suffix=suffix,
        namespace=namespace,
        template_name=template,
        output_dir=out_dir,
    )


SETTINGS: dict[ArtifactType, ArtifactProfile] = {
    ArtifactType.EVT_LISTENER: ArtifactProfile(
        _spec(ArtifactType.EVT_LISTENER, "Listener", "App\\Listener", "listener", "app/Listener"),
    ),
    ArtifactType.CLI_COMMAND: ArtifactProfile(
        _spec(ArtifactType.CLI_COMMAND, "Command", "App\\Command", "command", "app/Command"),
        _cli_command,
    ),
    ArtifactType.TASK: ArtifactProfile(
        _spec(ArtifactType.TASK, "Task", "App\\Task", "task", "app/Task"),
    ),
    ArtifactType.TASK_CRONTAB: ArtifactProfile(
        _spec(ArtifactType.TASK_CRONTAB, "Task", "App\\Task\\Crontab", "task-crontab", "app/Task/Crontab"),
    ),
    ArtifactType.HTTP_CONTROLLER: ArtifactProfile(
        _spec(
            ArtifactType.HTTP_CONTROLLER,
            "Controller",
            "App\\Http\\Controller",
            "http-rest-controller",
            "app/Http/Controller",
        ),
        _http_controller,
    ),
    ArtifactType.HTTP_MIDDLEWARE: ArtifactProfile(
        _spec(
            ArtifactType.HTTP_MIDDLEWARE,
            "Middleware",
            "App\\Http\\Middleware",
            "http-middleware",
            "app/Http/Middleware",
        ),
    ),
    ArtifactType.WS_MODULE: ArtifactProfile(
        _spec(ArtifactType.WS_MODULE, "Module", "App\\WebSocket", "ws-module", "app/WebSocket"),
        _route_prefix,
    ),
    ArtifactType.WS_CONTROLLER: ArtifactProfile(
        _spec(
            ArtifactType.WS_CONTROLLER,
            "Controller",
            "App\\WebSocket\\Controller",
            "ws-controller",
            "app/WebSocket/Controller",
        ),
        _route_prefix,
    ),
    ArtifactType.RPC_MIDDLEWARE: ArtifactProfile(
        _spec(
            ArtifactType.RPC_MIDDLEWARE,
            "Middleware",
            "App\\Rpc\\Middleware",
            "rpc-middleware",
            "app/Rpc/Middleware",
        ),
    ),
    ArtifactType.RPC_CONTROLLER: ArtifactProfile(
        _spec(ArtifactType.RPC_CONTROLLER, "Service", "App\\Rpc\\Service", "rpc-controller", "app/Rpc/Service"),
    ),
    ArtifactType.TCP_CONTROLLER: ArtifactProfile(
        _spec(
            ArtifactType.TCP_CONTROLLER,
            "Controller",
            "App\\Tcp\\Controller",
            "tcp-controller",
            "app/Tcp/Controller",
        ),
        _tcp_controller,
    ),
    ArtifactType.USER_PROCESS: ArtifactProfile(
        _spec(ArtifactType.USER_PROCESS, "Process", "App\\Process", "process", "app/Process"),
    ),
}


def lookup(type_key: ArtifactType | str) -> ArtifactProfile:
    """Return the profile registered for *type_key*.

    Raises:
        UnknownArtifactType: For unknown keys and reserved kinds.
    """
    try:
        kind = ArtifactType(type_key)
    except ValueError:
        raise UnknownArtifactType(str(type_key)) from None

    profile = SETTINGS.get(kind)
    if profile is None:
        raise UnknownArtifactType(kind.value)
    return profile


def registered_types() -> list[ArtifactType]:
    """Return every usable artifact kind, in declaration order."""
    return [kind for kind in ArtifactType if kind in SETTINGS]
