"""Single-class code generation.

``CodeGenerator`` drives one generation request through a fixed sequence:
resolve the artifact spec, collect the class name, let the artifact kind (and
an optional user callback) adjust the context, then render the stub and write
it after confirmation.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from rich.markup import escape
from rich.prompt import Confirm, Prompt

from devtool.aliases import AliasResolver
from devtool.config import DevtoolConfig
from devtool.errors import MissingRequiredInput
from devtool.scaffolder.registry import ArtifactProfile, ArtifactSpec, ArtifactType, lookup
from devtool.scaffolder.templates import TemplateRenderer
from devtool.utils import (
    console,
    print_code,
    print_error,
    print_success,
    print_summary_table,
    ucfirst,
)

PromptFn = Callable[[str], str]
ConfirmFn = Callable[[str, bool], bool]


# ---------------------------------------------------------------------------
# Request / context models
# ---------------------------------------------------------------------------


class GenerationOptions(BaseModel):
    """Options of one generation request, as collected from the CLI.

    Unknown keys are rejected.  Empty values mean "use the default".
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(default="", description="Class name without suffix or extension")
    out_dir: str = Field(default="", description="Output directory override (may use @aliases)")
    tpl_file: str = Field(default="", description="Template filename or full path")
    tpl_dir: str = Field(default="", description="Template directory")
    namespace: str = ""
    suffix: str = ""
    prefix: str = Field(default="", description="Route or command prefix")
    rest: bool = Field(default=True, description="Use the RESTful controller template")
    yes: bool = Field(default=False, description="Skip every confirmation")
    preview: bool = Field(default=False, description="Show the rendered content before writing")

    def spec_overrides(self) -> dict[str, str]:
        """Return the overrides that apply to the ``ArtifactSpec``."""
        template = "" if _is_template_path(self.tpl_file) else self.tpl_file
        return {
            "suffix": self.suffix,
            "namespace": self.namespace,
            "template_name": template,
        }


@dataclass
class GenerationContext:
    """Mutable naming context of one generation request."""

    name: str
    suffix: str
    namespace: str
    template_filename: str
    template_dir: Path
    work_dir: Path
    extra: dict[str, Any] = field(default_factory=dict)
    # Set through set("class_name", ...); empty means derive from name + suffix.
    class_name_override: str = ""

    @property
    def class_name(self) -> str:
        return self.class_name_override or class_name(self.name, self.suffix)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self.extra:
            return self.extra[key]
        if key == "class_name":
            return self.class_name
        return getattr(self, key, default) if key in self.__dataclass_fields__ else default

    def set(self, key: str, value: Any) -> None:
        """Set a known context field, or an extra template variable.

        ``class_name`` replaces the derived class name, which also names the
        generated file.
        """
        if key == "class_name":
            self.class_name_override = str(value)
        elif key in self.__dataclass_fields__ and key != "extra":
            setattr(self, key, value)
        else:
            self.extra[key] = value

    def template_vars(self) -> dict[str, Any]:
        """Flatten the context into the mapping handed to the template engine."""
        return {
            "name": self.name,
            "suffix": self.suffix,
            "namespace": self.namespace,
            "class_name": self.class_name,
            **self.extra,
        }


class SessionState(str, Enum):
    IDLE = "idle"
    SPEC_RESOLVED = "spec_resolved"
    NAME_COLLECTED = "name_collected"
    CONTEXT_FINALIZED = "context_finalized"
    RENDERED = "rendered"
    DECLINED = "declined"
    FAILED = "failed"


class GenerationOutcome(str, Enum):
    """Terminal result of a generation request."""

    RENDERED = "rendered"
    DECLINED = "declined"
    FAILED = "failed"

    @property
    def exit_code(self) -> int:
        return 1 if self is GenerationOutcome.FAILED else 0


def class_name(name: str, suffix: str) -> str:
    """``class_name("demo", "Controller") == "DemoController"``."""
    return ucfirst(name) + suffix


def _is_template_path(value: str) -> bool:
    return bool(value) and (Path(value).is_absolute() or "/" in value)


def _ask_name(message: str) -> str:
    return Prompt.ask(message, default="", show_default=False)


def _confirm(message: str, default: bool) -> bool:
    return Confirm.ask(message, default=default)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class CodeGenerator:
    """Generate one class file from a stub template.

    Quick usage::

        gen = CodeGenerator(DevtoolConfig(work_dir=Path.cwd()))
        outcome = await gen.run("httpController", GenerationOptions(name="user"))

    The optional ``after_collect`` callback receives the generator once the
    context is built and before anything is rendered; it may call
    :meth:`get` / :meth:`set` to adjust template variables.
    """

    def __init__(
        self,
        config: DevtoolConfig | None = None,
        *,
        aliases: AliasResolver | None = None,
        after_collect: Callable[["CodeGenerator"], None] | None = None,
    ) -> None:
        self.config = config or DevtoolConfig()
        self.aliases = aliases or self.config.aliases()
        self.after_collect = after_collect

        self.state = SessionState.IDLE
        self.profile: ArtifactProfile | None = None
        self.spec: ArtifactSpec | None = None
        self.options = GenerationOptions()
        self.context: GenerationContext | None = None

    # -- State machine -----------------------------------------------------

    def _expect(self, *states: SessionState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise RuntimeError(f"invalid generator state {self.state.value!r}, expected: {allowed}")

    def begin(
        self,
        type_key: ArtifactType | str,
        options: GenerationOptions | None = None,
    ) -> ArtifactSpec:
        """Resolve the artifact spec and merge the request's overrides into it.

        Raises:
            UnknownArtifactType: *type_key* is unknown or reserved.
        """
        self._expect(SessionState.IDLE)
        self.profile = lookup(type_key)
        self.options = options or GenerationOptions()
        self.spec = self.profile.spec.merge(self.options.spec_overrides())
        self.state = SessionState.SPEC_RESOLVED
        return self.spec

    def collect_name(self, prompt_fn: PromptFn | None = None) -> str:
        """Take the class name from the options, or ask for it.

        Raises:
            MissingRequiredInput: The name is still empty after prompting.
        """
        self._expect(SessionState.SPEC_RESOLVED)
        assert self.spec is not None

        name = self.options.name.strip()
        if not name:
            ask = prompt_fn or _ask_name
            name = (ask("Please input class name(no suffix and ext. eg. test)") or "").strip()
        if not name:
            raise MissingRequiredInput("No class name input! Quit")

        self.context = GenerationContext(
            name=name,
            suffix=self.spec.suffix,
            namespace=self.spec.namespace,
            template_filename=self.spec.template_name,
            template_dir=Path(self.options.tpl_dir) if self.options.tpl_dir else self.config.class_template_dir,
            work_dir=self.config.work_dir,
        )
        self.state = SessionState.NAME_COLLECTED
        return name

    def fire_after_collect(self) -> None:
        """Apply the artifact kind's specialization, then the user callback."""
        self._expect(SessionState.NAME_COLLECTED)
        assert self.profile is not None and self.context is not None

        if self.profile.specialize is not None:
            self.profile.specialize(self.context, self.options)
        if self.after_collect is not None:
            self.after_collect(self)
        self.state = SessionState.CONTEXT_FINALIZED

    def get(self, key: str, default: Any = None) -> Any:
        if self.context is None:
            return default
        return self.context.get(key, default)

    def set(self, key: str, value: Any) -> None:
        if self.context is None:
            raise RuntimeError("context is not collected yet")
        self.context.set(key, value)

    # -- Rendering ---------------------------------------------------------

    def destination(self) -> Path:
        """Return the file the class will be written to."""
        assert self.spec is not None and self.context is not None
        out_dir = self.options.out_dir or self.spec.output_dir
        return self.aliases.resolve(out_dir) / (self.context.class_name + self.config.source_ext)

    def renderer(self) -> TemplateRenderer:
        assert self.context is not None
        template_file = self.options.tpl_file if _is_template_path(self.options.tpl_file) else None
        return TemplateRenderer(
            template_dir=self.context.template_dir,
            template_filename=self.context.template_filename,
            template_ext=self.config.template_ext,
            template_file=template_file,
            aliases=self.aliases,
        )

    def metadata(self) -> dict[str, Any]:
        assert self.context is not None
        return {**self.context.template_vars(), "template": self.context.template_filename}

    async def finalize_and_write(self, confirm_fn: ConfirmFn | None = None) -> GenerationOutcome:
        """Render the class and write it, asking for confirmation unless ``yes``.

        Template errors propagate.  A declined confirmation or a failed write
        is reported on the console and returned as the outcome.
        """
        self._expect(SessionState.CONTEXT_FINALIZED)
        confirm = confirm_fn or _confirm
        yes = self.options.yes

        print_summary_table(self.metadata(), title="Metadata")
        target = self.destination()
        console.print(f"Target File:\n  [cyan]{escape(str(target))}[/cyan]\n", highlight=False)

        renderer = self.renderer()
        content = renderer.render(None, self.context.template_vars())

        if self.options.preview:
            print_code(content)

        if target.exists() and not yes:
            if not confirm("Target file has been exists, override it?", False):
                return self._finish(GenerationOutcome.DECLINED)

        if not yes and not confirm("Now, will write content to file, ensure continue?", True):
            return self._finish(GenerationOutcome.DECLINED)

        if await renderer.write_raw(target, content):
            print_success("OK, write successful!")
            return self._finish(GenerationOutcome.RENDERED)

        print_error(f"NO, write failed! {renderer.last_error}")
        return self._finish(GenerationOutcome.FAILED)

    def _finish(self, outcome: GenerationOutcome) -> GenerationOutcome:
        if outcome is GenerationOutcome.DECLINED:
            console.print("Quit, Bye!", style="cyan")
        self.state = SessionState(outcome.value)
        return outcome

    async def run(
        self,
        type_key: ArtifactType | str,
        options: GenerationOptions | None = None,
        prompt_fn: PromptFn | None = None,
        confirm_fn: ConfirmFn | None = None,
    ) -> GenerationOutcome:
        """Run the whole generation request."""
        self.begin(type_key, options)
        self.collect_name(prompt_fn)
        self.fire_after_collect()
        return await self.finalize_and_write(confirm_fn)
