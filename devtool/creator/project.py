"""Create a new application from a template repository.

The template repository is cloned once into a local cache directory (keyed by
the repository name) and copied from there into the new project directory,
without its ``.git`` metadata.
"""

from __future__ import annotations

import os
import re
import shlex
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from devtool.creator.base import BaseCreator, ExecNotifier
from devtool.errors import (
    InvalidRepoAddress,
    InvalidTypeName,
    MissingRequiredInput,
    MissingSource,
    TargetExists,
    WriteError,
)
from devtool.utils import ensure_dir

GITHUB_URL = "https://github.com"
SWOFT_CLOUD_URL = "https://github.com/swoft-cloud"

# https://github.com/swoft-cloud/swoft-http-project.git
DEMO_GITHUB_REPOS: dict[str, str] = {
    "http": "swoft-http-project",
    "tcp": "swoft-tcp-project",
    "rpc": "swoft-rpc-project",
    "ws": "swoft-ws-project",
}

DEFAULT_CACHE_DIR = Path(tempfile.gettempdir()) / "swoft-app-demos"

_FULL_URL_PREFIXES = ("http:", "https:", "git@")


class SourceKind(str, Enum):
    EXPLICIT_URL = "explicit-url"
    SHORTHAND = "shorthand"
    NAMED_PRESET = "named-preset"


@dataclass(frozen=True)
class RepositorySource:
    """Where a new project's template comes from."""

    kind: SourceKind
    raw_value: str
    resolved_url: str


@dataclass(frozen=True)
class ProjectCreationState:
    """Validated inputs of one project creation."""

    name: str
    type: str
    repo: str
    repo_url: str
    work_dir: str
    project_path: str
    refresh: bool


def is_full_url(value: str) -> bool:
    return value.startswith(_FULL_URL_PREFIXES)


def resolve_source(repo: str = "", type_name: str = "") -> RepositorySource:
    """Classify and resolve a ``--repo`` / ``--type`` pair.

    ``repo`` wins over ``type_name`` when both are given.

    Raises:
        InvalidRepoAddress: ``repo`` is neither a full URL nor ``user/repo``.
        InvalidTypeName: ``type_name`` is not a known preset.
        MissingSource: Neither value is given.
    """
    if repo:
        if is_full_url(repo):
            return RepositorySource(SourceKind.EXPLICIT_URL, repo, repo)
        # "user/repo", the slash must not be the first character
        if repo.find("/") > 0:
            return RepositorySource(SourceKind.SHORTHAND, repo, f"{GITHUB_URL}/{repo}.git")
        raise InvalidRepoAddress(repo)

    if type_name:
        if type_name not in DEMO_GITHUB_REPOS:
            raise InvalidTypeName(type_name, ["http", "ws", "tcp", "rpc"])
        url = f"{SWOFT_CLOUD_URL}/{DEMO_GITHUB_REPOS[type_name]}.git"
        return RepositorySource(SourceKind.NAMED_PRESET, type_name, url)

    raise MissingSource()


def repo_cache_name(repo_url: str) -> str:
    """Return the cache directory name for *repo_url*.

    ``https://github.com/a/b.git`` and ``git@github.com:a/b.git`` both map
    to ``b``.
    """
    base = re.split(r"[/:]", repo_url.rstrip("/"))[-1]
    return base[: -len(".git")] if base.endswith(".git") else base


class ProjectCreator(BaseCreator):
    """Create a new application project from a cached template repository.

    Usage::

        pcr = ProjectCreator(name="demo", type="http", work_dir="/tmp/x")
        if pcr.validate():
            await pcr.create()
            await pcr.install()
        if pcr.error:
            ...
    """

    def __init__(
        self,
        name: str = "",
        type: str = "",
        repo: str = "",
        work_dir: str | Path = "",
        refresh: bool = False,
        no_install: bool = False,
        cache_dir: str | Path | None = None,
        install_command: str = "composer install",
        on_exec_cmd: ExecNotifier | None = None,
    ) -> None:
        super().__init__(name=name, work_dir=work_dir, on_exec_cmd=on_exec_cmd)
        self.type = type.strip()
        self.repo = repo.strip()
        self.refresh = refresh
        self.no_install = no_install
        self.cache_dir = Path(cache_dir) if cache_dir else DEFAULT_CACHE_DIR
        self.install_command = install_command
        self.source: RepositorySource | None = None
        self.state: ProjectCreationState | None = None

    @property
    def project_path(self) -> str:
        return self.state.project_path if self.state is not None else ""

    @property
    def repo_url(self) -> str:
        return self.source.resolved_url if self.source is not None else ""

    def validate(self) -> bool:
        """Check the inputs and compute the project path.

        On failure the error is recorded and the project path stays unset.
        """
        if not self.name:
            self.fail(MissingRequiredInput("please set the new project name"))
            return False

        try:
            self.source = resolve_source(self.repo, self.type)
        except (InvalidRepoAddress, InvalidTypeName, MissingSource) as exc:
            self.fail(exc)
            return False

        project_path = os.path.join(self.work_dir, self.name) if self.work_dir else self.name
        self.state = ProjectCreationState(
            name=self.name,
            type=self.type,
            repo=self.repo,
            repo_url=self.source.resolved_url,
            work_dir=self.work_dir,
            project_path=project_path,
            refresh=self.refresh,
        )
        return True

    def info(self) -> dict[str, Any]:
        info = {
            "name": self.name,
            "type": self.type,
            "repo": self.repo,
            "repoUrl": self.repo_url,
            "workDir": self.work_dir,
            "projectPath": self.project_path,
            "cacheDir": str(self.cache_dir),
        }
        return {key: value for key, value in info.items() if value}

    def cache_path(self) -> Path:
        return self.cache_dir / repo_cache_name(self.repo_url)

    async def create(self) -> None:
        """Clone (or reuse) the cached template and copy it to the project path."""
        if self.failure is None and self.state is None:
            self.validate()
        if self.failure is not None or self.state is None:
            return

        path = self.state.project_path
        if os.path.exists(path):
            self.fail(TargetExists("the project dir has been exist!"))
            return

        try:
            ensure_dir(self.cache_dir, mode=0o755)
        except OSError as exc:
            self.fail(WriteError(str(self.cache_dir), exc.strerror or str(exc)))
            return

        cache_path = self.cache_path()
        has_cache = cache_path.exists()

        if has_cache and self.state.refresh:
            if not await self.delete_dir(cache_path):
                return
            has_cache = False

        if not has_cache:
            cmd = (
                f"cd {shlex.quote(str(self.cache_dir))} && "
                f"git clone --no-tags --depth 1 {shlex.quote(self.state.repo_url)}"
            )
            if not await self.exec(cmd):
                return

        target = shlex.quote(path)
        await self.exec(f"cp -R {shlex.quote(str(cache_path))} {target} && rm -rf {target}/.git")

    async def install(self) -> None:
        """Run the dependency installer inside the new project."""
        if self.no_install or self.failure is not None or self.state is None:
            return
        await self.exec(f"cd {shlex.quote(self.state.project_path)} && {self.install_command}")
