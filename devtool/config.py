"""Devtool configuration.

Centralised, typed configuration shared by the code generator and the
project/component creators.  All settings use Pydantic v2 models so they are
validated at construction time and can be overridden from environment
variables.
"""

from __future__ import annotations

import getpass
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from devtool.aliases import AliasResolver

BUNDLED_TEMPLATE_DIR = Path(__file__).parent / "scaffolder" / "templates"


def default_username() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "swoft"


class DevtoolConfig(BaseModel):
    """Global devtool configuration.

    Instances are usually created once by the CLI entry point and passed to
    ``CodeGenerator``, ``ProjectCreator`` and ``ComponentCreator``.
    """

    work_dir: Path = Field(default_factory=Path.cwd)
    template_dir: Path = Field(default=BUNDLED_TEMPLATE_DIR)
    template_ext: str = Field(default=".stub", description="Extension appended to template names")
    source_ext: str = Field(default=".php", description="Extension of generated class files")
    cache_dir: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()) / "swoft-app-demos",
        description="Local clone cache for project template repositories",
    )
    install_command: str = Field(default="composer install")
    username: str = Field(default_factory=default_username)

    @field_validator("template_ext", "source_ext")
    @classmethod
    def _leading_dot(cls, value: str) -> str:
        value = value.strip().strip(".")
        if not value:
            raise ValueError("extension must not be empty")
        return f".{value}"

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def class_template_dir(self) -> Path:
        """Directory holding the per-artifact class stubs."""
        return self.template_dir / "classes"

    @property
    def component_template_dir(self) -> Path:
        """Directory holding the component skeleton stubs."""
        return self.template_dir

    def aliases(self) -> AliasResolver:
        """Build the default alias resolver for this configuration."""
        return AliasResolver(
            {
                "@root": self.work_dir,
                "@app": self.work_dir / "app",
                "@devtool": self.template_dir,
            },
            base_dir=self.work_dir,
        )

    @classmethod
    def from_env(cls, **overrides: Any) -> "DevtoolConfig":
        """Build a ``DevtoolConfig`` from environment variables.

        Recognised variables (all optional):
            DEVTOOL_TPL_DIR, DEVTOOL_TPL_EXT, DEVTOOL_SOURCE_EXT,
            DEVTOOL_CACHE_DIR, DEVTOOL_INSTALL_CMD, DEVTOOL_USERNAME.

        Keyword arguments win over the environment.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("DEVTOOL_TPL_DIR"):
            kwargs["template_dir"] = Path(os.environ["DEVTOOL_TPL_DIR"]).expanduser()
        if os.environ.get("DEVTOOL_TPL_EXT"):
            kwargs["template_ext"] = os.environ["DEVTOOL_TPL_EXT"]
        if os.environ.get("DEVTOOL_SOURCE_EXT"):
            kwargs["source_ext"] = os.environ["DEVTOOL_SOURCE_EXT"]
        if os.environ.get("DEVTOOL_CACHE_DIR"):
            kwargs["cache_dir"] = Path(os.environ["DEVTOOL_CACHE_DIR"]).expanduser()
        if os.environ.get("DEVTOOL_INSTALL_CMD"):
            kwargs["install_command"] = os.environ["DEVTOOL_INSTALL_CMD"]
        if os.environ.get("DEVTOOL_USERNAME"):
            kwargs["username"] = os.environ["DEVTOOL_USERNAME"]

        kwargs.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**kwargs)
