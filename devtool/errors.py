"""Error taxonomy for the devtool scaffolders.

Template and lookup problems are raised as exceptions.  The creators record
workflow failures on their ``failure`` attribute instead of raising, so the
same classes double as the typed payload of that field.
"""

from __future__ import annotations


class DevtoolError(Exception):
    """Base class for every error raised or recorded by devtool."""


# -- Validation stage -------------------------------------------------------


class UnknownArtifactType(DevtoolError):
    """The requested type key is not registered (or is reserved)."""

    def __init__(self, type_key: str) -> None:
        self.type_key = type_key
        super().__init__(f"invalid type key string: {type_key}")


class MissingRequiredInput(DevtoolError):
    """A required value was neither given nor supplied interactively."""


class InvalidRepoAddress(DevtoolError):
    """A ``--repo`` value is neither a full URL nor ``user/repo``."""

    def __init__(self, repo: str) -> None:
        self.repo = repo
        super().__init__(f"invalid 'repo' address: {repo}")


class InvalidTypeName(DevtoolError):
    """A ``--type`` value is not one of the known project presets."""

    def __init__(self, type_name: str, allowed: list[str]) -> None:
        self.type_name = type_name
        self.allowed = allowed
        super().__init__(f"invalid 'type' name: {type_name}, allow: {', '.join(allowed)}")


class MissingSource(DevtoolError):
    """Neither a repository nor a project type was given."""

    def __init__(self) -> None:
        super().__init__("missing 'repo' or 'type' setting")


class UnknownAlias(DevtoolError):
    """A ``@alias`` path prefix has no registered directory."""

    def __init__(self, alias: str) -> None:
        self.alias = alias
        super().__init__(f"unknown path alias: {alias}")


# -- Template stage ---------------------------------------------------------


class TemplateNotFound(DevtoolError):
    """The resolved template file does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Template file not exists! File: {path}")


class TemplateSyntaxError(DevtoolError):
    """The template engine could not parse a template."""

    def __init__(self, path: str, message: str, lineno: int | None = None) -> None:
        self.path = path
        self.lineno = lineno
        where = f"{path}:{lineno}" if lineno else path
        super().__init__(f"Template syntax error in {where}: {message}")


class IncludePathNotFound(DevtoolError):
    """An ``include_file`` directive points at a missing file."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"The part file: {path} is not exist!")


# -- Mutation stage ---------------------------------------------------------


class WriteError(DevtoolError):
    """Writing a rendered or copied file failed."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"write file failed: {path}" + (f" ({reason})" if reason else ""))


class TargetExists(DevtoolError):
    """The project or component directory is already present."""


class ShellCommandFailed(DevtoolError):
    """A shell command exited with a non-zero status."""

    def __init__(self, command: str, returncode: int, output: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.output = output
        super().__init__("exec command fail" + (f": {output}" if output else ""))
