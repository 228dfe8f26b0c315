"""Shared behaviour of the multi-step creators.

A creator records the first failure of its workflow on ``failure`` and every
later step checks it on entry, so nothing else runs once a step has failed.
Shell commands and destructive actions are announced through ``on_exec_cmd``
before they run.
"""

from __future__ import annotations

import shlex
from collections.abc import Callable
from pathlib import Path

from devtool.errors import DevtoolError, ShellCommandFailed
from devtool.utils import run_command

ExecNotifier = Callable[[str], None]


class BaseCreator:
    """Error field, command execution and notification for creators."""

    def __init__(
        self,
        name: str = "",
        work_dir: str | Path = "",
        on_exec_cmd: ExecNotifier | None = None,
    ) -> None:
        self.name = name.strip(" /")
        self.work_dir = str(work_dir)
        self.on_exec_cmd = on_exec_cmd
        self.failure: DevtoolError | None = None

    @property
    def error(self) -> str:
        """The recorded failure message, or an empty string."""
        return str(self.failure) if self.failure is not None else ""

    def fail(self, failure: DevtoolError) -> None:
        """Record *failure* unless an earlier one is already recorded."""
        if self.failure is None:
            self.failure = failure

    def validate(self) -> bool:
        raise NotImplementedError

    async def create(self) -> None:
        raise NotImplementedError

    # -- Command execution -------------------------------------------------

    def notify(self, message: str) -> None:
        if self.on_exec_cmd is not None:
            self.on_exec_cmd(message)

    async def exec(self, cmd: str) -> bool:
        """Run a shell command; record ``ShellCommandFailed`` on non-zero exit."""
        self.notify(cmd)

        returncode, stdout, stderr = await run_command(cmd)
        if returncode != 0:
            output = "\n".join(part for part in (stdout, stderr) if part)
            self.fail(ShellCommandFailed(cmd, returncode, output))
            return False
        return True

    async def delete_dir(self, path: str | Path) -> bool:
        """Remove *path* recursively with ``rm -rf``.

        Raises:
            ValueError: *path* is too short to be removed safely.
        """
        if len(str(path)) < 6:
            raise ValueError(f"path is too short, cannot exec rm: {path}")
        return await self.exec(f"rm -rf {shlex.quote(str(path))}")
