"""Shared pytest fixtures for the devtool test suite.

Provides reusable fixtures for:
- Temporary work and cache directories
- A DevtoolConfig pointed at them
- A small custom template directory
- Mock subprocess helpers and a recording ``run_command`` replacement
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from devtool.config import DevtoolConfig


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    """Temporary application root (the ``@root`` alias)."""
    root = tmp_path / "app-root"
    root.mkdir()
    yield root


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Location of the template repository cache (not created)."""
    return tmp_path / "cache" / "swoft-app-demos"


@pytest.fixture
def config(work_dir: Path, cache_dir: Path) -> DevtoolConfig:
    """DevtoolConfig rooted in the temporary work dir, bundled templates."""
    return DevtoolConfig(work_dir=work_dir, cache_dir=cache_dir, username="inhere")


@pytest.fixture
def custom_template_dir(tmp_path: Path) -> Path:
    """A template directory with a plain stub, an include and a partial."""
    tpl_dir = tmp_path / "tpl"
    (tpl_dir / "parts").mkdir(parents=True)
    (tpl_dir / "plain.stub").write_text("Hello {{ name }}!\n", encoding="utf-8")
    (tpl_dir / "with-part.stub").write_text(
        textwrap.dedent("""\
            head
            {{ include_file(file="parts/note.txt") }}
            tail {{ name }}
        """),
        encoding="utf-8",
    )
    (tpl_dir / "parts" / "note.txt").write_text("raw {{ name }} text", encoding="utf-8")
    (tpl_dir / "broken.stub").write_text("{% if name %}never closed\n", encoding="utf-8")
    yield tpl_dir


# ---------------------------------------------------------------------------
# Subprocess mocks
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_shell", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


class CommandRecorder:
    """Stand-in for ``run_command`` that records every command it receives.

    ``results`` maps a substring of a command to the ``(rc, stdout, stderr)``
    tuple returned for it; anything else succeeds with empty output.
    """

    def __init__(self) -> None:
        self.commands: list[str] = []
        self.results: dict[str, tuple[int, str, str]] = {}

    async def __call__(self, cmd: Any, **kwargs: Any) -> tuple[int, str, str]:
        self.commands.append(cmd)
        for needle, result in self.results.items():
            if needle in cmd:
                return result
        return (0, "", "")


@pytest.fixture
def command_recorder(monkeypatch: pytest.MonkeyPatch) -> CommandRecorder:
    """Patch the creators' ``run_command`` with a ``CommandRecorder``."""
    recorder = CommandRecorder()
    monkeypatch.setattr("devtool.creator.base.run_command", recorder)
    return recorder
