"""Shared utility functions for devtool.

Provides async shell command execution, file-system helpers, name helpers and
Rich-based console output used by the CLI and the code generator.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(cmd: str) -> tuple[int, str, str]:
    """Run a shell command asynchronously.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple with both streams stripped.
    """
    process = await asyncio.create_subprocess_shell(
        cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout_bytes, stderr_bytes = await process.communicate()

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def ucfirst(value: str) -> str:
    """Upper-case the first character only.

    Unlike ``str.capitalize`` the rest of the string is left untouched::

        ucfirst("userProfile") -> "UserProfile"
    """
    return value[:1].upper() + value[1:]


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path, mode: int = 0o777) -> Path:
    """Create a directory (and parents) if it does not exist.

    Idempotent: an existing directory is left untouched.

    Returns:
        The ``Path`` object.
    """
    dir_path = Path(path)
    dir_path.mkdir(mode=mode, parents=True, exist_ok=True)
    return dir_path


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, Any], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_code(content: str, lexer: str = "php", title: str = "file content") -> None:
    """Print syntax-highlighted source code under a heading."""
    console.rule(f"[bold]{title}[/bold]")
    console.print(Syntax(content, lexer, line_numbers=False))


def print_command(cmd: str) -> None:
    """Echo a shell command before it runs."""
    console.print(f"> {cmd}", style="yellow", markup=False, highlight=False)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
