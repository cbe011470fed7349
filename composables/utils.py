"""Shared utility functions for composables.

Provides async command execution, Rich-based console output and a couple of
small platform helpers.
"""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

console = Console()
err_console = Console(stderr=True)

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: str | list[str],
    cwd: str | Path | None = None,
    timeout: Optional[int] = None,
    capture: bool = True,
    env: dict[str, str] | None = None,
    input_text: str | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously.

    Args:
        cmd: Shell command string or list of arguments.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
            ``None`` waits for the process to exit.
        capture: Whether to capture stdout/stderr (if ``False`` they inherit
            the parent's streams).
        env: Optional extra environment variables merged on top of ``os.environ``.
        input_text: Optional text fed to the child's stdin.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  If *capture* is ``False``
        the stdout/stderr strings will be empty.
    """
    pipe = asyncio.subprocess.PIPE
    options: dict = {
        "stdin": pipe if input_text is not None else None,
        "stdout": pipe if capture else None,
        "stderr": pipe if capture else None,
        "cwd": str(cwd) if cwd else None,
        "env": {**os.environ, **env} if env else None,
    }
    if isinstance(cmd, list):
        process = await asyncio.create_subprocess_exec(*cmd, **options)
        display = " ".join(cmd)
    else:
        process = await asyncio.create_subprocess_shell(cmd, **options)
        display = cmd

    feed = input_text.encode("utf-8") if input_text is not None else None
    try:
        out, err = await asyncio.wait_for(process.communicate(feed), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return -1, "", f"Command timed out after {timeout}s: {display}"

    return (
        process.returncode or 0,
        (out or b"").decode("utf-8", errors="replace").strip(),
        (err or b"").decode("utf-8", errors="replace").strip(),
    )


# ---------------------------------------------------------------------------
# Platform helpers
# ---------------------------------------------------------------------------


def gradle_script() -> str:
    """Name of the Gradle wrapper to invoke on this platform."""
    if sys.platform.startswith("win"):
        return "gradlew.bat"
    return "./gradlew"


def is_empty_dir(path: Path) -> bool:
    """True when *path* is an existing directory with no entries."""
    return path.is_dir() and not any(path.iterdir())


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print *data* as a two-column setting/value table followed by a blank line."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="dim", no_wrap=True)
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, str(value))
    console.print(table)
    console.print()


def print_success(message: str) -> None:
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message to stderr."""
    err_console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_info(message: str) -> None:
    """Plain text without rich's automatic highlighting of paths and numbers."""
    console.print(message, highlight=False)


def print_debug(message: str) -> None:
    console.print(f"[dim]{message}[/dim]", highlight=False)
