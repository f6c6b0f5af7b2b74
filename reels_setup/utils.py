"""Shared utility functions for the Quran Reels setup tool.

Provides async command execution, Rich-based console reporting, and a
reachability check for the published repository.  Every external tool the
setup procedure touches goes through ``run_command`` so that adapters share
one timeout and decoding policy.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

import httpx
from rich.console import Console
from rich.rule import Rule
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: float = 120,
    capture: bool = True,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run an external command asynchronously.

    Args:
        cmd: Program and arguments.  Never passed through a shell.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
        capture: Whether to capture stdout/stderr.  Interactive commands
            (``gh auth login``) pass ``False`` so they inherit the terminal.
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  A timeout yields
        returncode ``-1`` and a descriptive stderr.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=stdout_pipe,
            stderr=stderr_pipe,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
        )
    except FileNotFoundError:
        return (127, "", f"Command not found: {cmd[0]}")

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_header(title: str) -> None:
    """Print a full-width section rule."""
    console.print()
    console.print(Rule(f"[bold blue]{title}[/bold blue]", style="blue"))
    console.print()


def print_step(message: str) -> None:
    """Print a completed step with a green check mark."""
    console.print(f"[green]✓[/green] {message}")


def print_info(message: str) -> None:
    console.print(f"[yellow]ℹ[/yellow] {message}")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]✗[/bold red] {message}")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_success(message: str) -> None:
    console.print(f"[bold green]{message}[/bold green]")


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


# ---------------------------------------------------------------------------
# Remote reachability
# ---------------------------------------------------------------------------


async def check_url_reachable(url: str, timeout: float = 10.0) -> bool:
    """Return ``True`` if *url* answers with a non-error HTTP status.

    Redirects are followed.  Network failures are reported as unreachable
    rather than raised, since the result only feeds the final report.
    """
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(timeout, connect=5.0), follow_redirects=True
    ) as client:
        try:
            response = await client.get(url)
        except httpx.HTTPError:
            return False
    return response.status_code < 400
