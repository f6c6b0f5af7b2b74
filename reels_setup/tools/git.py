"""``VersionControl`` implementation backed by the ``git`` binary."""

from __future__ import annotations

from pathlib import Path

from reels_setup.tools.base import ToolError
from reels_setup.utils import run_command


async def _run_git(
    *args: str,
    cwd: str | Path | None = None,
    timeout: float = 120.0,
) -> str:
    """Run a git command and return its stdout.

    Raises ToolError if the command exits with a non-zero code or times out.
    """
    cmd = ["git", *args]
    cmd_str = " ".join(cmd)

    returncode, stdout, stderr = await run_command(cmd, cwd=cwd, timeout=timeout)
    if returncode == -1:
        raise ToolError(
            f"Git command timed out after {timeout}s: {cmd_str}",
            command=cmd_str,
            stderr=stderr,
            returncode=returncode,
        )
    if returncode != 0:
        raise ToolError(
            f"Git command failed (exit {returncode}): {cmd_str}\n{stderr}",
            command=cmd_str,
            stderr=stderr,
            returncode=returncode,
        )
    return stdout


class GitCli:
    """Drives a local repository through the ``git`` command line."""

    def __init__(self, timeout: float = 120.0) -> None:
        self.timeout = timeout

    async def init(self, root: Path) -> None:
        await _run_git("init", cwd=root, timeout=self.timeout)

    async def get_config(self, root: Path, key: str) -> str | None:
        # git exits 1 when the key is unset; anything else is a real failure.
        try:
            value = await _run_git("config", key, cwd=root, timeout=self.timeout)
        except ToolError as exc:
            if exc.returncode == 1:
                return None
            raise
        return value or None

    async def set_config(self, root: Path, key: str, value: str) -> None:
        await _run_git("config", key, value, cwd=root, timeout=self.timeout)

    async def add_all(self, root: Path) -> None:
        await _run_git("add", ".", cwd=root, timeout=self.timeout)

    async def commit(self, root: Path, message: str) -> None:
        await _run_git("commit", "-m", message, cwd=root, timeout=self.timeout)

    async def has_remote(self, root: Path, name: str) -> bool:
        try:
            await _run_git("remote", "get-url", name, cwd=root, timeout=self.timeout)
        except ToolError:
            return False
        return True

    async def add_remote(self, root: Path, name: str, url: str) -> None:
        await _run_git("remote", "add", name, url, cwd=root, timeout=self.timeout)

    async def push(self, root: Path, remote: str, branch: str) -> None:
        await _run_git("push", "-u", remote, branch, cwd=root, timeout=self.timeout)
