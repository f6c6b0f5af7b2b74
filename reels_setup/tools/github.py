"""``AuthProvider`` and ``RemoteHost`` implementation backed by the GitHub CLI.

Wraps the handful of ``gh`` subcommands the setup procedure needs:

* ``gh auth status`` / ``gh auth login --web`` for the session,
* ``gh api user -q .login`` to resolve the authenticated identity,
* ``gh repo create`` to create the repository and push in one action.
"""

from __future__ import annotations

from pathlib import Path

from reels_setup.config import RemoteRepository
from reels_setup.tools.base import ToolError
from reels_setup.utils import run_command


class GitHubCli:
    """Talks to GitHub through the ``gh`` binary."""

    def __init__(self, timeout: float = 120.0, login_timeout: float = 600.0) -> None:
        self.timeout = timeout
        self.login_timeout = login_timeout

    async def _run_gh(
        self,
        *args: str,
        cwd: str | Path | None = None,
        capture: bool = True,
        timeout: float | None = None,
    ) -> str:
        cmd = ["gh", *args]
        cmd_str = " ".join(cmd)
        limit = timeout if timeout is not None else self.timeout

        returncode, stdout, stderr = await run_command(
            cmd, cwd=cwd, timeout=limit, capture=capture
        )
        if returncode == -1:
            raise ToolError(
                f"gh command timed out after {limit}s: {cmd_str}",
                command=cmd_str,
                stderr=stderr,
                returncode=returncode,
            )
        if returncode != 0:
            raise ToolError(
                f"gh command failed (exit {returncode}): {cmd_str}\n{stderr}",
                command=cmd_str,
                stderr=stderr,
                returncode=returncode,
            )
        return stdout

    # -- AuthProvider ------------------------------------------------------

    async def is_authenticated(self) -> bool:
        try:
            await self._run_gh("auth", "status")
        except ToolError:
            return False
        return True

    async def login(self) -> None:
        """Run ``gh auth login --web`` attached to the terminal."""
        await self._run_gh(
            "auth", "login", "--web", capture=False, timeout=self.login_timeout
        )

    async def current_user(self) -> str:
        return await self._run_gh("api", "user", "-q", ".login")

    # -- RemoteHost --------------------------------------------------------

    async def create_repository(
        self, repo: RemoteRepository, source: Path, push: bool = True
    ) -> None:
        """Create *repo* from the local checkout at *source*.

        Raises:
            ToolError: If ``gh repo create`` fails, most commonly because a
                repository with that name already exists.
        """
        args = [
            "repo",
            "create",
            repo.name,
            f"--{repo.visibility.value}",
            "--source=.",
            "--description",
            repo.description,
        ]
        if push:
            args.append("--push")
        await self._run_gh(*args, cwd=source)
