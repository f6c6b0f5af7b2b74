"""Capability interfaces for the external tools the setup procedure drives.

The orchestrator only talks to these protocols.  ``GitHubCli`` and ``GitCli``
implement them on top of the real binaries; the test suite supplies
in-memory fakes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from reels_setup.config import RemoteRepository


class ToolError(Exception):
    """Raised when an external tool command fails or times out."""

    def __init__(
        self,
        message: str,
        command: str = "",
        stderr: str = "",
        returncode: int | None = None,
    ):
        self.command = command
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(message)


class AuthProvider(Protocol):
    """Authentication against the Git hosting service."""

    async def is_authenticated(self) -> bool: ...

    async def login(self) -> None:
        """Run the interactive login flow, blocking until it finishes."""
        ...

    async def current_user(self) -> str: ...


class VersionControl(Protocol):
    """Local repository operations."""

    async def init(self, root: Path) -> None: ...

    async def get_config(self, root: Path, key: str) -> str | None:
        """Return the configured value for *key*, or ``None`` when unset."""
        ...

    async def set_config(self, root: Path, key: str, value: str) -> None: ...

    async def add_all(self, root: Path) -> None: ...

    async def commit(self, root: Path, message: str) -> None: ...

    async def has_remote(self, root: Path, name: str) -> bool: ...

    async def add_remote(self, root: Path, name: str, url: str) -> None: ...

    async def push(self, root: Path, remote: str, branch: str) -> None: ...


class RemoteHost(Protocol):
    """Remote repository management on the hosting service."""

    async def create_repository(
        self, repo: RemoteRepository, source: Path, push: bool = True
    ) -> None: ...
