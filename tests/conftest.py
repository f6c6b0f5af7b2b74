"""Shared pytest fixtures for the Quran Reels setup test suite.

Provides reusable fixtures for:
- A ``SetupConfig`` rooted in a temporary working directory
- In-memory fakes for the auth, version-control and remote-host capabilities
- A factory that wires an orchestrator with fixed-answer prompts
- Mock subprocess helpers for the CLI adapter tests
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from reels_setup.config import RemoteRepository, SetupConfig
from reels_setup.orchestrator import SetupOrchestrator
from reels_setup.tools.base import ToolError


# ---------------------------------------------------------------------------
# In-memory capability fakes
# ---------------------------------------------------------------------------


class FakeAuth:
    """``AuthProvider`` with a scripted session state."""

    def __init__(
        self,
        authenticated: bool = True,
        user: str = "octocat",
        login_succeeds: bool = True,
    ) -> None:
        self.authenticated = authenticated
        self.user = user
        self.login_succeeds = login_succeeds
        self.login_calls = 0

    async def is_authenticated(self) -> bool:
        return self.authenticated

    async def login(self) -> None:
        self.login_calls += 1
        if not self.login_succeeds:
            raise ToolError("login aborted", command="gh auth login --web", returncode=1)
        self.authenticated = True

    async def current_user(self) -> str:
        return self.user


class FakeVersionControl:
    """``VersionControl`` that records every call instead of touching git."""

    def __init__(
        self,
        config: dict[str, str] | None = None,
        failing_branches: set[str] | None = None,
        config_fails: bool = False,
    ) -> None:
        self.config = dict(config or {})
        self.failing_branches = set(failing_branches or ())
        self.config_fails = config_fails
        self.calls: list[tuple[Any, ...]] = []
        self.initialized: list[Path] = []
        self.commits: list[str] = []
        self.remotes: dict[str, str] = {}
        self.pushes: list[tuple[str, str]] = []

    async def init(self, root: Path) -> None:
        self.calls.append(("init", root))
        self.initialized.append(root)

    async def get_config(self, root: Path, key: str) -> str | None:
        self.calls.append(("get_config", key))
        return self.config.get(key)

    async def set_config(self, root: Path, key: str, value: str) -> None:
        self.calls.append(("set_config", key, value))
        if self.config_fails:
            raise ToolError("could not lock config file", command="git config", returncode=255)
        self.config[key] = value

    async def add_all(self, root: Path) -> None:
        self.calls.append(("add_all", root))

    async def commit(self, root: Path, message: str) -> None:
        self.calls.append(("commit", message))
        self.commits.append(message)

    async def has_remote(self, root: Path, name: str) -> bool:
        return name in self.remotes

    async def add_remote(self, root: Path, name: str, url: str) -> None:
        self.calls.append(("add_remote", name, url))
        self.remotes[name] = url

    async def push(self, root: Path, remote: str, branch: str) -> None:
        self.calls.append(("push", remote, branch))
        self.pushes.append((remote, branch))
        if branch in self.failing_branches:
            raise ToolError(
                f"error: src refspec {branch} does not match any",
                command=f"git push -u {remote} {branch}",
                returncode=1,
            )


class FakeRemoteHost:
    """``RemoteHost`` backed by a set of existing ``owner/name`` repositories."""

    def __init__(self, existing: set[str] | None = None) -> None:
        self.existing = set(existing or ())
        self.created: list[RemoteRepository] = []

    async def create_repository(
        self, repo: RemoteRepository, source: Path, push: bool = True
    ) -> None:
        if repo.full_name in self.existing:
            raise ToolError(
                "GraphQL: Name already exists on this account (createRepository)",
                command=f"gh repo create {repo.name}",
                returncode=1,
            )
        self.existing.add(repo.full_name)
        self.created.append(repo)


# ---------------------------------------------------------------------------
# Config & orchestrator fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def setup_config(tmp_path: Path) -> SetupConfig:
    """Default configuration rooted in a fresh temporary working directory."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    return SetupConfig(workdir=workdir)


@pytest.fixture
def fake_auth() -> FakeAuth:
    return FakeAuth()


@pytest.fixture
def fake_vcs() -> FakeVersionControl:
    return FakeVersionControl()


@pytest.fixture
def fake_host() -> FakeRemoteHost:
    return FakeRemoteHost()


def all_present(name: str) -> str:
    return f"/usr/bin/{name}"


@pytest.fixture
def make_orchestrator(
    setup_config: SetupConfig,
    fake_auth: FakeAuth,
    fake_vcs: FakeVersionControl,
    fake_host: FakeRemoteHost,
) -> Callable[..., SetupOrchestrator]:
    """Factory for an orchestrator wired entirely to fakes.

    Keyword arguments override any constructor argument, e.g.
    ``make_orchestrator(confirm=lambda _: False)``.
    """

    def factory(**overrides: Any) -> SetupOrchestrator:
        kwargs: dict[str, Any] = {
            "config": setup_config,
            "auth": fake_auth,
            "vcs": fake_vcs,
            "host": fake_host,
            "confirm": lambda _prompt: True,
            "open_url": None,
            "check_reachable": AsyncMock(return_value=True),
            "which": all_present,
        }
        kwargs.update(overrides)
        config = kwargs.pop("config")
        auth = kwargs.pop("auth")
        vcs = kwargs.pop("vcs")
        host = kwargs.pop("host")
        return SetupOrchestrator(config, auth, vcs, host, **kwargs)

    return factory


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
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
