"""Quran Reels setup configuration.

Every constant the setup procedure needs lives on one typed ``SetupConfig``
instance, built once at start-up and passed explicitly to each step.  The
models use Pydantic v2 so they validate at construction time and round-trip
through JSON without boiler-plate.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


DEFAULT_COMMIT_MESSAGE = """Initial commit: Quran Reels Generator project structure

- Express backend with TypeScript setup
- Next.js frontend with Tailwind CSS
- Complete full-stack documentation
- Quick start and setup guides
- GitHub workflow instructions
- Ready for implementation of video generation features

See docs/ for complete implementation details"""


class Visibility(str, Enum):
    """Visibility of the remote repository, as understood by ``gh repo create``."""

    PUBLIC = "public"
    PRIVATE = "private"
    INTERNAL = "internal"


class Prerequisite(BaseModel):
    """An external binary that must be resolvable on ``PATH``."""

    name: str
    install_url: str = Field(default="")


def _default_prerequisites() -> list[Prerequisite]:
    return [
        Prerequisite(name="gh", install_url="https://cli.github.com"),
        Prerequisite(name="git", install_url="https://git-scm.com"),
        Prerequisite(name="node", install_url="https://nodejs.org"),
    ]


class RemoteRepository(BaseModel):
    """The GitHub repository the skeleton is published to."""

    name: str
    owner: str
    visibility: Visibility = Visibility.PUBLIC
    description: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def url(self) -> str:
        """Browser URL of the repository."""
        return f"https://github.com/{self.owner}/{self.name}"

    @property
    def clone_url(self) -> str:
        return f"{self.url}.git"


class SetupConfig(BaseModel):
    """Global setup configuration.

    Holds the project and repository names, the remote visibility, and the
    tuning knobs for the external commands.  Instances are created once by
    the CLI entry point and threaded through ``SetupOrchestrator``.
    """

    project_name: str = Field(default="quran-reels-app", min_length=1)
    repo_name: str = Field(default="quran-reels-generator", min_length=1)
    description: str = Field(
        default="Full-stack Quran Reels video generator with Next.js & Express"
    )
    visibility: Visibility = Field(default=Visibility.PUBLIC)
    workdir: Path = Field(default=Path("."))
    prerequisites: list[Prerequisite] = Field(default_factory=_default_prerequisites)

    # Branches tried, in order, when the repository already exists remotely.
    fallback_branches: list[str] = Field(default=["main", "master"], min_length=1)

    commit_message: str = Field(default=DEFAULT_COMMIT_MESSAGE, min_length=1)
    command_timeout: int = Field(
        default=120, ge=1, description="Timeout in seconds for non-interactive commands"
    )
    login_timeout: int = Field(
        default=600, ge=10, description="Timeout in seconds for the interactive web login"
    )
    open_browser: bool = Field(default=True)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def project_root(self) -> Path:
        """Root directory of the scaffolded project."""
        return self.workdir / self.project_name

    def remote_for(self, owner: str) -> RemoteRepository:
        """Build the remote repository record for an authenticated *owner*."""
        return RemoteRepository(
            name=self.repo_name,
            owner=owner,
            visibility=self.visibility,
            description=self.description,
        )

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "SetupConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "SetupConfig":
        """Build a ``SetupConfig`` from environment variables.

        Recognised variables (all optional):
            REELS_PROJECT_NAME, REELS_REPO_NAME, REELS_DESCRIPTION,
            REELS_VISIBILITY, REELS_WORKDIR.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("REELS_PROJECT_NAME"):
            kwargs["project_name"] = os.environ["REELS_PROJECT_NAME"]
        if os.environ.get("REELS_REPO_NAME"):
            kwargs["repo_name"] = os.environ["REELS_REPO_NAME"]
        if os.environ.get("REELS_DESCRIPTION"):
            kwargs["description"] = os.environ["REELS_DESCRIPTION"]
        if os.environ.get("REELS_VISIBILITY"):
            kwargs["visibility"] = Visibility(os.environ["REELS_VISIBILITY"].lower())
        if os.environ.get("REELS_WORKDIR"):
            kwargs["workdir"] = Path(os.environ["REELS_WORKDIR"])
        return cls(**kwargs)
