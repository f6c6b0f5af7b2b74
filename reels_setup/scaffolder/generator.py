"""Skeleton generator for the Quran Reels project.

Creates the ``server`` / ``client`` / ``docs`` tree under the project root
and renders the fixed set of ignore rules, manifests, compiler configs and
documentation stubs into it.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import Any

from reels_setup.config import SetupConfig

from .templates import TemplateRenderer


SKELETON_DIRS: tuple[str, ...] = ("server", "client", "docs")

# (template, output path relative to the project root).  The docs/ templates
# are rendered as a tree and are not listed here.
SKELETON_FILES: list[tuple[str, str]] = [
    ("gitignore/root.j2", ".gitignore"),
    ("gitignore/server.j2", "server/.gitignore"),
    ("gitignore/client.j2", "client/.gitignore"),
    ("README.md.j2", "README.md"),
    ("server/package.json.j2", "server/package.json"),
    ("server/tsconfig.json.j2", "server/tsconfig.json"),
    ("client/package.json.j2", "client/package.json"),
    ("client/tsconfig.json.j2", "client/tsconfig.json"),
]


class SkeletonGenerator:
    """Provisions the project directory and writes the template files.

    Every write is an unconditional overwrite and the rendered content depends
    only on the configuration and the repository owner, so regenerating into
    a freshly reset root reproduces the same bytes.
    """

    def __init__(self, config: SetupConfig, renderer: TemplateRenderer | None = None) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer()

    @property
    def root(self) -> Path:
        return self.config.project_root

    def exists(self) -> bool:
        return self.root.is_dir()

    # -- Directory structure -----------------------------------------------

    async def reset(self) -> None:
        """Recursively delete the project root.  Irreversible."""
        await asyncio.to_thread(shutil.rmtree, self.root)

    async def create_directories(self) -> list[Path]:
        """Create the root and its three top-level folders."""
        created: list[Path] = []
        for name in SKELETON_DIRS:
            path = self.root / name
            await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)
            created.append(path)
        return created

    # -- Template emission ---------------------------------------------------

    def build_context(self, owner: str) -> dict[str, Any]:
        """Build the Jinja2 template context."""
        repo = self.config.remote_for(owner)
        return {
            "project_name": self.config.project_name,
            "repo_name": repo.name,
            "owner": repo.owner,
            "repo_url": repo.url,
            "clone_url": repo.clone_url,
            "description": repo.description,
        }

    async def emit(self, owner: str) -> list[Path]:
        """Render every skeleton file into the project root.

        Args:
            owner: Authenticated GitHub login, used in repository links.

        Returns:
            Written paths, fixed files first, then the docs tree.
        """
        context = self.build_context(owner)
        written: list[Path] = []
        for template_name, output_name in SKELETON_FILES:
            written.append(
                await self.renderer.render_to_file(
                    template_name, self.root / output_name, context
                )
            )
        written.extend(
            await self.renderer.render_tree("docs", self.root / "docs", context)
        )
        return written
