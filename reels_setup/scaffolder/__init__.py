"""Quran Reels skeleton scaffolder.

Creates the ``server`` / ``client`` / ``docs`` tree and renders the bundled
Jinja2 templates into it.

Quick usage::

    from reels_setup.config import SetupConfig
    from reels_setup.scaffolder import SkeletonGenerator

    generator = SkeletonGenerator(SetupConfig(workdir=Path("/tmp")))
    await generator.create_directories()
    files = await generator.emit(owner="octocat")
"""

from reels_setup.scaffolder.generator import SKELETON_DIRS, SKELETON_FILES, SkeletonGenerator
from reels_setup.scaffolder.templates import TemplateRenderer

__all__ = [
    "SKELETON_DIRS",
    "SKELETON_FILES",
    "SkeletonGenerator",
    "TemplateRenderer",
]
