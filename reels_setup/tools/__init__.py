"""External tool adapters.

The setup procedure reaches GitHub and git only through the capability
protocols defined in :mod:`reels_setup.tools.base`::

    from reels_setup.tools import GitCli, GitHubCli

    github = GitHubCli()
    orchestrator = SetupOrchestrator(config, auth=github, vcs=GitCli(), host=github)
"""

from reels_setup.tools.base import AuthProvider, RemoteHost, ToolError, VersionControl
from reels_setup.tools.git import GitCli
from reels_setup.tools.github import GitHubCli

__all__ = [
    "AuthProvider",
    "GitCli",
    "GitHubCli",
    "RemoteHost",
    "ToolError",
    "VersionControl",
]
