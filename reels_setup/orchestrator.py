"""Quran Reels setup orchestrator.

Implements the ordered setup procedure:

1. PREREQUISITES -- ``gh``, ``git`` and ``node`` must be on ``PATH``.
2. AUTHENTICATE  -- reuse the ``gh`` session or run the web login.
3. PROVISION     -- create ``<project>/{server,client,docs}`` (overwrite gated).
4. INIT          -- ``git init`` and a best-effort author identity.
5. EMIT          -- render ignore rules, manifests, tsconfigs and docs.
6. SNAPSHOT      -- stage everything and create the initial commit.
7. PUBLISH       -- ``gh repo create --push``, falling back to ``git push``.
8. REPORT        -- summary, reachability check, optional browser open.

Each step either completes or raises; there is no rollback.

Usage::

    reels-setup
    python -m reels_setup --workdir ~/projects --private
"""

from __future__ import annotations

import asyncio
import shutil
import sys
import webbrowser
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path

from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.tree import Tree

from reels_setup.config import RemoteRepository, SetupConfig, Visibility
from reels_setup.scaffolder import SkeletonGenerator
from reels_setup.tools import AuthProvider, GitCli, GitHubCli, RemoteHost, ToolError, VersionControl
from reels_setup.utils import (
    check_url_reachable,
    console,
    print_error,
    print_header,
    print_info,
    print_step,
    print_success,
    print_summary_table,
    print_warning,
)

ConfirmFn = Callable[[str], bool]
OpenUrlFn = Callable[[str], object]
ReachabilityFn = Callable[[str], Awaitable[bool]]

# Captions shown next to the rendered docs in the final report.
DOC_NOTES: dict[str, str] = {
    "fullstack-implementation.md": "Complete source code",
    "quick-start-guide.md": "Setup & troubleshooting",
    "github-setup-guide.md": "Git workflow",
}

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class SetupError(Exception):
    """Raised when a setup step fails irrecoverably."""

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        super().__init__(message)


class PrerequisiteError(SetupError):
    """One or more required binaries are not on ``PATH``."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(
            "prerequisites",
            f"Missing prerequisites: {', '.join(missing)}. "
            "Please install missing prerequisites and try again",
        )


class AuthenticationError(SetupError):
    """The GitHub session could not be established."""

    def __init__(self, message: str) -> None:
        super().__init__("authenticate", message)


class SetupCancelled(SetupError):
    """The operator declined a confirmation gate."""


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass
class PublishOutcome:
    """How the skeleton reached the remote."""

    created: bool
    pushed_branch: str | None = None


@dataclass
class SetupResult:
    root: Path
    owner: str
    repository: RemoteRepository
    files: list[Path] = field(default_factory=list)
    publish: PublishOutcome | None = None
    reachable: bool = False


def ask_confirm(prompt: str) -> bool:
    """Interactive yes/no prompt defaulting to *no*."""
    return Confirm.ask(prompt, default=False, console=console)


def local_browser() -> OpenUrlFn | None:
    """Return ``webbrowser.open`` if a local browser can be launched."""
    try:
        webbrowser.get()
    except webbrowser.Error:
        return None
    return webbrowser.open


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class SetupOrchestrator:
    """Drives the setup procedure against injected tool capabilities.

    Attributes:
        config: The setup configuration, fixed for the whole run.
        auth: Hosting-service authentication.
        vcs: Local version control.
        host: Remote repository creation.
        confirm: Yes/no prompt.  Tests pass a fixed-answer stub.
        open_url: Browser launcher, or ``None`` when no browser is available.
        check_reachable: Coroutine reporting whether a URL is reachable.
        which: Binary lookup used for the prerequisite check.
    """

    def __init__(
        self,
        config: SetupConfig,
        auth: AuthProvider,
        vcs: VersionControl,
        host: RemoteHost,
        *,
        confirm: ConfirmFn = ask_confirm,
        open_url: OpenUrlFn | None = None,
        check_reachable: ReachabilityFn = check_url_reachable,
        which: Callable[[str], str | None] = shutil.which,
    ) -> None:
        self.config = config
        self.auth = auth
        self.vcs = vcs
        self.host = host
        self.confirm = confirm
        self.open_url = open_url
        self.check_reachable = check_reachable
        self.which = which
        self.generator = SkeletonGenerator(config)

    @property
    def root(self) -> Path:
        return self.config.project_root

    async def run(self) -> SetupResult:
        """Execute every step in order and return what was produced."""
        print_header("🚀 Quran Reels Generator - GitHub Setup")

        self.check_prerequisites()
        owner = await self.authenticate()
        await self.provision_directories()
        await self.initialize_repository(owner)
        files = await self.emit_templates(owner)
        await self.snapshot()

        repo = self.config.remote_for(owner)
        outcome = await self.publish(repo)

        result = SetupResult(
            root=self.root,
            owner=owner,
            repository=repo,
            files=files,
            publish=outcome,
        )
        await self.report(result)
        return result

    # ------------------------------------------------------------------
    # 1. Prerequisites
    # ------------------------------------------------------------------

    def check_prerequisites(self) -> list[str]:
        """Verify every configured binary resolves on ``PATH``.

        Returns:
            The resolved executable paths, in configuration order.

        Raises:
            PrerequisiteError: Listing every missing binary.
        """
        console.print("Checking prerequisites...")
        resolved: list[str] = []
        missing: list[str] = []
        for prereq in self.config.prerequisites:
            location = self.which(prereq.name)
            if location is None:
                print_error(f"{prereq.name} is not installed")
                if prereq.install_url:
                    console.print(f"  Install from: {prereq.install_url}")
                missing.append(prereq.name)
            else:
                print_step(f"{prereq.name} is installed")
                resolved.append(location)

        if missing:
            raise PrerequisiteError(missing)
        print_step("All prerequisites installed")
        return resolved

    # ------------------------------------------------------------------
    # 2. Authentication
    # ------------------------------------------------------------------

    async def authenticate(self) -> str:
        """Ensure a GitHub session exists and return the authenticated login."""
        print_header("🔐 GitHub Authentication")

        if await self.auth.is_authenticated():
            print_step("Already authenticated with GitHub")
        else:
            print_info("Starting GitHub authentication...")
            try:
                await self.auth.login()
            except ToolError as exc:
                raise AuthenticationError(f"GitHub login did not complete: {exc}") from exc
            print_step("GitHub authentication completed")

        try:
            owner = (await self.auth.current_user()).strip()
        except ToolError as exc:
            raise AuthenticationError(f"Could not resolve the GitHub user: {exc}") from exc
        if not owner:
            raise AuthenticationError("Could not resolve the GitHub user: empty login")

        print_step(f"Authenticated as: {owner}")
        return owner

    # ------------------------------------------------------------------
    # 3. Directory provisioning
    # ------------------------------------------------------------------

    async def provision_directories(self) -> Path:
        """Create the project tree, deleting an existing one only on confirmation.

        Raises:
            SetupCancelled: If the root exists and the operator declines.
            SetupError: If the root is not a directory or cannot be created.
        """
        print_header("📁 Creating Project Structure")

        if self.root.exists() and not self.generator.exists():
            raise SetupError("provision", f"{self.root} exists and is not a directory")

        try:
            if self.generator.exists():
                print_info(f"Directory {self.root} already exists")
                if not self.confirm("Overwrite?"):
                    raise SetupCancelled("provision", "Cancelled")
                await self.generator.reset()

            await self.generator.create_directories()
        except OSError as exc:
            raise SetupError("provision", f"Could not prepare {self.root}: {exc}") from exc
        print_step("Created project directories")
        return self.root

    # ------------------------------------------------------------------
    # 4. Version-control initialisation
    # ------------------------------------------------------------------

    async def initialize_repository(self, owner: str) -> None:
        """``git init`` the root and fill in a missing author identity."""
        print_header("🔧 Initializing Git Repository")

        await self.vcs.init(self.root)
        print_step("Git repository initialized")

        try:
            if await self.vcs.get_config(self.root, "user.email") is None:
                print_info("Configuring Git user...")
                await self.vcs.set_config(
                    self.root, "user.email", f"{owner}@users.noreply.github.com"
                )
                await self.vcs.set_config(self.root, "user.name", owner)
        except ToolError as exc:
            print_warning(f"Could not configure the git identity: {exc}")

    # ------------------------------------------------------------------
    # 5. Template emission
    # ------------------------------------------------------------------

    async def emit_templates(self, owner: str) -> list[Path]:
        print_header("📝 Creating Project Files")

        written = await self.generator.emit(owner)
        for path in written:
            print_step(f"{path.relative_to(self.root).as_posix()} created")
        return written

    # ------------------------------------------------------------------
    # 6. Snapshot
    # ------------------------------------------------------------------

    async def snapshot(self) -> None:
        print_header("💾 Creating Initial Commit")

        await self.vcs.add_all(self.root)
        await self.vcs.commit(self.root, self.config.commit_message)
        print_step("Initial commit created")

    # ------------------------------------------------------------------
    # 7. Publish
    # ------------------------------------------------------------------

    async def publish(self, repo: RemoteRepository) -> PublishOutcome:
        """Create the remote and push, or push into the existing one.

        Raises:
            ToolError: From the last fallback push when every branch fails.
        """
        print_header("🐙 Creating GitHub Repository")
        print_info(f"Creating repository: {repo.name}...")

        try:
            await self.host.create_repository(repo, source=self.root, push=True)
        except ToolError as exc:
            print_info("Note: Repository may already exist, pushing changes...")
            console.print(f"  {exc}", style="dim", markup=False)
            branch = await self._push_existing(repo)
            return PublishOutcome(created=False, pushed_branch=branch)

        print_step("GitHub repository created and code pushed successfully")
        return PublishOutcome(created=True)

    async def _push_existing(self, repo: RemoteRepository) -> str:
        if not await self.vcs.has_remote(self.root, "origin"):
            await self.vcs.add_remote(self.root, "origin", repo.clone_url)

        last_error: ToolError | None = None
        for branch in self.config.fallback_branches:
            try:
                await self.vcs.push(self.root, "origin", branch)
            except ToolError as exc:
                print_warning(f"Push to '{branch}' failed")
                last_error = exc
                continue
            print_step(f"Pushed to origin/{branch}")
            return branch

        assert last_error is not None  # fallback_branches is never empty
        raise last_error

    # ------------------------------------------------------------------
    # 8. Report
    # ------------------------------------------------------------------

    def doc_names(self) -> list[str]:
        """Output names of the rendered ``docs/`` files, sorted."""
        return [
            name.removeprefix("docs/").removesuffix(".j2")
            for name in self.generator.renderer.list_templates("docs")
        ]

    async def report(self, result: SetupResult) -> None:
        """Print the final summary and optionally open the repository."""
        repo = result.repository
        print_header("✅ Setup Complete!")
        print_success("Your Quran Reels Generator project is ready!")
        console.print()

        print_summary_table(
            {
                "Repository": repo.name,
                "Owner": repo.owner,
                "Visibility": repo.visibility.value,
                "URL": repo.url,
            },
            title="📊 Project Information",
        )

        structure = Tree(f"[bold]{self.config.project_name}/[/bold]")
        structure.add("server/       (Express backend)")
        structure.add("client/       (Next.js frontend)")
        docs = structure.add("docs/         (Complete documentation)")
        for name in self.doc_names():
            note = DOC_NOTES.get(name)
            docs.add(f"{name:<28} ({note})" if note else name)
        structure.add("README.md     (Project overview)")
        console.print(structure)
        console.print()

        console.print(
            Panel(
                f"1. cd {self.config.project_name}\n"
                "2. Copy source code from docs/fullstack-implementation.md\n"
                "3. Create server/src/*.ts files\n"
                "4. Create client/app/*.tsx files\n"
                "5. cd server && npm install && npm run dev\n"
                "6. cd client && npm install && npm run dev (new terminal)\n"
                "7. Open http://localhost:3000",
                title="🚀 Next Steps",
                border_style="green",
            )
        )

        # Anonymous requests to private and internal repositories always 404.
        if repo.visibility is not Visibility.PUBLIC:
            print_info(
                f"Skipping reachability check for {repo.visibility.value} repository"
            )
        else:
            result.reachable = await self.check_reachable(repo.url)
            if result.reachable:
                print_step(f"Repository reachable at {repo.url}")
            else:
                print_warning(f"Repository not reachable yet at {repo.url}")

        if self.open_url is not None and self.confirm("Open repository in browser?"):
            self.open_url(repo.url)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``reels-setup`` / ``python -m reels_setup``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="reels-setup",
        description="Scaffold the Quran Reels Generator project and publish it to GitHub",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  reels-setup\n"
            "  reels-setup --workdir ~/projects --private\n"
            "  reels-setup --config setup.json --yes --no-browser\n"
        ),
    )
    parser.add_argument(
        "--workdir",
        default=None,
        help="Directory in which the project folder is created (default: .)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Load a saved SetupConfig JSON file",
    )
    parser.add_argument(
        "--private",
        action="store_true",
        help="Create a private repository",
    )
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Do not offer to open the repository in a browser",
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Answer yes to every confirmation, including the overwrite prompt",
    )

    args = parser.parse_args(argv)

    try:
        if args.config:
            config_path = Path(args.config)
            if not config_path.exists():
                print_error(f"Config file not found: {config_path}")
                sys.exit(1)
            config = SetupConfig.load(config_path)
        else:
            config = SetupConfig.from_env()
    except ValueError as exc:
        # pydantic.ValidationError is a ValueError
        print_error(f"Invalid configuration: {escape(str(exc))}")
        sys.exit(1)

    updates: dict[str, object] = {}
    if args.workdir:
        updates["workdir"] = Path(args.workdir)
    if args.private:
        updates["visibility"] = Visibility.PRIVATE
    if args.no_browser:
        updates["open_browser"] = False
    if updates:
        config = config.model_copy(update=updates)

    github = GitHubCli(timeout=config.command_timeout, login_timeout=config.login_timeout)
    orchestrator = SetupOrchestrator(
        config,
        auth=github,
        vcs=GitCli(timeout=config.command_timeout),
        host=github,
        confirm=(lambda _prompt: True) if args.yes else ask_confirm,
        open_url=local_browser() if config.open_browser else None,
    )

    try:
        asyncio.run(orchestrator.run())
    except SetupError as exc:
        print_error(escape(str(exc)))
        sys.exit(1)
    except ToolError as exc:
        print_error(escape(str(exc)))
        sys.exit(1)
    except KeyboardInterrupt:
        print_warning("Interrupted -- partially created files are left in place.")
        sys.exit(130)


if __name__ == "__main__":
    main()
