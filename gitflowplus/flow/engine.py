"""WorkflowEngine -- the role flows composed over one repository."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from gitflowplus.config import ConfigStore, FlowSettings, WorkflowConfig
from gitflowplus.constants import BranchType
from gitflowplus.exceptions import CommandError, DetachedHeadError
from gitflowplus.flow.core import FlowCore
from gitflowplus.flow.feature import FeatureFlow
from gitflowplus.flow.hotfix import HotfixFlow
from gitflowplus.flow.release import ReleaseFlow
from gitflowplus.git.locator import find_git
from gitflowplus.git.ops import GitOps
from gitflowplus.git.refs import BranchRef
from gitflowplus.interaction import Interaction
from gitflowplus.logging import get_logger
from gitflowplus.markers import MergeConflictMarker
from gitflowplus.progress import CancellationToken

logger = get_logger("flow.engine")


@dataclass
class WorkflowStatus:
    """Snapshot of the workflow state of a repository."""

    enabled: bool
    config: WorkflowConfig | None
    current_branch: str | None
    active_release: str | None
    active_hotfix: str | None
    unresolved_merge: str | None


class WorkflowEngine:
    """Entry point for every workflow action.

    Each role lives in its own flow object; the engine wires them to the
    same repository, front end and settings and exposes the actions the
    CLI calls.
    """

    def __init__(
        self,
        git: GitOps,
        interaction: Interaction,
        settings: FlowSettings | None = None,
        store: ConfigStore | None = None,
        token: CancellationToken | None = None,
    ) -> None:
        self.core = FlowCore(git, interaction, settings, store, token)
        self.feature = FeatureFlow(self.core)
        self.release = ReleaseFlow(self.core, self.feature)
        self.hotfix = HotfixFlow(self.core, self.release)

    @classmethod
    def from_path(
        cls,
        repo_path: str | Path,
        interaction: Interaction,
        git_path: str | None = None,
        token: CancellationToken | None = None,
    ) -> WorkflowEngine:
        """Build an engine for the repository at ``repo_path``.

        Settings come from ``.gitflowplus.yaml``; ``git_path`` overrides the
        configured executable hint.

        Raises:
            GitNotFoundError: If no git executable can be located
            CommandError: If ``repo_path`` is not a git repository
            ConfigError: If the settings file is invalid
        """
        settings = FlowSettings.load(repo_path)
        git = GitOps(
            repo_path,
            find_git(git_path or settings.git_path),
            timeout=settings.command_timeout,
            merge_detection=settings.merge_detection,
            merge_window_days=settings.merge_window_days,
        )
        logger.debug(f"Using git {git.git.version} at {git.git.path}")
        return cls(git, interaction, settings, token=token)

    @property
    def git(self) -> GitOps:
        return self.core.git

    @property
    def settings(self) -> FlowSettings:
        return self.core.settings

    def initialize(self, *args, **kwargs) -> bool:
        return self.core.initialize(*args, **kwargs)

    def initialize_interactive(self) -> bool:
        return self.core.initialize_interactive()

    def create_branch(self, name: str, branch_type: BranchType | str) -> BranchRef:
        return self.feature.create_branch(name, branch_type)

    def start_test_branch(self) -> bool:
        return self.feature.start_test_branch()

    def publish_branch(self, branch_type: BranchType | str) -> bool:
        return self.feature.publish_branch(branch_type)

    def publish_current_branch(self) -> bool:
        return self.feature.publish_current_branch()

    def publish_finish(self) -> bool:
        return self.release.publish_finish()

    def delete_branch(self) -> bool:
        return self.core.delete_branch()

    def status(self) -> WorkflowStatus:
        """Collect configuration, current branch, active release/hotfix and any unresolved publish."""
        config = self.core.store.read()
        try:
            current = self.git.current_branch().name
        except (DetachedHeadError, CommandError):
            current = None

        active_release = active_hotfix = None
        if config is not None:
            release = self.release.find_active(config.release_prefix)
            hotfix = self.release.find_active(config.hotfix_prefix)
            active_release = release.name if release else None
            active_hotfix = hotfix.name if hotfix else None

        return WorkflowStatus(
            enabled=config is not None,
            config=config,
            current_branch=current,
            active_release=active_release,
            active_hotfix=active_hotfix,
            unresolved_merge=MergeConflictMarker(self.git.git_dir()).target(),
        )
