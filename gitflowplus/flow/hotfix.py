"""Hotfix branches: cut from master, finished like a release."""

from __future__ import annotations

from gitflowplus.constants import Bump
from gitflowplus.exceptions import NoActiveBranchError
from gitflowplus.flow.core import FlowCore
from gitflowplus.flow.release import ReleaseFlow
from gitflowplus.flow.versioning import guess_new_version
from gitflowplus.git.refs import BranchRef


class HotfixFlow:
    """Hotfix role. Shares the hotfix prefix with bugfix branches."""

    def __init__(self, core: FlowCore, release: ReleaseFlow) -> None:
        self.core = core
        self.release = release
        self.git = core.git

    def prefix(self) -> str:
        return self.core.require_enabled().hotfix_prefix

    def current(self) -> BranchRef | None:
        return self.release.find_active(self.prefix())

    def guess_new_version(self) -> str:
        config = self.core.require_enabled()
        return guess_new_version(self.git.latest_tag(), config.tag_prefix, Bump.HOTFIX)

    def start(self, name: str) -> BranchRef:
        """Create ``hotfix/<name>`` off master and check it out."""
        config = self.core.require_enabled()
        return self.release.start_branch(
            config,
            role="hotfix",
            prefix=config.hotfix_prefix,
            name=name,
            base=BranchRef(config.master_branch),
        )

    def finish(self) -> str | None:
        prefix = self.prefix()
        active = self.current()
        if active is None:
            raise NoActiveBranchError("No active hotfix branch to finish")
        return self.release.finalize_with_branch(prefix, active, self.finish)
