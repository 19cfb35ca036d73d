"""Release branches and the final develop -> master publish."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

from gitflowplus.config import WorkflowConfig
from gitflowplus.constants import Bump
from gitflowplus.exceptions import (
    ConfigError,
    DuplicateBranchError,
    DuplicateTagError,
    NoActiveBranchError,
    NotYetPublishedError,
    RecoveryAction,
    WrongBranchError,
)
from gitflowplus.flow.core import FlowCore
from gitflowplus.flow.feature import FeatureFlow
from gitflowplus.flow.versioning import guess_new_version
from gitflowplus.git.refs import BranchRef, TagRef
from gitflowplus.logging import get_logger

logger = get_logger("flow.release")

TAG_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _required_tag(value: str) -> str | None:
    return None if value.strip() else "Please enter a tag name"


class ReleaseFlow:
    """Release branches, plus the finalize sequence shared with hotfixes."""

    def __init__(self, core: FlowCore, feature: FeatureFlow) -> None:
        self.core = core
        self.feature = feature
        self.git = core.git

    def prefix(self) -> str:
        return self.core.require_enabled().release_prefix

    def current(self) -> BranchRef | None:
        """The active release branch (first branch carrying the release prefix), if any."""
        return self.find_active(self.prefix())

    def find_active(self, prefix: str) -> BranchRef | None:
        for ref in self.git.all_branches():
            if ref.name.startswith(prefix):
                return ref
        return None

    def guess_new_version(self) -> str:
        config = self.core.require_enabled()
        return guess_new_version(self.git.latest_tag(), config.tag_prefix, Bump.RELEASE)

    def start(self, name: str) -> BranchRef:
        """Create ``release/<name>`` off develop and check it out."""
        config = self.core.require_enabled()
        return self.start_branch(
            config,
            role="release",
            prefix=config.release_prefix,
            name=name,
            base=BranchRef(config.release_branch),
        )

    def start_branch(
        self,
        config: WorkflowConfig,
        role: str,
        prefix: str,
        name: str,
        base: BranchRef,
    ) -> BranchRef:
        """Check the release/hotfix preconditions, then ``checkout -b prefix+name base``.

        Raises:
            DuplicateBranchError: If a branch of this role is already active, or
                the new branch already exists
            DuplicateTagError: If the tag the branch will produce already exists
            DirtyWorkingTreeError: If there are uncommitted changes
            DivergedStateError: If ``base`` differs from its remote copy
        """
        name = name.strip()
        if not name or not self.git.is_valid_branch_name(prefix + name):
            raise ConfigError(f'"{name}" is not a valid {role} name', field="name")
        new_branch = BranchRef(prefix + name)

        with self.core.operation(f"Start {role} branch") as pr:
            pr.report(f"Checking for an active {role} branch...")
            active = self.find_active(prefix)
            if active is not None:
                raise DuplicateBranchError(
                    f'There is an existing {role} branch "{active.name}". Finish it before starting a new one.',
                    active.name,
                )

            tag = TagRef(config.tag_prefix + name)
            if self.git.tag_exists(tag):
                raise DuplicateTagError(f'The tag "{tag.name}" already exists. Choose another {role} name.', tag.name)

            self.core.require_clean()

            self.core.refresh_remote(pr)
            remote_base = base.remote_at(self.core.remote)
            if self.git.branch_exists(remote_base):
                self.core.require_equal(base, remote_base)

            if self.git.branch_exists(new_branch):
                raise DuplicateBranchError(f'"{new_branch.name}" is the name of an existing branch', new_branch.name)

            pr.report(f"Creating {new_branch.name} from {base.name}...")
            self.git.create_branch(new_branch, base, checkout=True)

        logger.info(f"Started {role} branch {new_branch.name}")
        return new_branch

    def finish(self) -> str | None:
        """Finish the active release branch.

        Raises:
            NoActiveBranchError: Without touching the working tree when there is no release branch
        """
        prefix = self.prefix()
        active = self.current()
        if active is None:
            raise NoActiveBranchError("No active release branch to finish")
        return self.finalize_with_branch(prefix, active, self.finish)

    def finalize_with_branch(
        self,
        prefix: str,
        branch: BranchRef,
        reenter: Callable[[], Any],
    ) -> str | None:
        """Merge ``branch`` into master and develop, tag master, then clean up.

        A tag left by an earlier run that stopped on the develop merge is reused
        when it marks a master commit containing ``branch``.

        Args:
            prefix: Role prefix stripped from the branch name to build the tag
            branch: Release or hotfix branch being finished
            reenter: Action re-run by the "checkout and continue" recovery

        Returns:
            The created tag name, or None if the tag message prompt was cancelled

        Raises:
            WrongBranchError: If ``branch`` is not checked out
            DuplicateTagError: If the release tag already exists elsewhere
        """
        config = self.core.require_enabled()
        master = BranchRef(config.master_branch)
        develop = BranchRef(config.release_branch)
        remote = self.core.remote

        with self.core.operation("Finishing release branch") as pr:
            pr.report("Getting current branch...")
            current = self.git.current_branch()
            if current.name != branch.name:

                def checkout_and_continue() -> Any:
                    self.git.checkout(branch)
                    return reenter()

                raise WrongBranchError(
                    f'You are not currently on the "{branch.name}" branch',
                    current.name,
                    recovery=[RecoveryAction(f"Checkout {branch.name} and continue", checkout_and_continue)],
                )

            pr.report("Checking cleanliness...")
            self.core.require_clean()

            pr.report("Checking remotes...")
            self.core.refresh_remote(pr)
            remote_master = master.remote_at(remote)
            remote_master_exists = self.git.branch_exists(remote_master)
            if remote_master_exists:
                self.core.require_equal(master, remote_master)
            remote_develop = develop.remote_at(remote)
            remote_develop_exists = self.git.branch_exists(remote_develop)
            if remote_develop_exists:
                self.core.require_equal(develop, remote_develop)

            release_name = config.tag_prefix + branch.strip_prefix(prefix)
            tag = TagRef(release_name)
            tag_message = None
            if self.git.tag_exists(tag):
                # An earlier finish tagged master and then stopped on the develop merge
                tagged = self.git.resolve(f"refs/tags/{release_name}")
                if not (self.git.is_ancestor(branch.name, tagged) and self.git.is_ancestor(tagged, master.name)):
                    raise DuplicateTagError(f'The tag "{release_name}" already exists', release_name)
                logger.info(f"Tag {release_name} already marks {branch.name} on {master.name}; resuming finish")
            else:
                pr.report("Getting a tag message...")
                tag_message = self.core.interaction.prompt_input(
                    f"Release {release_name}", "Enter a tag message", f"Release {release_name}"
                )
                if tag_message is None:
                    return None

            pr.report(f"Switching to {master.name}...")
            self.git.checkout(master)
            if not self.git.is_merged(branch, master):
                pr.report(f"Merging {branch.name} into {master.name}...")
                self.core.merge_or_fail(branch, master)

            if tag_message is not None:
                pr.report(f"Tagging {master.name}: {release_name}...")
                self.git.tag(tag, tag_message, master)

            pr.report(f"Switching to {develop.name}...")
            self.git.checkout(develop)
            if not self.git.is_merged(branch, develop):
                pr.report(f"Merging {branch.name} into {develop.name}...")
                self.core.merge_or_fail(branch, develop)

            if self.core.settings.delete_branch_on_finish:
                pr.report(f"Deleting {branch.name}...")
                self.git.delete_branch(branch)

                if self.core.settings.delete_remote_branches and remote_master_exists and remote_develop_exists:
                    pr.report(f"Pushing to {remote.name}/{develop.name}...")
                    self.git.push(remote, develop)
                    pr.report(f"Pushing to {remote.name}/{master.name}...")
                    self.git.push(remote, master)
                    pr.report(f"Pushing tag {release_name}...")
                    self.git.push_tags(remote)
                    if self.core.remote_branch_exists(branch):
                        pr.report(f"Deleting remote {remote.name}/{branch.name}...")
                        self.git.delete_remote_branch(remote, branch)

        logger.info(f"Finished {branch.name} as {release_name}; now on {develop.name}")
        return release_name

    def publish_finish(self) -> bool:
        """Merge develop into master, tag master and push both, then drop the published branch.

        Returns:
            False if a tag prompt was cancelled, True once pushed

        Raises:
            WrongBranchError: If not on a feature or hotfix branch
            MissingRemoteBranchError: If master or develop are not on the remote
            DivergedStateError: If master or develop differ from their remote copies
            NotYetPublishedError: If the branch has not been published to develop;
                carries a "Publish now" recovery action
            DuplicateTagError: If the chosen tag already exists
        """
        config = self.core.require_enabled()
        master = BranchRef(config.master_branch)
        develop = BranchRef(config.release_branch)
        remote = self.core.remote

        with self.core.operation("Finish publish") as pr:
            pr.report("Checking branches...")
            current = self.core.require_role_branch(
                config, "You must be on the feature or bugfix branch you want to finish"
            )
            self.core.require_clean()

            self.core.refresh_remote(pr)
            remote_master = self.core.require_remote(master)
            remote_develop = self.core.require_remote(develop)
            self.core.require_equal(develop, remote_develop)
            self.core.require_equal(master, remote_master)

            remote_current = current.ref.remote_at(remote)
            published = self.git.branch_exists(remote_current) and self.git.is_merged(remote_current, develop)
            if not published:
                raise NotYetPublishedError(
                    f"{current.name} has not been published to {develop.name} yet",
                    current.name,
                    recovery=[RecoveryAction("Publish now", self.feature.publish_current_branch)],
                )

            pr.report("Getting tag information...")
            ask = self.core.interaction.prompt_input
            tag_name = ask(current.name, "Tag name", current.name, _required_tag)
            if not tag_name:
                return False
            tag_message = ask("", "Tag message", datetime.now().strftime(TAG_TIMESTAMP_FORMAT))
            if not tag_message:
                return False

            tag = TagRef(tag_name)
            if self.git.tag_exists(tag):
                raise DuplicateTagError(f'The tag "{tag_name}" already exists', tag_name)

            pr.report(f"Switching to {master.name}...")
            self.git.checkout(master)

            pr.report(f"Merging {develop.name} into {master.name}...")
            self.core.merge_or_fail(develop, master)

            pr.report(f"Tagging {master.name}: {tag_name}...")
            self.git.tag(tag, tag_message)

            pr.report(f"Pushing {master.name} to {remote.name}...")
            self.git.push(remote, master)

            pr.report("Pushing tags...")
            self.git.push_tags(remote)

            if self.core.settings.delete_branch_on_finish:
                pr.report(f"Deleting local branch {current.name}...")
                self.git.delete_branch(current.ref)

                if self.core.settings.delete_remote_branches and self.git.branch_exists(remote_current):
                    pr.report(f"Deleting remote branch {remote_current.name}...")
                    self.git.delete_remote_branch(remote, current.ref)

        logger.info(f"Published {develop.name} to {master.name} as {tag_name}")
        return True
