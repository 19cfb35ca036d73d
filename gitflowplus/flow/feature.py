"""Feature and bugfix branches: create, send to test, publish to develop."""

from __future__ import annotations

from gitflowplus.constants import BranchType
from gitflowplus.exceptions import (
    ConfigError,
    DuplicateBranchError,
    MergeConflictError,
    UnresolvedConflictError,
    WrongBranchError,
)
from gitflowplus.flow.core import FlowCore
from gitflowplus.git.refs import Branch, BranchRef
from gitflowplus.logging import get_logger
from gitflowplus.markers import MergeConflictMarker

logger = get_logger("flow.feature")


class FeatureFlow:
    """Actions on the short-lived feature and hotfix branches."""

    def __init__(self, core: FlowCore) -> None:
        self.core = core
        self.git = core.git

    def prefix(self, branch_type: BranchType | str) -> str:
        config = self.core.require_enabled()
        return config.prefix_for(BranchType(branch_type))

    def current(
        self,
        branch_type: BranchType | str,
        message: str = "The current branch is not a feature or bugfix branch",
    ) -> tuple[Branch, str]:
        """Return the current branch and its name without the role prefix.

        Raises:
            WrongBranchError: If the current branch lacks the prefix
        """
        prefix = self.prefix(branch_type)
        branch = self.git.current_branch()
        if not branch.name.startswith(prefix):
            raise WrongBranchError(message, branch.name)
        return branch, branch.name[len(prefix) :]

    def create_branch(self, name: str, branch_type: BranchType | str) -> BranchRef:
        """Create ``prefix + name`` off an up-to-date master and push it.

        Raises:
            DuplicateBranchError: If the branch exists locally or on the remote
            MissingRemoteBranchError: If master is not on the remote
            DivergedStateError: If local master differs from the remote copy
        """
        branch_type = BranchType(branch_type)
        config = self.core.require_enabled()
        name = name.strip()
        if not name or not self.git.is_valid_branch_name(config.prefix_for(branch_type) + name):
            raise ConfigError(f'"{name}" is not a valid branch name', field="name")

        new_branch = BranchRef(config.prefix_for(branch_type) + name)
        master = BranchRef(config.master_branch)

        with self.core.operation(f"Create {branch_type.value} branch") as pr:
            pr.report("Checking branches...")
            self.core.refresh_remote(pr)
            if self.git.branch_exists(new_branch) or self.core.remote_branch_exists(new_branch):
                raise DuplicateBranchError(f'Branch "{new_branch.name}" already exists', new_branch.name)

            remote_master = self.core.require_remote(master)
            self.core.require_equal(master, remote_master)

            pr.report(f"Switching to {master.name}...")
            self.git.checkout(master)

            pr.report(f"Creating {new_branch.name} from {master.name}...")
            self.git.create_branch(new_branch, master, checkout=True)

            pr.report(f"Pushing {new_branch.name} to {self.core.remote.name}...")
            self.git.push(self.core.remote, new_branch, set_upstream=True)

        logger.info(f"Created and pushed {new_branch.name}")
        return new_branch

    def start_test_branch(self) -> bool:
        """Merge the current feature/hotfix branch into the test branch and push it.

        Returns:
            False if the user declined, True once merged and pushed

        Raises:
            WrongBranchError: If not on a feature or hotfix branch
            MissingRemoteBranchError: If the test branch is not on the remote
            MergeConflictError: The repository is left on the test branch mid-merge
        """
        config = self.core.require_enabled()
        test = BranchRef(config.test_branch)

        with self.core.operation("Start test") as pr:
            pr.report("Checking branches...")
            self.core.require_clean()
            current = self.core.require_role_branch(
                config, "You must be on the feature or bugfix branch you want to send to test"
            )

            self.core.refresh_remote(pr)
            remote_test = self.core.require_remote(test)

            if not self.core.interaction.confirm(
                f"About to merge {current.name} into {test.name}. Continue?", "Merge"
            ):
                return False

            if not self.git.branch_exists(test):
                pr.report(f"Creating {test.name} from {remote_test.name}...")
                self.git.create_branch(test, remote_test, track=True)
            self.core.require_equal(test, remote_test)

            pr.report(f"Switching to {test.name}...")
            self.git.checkout(test)

            pr.report(f"Merging {current.name} into {test.name}...")
            self.core.merge_or_fail(current.ref, test)

            pr.report(f"Pushing {test.name} to {self.core.remote.name}...")
            self.git.push(self.core.remote, test, set_upstream=True)

            pr.report(f"Switching back to {current.name}...")
            self.git.checkout(current.ref)

        logger.info(f"Merged {current.name} into {test.name}")
        return True

    def publish_current_branch(self) -> bool:
        """Publish whichever feature or hotfix branch is checked out."""
        config = self.core.require_enabled()
        current = self.git.current_branch()
        branch_type = self.core.branch_type_of(config, current)
        if branch_type is None:
            raise WrongBranchError("You must be on the feature or bugfix branch you want to publish", current.name)
        return self.publish_branch(branch_type)

    def publish_branch(self, branch_type: BranchType | str) -> bool:
        """Merge the current branch into develop and push develop.

        A previous attempt that hit a conflict leaves a marker behind. With a
        clean tree the marker is cleared (the conflict was resolved); with a
        dirty tree the publish is refused.

        Returns:
            False if the user declined, True once develop is merged and pushed

        Raises:
            UnresolvedConflictError: Marker present and the tree is dirty
            WrongBranchError: If the current branch lacks the prefix
            DivergedStateError: If the branch or develop differ from their remote copies
            MergeConflictError: After recording the marker; the tree is left on develop mid-merge
        """
        branch_type = BranchType(branch_type)
        config = self.core.require_enabled()
        develop = BranchRef(config.release_branch)

        with self.core.operation(f"Publish {branch_type.value} branch") as pr:
            pr.report("Checking for unfinished merges...")
            marker = MergeConflictMarker(self.git.git_dir())
            if marker.exists():
                if self.git.is_clean():
                    marker.clear()
                else:
                    target = marker.target() or develop.name
                    raise UnresolvedConflictError(
                        f"There is an unresolved merge conflict on {target}. Resolve it and commit, then try again.",
                        target,
                    )

            pr.report("Getting current branch...")
            current, _ = self.current(branch_type, "You must be on the feature or bugfix branch you want to publish")

            pr.report("Checking current branch...")
            self.core.require_clean()

            if not self.core.interaction.confirm(
                f"About to merge {current.name} into {develop.name}. Continue?", "Publish"
            ):
                return False

            pr.report("Checking remote branches...")
            self.core.refresh_remote(pr)
            remote_current = self.core.require_remote(current.ref)
            self.core.require_equal(current.ref, remote_current)
            remote_develop = self.core.require_remote(develop)
            self.core.require_equal(develop, remote_develop)

            if self.git.is_merged(current.ref, develop):
                if not self.core.interaction.confirm(
                    f"{current.name} is already merged into {develop.name}. Publish again?", "Publish"
                ):
                    return False

            pr.report(f"Switching to {develop.name}...")
            self.git.checkout(develop)

            pr.report(f"Merging {current.name} into {develop.name}...")
            try:
                self.core.merge_or_fail(current.ref, develop)
            except MergeConflictError:
                marker.record(develop.name)
                raise

            pr.report(f"Pushing {develop.name} to {self.core.remote.name}...")
            self.git.push(self.core.remote, develop, set_upstream=True)

            pr.report(f"Switching back to {current.name}...")
            self.git.checkout(current.ref)

        logger.info(f"Published {current.name} to {develop.name}")
        return True
