"""Shared workflow state: configuration access, prechecks, initialize and delete."""

from __future__ import annotations

from contextlib import AbstractContextManager

from gitflowplus.config import ConfigStore, FlowSettings, WorkflowConfig
from gitflowplus.constants import (
    DEFAULT_DEVELOP_BRANCH,
    DEFAULT_FEATURE_PREFIX,
    DEFAULT_HOTFIX_PREFIX,
    DEFAULT_MASTER_BRANCH,
    DEFAULT_RELEASE_PREFIX,
    DEFAULT_TEST_BRANCH,
    INITIAL_COMMIT_MESSAGE,
    BranchType,
)
from gitflowplus.exceptions import (
    ConfigError,
    DirtyWorkingTreeError,
    DivergedStateError,
    MergeConflictError,
    MissingRemoteBranchError,
    NotInitializedError,
    RecoveryAction,
    WrongBranchError,
)
from gitflowplus.git.ops import GitOps
from gitflowplus.git.refs import Branch, BranchRef, RemoteRef
from gitflowplus.interaction import Interaction
from gitflowplus.logging import get_logger
from gitflowplus.progress import CancellationToken, ProgressReporter, run_operation

logger = get_logger("flow.core")


def _required(value: str) -> str | None:
    return None if value.strip() else "Please enter a branch name"


class FlowCore:
    """State and checks shared by every workflow role.

    Holds the repository handle, the front end and the settings, and owns
    the actions that are not tied to a branch role: initialize and delete.
    """

    def __init__(
        self,
        git: GitOps,
        interaction: Interaction,
        settings: FlowSettings | None = None,
        store: ConfigStore | None = None,
        token: CancellationToken | None = None,
    ) -> None:
        self.git = git
        self.interaction = interaction
        self.settings = settings or FlowSettings()
        self.store = store or ConfigStore(git.repo_path)
        self.token = token
        self.remote = RemoteRef(self.settings.remote)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def enabled(self) -> bool:
        """The workflow is enabled exactly when its config file exists."""
        return self.store.exists()

    def require_enabled(self) -> WorkflowConfig:
        """Return the workflow config.

        Raises:
            NotInitializedError: With an "Initialize now" recovery action
        """
        config = self.store.read()
        if config is None:
            raise NotInitializedError(
                "This repository has not been initialized for gitflowplus",
                recovery=[RecoveryAction("Initialize now", self.initialize_interactive)],
            )
        return config

    def operation(self, title: str) -> AbstractContextManager[ProgressReporter]:
        return run_operation(title, self.interaction.report_progress, self.token)

    # ------------------------------------------------------------------
    # Prechecks
    # ------------------------------------------------------------------

    def require_clean(self) -> None:
        if not self.git.is_clean():
            raise DirtyWorkingTreeError("There are uncommitted changes. Commit or stash them and try again.")

    def require_role_branch(self, config: WorkflowConfig, message: str) -> Branch:
        """Return the current branch if it carries the feature or hotfix prefix.

        Raises:
            WrongBranchError: Otherwise
        """
        current = self.git.current_branch()
        prefixes = (config.feature_prefix, config.hotfix_prefix)
        if not current.name.startswith(prefixes):
            raise WrongBranchError(message, current.name)
        return current

    def branch_type_of(self, config: WorkflowConfig, branch: Branch) -> BranchType | None:
        for branch_type in BranchType:
            if branch.name.startswith(config.prefix_for(branch_type)):
                return branch_type
        return None

    def refresh_remote(self, pr: ProgressReporter) -> None:
        """Fetch the primary remote so remote-tracking refs are current for the checks that follow."""
        if not self.settings.fetch_before_checks or not self.git.remote_exists(self.remote):
            return
        pr.report(f"Fetching {self.remote.name}...")
        self.git.fetch(self.remote)

    def remote_branch_exists(self, ref: BranchRef) -> bool:
        return self.git.branch_exists(ref.remote_at(self.remote))

    def require_remote(self, ref: BranchRef) -> BranchRef:
        """Return the remote-qualified ref of ``ref``.

        Raises:
            MissingRemoteBranchError: If the remote copy does not exist
        """
        remote_ref = ref.remote_at(self.remote)
        if not self.git.branch_exists(remote_ref):
            raise MissingRemoteBranchError(f'Branch "{remote_ref.name}" does not exist on the remote', remote_ref.name)
        return remote_ref

    def require_equal(self, local: BranchRef, remote: BranchRef) -> None:
        """Fail unless ``local`` and ``remote`` point at the same commit.

        Raises:
            DivergedStateError: When they differ; nothing is pulled or pushed
        """
        if self.git.resolve(local) != self.git.resolve(remote):
            raise DivergedStateError(
                f'Branch "{local.name}" is not in sync with "{remote.name}". '
                f"Pull or push {local.name} and try again.",
                local.name,
                remote.name,
            )

    def merge_or_fail(self, source: BranchRef, target: BranchRef) -> None:
        """Merge ``source`` into the checked-out ``target``.

        Raises:
            MergeConflictError: If git reports a non-zero exit; the conflicted
                tree is left in place for the user to resolve
        """
        result = self.git.merge(source)
        if result.returncode != 0:
            raise MergeConflictError(
                f"Merging {source.name} into {target.name} produced conflicts. "
                "Resolve them, commit, and try again.",
                source.name,
                target.name,
                output=(result.stdout + result.stderr).strip(),
            )

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def initialize(
        self,
        master_name: str,
        develop_name: str,
        feature_prefix: str = DEFAULT_FEATURE_PREFIX,
        hotfix_prefix: str = DEFAULT_HOTFIX_PREFIX,
        tag_prefix: str = "",
        test_name: str = DEFAULT_TEST_BRANCH,
        release_prefix: str = DEFAULT_RELEASE_PREFIX,
        confirmed: bool = False,
    ) -> bool:
        """Enable the workflow for this repository.

        Args:
            master_name: Branch that receives tagged releases
            develop_name: Integration branch features are published to
            feature_prefix: Prefix of feature branches
            hotfix_prefix: Prefix of hotfix/bugfix branches
            tag_prefix: Prefix prepended to release tags
            test_name: Shared test branch
            release_prefix: Prefix of release branches
            confirmed: Skip the reinitialize question (the caller already asked)

        Returns:
            False if the user declined to reinitialize, True once the config is written

        Raises:
            ConfigError: If a name is empty, master equals develop, or a prefix matches a main branch
        """
        if self.enabled() and not confirmed:
            if not self.interaction.confirm(
                "gitflowplus is already initialized for this repository. Initialize again?", "Reinitialize"
            ):
                return False

        if not master_name.strip() or not develop_name.strip():
            raise ConfigError("Master and develop branch names are required")
        if master_name.strip() == develop_name.strip():
            raise ConfigError("The master and develop branches must have different names", field="releaseBranch")

        config = WorkflowConfig.from_dict(
            {
                "masterBranch": master_name,
                "releaseBranch": develop_name,
                "testBranch": test_name,
                "featurePrefix": feature_prefix,
                "hotfixPrefix": hotfix_prefix,
                "releasePrefix": release_prefix,
                "tagPrefix": tag_prefix or "",
            }
        )
        master = BranchRef(config.master_branch)
        develop = BranchRef(config.release_branch)

        with self.operation("Initialize") as pr:
            if not self.git.has_commits():
                pr.report(f"Creating initial commit on {master.name}...")
                self.git.create_initial_commit(master, INITIAL_COMMIT_MESSAGE)

            if not self.git.branch_exists(develop):
                remote_develop = develop.remote_at(self.remote)
                if self.git.branch_exists(remote_develop):
                    pr.report(f"Creating {develop.name} tracking {remote_develop.name}...")
                    self.git.create_branch(develop, remote_develop, track=True)
                else:
                    pr.report(f"Creating {develop.name} from {master.name}...")
                    self.git.create_branch(develop, master, track=False)
                self.git.checkout(develop)

            pr.report("Writing workflow configuration...")
            self.store.write(config)

        logger.info(f"Initialized workflow: master={master.name} develop={develop.name}")
        return True

    def initialize_interactive(self) -> bool:
        """Ask for every setting, then initialize. Any cancelled prompt aborts without side effects."""
        if self.enabled():
            if not self.interaction.confirm(
                "gitflowplus is already initialized for this repository. Initialize again?", "Reinitialize"
            ):
                return False

        ask = self.interaction.prompt_input
        master = ask(DEFAULT_MASTER_BRANCH, "Name of the master branch", DEFAULT_MASTER_BRANCH, _required)
        if not master:
            return False
        develop = ask(DEFAULT_DEVELOP_BRANCH, "Name of the develop branch", DEFAULT_DEVELOP_BRANCH, _required)
        if not develop:
            return False
        if master == develop:
            raise ConfigError("The master and develop branches must have different names", field="releaseBranch")
        test = ask(DEFAULT_TEST_BRANCH, "Name of the test branch", DEFAULT_TEST_BRANCH, _required)
        if not test:
            return False

        prefixes: dict[str, str] = {}
        for role, default in (
            ("feature", DEFAULT_FEATURE_PREFIX),
            ("hotfix", DEFAULT_HOTFIX_PREFIX),
            ("release", DEFAULT_RELEASE_PREFIX),
        ):
            prefix = ask(default, f'Prefix for "{role}" branches', default, _required)
            if not prefix:
                return False
            prefixes[role] = prefix

        # Optional: an empty answer means no tag prefix
        tag_prefix = ask("v", "Tag name prefix (optional)", None, None) or ""

        return self.initialize(
            master,
            develop,
            feature_prefix=prefixes["feature"],
            hotfix_prefix=prefixes["hotfix"],
            tag_prefix=tag_prefix,
            test_name=test,
            release_prefix=prefixes["release"],
            confirmed=True,
        )

    def delete_branch(self) -> bool:
        """Delete the current branch locally and on the remote, leaving the user on master.

        Returns:
            False if the user declined, True once deleted

        Raises:
            WrongBranchError: If the current branch is master or develop
        """
        config = self.require_enabled()
        if not self.interaction.confirm("About to delete the current branch. Continue?", "Delete"):
            return False

        with self.operation("Delete branch") as pr:
            current = self.git.current_branch()
            master = BranchRef(config.master_branch)
            if current.name in (config.master_branch, config.release_branch):
                raise WrongBranchError(f'Refusing to delete the "{current.name}" branch', current.name)

            pr.report(f"Switching to {master.name}...")
            self.git.checkout(master)

            pr.report(f"Deleting local branch {current.name}...")
            self.git.delete_branch(current.ref)

            if self.remote_branch_exists(current.ref):
                pr.report(f"Deleting remote branch {self.remote.name}/{current.name}...")
                self.git.delete_remote_branch(self.remote, current.ref)

        logger.info(f"Deleted branch {current.name}")
        return True
