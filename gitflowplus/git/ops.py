"""GitOps -- state-changing git operations used by the workflow engine."""

import subprocess

from gitflowplus.exceptions import CheckoutFailedError, CommandError, PushFailedError
from gitflowplus.git.refs import BranchRef, RemoteRef, TagRef
from gitflowplus.git.state import RepositoryState
from gitflowplus.logging import get_logger

logger = get_logger("git.ops")


class GitOps(RepositoryState):
    """Repository mutators: checkout, branch, merge, tag, push and delete.

    Inherits command execution and every read-only query from
    RepositoryState. Each method issues exactly one git invocation so a
    workflow step is never left half-applied.
    """

    def checkout(self, ref: BranchRef) -> None:
        """Checkout a branch.

        Raises:
            CheckoutFailedError: If git refuses the checkout
        """
        try:
            self._run("checkout", ref.name)
        except CommandError as e:
            raise CheckoutFailedError(
                f"Unable to checkout {ref.name}: {e.stderr or e.message}",
                command=e.command,
                exit_code=e.exit_code,
                stderr=e.stderr,
            ) from e
        logger.info(f"Checked out {ref.name}")

    def create_branch(
        self,
        new: BranchRef,
        base: BranchRef,
        checkout: bool = False,
        track: bool | None = None,
    ) -> None:
        """Create ``new`` at ``base``'s commit.

        Args:
            new: Branch to create
            base: Branch (or remote-tracking branch) to start from
            checkout: Switch to the new branch
            track: Force (True) or suppress (False) upstream tracking; git's default when None
        """
        args = ["checkout"] if checkout else ["branch"]
        if track is True:
            args.append("--track")
        elif track is False:
            args.append("--no-track")
        if checkout:
            args.append("-b")
        self._run(*args, new.name, base.name)
        logger.info(f"Created branch {new.name} from {base.name}")

    def merge(self, ref: BranchRef) -> subprocess.CompletedProcess[str]:
        """Merge ``ref`` into the current branch, always recording a merge commit.

        Non-zero exit is not raised: the caller inspects ``returncode`` to
        detect conflicts and decides what to do.
        """
        result = self._run("merge", "--no-ff", "--no-edit", ref.name, check=False)
        if result.returncode == 0:
            logger.info(f"Merged {ref.name}")
        else:
            logger.warning(f"Merge of {ref.name} exited with {result.returncode}")
        return result

    def tag(self, name: TagRef, message: str, ref: BranchRef | None = None) -> None:
        """Create an annotated tag at ``ref`` (HEAD when omitted)."""
        args = ["tag", "-a", name.name, "-m", message]
        if ref is not None:
            args.append(ref.name)
        self._run(*args)
        logger.info(f"Tagged {ref.name if ref else 'HEAD'} as {name.name}")

    def push(self, remote: RemoteRef, branch: BranchRef, set_upstream: bool = False) -> None:
        """Push ``branch`` to ``remote``.

        Raises:
            PushFailedError: On a non-zero exit
        """
        args = ["push"]
        if set_upstream:
            args.append("--set-upstream")
        args.extend([remote.name, branch.name])
        self._push(*args)
        logger.info(f"Pushed {branch.name} to {remote.name}")

    def push_tags(self, remote: RemoteRef) -> None:
        self._push("push", "--tags", remote.name)
        logger.info(f"Pushed tags to {remote.name}")

    def _push(self, *args: str) -> None:
        try:
            self._run(*args)
        except CommandError as e:
            raise PushFailedError(
                f"Failed to push to remote: {e.stderr or e.message}",
                command=e.command,
                exit_code=e.exit_code,
                stderr=e.stderr,
            ) from e

    def fetch(self, remote: RemoteRef) -> None:
        """Refresh remote-tracking branches from ``remote``."""
        self._run("fetch", "--prune", remote.name)
        logger.debug(f"Fetched {remote.name}")

    def delete_branch(self, ref: BranchRef, force: bool = True) -> None:
        """Delete a local branch; workflow branches are disposable so force is the default."""
        self._run("branch", "-D" if force else "-d", ref.name)
        logger.info(f"Deleted branch {ref.name}")

    def delete_remote_branch(self, remote: RemoteRef, ref: BranchRef) -> None:
        """Delete ``ref`` on ``remote`` by pushing a deletion."""
        # Fully qualified so a tag of the same name is never matched
        self._push("push", remote.name, "--delete", f"refs/heads/{ref.name}")
        logger.info(f"Deleted {remote.name}/{ref.name}")

    def create_initial_commit(self, branch: BranchRef, message: str) -> None:
        """Point HEAD at ``branch`` and give an empty repository its first commit."""
        self._run("symbolic-ref", "HEAD", f"refs/heads/{branch.name}")
        self._run("commit", "--allow-empty", "--quiet", "-m", message)
        logger.info(f"Created initial commit on {branch.name}")
