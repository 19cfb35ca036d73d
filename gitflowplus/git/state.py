"""RepositoryState -- read-only queries over the repository."""

from pathlib import Path

from gitflowplus.constants import DEFAULT_COMMAND_TIMEOUT, DEFAULT_MERGE_WINDOW_DAYS, MergeDetection
from gitflowplus.exceptions import CommandError, DetachedHeadError
from gitflowplus.git.base import GitRunner
from gitflowplus.git.locator import GitExecutable
from gitflowplus.git.refs import Branch, BranchRef, RemoteRef, TagRef
from gitflowplus.logging import get_logger

logger = get_logger("git.state")


class RepositoryState(GitRunner):
    """Read-only repository queries.

    Nothing here changes refs, the index or the working tree. Results are
    never cached; every call asks git again.
    """

    def __init__(
        self,
        repo_path: str | Path = ".",
        git: GitExecutable | None = None,
        timeout: int = DEFAULT_COMMAND_TIMEOUT,
        merge_detection: MergeDetection = MergeDetection.ANCESTRY,
        merge_window_days: int = DEFAULT_MERGE_WINDOW_DAYS,
    ) -> None:
        super().__init__(repo_path, git, timeout)
        self.merge_detection = merge_detection
        self.merge_window_days = merge_window_days

    def current_branch(self) -> Branch:
        """Resolve the checked-out branch.

        Raises:
            DetachedHeadError: If HEAD is not on a named branch
        """
        result = self._run("rev-parse", "--abbrev-ref", "HEAD")
        name = result.stdout.strip()
        if name == "HEAD":
            raise DetachedHeadError("Unable to determine the current branch: HEAD is detached")
        return self.get_branch(BranchRef(name))

    def get_branch(self, ref: BranchRef) -> Branch:
        """Resolve ``ref`` to its commit and upstream.

        Raises:
            CommandError: If the ref does not resolve
        """
        upstream = self._run(
            "rev-parse", "--abbrev-ref", "--symbolic-full-name", f"{ref.name}@{{upstream}}", check=False
        )
        tracking = upstream.stdout.strip() if upstream.returncode == 0 else ""
        return Branch(ref=ref, commit=self.resolve(ref), upstream=tracking or None)

    def resolve(self, ref: BranchRef | str) -> str:
        """Get the commit a ref currently points to."""
        name = ref.name if isinstance(ref, BranchRef) else ref
        result = self._run("rev-parse", "--verify", "--quiet", f"{name}^{{commit}}", check=False)
        if result.returncode != 0:
            raise CommandError(f"Unable to resolve {name}", command=f"rev-parse {name}", exit_code=result.returncode)
        return result.stdout.strip()

    def has_commits(self) -> bool:
        """True when HEAD points at a commit (false in a freshly created repository)."""
        result = self._run("rev-parse", "--quiet", "--verify", "HEAD", check=False)
        return result.returncode == 0

    def git_dir(self) -> Path:
        """Absolute path of the repository's metadata directory."""
        result = self._run("rev-parse", "--git-dir")
        path = Path(result.stdout.strip())
        return path if path.is_absolute() else (self.repo_path / path).resolve()

    def is_clean(self) -> bool:
        """True iff there are no unstaged changes and nothing staged against HEAD."""
        for args in (("diff", "--quiet"), ("diff", "--cached", "--quiet")):
            result = self._run(*args, check=False)
            if result.returncode == 1:
                return False
            if result.returncode != 0:
                raise CommandError(
                    f"Git command failed: {result.stderr.strip()}",
                    command=" ".join(args),
                    exit_code=result.returncode,
                    stderr=result.stderr.strip(),
                )
        # Unmerged paths left by a conflicted merge
        unmerged = self._run("diff", "--name-only", "--diff-filter=U", check=False)
        return not unmerged.stdout.strip()

    def all_branches(self) -> list[BranchRef]:
        """Local and remote branches, de-duplicated in first-seen order."""
        local = self._run("branch", "--no-color", check=False)
        remote = self._run("branch", "-r", "--no-color", check=False)
        return BranchRef.parse_listing(local.stdout + "\n" + remote.stdout)

    def all_tags(self) -> list[TagRef]:
        result = self._run("tag", "-l")
        return TagRef.parse_listing(result.stdout)

    def branch_exists(self, ref: BranchRef) -> bool:
        return ref in self.all_branches()

    def tag_exists(self, ref: TagRef) -> bool:
        return ref in self.all_tags()

    def is_valid_branch_name(self, name: str) -> bool:
        """Ask git whether ``name`` is acceptable as a branch name."""
        result = self._run("check-ref-format", "--branch", name, check=False)
        return result.returncode == 0

    def remote_exists(self, remote: RemoteRef) -> bool:
        result = self._run("remote", check=False)
        return remote.name in result.stdout.split()

    def latest_tag(self) -> str | None:
        """Tag describing the most recently tagged commit, or None without tags."""
        if not self.all_tags():
            return None
        latest_commit = self._run("rev-list", "--tags", "--max-count=1").stdout.strip()
        result = self._run("describe", "--tags", latest_commit)
        return result.stdout.strip() or None

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        """True when the commit ``ancestor`` names is reachable from ``descendant``."""
        result = self._run("merge-base", "--is-ancestor", ancestor, descendant, check=False)
        if result.returncode not in (0, 1):
            raise CommandError(
                f"Unable to compare {ancestor} with {descendant}: {result.stderr.strip()}",
                command=f"merge-base --is-ancestor {ancestor} {descendant}",
                exit_code=result.returncode,
                stderr=result.stderr.strip(),
            )
        return result.returncode == 0

    def is_merged(self, subject: BranchRef, base: BranchRef) -> bool:
        """Detect whether ``subject`` has been merged into ``base``.

        With ``MergeDetection.ANCESTRY`` this is exact reachability. With
        ``MergeDetection.RECENT_MERGE_MESSAGE`` it looks for a merge commit
        titled "Merge branch '<subject>' into <base>" among the merges of the
        last ``merge_window_days`` days, which misses older and renamed merges.
        """
        if self.merge_detection is MergeDetection.ANCESTRY:
            return self.is_ancestor(subject.name, base.name)

        result = self._run(
            "rev-list",
            "--all",
            "--merges",
            "--fixed-strings",
            f"--grep=Merge branch '{subject.name}' into {base.name}",
            f"--since={self.merge_window_days} days ago",
        )
        return bool(result.stdout.strip())
