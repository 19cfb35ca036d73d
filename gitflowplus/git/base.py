"""GitRunner base class -- low-level git command execution."""

import subprocess
from pathlib import Path

from gitflowplus.constants import DEFAULT_COMMAND_TIMEOUT
from gitflowplus.exceptions import CommandError
from gitflowplus.git.locator import GitExecutable, find_git
from gitflowplus.logging import get_logger

logger = get_logger("git.base")


class GitRunner:
    """Runs the located git executable inside one repository.

    Two invocation modes are supported through ``_run``: required calls
    (``check=True``) raise ``CommandError`` carrying stderr on a non-zero exit,
    probing calls (``check=False``) hand the completed process back so the
    caller can inspect ``returncode`` itself.
    """

    def __init__(
        self,
        repo_path: str | Path = ".",
        git: GitExecutable | None = None,
        timeout: int = DEFAULT_COMMAND_TIMEOUT,
    ) -> None:
        """Initialize git runner.

        Args:
            repo_path: Path to the git repository
            git: Located git executable; discovered with ``find_git`` when omitted
            timeout: Default per-command timeout in seconds

        Raises:
            CommandError: If the path is not a git repository
        """
        self.repo_path = Path(repo_path).resolve()
        self.git = git or find_git()
        self.timeout = timeout
        self._validate_repo()

    def _validate_repo(self) -> None:
        """Validate that repo_path is a git repository (or a worktree, where .git is a file)."""
        if not (self.repo_path / ".git").exists():
            raise CommandError(
                f"Not a git repository: {self.repo_path}",
                details={"path": str(self.repo_path)},
            )

    def _run(
        self,
        *args: str,
        check: bool = True,
        timeout: int | None = None,
    ) -> subprocess.CompletedProcess[str]:
        """Run a git command.

        Args:
            *args: Git command arguments
            check: Whether to raise on non-zero exit
            timeout: Timeout in seconds, defaults to the runner's timeout

        Returns:
            Completed process result

        Raises:
            CommandError: If the command fails (when check=True) or times out
        """
        timeout = timeout or self.timeout
        cmd = [self.git.path, "-C", str(self.repo_path), *args]
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise CommandError(
                f"Git command timed out after {timeout}s: {' '.join(args)}",
                command=" ".join(cmd),
                exit_code=-1,
            ) from e

        if check and result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise CommandError(
                f"Git command failed: {stderr or ' '.join(args)}",
                command=" ".join(cmd),
                exit_code=result.returncode,
                stderr=stderr,
            )
        return result
