"""Merge-conflict marker left behind by a publish that hit a conflict."""

from pathlib import Path

from gitflowplus.constants import MARKER_DIRNAME, MARKER_FILENAME
from gitflowplus.logging import get_logger

logger = get_logger("markers")


class MergeConflictMarker:
    """File under the git directory naming the branch a failed publish merged into.

    Presence blocks further publishes while the tree is dirty; the next
    publish attempt on a clean tree clears it.
    """

    def __init__(self, git_dir: str | Path) -> None:
        self.path = Path(git_dir) / MARKER_DIRNAME / MARKER_FILENAME

    def exists(self) -> bool:
        return self.path.is_file()

    def target(self) -> str | None:
        """Branch recorded by the marker, or None when there is no marker."""
        if not self.exists():
            return None
        return self.path.read_text(encoding="utf-8").strip() or None

    def record(self, target_branch: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(target_branch, encoding="utf-8")
        logger.info(f"Recorded unresolved merge into {target_branch}")

    def clear(self) -> None:
        if self.exists():
            self.path.unlink()
            logger.info("Cleared merge conflict marker")
