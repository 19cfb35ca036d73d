"""Tests for the merge-conflict marker file."""

from pathlib import Path

from gitflowplus.markers import MergeConflictMarker


class TestMergeConflictMarker:
    """Tests for MergeConflictMarker."""

    def test_location(self, tmp_path: Path) -> None:
        marker = MergeConflictMarker(tmp_path / ".git")
        assert marker.path == tmp_path / ".git" / ".gitflow" / "MERGE_BASE"

    def test_absent(self, tmp_path: Path) -> None:
        marker = MergeConflictMarker(tmp_path)
        assert not marker.exists()
        assert marker.target() is None

    def test_record_creates_directory(self, tmp_path: Path) -> None:
        marker = MergeConflictMarker(tmp_path / ".git")
        marker.record("develop")
        assert marker.exists()
        assert marker.target() == "develop"
        assert marker.path.read_text() == "develop"

    def test_clear(self, tmp_path: Path) -> None:
        marker = MergeConflictMarker(tmp_path)
        marker.record("develop")
        marker.clear()
        assert not marker.exists()

    def test_clear_without_marker(self, tmp_path: Path) -> None:
        MergeConflictMarker(tmp_path).clear()
