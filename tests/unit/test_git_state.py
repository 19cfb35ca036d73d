"""Tests for RepositoryState read-only queries against real repositories."""

from pathlib import Path

import pytest

from gitflowplus.constants import MergeDetection
from gitflowplus.exceptions import CommandError, DetachedHeadError
from gitflowplus.git.refs import BranchRef, RemoteRef, TagRef
from gitflowplus.git.state import RepositoryState


def _commit(run_git, repo: Path, name: str, content: str = "x\n", message: str | None = None) -> None:
    (repo / name).write_text(content)
    run_git("add", name, cwd=repo)
    run_git("commit", "-q", "-m", message or f"Add {name}", cwd=repo)


class TestCurrentBranch:
    """Tests for current_branch and get_branch."""

    def test_current_branch(self, tmp_repo: Path, run_git) -> None:
        state = RepositoryState(tmp_repo)
        branch = state.current_branch()
        assert branch.name == "master"
        assert branch.commit == run_git("rev-parse", "HEAD", cwd=tmp_repo)
        assert branch.upstream is None

    def test_upstream_reported(self, remote_repo: Path) -> None:
        branch = RepositoryState(remote_repo).current_branch()
        assert branch.upstream == "origin/master"

    def test_detached_head(self, tmp_repo: Path, run_git) -> None:
        run_git("checkout", "-q", "--detach", "HEAD", cwd=tmp_repo)
        with pytest.raises(DetachedHeadError):
            RepositoryState(tmp_repo).current_branch()

    def test_resolve_unknown_ref(self, tmp_repo: Path) -> None:
        with pytest.raises(CommandError):
            RepositoryState(tmp_repo).resolve(BranchRef("nope"))


class TestIsClean:
    """Tests for is_clean."""

    def test_clean_after_commit(self, tmp_repo: Path) -> None:
        assert RepositoryState(tmp_repo).is_clean() is True

    def test_untracked_files_do_not_count(self, tmp_repo: Path) -> None:
        (tmp_repo / "notes.txt").write_text("scratch")
        assert RepositoryState(tmp_repo).is_clean() is True

    def test_unstaged_change(self, tmp_repo: Path) -> None:
        (tmp_repo / "README.md").write_text("changed\n")
        assert RepositoryState(tmp_repo).is_clean() is False

    def test_staged_change(self, tmp_repo: Path, run_git) -> None:
        (tmp_repo / "new.txt").write_text("new\n")
        run_git("add", "new.txt", cwd=tmp_repo)
        assert RepositoryState(tmp_repo).is_clean() is False


class TestListings:
    """Tests for branch and tag listings."""

    def test_all_branches_local_and_remote(self, remote_repo: Path) -> None:
        names = [ref.name for ref in RepositoryState(remote_repo).all_branches()]
        assert names[:3] == ["develop", "master", "test"]
        assert "origin/develop" in names
        assert "origin/master" in names
        assert not any("->" in name for name in names)

    def test_branch_exists(self, remote_repo: Path) -> None:
        state = RepositoryState(remote_repo)
        assert state.branch_exists(BranchRef("develop"))
        assert state.branch_exists(BranchRef("origin/test"))
        assert not state.branch_exists(BranchRef("feature/none"))

    def test_tags(self, tmp_repo: Path, run_git) -> None:
        run_git("tag", "-a", "v1.0.0", "-m", "first", cwd=tmp_repo)
        state = RepositoryState(tmp_repo)
        assert state.all_tags() == [TagRef("v1.0.0")]
        assert state.tag_exists(TagRef("v1.0.0"))
        assert not state.tag_exists(TagRef("v2.0.0"))

    def test_latest_tag_none_without_tags(self, tmp_repo: Path) -> None:
        assert RepositoryState(tmp_repo).latest_tag() is None

    def test_latest_tag(self, tmp_repo: Path, run_git) -> None:
        run_git("tag", "-a", "v1.0.0", "-m", "first", cwd=tmp_repo)
        _commit(run_git, tmp_repo, "a.txt")
        run_git("tag", "-a", "v1.1.0", "-m", "second", cwd=tmp_repo)
        assert RepositoryState(tmp_repo).latest_tag() == "v1.1.0"

    def test_remote_exists(self, remote_repo: Path) -> None:
        state = RepositoryState(remote_repo)
        assert state.remote_exists(RemoteRef("origin"))
        assert not state.remote_exists(RemoteRef("upstream"))

    def test_valid_branch_names(self, tmp_repo: Path) -> None:
        state = RepositoryState(tmp_repo)
        assert state.is_valid_branch_name("feature/login-form")
        assert not state.is_valid_branch_name("feature/bad..name")
        assert not state.is_valid_branch_name("feature/with space")


class TestRepositoryMetadata:
    """Tests for has_commits and git_dir."""

    def test_has_commits(self, tmp_repo: Path, empty_repo: Path) -> None:
        assert RepositoryState(tmp_repo).has_commits() is True
        assert RepositoryState(empty_repo).has_commits() is False

    def test_git_dir_is_absolute(self, tmp_repo: Path) -> None:
        git_dir = RepositoryState(tmp_repo).git_dir()
        assert git_dir.is_absolute()
        assert git_dir == (tmp_repo / ".git").resolve()


class TestIsMerged:
    """Tests for both merge detection strategies."""

    def test_ancestry(self, tmp_repo: Path, run_git) -> None:
        run_git("checkout", "-q", "-b", "feature/a", cwd=tmp_repo)
        _commit(run_git, tmp_repo, "a.txt")
        state = RepositoryState(tmp_repo)
        assert not state.is_merged(BranchRef("feature/a"), BranchRef("master"))

        run_git("checkout", "-q", "master", cwd=tmp_repo)
        run_git("merge", "-q", "--no-ff", "--no-edit", "feature/a", cwd=tmp_repo)
        assert state.is_merged(BranchRef("feature/a"), BranchRef("master"))

    def test_is_ancestor_through_annotated_tag(self, tmp_repo: Path, run_git) -> None:
        run_git("tag", "-a", "v1.0.0", "-m", "Release v1.0.0", cwd=tmp_repo)
        _commit(run_git, tmp_repo, "a.txt")
        state = RepositoryState(tmp_repo)
        tagged = state.resolve("refs/tags/v1.0.0")

        assert state.is_ancestor(tagged, "master")
        assert not state.is_ancestor("master", tagged)

    def test_ancestry_unknown_ref_raises(self, tmp_repo: Path) -> None:
        with pytest.raises(CommandError):
            RepositoryState(tmp_repo).is_merged(BranchRef("nope"), BranchRef("master"))

    def test_recent_merge_message(self, tmp_repo: Path, run_git) -> None:
        run_git("checkout", "-q", "-b", "develop", cwd=tmp_repo)
        run_git("checkout", "-q", "-b", "feature/a", cwd=tmp_repo)
        _commit(run_git, tmp_repo, "a.txt")
        run_git("checkout", "-q", "develop", cwd=tmp_repo)

        state = RepositoryState(tmp_repo, merge_detection=MergeDetection.RECENT_MERGE_MESSAGE)
        assert not state.is_merged(BranchRef("feature/a"), BranchRef("develop"))

        run_git(
            "merge", "-q", "--no-ff", "-m", "Merge branch 'feature/a' into develop", "feature/a", cwd=tmp_repo
        )
        assert state.is_merged(BranchRef("feature/a"), BranchRef("develop"))

    def test_recent_merge_message_ignores_other_messages(self, tmp_repo: Path, run_git) -> None:
        run_git("checkout", "-q", "-b", "feature/a", cwd=tmp_repo)
        _commit(run_git, tmp_repo, "a.txt")
        run_git("checkout", "-q", "master", cwd=tmp_repo)
        run_git("merge", "-q", "--no-ff", "-m", "Integrate login", "feature/a", cwd=tmp_repo)

        state = RepositoryState(tmp_repo, merge_detection=MergeDetection.RECENT_MERGE_MESSAGE)
        assert not state.is_merged(BranchRef("feature/a"), BranchRef("master"))
        state.merge_detection = MergeDetection.ANCESTRY
        assert state.is_merged(BranchRef("feature/a"), BranchRef("master"))
