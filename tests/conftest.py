"""Pytest configuration and fixtures for gitflowplus tests."""

import os
import subprocess
from collections.abc import Generator
from pathlib import Path

import pytest

from gitflowplus.config import ConfigStore, FlowSettings, WorkflowConfig
from gitflowplus.flow import WorkflowEngine
from gitflowplus.git.ops import GitOps
from tests.mocks.scripted_interaction import ScriptedInteraction


def _run_git(*args: str, cwd: Path | None = None) -> str:
    """Run git command safely without shell=True."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def _configure_identity(repo: Path) -> None:
    _run_git("config", "user.email", "test@test.com", cwd=repo)
    _run_git("config", "user.name", "Test", cwd=repo)
    _run_git("config", "commit.gpgsign", "false", cwd=repo)
    _run_git("config", "tag.gpgsign", "false", cwd=repo)


@pytest.fixture
def run_git():
    """Expose the git helper to tests that need to prepare repository state."""
    return _run_git


@pytest.fixture(autouse=True)
def _fresh_settings_cache() -> Generator[None, None, None]:
    FlowSettings.invalidate_cache()
    yield
    FlowSettings.invalidate_cache()


@pytest.fixture
def empty_repo(tmp_path: Path) -> Path:
    """A freshly initialized repository without any commit."""
    repo = tmp_path / "empty"
    repo.mkdir()
    _run_git("init", "-q", "-b", "master", cwd=repo)
    _configure_identity(repo)
    return repo


@pytest.fixture
def tmp_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary git repository with one commit on master.

    Yields:
        Path to the temporary repository
    """
    orig_dir = os.getcwd()
    repo = tmp_path / "work"
    repo.mkdir()
    os.chdir(repo)

    _run_git("init", "-q", "-b", "master", cwd=repo)
    _configure_identity(repo)

    (repo / "README.md").write_text("# Test Repo\n")
    _run_git("add", "-A", cwd=repo)
    _run_git("commit", "-q", "-m", "Initial commit", cwd=repo)

    yield repo

    os.chdir(orig_dir)


@pytest.fixture
def origin(tmp_path: Path) -> Path:
    """A bare repository used as the ``origin`` remote."""
    bare = tmp_path / "origin.git"
    _run_git("init", "-q", "--bare", "-b", "master", str(bare))
    return bare


@pytest.fixture
def remote_repo(tmp_repo: Path, origin: Path) -> Path:
    """Repository with master, develop and test pushed to a bare origin."""
    _run_git("remote", "add", "origin", str(origin), cwd=tmp_repo)
    _run_git("branch", "develop", cwd=tmp_repo)
    _run_git("branch", "test", cwd=tmp_repo)
    _run_git("push", "-q", "-u", "origin", "master", "develop", "test", cwd=tmp_repo)
    return tmp_repo


@pytest.fixture
def workflow_config() -> WorkflowConfig:
    return WorkflowConfig(
        master_branch="master",
        release_branch="develop",
        test_branch="test",
        feature_prefix="feature/",
        hotfix_prefix="hotfix/",
        release_prefix="release/",
        tag_prefix="v",
    )


@pytest.fixture
def flow_repo(remote_repo: Path, workflow_config: WorkflowConfig) -> Path:
    """Repository with a bare origin and a written workflow config."""
    ConfigStore(remote_repo).write(workflow_config)
    return remote_repo


@pytest.fixture
def interaction() -> ScriptedInteraction:
    return ScriptedInteraction()


@pytest.fixture
def engine(flow_repo: Path, interaction: ScriptedInteraction) -> WorkflowEngine:
    """Engine on an initialized repository, answering every prompt with its default."""
    return WorkflowEngine(GitOps(flow_repo), interaction, FlowSettings())
