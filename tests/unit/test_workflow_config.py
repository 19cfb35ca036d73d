"""Tests for WorkflowConfig, ConfigStore and FlowSettings."""

import json
import os
import time
from pathlib import Path

import pytest

from gitflowplus.config import ConfigStore, FlowSettings, LoggingConfig, WorkflowConfig
from gitflowplus.constants import CONFIG_FILENAME, SETTINGS_FILENAME, BranchType, MergeDetection
from gitflowplus.exceptions import ConfigError


class TestWorkflowConfig:
    """Tests for the persisted workflow record."""

    def test_from_camel_case_keys(self) -> None:
        config = WorkflowConfig.from_dict({"masterBranch": "main", "releaseBranch": "develop"})
        assert config.master_branch == "main"
        assert config.release_branch == "develop"
        assert config.test_branch == "test"
        assert config.feature_prefix == "feature/"
        assert config.hotfix_prefix == "hotfix/"
        assert config.release_prefix == "release/"
        assert config.tag_prefix == ""

    def test_from_field_names(self) -> None:
        config = WorkflowConfig.from_dict({"master_branch": "main", "release_branch": "dev"})
        assert config.release_branch == "dev"

    def test_to_dict_uses_camel_case(self) -> None:
        config = WorkflowConfig(master_branch="master", release_branch="develop", tag_prefix="v")
        data = config.to_dict()
        assert data["masterBranch"] == "master"
        assert data["releaseBranch"] == "develop"
        assert data["tagPrefix"] == "v"
        assert "master_branch" not in data

    def test_names_are_stripped(self) -> None:
        config = WorkflowConfig.from_dict({"masterBranch": " master ", "releaseBranch": "develop"})
        assert config.master_branch == "master"

    def test_empty_master_rejected(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            WorkflowConfig.from_dict({"masterBranch": "  ", "releaseBranch": "develop"})
        assert exc_info.value.field == "masterBranch"

    def test_missing_develop_rejected(self) -> None:
        with pytest.raises(ConfigError):
            WorkflowConfig.from_dict({"masterBranch": "master"})

    def test_equal_master_and_develop_rejected(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            WorkflowConfig.from_dict({"masterBranch": "main", "releaseBranch": "main"})
        assert "different" in exc_info.value.message

    def test_empty_release_prefix_rejected(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            WorkflowConfig.from_dict({"masterBranch": "master", "releaseBranch": "develop", "releasePrefix": " "})
        assert exc_info.value.field == "releasePrefix"

    @pytest.mark.parametrize(
        "key,prefix",
        [
            ("releasePrefix", "dev"),
            ("releasePrefix", "m"),
            ("hotfixPrefix", "master"),
            ("featurePrefix", "te"),
        ],
    )
    def test_prefix_matching_main_branch_rejected(self, key: str, prefix: str) -> None:
        with pytest.raises(ConfigError) as exc_info:
            WorkflowConfig.from_dict({"masterBranch": "master", "releaseBranch": "develop", key: prefix})
        assert f"prefix '{prefix}'" in exc_info.value.message

    def test_prefix_sharing_leading_text_accepted(self) -> None:
        config = WorkflowConfig.from_dict({"masterBranch": "master", "releaseBranch": "develop", "releasePrefix": "dev/"})
        assert config.release_prefix == "dev/"

    def test_prefix_for(self, workflow_config: WorkflowConfig) -> None:
        assert workflow_config.prefix_for(BranchType.FEATURE) == "feature/"
        assert workflow_config.prefix_for(BranchType.HOTFIX) == "hotfix/"
        assert workflow_config.prefix_for(BranchType("bugfix")) == "hotfix/"
        assert workflow_config.prefix_for(BranchType("featurePrefix")) == "feature/"

    def test_frozen(self, workflow_config: WorkflowConfig) -> None:
        with pytest.raises(ValueError):
            workflow_config.master_branch = "main"


class TestConfigStore:
    """Tests for reading and writing git-flow-plus.config."""

    def test_absent_file(self, tmp_path: Path) -> None:
        store = ConfigStore(tmp_path)
        assert not store.exists()
        assert store.read() is None
        assert store.read_raw() == {}

    def test_write_then_read(self, tmp_path: Path, workflow_config: WorkflowConfig) -> None:
        store = ConfigStore(tmp_path)
        store.write(workflow_config)
        assert store.exists()
        assert store.read() == workflow_config

    def test_written_with_two_space_indent(self, tmp_path: Path, workflow_config: WorkflowConfig) -> None:
        ConfigStore(tmp_path).write(workflow_config)
        text = (tmp_path / CONFIG_FILENAME).read_text()
        assert '\n  "masterBranch": "master"' in text

    def test_write_preserves_unknown_keys(self, tmp_path: Path, workflow_config: WorkflowConfig) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text(json.dumps({"masterBranch": "old", "releaseBranch": "dev", "team": "core"}))

        ConfigStore(tmp_path).write(workflow_config)

        data = json.loads(path.read_text())
        assert data["team"] == "core"
        assert data["masterBranch"] == "master"
        assert data["releaseBranch"] == "develop"

    def test_write_leaves_no_temp_files(self, tmp_path: Path, workflow_config: WorkflowConfig) -> None:
        ConfigStore(tmp_path).write(workflow_config)
        assert [p.name for p in tmp_path.iterdir()] == [CONFIG_FILENAME]

    def test_invalid_json(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("{not json")
        with pytest.raises(ConfigError):
            ConfigStore(tmp_path).read()

    def test_non_object_json(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("[1, 2]")
        with pytest.raises(ConfigError):
            ConfigStore(tmp_path).read_raw()


class TestFlowSettings:
    """Tests for the YAML settings file."""

    def test_defaults_without_file(self, tmp_path: Path) -> None:
        settings = FlowSettings.load(tmp_path)
        assert settings.delete_branch_on_finish is True
        assert settings.delete_remote_branches is True
        assert settings.remote == "origin"
        assert settings.git_path is None
        assert settings.merge_detection is MergeDetection.ANCESTRY
        assert settings.merge_window_days == 5
        assert settings.fetch_before_checks is True
        assert settings.command_timeout == 60
        assert settings.logging == LoggingConfig()

    def test_loads_yaml(self, tmp_path: Path) -> None:
        (tmp_path / SETTINGS_FILENAME).write_text(
            "delete_branch_on_finish: false\n"
            "merge_detection: recent-merge-message\n"
            "logging:\n"
            "  level: debug\n"
        )
        settings = FlowSettings.load(tmp_path)
        assert settings.delete_branch_on_finish is False
        assert settings.merge_detection is MergeDetection.RECENT_MERGE_MESSAGE
        assert settings.logging.level == "debug"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        (tmp_path / SETTINGS_FILENAME).write_text("")
        assert FlowSettings.load(tmp_path) == FlowSettings()

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        (tmp_path / SETTINGS_FILENAME).write_text("remote: [unclosed\n")
        with pytest.raises(ConfigError):
            FlowSettings.load(tmp_path)

    def test_invalid_value(self, tmp_path: Path) -> None:
        (tmp_path / SETTINGS_FILENAME).write_text("command_timeout: 0\n")
        with pytest.raises(ConfigError):
            FlowSettings.load(tmp_path)

    def test_cached_until_mtime_changes(self, tmp_path: Path) -> None:
        path = tmp_path / SETTINGS_FILENAME
        path.write_text("remote: upstream\n")
        first = FlowSettings.load(tmp_path)
        assert FlowSettings.load(tmp_path) is first

        path.write_text("remote: mirror\n")
        future = time.time() + 10
        os.utime(path, (future, future))
        assert FlowSettings.load(tmp_path).remote == "mirror"

    def test_force_reload(self, tmp_path: Path) -> None:
        (tmp_path / SETTINGS_FILENAME).write_text("remote: upstream\n")
        first = FlowSettings.load(tmp_path)
        assert FlowSettings.load(tmp_path, force_reload=True) is not first
