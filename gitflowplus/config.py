"""gitflowplus configuration: the persisted workflow record and tool settings."""

__all__ = [
    "WorkflowConfig",
    "ConfigStore",
    "FlowSettings",
    "LoggingConfig",
]

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, ClassVar

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from gitflowplus.constants import (
    CONFIG_FILENAME,
    DEFAULT_COMMAND_TIMEOUT,
    DEFAULT_FEATURE_PREFIX,
    DEFAULT_HOTFIX_PREFIX,
    DEFAULT_MERGE_WINDOW_DAYS,
    DEFAULT_RELEASE_PREFIX,
    DEFAULT_REMOTE,
    DEFAULT_TEST_BRANCH,
    SETTINGS_FILENAME,
    BranchType,
    MergeDetection,
)
from gitflowplus.exceptions import ConfigError

logger = logging.getLogger(__name__)


class WorkflowConfig(BaseModel):
    """Branch names and prefixes of an initialized repository.

    Serialized with the camelCase keys of ``git-flow-plus.config`` so the file
    stays compatible with hand edits and other tools reading it.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    master_branch: str = Field(alias="masterBranch")
    release_branch: str = Field(alias="releaseBranch")
    test_branch: str = Field(default=DEFAULT_TEST_BRANCH, alias="testBranch")
    feature_prefix: str = Field(default=DEFAULT_FEATURE_PREFIX, alias="featurePrefix")
    hotfix_prefix: str = Field(default=DEFAULT_HOTFIX_PREFIX, alias="hotfixPrefix")
    release_prefix: str = Field(default=DEFAULT_RELEASE_PREFIX, alias="releasePrefix")
    tag_prefix: str = Field(default="", alias="tagPrefix")

    @field_validator(
        "master_branch", "release_branch", "test_branch", "feature_prefix", "hotfix_prefix", "release_prefix"
    )
    @classmethod
    def _non_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @model_validator(mode="after")
    def _distinct_branch_names(self) -> "WorkflowConfig":
        if self.master_branch == self.release_branch:
            raise ValueError("master and develop branches must have different names")
        for role, prefix in (
            ("feature", self.feature_prefix),
            ("hotfix", self.hotfix_prefix),
            ("release", self.release_prefix),
        ):
            # A prefix matching a main branch would make that branch look like an active role branch
            for branch in (self.master_branch, self.release_branch, self.test_branch):
                if branch.startswith(prefix):
                    raise ValueError(f"{role} prefix '{prefix}' must not match the '{branch}' branch")
        return self

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkflowConfig":
        """Build a config, turning validation failures into ConfigError.

        Args:
            data: Mapping using either camelCase keys or field names

        Raises:
            ConfigError: If a field is missing or invalid
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(p) for p in first.get("loc", ())) or None
            raise ConfigError(
                f"Invalid workflow configuration: {first['msg']}",
                field=field,
                details={"errors": [err["msg"] for err in e.errors()]},
            ) from e

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

    def prefix_for(self, branch_type: BranchType) -> str:
        if branch_type is BranchType.FEATURE:
            return self.feature_prefix
        return self.hotfix_prefix


class ConfigStore:
    """Reads and writes the workflow config file at the repository root.

    The file's existence is what makes the workflow "enabled".
    """

    def __init__(self, repo_root: str | Path) -> None:
        self.path = Path(repo_root) / CONFIG_FILENAME

    def exists(self) -> bool:
        return self.path.is_file()

    def read_raw(self) -> dict[str, Any]:
        """Return the file's JSON object, or an empty dict when absent.

        Raises:
            ConfigError: If the file is not a JSON object
        """
        if not self.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Unable to read {self.path.name}: {e}", details={"path": str(self.path)}) from e
        if not isinstance(data, dict):
            raise ConfigError(f"{self.path.name} must contain a JSON object", details={"path": str(self.path)})
        return data

    def read(self) -> WorkflowConfig | None:
        """Parse the stored config; None when the workflow is not initialized."""
        if not self.exists():
            return None
        return WorkflowConfig.from_dict(self.read_raw())

    def write(self, config: WorkflowConfig) -> None:
        """Rewrite the whole file, keeping keys of prior content that the model does not own."""
        merged = self.read_raw()
        merged.update(config.to_dict())

        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(merged, f, indent=2)
                f.write("\n")
            os.replace(tmp_path, self.path)
        except OSError:
            Path(tmp_path).unlink(missing_ok=True)
            raise
        logger.debug("Wrote workflow config to %s", self.path)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="warning", pattern="^(debug|info|warning|error)$")
    directory: str | None = None
    json_output: bool = True


class FlowSettings(BaseModel):
    """Behaviour switches, loaded from ``.gitflowplus.yaml`` at the repository root."""

    delete_branch_on_finish: bool = True
    delete_remote_branches: bool = True
    remote: str = DEFAULT_REMOTE
    git_path: str | None = None
    merge_detection: MergeDetection = MergeDetection.ANCESTRY
    merge_window_days: int = Field(default=DEFAULT_MERGE_WINDOW_DAYS, ge=1, le=365)
    fetch_before_checks: bool = True
    command_timeout: int = Field(default=DEFAULT_COMMAND_TIMEOUT, ge=1, le=3600)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    _cache: ClassVar[dict[Path, tuple[float, "FlowSettings"]]] = {}
    _cache_lock: ClassVar[threading.Lock] = threading.Lock()

    @classmethod
    def load(cls, repo_root: str | Path = ".", force_reload: bool = False) -> "FlowSettings":
        """Load settings with mtime-based caching; defaults when the file is absent.

        Args:
            repo_root: Repository root containing ``.gitflowplus.yaml``
            force_reload: Bypass the cache

        Raises:
            ConfigError: If the file is not valid YAML or fails validation
        """
        path = (Path(repo_root) / SETTINGS_FILENAME).resolve()
        if not path.exists():
            return cls()

        mtime = path.stat().st_mtime
        with cls._cache_lock:
            cached = cls._cache.get(path)
            if not force_reload and cached is not None and cached[0] == mtime:
                logger.debug("Cache hit for FlowSettings")
                return cached[1]

            try:
                with open(path, encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
                instance = cls.model_validate(data)
            except (yaml.YAMLError, ValidationError) as e:
                raise ConfigError(f"Invalid settings file {path.name}: {e}", details={"path": str(path)}) from e

            cls._cache[path] = (mtime, instance)
            return instance

    @classmethod
    def invalidate_cache(cls) -> None:
        with cls._cache_lock:
            cls._cache.clear()
