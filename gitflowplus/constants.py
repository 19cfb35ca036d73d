"""gitflowplus constants and enumerations."""

from enum import Enum, StrEnum


class BranchType(StrEnum):
    """Short-lived branch roles created from master."""

    FEATURE = "feature"
    HOTFIX = "hotfix"

    @classmethod
    def _missing_(cls, value: object) -> "BranchType | None":
        # Accept the config keys ("featurePrefix") and the "bugfix" alias
        if isinstance(value, str):
            key = value.lower().removesuffix("prefix")
            if key == "bugfix":
                key = "hotfix"
            for member in cls:
                if member.value == key:
                    return member
        return None


class Bump(StrEnum):
    """Version component bumped when guessing the next release name."""

    RELEASE = "release"
    HOTFIX = "hotfix"


class MergeDetection(Enum):
    """Strategy used to decide whether one branch is merged into another."""

    ANCESTRY = "ancestry"
    RECENT_MERGE_MESSAGE = "recent-merge-message"


# Persisted files
CONFIG_FILENAME = "git-flow-plus.config"
SETTINGS_FILENAME = ".gitflowplus.yaml"
MARKER_DIRNAME = ".gitflow"
MARKER_FILENAME = "MERGE_BASE"

# Defaults
DEFAULT_REMOTE = "origin"
DEFAULT_MASTER_BRANCH = "master"
DEFAULT_DEVELOP_BRANCH = "develop"
DEFAULT_TEST_BRANCH = "test"
DEFAULT_FEATURE_PREFIX = "feature/"
DEFAULT_HOTFIX_PREFIX = "hotfix/"
DEFAULT_RELEASE_PREFIX = "release/"
DEFAULT_MERGE_WINDOW_DAYS = 5
DEFAULT_COMMAND_TIMEOUT = 60
FALLBACK_VERSION = "0.0.0"
INITIAL_COMMIT_MESSAGE = "Initial commit"
