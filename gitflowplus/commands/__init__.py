"""gitflowplus CLI commands."""

from gitflowplus.commands.branch import bugfix, delete, feature, publish, publish_finish, test_cmd
from gitflowplus.commands.init import init
from gitflowplus.commands.release import hotfix, release
from gitflowplus.commands.status import status

__all__ = [
    "bugfix",
    "delete",
    "feature",
    "hotfix",
    "init",
    "publish",
    "publish_finish",
    "release",
    "status",
    "test_cmd",
]
