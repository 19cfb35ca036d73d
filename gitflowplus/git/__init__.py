"""gitflowplus git package -- structured git access.

Re-exports core classes for convenient access:
    from gitflowplus.git import GitOps, RepositoryState, GitRunner, BranchRef
"""

from gitflowplus.git.base import GitRunner
from gitflowplus.git.locator import GitExecutable, find_git
from gitflowplus.git.ops import GitOps
from gitflowplus.git.refs import Branch, BranchRef, RemoteRef, TagRef
from gitflowplus.git.state import RepositoryState

__all__ = [
    "GitRunner",
    "RepositoryState",
    "GitOps",
    "GitExecutable",
    "find_git",
    "Branch",
    "BranchRef",
    "RemoteRef",
    "TagRef",
]
