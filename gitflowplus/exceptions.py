"""gitflowplus exception hierarchy."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RecoveryAction:
    """A named continuation offered to the user alongside an error."""

    label: str
    action: Callable[[], Any]

    def __call__(self) -> Any:
        return self.action()


class GitflowError(Exception):
    """Base exception for all gitflowplus errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        recovery: list[RecoveryAction] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recovery = list(recovery or [])

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class NotInitializedError(GitflowError):
    """The workflow configuration file does not exist."""

    pass


class ConfigError(GitflowError):
    """Invalid workflow configuration input."""

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details)
        self.field = field


class WrongBranchError(GitflowError):
    """The current branch is not the one the action requires."""

    def __init__(
        self,
        message: str,
        branch: str | None = None,
        recovery: list[RecoveryAction] | None = None,
    ) -> None:
        super().__init__(message, recovery=recovery)
        self.branch = branch


class DirtyWorkingTreeError(GitflowError):
    """The working tree or index has uncommitted changes."""

    pass


class DuplicateBranchError(GitflowError):
    """A branch with the requested name already exists."""

    def __init__(self, message: str, branch: str) -> None:
        super().__init__(message, {"branch": branch})
        self.branch = branch


class DuplicateTagError(GitflowError):
    """A tag with the requested name already exists."""

    def __init__(self, message: str, tag: str) -> None:
        super().__init__(message, {"tag": tag})
        self.tag = tag


class DivergedStateError(GitflowError):
    """A local branch differs from its remote copy where equality is required."""

    def __init__(self, message: str, local: str, remote: str) -> None:
        super().__init__(message, {"local": local, "remote": remote})
        self.local = local
        self.remote = remote


class MergeConflictError(GitflowError):
    """A merge left conflicts in the working tree."""

    def __init__(self, message: str, source_branch: str, target_branch: str, output: str = "") -> None:
        super().__init__(
            message,
            details={"source_branch": source_branch, "target_branch": target_branch},
        )
        self.source_branch = source_branch
        self.target_branch = target_branch
        self.output = output


class UnresolvedConflictError(GitflowError):
    """A previous publish left a conflict that is still unresolved."""

    def __init__(self, message: str, target_branch: str) -> None:
        super().__init__(message, {"target_branch": target_branch})
        self.target_branch = target_branch


class NoActiveBranchError(GitflowError):
    """Finish was requested but there is no active release/hotfix branch."""

    pass


class MissingRemoteBranchError(GitflowError):
    """A branch required on the remote does not exist there."""

    def __init__(self, message: str, branch: str) -> None:
        super().__init__(message, {"branch": branch})
        self.branch = branch


class NotYetPublishedError(GitflowError):
    """The branch has not been merged into develop yet."""

    def __init__(
        self,
        message: str,
        branch: str,
        recovery: list[RecoveryAction] | None = None,
    ) -> None:
        super().__init__(message, {"branch": branch}, recovery)
        self.branch = branch


class DetachedHeadError(GitflowError):
    """HEAD is not attached to a named branch."""

    pass


class GitNotFoundError(GitflowError):
    """No usable git executable could be located."""

    pass


class OperationCancelledError(GitflowError):
    """The running action was cancelled between two steps."""

    pass


class CommandError(GitflowError):
    """A required git invocation exited with a non-zero status."""

    def __init__(
        self,
        message: str,
        command: str | None = None,
        exit_code: int | None = None,
        stderr: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr


class CheckoutFailedError(CommandError):
    """The target ref could not be checked out."""

    pass


class PushFailedError(CommandError):
    """Pushing to the remote failed."""

    pass
