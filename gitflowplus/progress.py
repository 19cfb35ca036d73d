"""Progress reporting and cooperative cancellation for workflow actions."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from gitflowplus.exceptions import OperationCancelledError
from gitflowplus.logging import clear_action_context, get_logger, set_action_context

logger = get_logger("progress")


class CancellationToken:
    """Cancellation flag checked between workflow steps.

    Git invocations are not interrupted; a cancelled action stops before its
    next step starts.
    """

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ProgressReporter:
    """Collects the human-readable steps of one running action."""

    def __init__(
        self,
        title: str,
        sink: Callable[[str], None] | None = None,
        token: CancellationToken | None = None,
    ) -> None:
        self.title = title
        self.steps: list[str] = []
        self._sink = sink
        self._token = token

    def report(self, message: str) -> None:
        """Announce the next step.

        Raises:
            OperationCancelledError: If cancellation was requested since the last step
        """
        if self._token is not None and self._token.cancelled:
            raise OperationCancelledError(f"{self.title} cancelled before: {message}")
        self.steps.append(message)
        logger.info(message)
        if self._sink is not None:
            self._sink(message)


@contextmanager
def run_operation(
    title: str,
    sink: Callable[[str], None] | None = None,
    token: CancellationToken | None = None,
) -> Iterator[ProgressReporter]:
    """Run a workflow action as a long-running operation.

    Tags log records with the action title for the duration and logs the
    outcome. Exceptions propagate unchanged.
    """
    set_action_context(action=title)
    reporter = ProgressReporter(title, sink, token)
    logger.debug(f"Starting {title}")
    try:
        yield reporter
    except Exception as e:
        logger.warning(f"{title} stopped: {e}")
        raise
    else:
        logger.debug(f"Finished {title} after {len(reporter.steps)} steps")
    finally:
        clear_action_context()
