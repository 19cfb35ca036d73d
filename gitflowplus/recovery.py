"""Error presentation loop with user-selected recovery actions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from gitflowplus.exceptions import GitflowError
from gitflowplus.interaction import Interaction
from gitflowplus.logging import get_logger

logger = get_logger("recovery")


@dataclass
class Outcome:
    """Result of running an action under ``run_wrapped``."""

    ok: bool
    value: Any = None
    error: GitflowError | None = None
    # Label of the recovery action that produced ``value``, None when the original action did
    recovered_with: str | None = None


def run_wrapped(fn: Callable[..., Any], interaction: Interaction, *args: Any, **kwargs: Any) -> Outcome:
    """Run ``fn`` and handle workflow errors until success or dismissal.

    Each ``GitflowError`` is shown with its recovery actions. A chosen action
    becomes the next callable and its own errors go through the same loop.
    Exceptions that are not ``GitflowError`` propagate.

    Args:
        fn: Workflow action to run
        interaction: Front end used to present errors
        *args: Positional arguments for the first call only
        **kwargs: Keyword arguments for the first call only

    Returns:
        Outcome with the last value on success, or the last error when dismissed
    """
    current: Callable[[], Any] = lambda: fn(*args, **kwargs)  # noqa: E731
    label: str | None = None
    while True:
        try:
            return Outcome(ok=True, value=current(), recovered_with=label)
        except GitflowError as e:
            logger.info(f"Action failed: {e.message}")
            chosen = interaction.report_error(e.message, e.recovery)
            if chosen is None:
                return Outcome(ok=False, error=e)
            logger.info(f"Running recovery action: {chosen.label}")
            current = chosen.action
            label = chosen.label
