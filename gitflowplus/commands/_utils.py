"""Shared utilities for gitflowplus CLI commands."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import click
from rich.console import Console

from gitflowplus.config import FlowSettings
from gitflowplus.exceptions import GitflowError
from gitflowplus.flow import WorkflowEngine
from gitflowplus.interaction import RichInteraction
from gitflowplus.logging import get_logger, setup_logging
from gitflowplus.recovery import run_wrapped

console = Console()
logger = get_logger("commands")


def normalize_name(parts: Sequence[str]) -> str:
    """Join a possibly multi-word branch name with dashes.

    >>> normalize_name(["login", "form"])
    'login-form'
    """
    return "-".join(" ".join(parts).split())


def get_interaction(ctx: click.Context) -> RichInteraction:
    obj = ctx.ensure_object(dict)
    if "interaction" not in obj:
        obj["interaction"] = RichInteraction(console=console, assume_yes=obj.get("assume_yes", False))
    return obj["interaction"]


def build_engine(ctx: click.Context) -> WorkflowEngine:
    """Create the engine for the repository selected on the command line.

    Configures logging from the repository's settings file on the way. Setup
    failures are printed and end the command with exit code 1.
    """
    obj = ctx.ensure_object(dict)
    if "engine" in obj:
        return obj["engine"]

    repo = Path(obj.get("repo") or ".")
    try:
        settings = FlowSettings.load(repo)
        setup_logging(
            level="debug" if obj.get("verbose") else settings.logging.level,
            log_dir=settings.logging.directory,
            json_output=settings.logging.json_output,
        )
        engine = WorkflowEngine.from_path(repo, get_interaction(ctx), git_path=obj.get("git_path"))
    except GitflowError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise SystemExit(1) from None

    obj["engine"] = engine
    return engine


def run_action(ctx: click.Context, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Run a workflow action through the recovery loop.

    Exits 1 when the last error was dismissed and 130 on Ctrl-C.

    Returns:
        The action's return value, or None when a recovery action ran in its place
    """
    try:
        outcome = run_wrapped(fn, get_interaction(ctx), *args, **kwargs)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        raise SystemExit(130) from None

    if not outcome.ok:
        logger.debug(f"Action ended with {type(outcome.error).__name__}")
        raise SystemExit(1)
    if outcome.value is False or outcome.value is None:
        console.print("[yellow]Cancelled[/yellow]")
    elif outcome.recovered_with is not None:
        console.print(f"[green]\u2713[/green] {outcome.recovered_with}: done")
        return None
    return outcome.value
