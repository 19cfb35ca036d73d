"""gitflowplus branch commands - feature/bugfix start, test, publish, delete."""

import click

from gitflowplus.commands._utils import build_engine, console, normalize_name, run_action
from gitflowplus.constants import BranchType


def _start(ctx: click.Context, branch_type: BranchType, name: tuple[str, ...]) -> None:
    engine = build_engine(ctx)
    branch = run_action(ctx, engine.create_branch, normalize_name(name), branch_type)
    if branch:
        console.print(f"[green]\u2713[/green] Created and pushed [cyan]{branch.name}[/cyan]")


@click.group()
def feature() -> None:
    """Feature branches."""


@feature.command("start")
@click.argument("name", nargs=-1, required=True)
@click.pass_context
def feature_start(ctx: click.Context, name: tuple[str, ...]) -> None:
    """Create a feature branch off master and push it."""
    _start(ctx, BranchType.FEATURE, name)


@click.group()
def bugfix() -> None:
    """Bugfix branches (they share the hotfix prefix)."""


@bugfix.command("start")
@click.argument("name", nargs=-1, required=True)
@click.pass_context
def bugfix_start(ctx: click.Context, name: tuple[str, ...]) -> None:
    """Create a bugfix branch off master and push it."""
    _start(ctx, BranchType.HOTFIX, name)


@click.command("test")
@click.pass_context
def test_cmd(ctx: click.Context) -> None:
    """Merge the current feature/bugfix branch into the test branch."""
    engine = build_engine(ctx)
    if run_action(ctx, engine.start_test_branch):
        console.print("[green]\u2713[/green] Merged into the test branch and pushed")


@click.command()
@click.option(
    "--type",
    "branch_type",
    type=click.Choice(["feature", "bugfix"]),
    default=None,
    help="Branch role; detected from the current branch when omitted",
)
@click.pass_context
def publish(ctx: click.Context, branch_type: str | None) -> None:
    """Merge the current branch into develop and push develop."""
    engine = build_engine(ctx)
    if branch_type is None:
        done = run_action(ctx, engine.publish_current_branch)
    else:
        done = run_action(ctx, engine.publish_branch, BranchType(branch_type))
    if done:
        console.print("[green]\u2713[/green] Published to develop")


@click.command("publish-finish")
@click.pass_context
def publish_finish(ctx: click.Context) -> None:
    """Merge develop into master, tag it and push."""
    engine = build_engine(ctx)
    if run_action(ctx, engine.publish_finish):
        console.print("[green]\u2713[/green] Master tagged and pushed")


@click.command()
@click.pass_context
def delete(ctx: click.Context) -> None:
    """Delete the current branch locally and on the remote."""
    engine = build_engine(ctx)
    if run_action(ctx, engine.delete_branch):
        console.print("[green]\u2713[/green] Branch deleted")
