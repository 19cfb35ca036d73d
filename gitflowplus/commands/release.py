"""gitflowplus release and hotfix commands."""

from collections.abc import Callable

import click

from gitflowplus.commands._utils import build_engine, console, get_interaction, normalize_name, run_action


def _version_name(ctx: click.Context, name: tuple[str, ...], guess: Callable[[], str], role: str) -> str | None:
    if name:
        return normalize_name(name)
    suggested = run_action(ctx, guess)
    if suggested is None:
        return None
    version = get_interaction(ctx).prompt_input(suggested, f"Name of the new {role}", suggested)
    if version is None:
        console.print("[yellow]Cancelled[/yellow]")
    return version


@click.group()
def release() -> None:
    """Release branches."""


@release.command("start")
@click.argument("name", nargs=-1)
@click.pass_context
def release_start(ctx: click.Context, name: tuple[str, ...]) -> None:
    """Create a release branch off develop.

    Without NAME the next minor version is suggested.
    """
    engine = build_engine(ctx)
    version = _version_name(ctx, name, engine.release.guess_new_version, "release")
    if not version:
        return
    branch = run_action(ctx, engine.release.start, version)
    if branch:
        console.print(
            f"[green]\u2713[/green] New branch [cyan]{branch.name}[/cyan] has been created. "
            "Now is the time to update your version numbers and fix any last minute bugs."
        )


@release.command("finish")
@click.pass_context
def release_finish(ctx: click.Context) -> None:
    """Merge the active release into master and develop and tag it."""
    engine = build_engine(ctx)
    tag = run_action(ctx, engine.release.finish)
    if tag:
        console.print(f"[green]\u2713[/green] The release [cyan]{tag}[/cyan] has been created")


@click.group()
def hotfix() -> None:
    """Hotfix branches."""


@hotfix.command("start")
@click.argument("name", nargs=-1)
@click.pass_context
def hotfix_start(ctx: click.Context, name: tuple[str, ...]) -> None:
    """Create a hotfix branch off master.

    Without NAME the next patch version is suggested.
    """
    engine = build_engine(ctx)
    version = _version_name(ctx, name, engine.hotfix.guess_new_version, "hotfix")
    if not version:
        return
    branch = run_action(ctx, engine.hotfix.start, version)
    if branch:
        console.print(f"[green]\u2713[/green] New branch [cyan]{branch.name}[/cyan] has been created")


@hotfix.command("finish")
@click.pass_context
def hotfix_finish(ctx: click.Context) -> None:
    """Merge the active hotfix into master and develop and tag it."""
    engine = build_engine(ctx)
    tag = run_action(ctx, engine.hotfix.finish)
    if tag:
        console.print(f"[green]\u2713[/green] The hotfix [cyan]{tag}[/cyan] has been created")
