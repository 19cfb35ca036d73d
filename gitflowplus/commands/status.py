"""gitflowplus status command - show the workflow state of the repository."""

import click
from rich.table import Table

from gitflowplus.commands._utils import build_engine, console


@click.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show configuration, current branch and active release/hotfix."""
    engine = build_engine(ctx)
    state = engine.status()

    if not state.enabled:
        console.print("[yellow]gitflowplus is not initialized here. Run 'gitflowplus init'.[/yellow]")

    table = Table(title="gitflowplus")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Current branch", state.current_branch or "[dim](detached)[/dim]")
    if state.config is not None:
        config = state.config
        table.add_row("Master branch", config.master_branch)
        table.add_row("Develop branch", config.release_branch)
        table.add_row("Test branch", config.test_branch)
        table.add_row("Feature prefix", config.feature_prefix)
        table.add_row("Hotfix prefix", config.hotfix_prefix)
        table.add_row("Release prefix", config.release_prefix)
        table.add_row("Tag prefix", config.tag_prefix or "[dim](none)[/dim]")
        table.add_row("Active release", state.active_release or "[dim]-[/dim]")
        table.add_row("Active hotfix", state.active_hotfix or "[dim]-[/dim]")
    if state.unresolved_merge:
        table.add_row("Unresolved merge", f"[red]{state.unresolved_merge}[/red]")

    console.print(table)
