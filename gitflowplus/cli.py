"""gitflowplus command-line interface."""

import click

from gitflowplus import __version__
from gitflowplus.commands import (
    bugfix,
    delete,
    feature,
    hotfix,
    init,
    publish,
    publish_finish,
    release,
    status,
    test_cmd,
)


@click.group()
@click.version_option(version=__version__, prog_name="gitflowplus")
@click.option("--repo", type=click.Path(file_okay=False), default=None, help="Repository to operate on")
@click.option("--git-path", default=None, help="Path to the git executable")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--yes", "-y", "assume_yes", is_flag=True, help="Answer confirmations and accept defaults")
@click.pass_context
def cli(
    ctx: click.Context,
    repo: str | None,
    git_path: str | None,
    verbose: bool,
    assume_yes: bool,
) -> None:
    """gitflowplus - feature, test, release and hotfix branches on top of git."""
    ctx.ensure_object(dict)
    ctx.obj.setdefault("repo", repo)
    ctx.obj.setdefault("git_path", git_path)
    ctx.obj.setdefault("verbose", verbose)
    ctx.obj.setdefault("assume_yes", assume_yes)


cli.add_command(init)
cli.add_command(feature)
cli.add_command(bugfix)
cli.add_command(test_cmd, name="test")
cli.add_command(publish)
cli.add_command(publish_finish, name="publish-finish")
cli.add_command(release)
cli.add_command(hotfix)
cli.add_command(delete)
cli.add_command(status)


if __name__ == "__main__":
    cli()
