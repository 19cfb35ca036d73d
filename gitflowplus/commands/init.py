"""gitflowplus init command - enable the workflow in a repository."""

import click

from gitflowplus.commands._utils import build_engine, console, run_action
from gitflowplus.constants import (
    DEFAULT_FEATURE_PREFIX,
    DEFAULT_HOTFIX_PREFIX,
    DEFAULT_RELEASE_PREFIX,
    DEFAULT_TEST_BRANCH,
)


@click.command()
@click.option("--master", "master_name", help="Name of the master branch")
@click.option("--develop", "develop_name", help="Name of the develop branch")
@click.option("--test", "test_name", default=DEFAULT_TEST_BRANCH, show_default=True, help="Name of the test branch")
@click.option("--feature-prefix", default=DEFAULT_FEATURE_PREFIX, show_default=True, help="Feature branch prefix")
@click.option("--hotfix-prefix", default=DEFAULT_HOTFIX_PREFIX, show_default=True, help="Hotfix/bugfix branch prefix")
@click.option("--release-prefix", default=DEFAULT_RELEASE_PREFIX, show_default=True, help="Release branch prefix")
@click.option("--tag-prefix", default="", help="Prefix for release tags")
@click.pass_context
def init(
    ctx: click.Context,
    master_name: str | None,
    develop_name: str | None,
    test_name: str,
    feature_prefix: str,
    hotfix_prefix: str,
    release_prefix: str,
    tag_prefix: str,
) -> None:
    """Initialize gitflowplus for the repository.

    Without --master and --develop every setting is asked for interactively.

    Examples:

        gitflowplus init

        gitflowplus init --master main --develop develop --tag-prefix v
    """
    engine = build_engine(ctx)

    if master_name is None and develop_name is None:
        done = run_action(ctx, engine.initialize_interactive)
    else:
        if not master_name or not develop_name:
            raise click.UsageError("--master and --develop must be given together")
        done = run_action(
            ctx,
            engine.initialize,
            master_name,
            develop_name,
            feature_prefix=feature_prefix,
            hotfix_prefix=hotfix_prefix,
            tag_prefix=tag_prefix,
            test_name=test_name,
            release_prefix=release_prefix,
        )

    if done:
        config = engine.core.store.read()
        console.print(
            f"[green]\u2713[/green] gitflowplus initialized: "
            f"master=[cyan]{config.master_branch}[/cyan] develop=[cyan]{config.release_branch}[/cyan]"
        )
