"""Addon Manager CLI - reorder, rename and prune a remote addon collection."""

import logging

import click

from . import __version__
from .commands.addon import edit
from .commands.addon import list_cmd
from .commands.addon import move
from .commands.addon import remove
from .commands.addon import show
from .commands.auth import auth as auth_group
from .commands.config import config as config_group
from .commands.shell import shell
from .logging_setup import init_logging

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Also print debug logs to the console")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """Addon Manager - reorder, rename and prune your addon collection.

    Every edit command loads the collection from the server, applies the
    edit locally and replaces the whole collection on the server. Use
    'shell' to make several edits before syncing once.
    """
    init_logging(verbose=verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logger.debug(f"addon-manager {__version__} invoked: {ctx.invoked_subcommand}")


cli.add_command(list_cmd)
cli.add_command(show)
cli.add_command(move)
cli.add_command(remove)
cli.add_command(edit)
cli.add_command(shell)
cli.add_command(auth_group)
cli.add_command(config_group)


def main():
    """Entry point for the addon-manager console script."""
    cli()


if __name__ == "__main__":
    main()
