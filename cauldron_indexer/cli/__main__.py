# cauldron_indexer/cli/__main__.py

"""
Cauldron indexer CLI

Usage: python -m cauldron_indexer.cli [--verbose] COMMAND [ARGS]...
"""

import atexit
import os

import click
import msgspec

from cauldron_indexer.cli.context import CLIContext
from cauldron_indexer.cli.commands.networks import networks
from cauldron_indexer.cli.commands.run import run
from cauldron_indexer.cli.commands.show import show
from cauldron_indexer.core.logging import IndexerLogger, LogSettings


cli_context = CLIContext()
atexit.register(cli_context.shutdown)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Log at DEBUG with event context')
@click.pass_context
def cli(ctx, verbose):
    """Index cauldron fee accounting and liquidations from BentoBox/DegenBox deployments"""
    settings = LogSettings.from_env(os.environ)
    if verbose:
        settings = msgspec.structs.replace(settings, level="DEBUG", structured=True)
    IndexerLogger.configure(settings)

    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['cli_context'] = cli_context


cli.add_command(networks)
cli.add_command(run)
cli.add_command(show)


if __name__ == '__main__':
    cli()
