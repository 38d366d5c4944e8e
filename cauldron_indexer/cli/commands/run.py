# cauldron_indexer/cli/commands/run.py

import click
from web3.exceptions import Web3Exception

from ...core.errors import IndexerError
from ...pipeline.indexing_pipeline import IndexingPipeline

# requests raises OSError subclasses for connection failures and timeouts
RPC_ERRORS = (Web3Exception, OSError)


@click.command('run')
@click.option('--network', '-n', envvar='CAULDRON_NETWORK', required=True, help='Network to index')
@click.option('--from-block', type=int, help='First block (default: stored checkpoint, else earliest factory start block)')
@click.option('--to-block', type=int, help='Last block (default: latest)')
@click.option('--batch-size', type=int, help='Blocks per eth_getLogs request')
@click.pass_context
def run(ctx, network, from_block, to_block, batch_size):
    """Index cauldron events for a network

    Re-running a range is safe: logs at or before the stored checkpoint are skipped.

    Examples:
        run --network mainnet --from-block 12094175 --to-block 12100000
    """
    cli_context = ctx.obj['cli_context']
    overrides = {'batch_size': batch_size} if batch_size else {}

    try:
        container = cli_context.get_container(network, **overrides)
        pipeline = container.get(IndexingPipeline)
        stats = pipeline.run(from_block, to_block)
    except IndexerError as e:
        raise click.ClickException(f"Indexing failed: {e}")
    except RPC_ERRORS as e:
        raise click.ClickException(f"RPC request failed ({type(e).__name__}): {e}")

    click.echo(f"Indexed {network}")
    click.echo(f"   Batches: {stats.batches}")
    click.echo(f"   Logs seen: {stats.logs_seen}")
    click.echo(f"   Events handled: {stats.events_handled}")
    click.echo(f"   Markets activated: {stats.markets_activated}")
