# cauldron_indexer/cli/commands/networks.py

import click

from ...core.config import load_networks
from ...core.errors import ConfigurationError


@click.command('networks')
@click.option('--networks-file', envvar='CAULDRON_NETWORKS_FILE', help='YAML file with extra networks')
def networks(networks_file):
    """List configured networks, their factories and allow-lists"""
    try:
        configured = load_networks(networks_file)
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    for name in sorted(configured):
        network = configured[name]
        caps = network.capabilities
        click.echo(f"{name} (chain {network.chain_id})")
        click.echo(f"   Direct liquidation selector: {network.direct_liquidation_selector}")
        click.echo(f"   Capabilities: corrected_collateral_conversion={caps.corrected_collateral_conversion}"
                   f" direct_liquidation_flag={caps.direct_liquidation_flag}"
                   f" collateral_name={caps.collateral_name}")
        for source in network.factories:
            click.echo(f"   Factory {source.name} {source.address} from block {source.start_block}")
            click.echo(f"      Filter by {source.filter.mode}:")
            for address in source.filter.addresses:
                click.echo(f"         {address}")
        click.echo("")
