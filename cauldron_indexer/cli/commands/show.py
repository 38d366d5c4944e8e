# cauldron_indexer/cli/commands/show.py

import click
import msgspec

from ...core.errors import IndexerError
from ...types import ExchangeRate, MarketFeeAccount


@click.group()
@click.option('--network', '-n', envvar='CAULDRON_NETWORK', required=True, help='Network the data was indexed from')
@click.option('--json', 'as_json', is_flag=True, help='Print entities as JSON')
@click.pass_context
def show(ctx, network, as_json):
    """Print stored entities"""
    ctx.obj['network'] = network
    ctx.obj['as_json'] = as_json


def _store(ctx):
    try:
        return ctx.obj['cli_context'].get_store(ctx.obj['network'])
    except IndexerError as e:
        raise click.ClickException(str(e))


@show.command('market')
@click.argument('address')
@click.pass_context
def market(ctx, address):
    """Fee account and exchange rate for a cauldron"""
    store = _store(ctx)
    account = store.load(MarketFeeAccount, address.lower())
    if account is None:
        raise click.ClickException(f"No market indexed at {address}")
    rate = store.load(ExchangeRate, address.lower())

    if ctx.obj['as_json']:
        payload = {'market': account, 'exchange_rate': rate.rate if rate else None}
        click.echo(msgspec.json.encode(payload).decode())
        return

    name = f" ({account.collateral_name})" if account.collateral_name else ""
    click.echo(f"Market {account.id}")
    click.echo(f"   Collateral: {account.collateral_symbol}{name} {account.collateral}")
    click.echo(f"   Collateral decimals: {account.collateral_decimals}")
    click.echo(f"   Master contract: {account.master_contract}")
    click.echo(f"   Vault: {account.bento_box}")
    click.echo(f"   Total borrow elastic: {account.total_borrow_elastic}")
    click.echo(f"   Fees earned: {account.fees_earned}")
    click.echo(f"   Fees withdrawn: {account.fees_withdrawn}")
    click.echo(f"   Exchange rate: {rate.rate if rate else 'n/a'}")


@show.command('liquidations')
@click.argument('user')
@click.pass_context
def liquidations(ctx, user):
    """Liquidation records for a user"""
    records = _store(ctx).liquidations_for_user(user)

    if ctx.obj['as_json']:
        click.echo(msgspec.json.encode(records).decode())
        return

    if not records:
        click.echo(f"No liquidations found for {user}")
        return

    for record in records:
        flag = " direct" if record.direct else ""
        click.echo(f"{record.transaction}{flag}")
        click.echo(f"   Cauldron: {record.cauldron or 'n/a'}")
        click.echo(f"   Timestamp: {record.timestamp}")
        click.echo(f"   Loan repaid: {record.loan_repaid}")
        click.echo(f"   Collateral removed: {record.collateral_removed}")
        click.echo(f"   Exchange rate: {record.exchange_rate if record.exchange_rate is not None else 'n/a'}")
