"""Native-coin balance lookup."""

from __future__ import annotations

from typing import Optional

import click

from ..errors import WardenError
from ..keys import get_address, load_private_key
from .common import connect, fail, format_wei, parse_address


@click.command()
@click.argument("address", required=False)
@click.pass_context
def balance(ctx: click.Context, address: Optional[str]) -> None:
    """Show the native-coin balance of ADDRESS (default: own account)."""
    try:
        target = parse_address(address) if address else get_address(load_private_key())
        blockchain = connect(ctx)
        amount = blockchain.get_address_balance(target)
    except WardenError as exc:
        fail(exc)

    click.echo(click.style("  Address: ", dim=True) + target.checksum)
    click.echo(click.style("  Balance: ", dim=True) + format_wei(amount))
