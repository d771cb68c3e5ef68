"""
Send - build, sign and broadcast a transaction from the local account.

Flow:
1. Build the draft (nonce, gas, fee fields) from live chain state
2. Show it with its worst-case cost
3. Ask for confirmation unless --yes
4. Sign locally and broadcast the raw transaction

Nothing is broadcast if any step before signing fails.
"""

from __future__ import annotations

from typing import Optional

import click

from ..chain.units import NativeWei
from ..errors import WardenError
from ..keys import get_address, load_private_key, sign_transaction
from .common import confirm_or_abort, connect, echo_draft, fail, parse_address


@click.command()
@click.option("--to", "recipient", required=True, help="Recipient address (0x...)")
@click.option("--amount", default="0", show_default=True, help="Amount in ETH (e.g. 0.25)")
@click.option("--data", default=None, help="Hex call data for contract calls")
@click.option("--dry-run", is_flag=True, help="Show the draft without signing")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def send(
    ctx: click.Context,
    recipient: str,
    amount: str,
    data: Optional[str],
    dry_run: bool,
    yes: bool,
) -> None:
    """Send ETH (and optional call data) to a recipient."""
    to = parse_address(recipient)

    try:
        value = NativeWei.from_ether(amount)
        private_key = load_private_key()
        sender = get_address(private_key)
        blockchain = connect(ctx)
        draft = blockchain.make_transaction(sender, to, data, value)
    except WardenError as exc:
        fail(exc)

    click.echo(f"=== Transaction (chain {draft.chain_id}) ===")
    click.echo(click.style("  from:                 ", dim=True) + sender.checksum)
    echo_draft(draft)
    click.echo()

    if dry_run:
        click.echo("Dry run: not signed, not sent.")
        return

    confirm_or_abort(yes)

    try:
        signed = sign_transaction(draft, private_key)
        tx_hash = blockchain.send_transaction(signed)
    except WardenError as exc:
        fail(exc)

    click.secho("Transaction sent!", fg="green")
    click.echo(f"  TX: {tx_hash}")
