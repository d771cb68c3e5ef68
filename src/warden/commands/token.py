"""
Token - ERC-20 operations for any token contract.

Commands:
- balance:  Show token balance of an address
- transfer: Send tokens from the local account to a recipient
"""

from __future__ import annotations

from typing import Optional

import click

from ..chain.contract import (
    Contract,
    erc20_balance,
    erc20_decimals,
    erc20_symbol,
    erc20_transfer_data,
)
from ..chain.units import NativeWei, TokenAmount
from ..errors import ValidationError, WardenError
from ..keys import get_address, load_private_key, sign_transaction
from .common import confirm_or_abort, connect, echo_draft, fail, parse_address


@click.group()
def token() -> None:
    """ERC-20 token operations.

    \b
    Examples:
      warden token balance --token 0xAbC...
      warden token transfer --token 0xAbC... --to 0x... --amount 5.5
    """


@token.command("balance")
@click.option("--token", "token_address", required=True, help="ERC-20 contract address")
@click.argument("address", required=False)
@click.pass_context
def token_balance(ctx: click.Context, token_address: str, address: Optional[str]) -> None:
    """Show the token balance of ADDRESS (default: own account)."""
    contract = Contract(parse_address(token_address))
    try:
        owner = parse_address(address) if address else get_address(load_private_key())
        blockchain = connect(ctx)
        symbol = erc20_symbol(blockchain, contract)
        amount = erc20_balance(blockchain, contract, owner)
    except WardenError as exc:
        fail(exc)

    click.echo(click.style("  Token:   ", dim=True) + f"{symbol} ({contract.address.checksum})")
    click.echo(click.style("  Address: ", dim=True) + owner.checksum)
    click.echo(
        click.style("  Balance: ", dim=True)
        + f"{amount.to_units():f} {symbol} ({amount.wei} raw, {amount.decimals} decimals)"
    )


@token.command("transfer")
@click.option("--token", "token_address", required=True, help="ERC-20 contract address")
@click.option("--to", "recipient", required=True, help="Recipient address (0x...)")
@click.option("--amount", required=True, help="Amount in token units (e.g. 1.5)")
@click.option("--dry-run", is_flag=True, help="Show the draft without signing")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def token_transfer(
    ctx: click.Context,
    token_address: str,
    recipient: str,
    amount: str,
    dry_run: bool,
    yes: bool,
) -> None:
    """Transfer ERC-20 tokens from the local account."""
    contract = Contract(parse_address(token_address))
    to = parse_address(recipient)

    try:
        private_key = load_private_key()
        sender = get_address(private_key)
        blockchain = connect(ctx)
        symbol = erc20_symbol(blockchain, contract)
        raw_amount = TokenAmount.from_units(amount, erc20_decimals(blockchain, contract))

        held = erc20_balance(blockchain, contract, sender)
        if held.as_int < raw_amount.as_int:
            raise ValidationError(
                f"Insufficient balance: {held.to_units():f} {symbol} < {amount} {symbol}"
            )

        data = erc20_transfer_data(contract, to, raw_amount)
        draft = blockchain.make_transaction(sender, contract.address, data, NativeWei("0"))
    except WardenError as exc:
        fail(exc)

    click.echo(f"=== {symbol} Transfer (chain {draft.chain_id}) ===")
    click.echo(click.style("  from:                 ", dim=True) + sender.checksum)
    click.echo(click.style("  recipient:            ", dim=True) + to.checksum)
    click.echo(click.style("  amount:               ", dim=True) + f"{amount} {symbol}")
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

    click.secho("Transfer sent!", fg="green")
    click.echo(f"  TX: {tx_hash}")
