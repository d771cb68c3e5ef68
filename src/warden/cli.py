"""
Warden CLI

Command-line interface for generating Ethereum accounts, checking balances,
and building, signing and sending transactions with safe fee defaults.

Commands:
  generate  - Create a new account (optionally stored in ~/.warden/.env)
  whoami    - Show the stored account address
  balance   - Show a native-coin balance
  send      - Send ETH or a raw contract call
  token     - ERC-20 balance and transfer
  info      - Show endpoint, chain and fee settings
"""

from __future__ import annotations

from typing import Optional

import click

from .config import load_env
from .errors import ConfigurationError, WardenError
from .keys import get_address, load_private_key
from .log import setup_logging


# ============ Constants ============

VERSION = "1.0.0"


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=VERSION, prog_name="warden")
@click.option("--rpc-url", envvar="WARDEN_RPC_URL", default=None, help="JSON-RPC endpoint URL")
@click.option("--gas-limit", envvar="WARDEN_GAS_LIMIT", type=int, default=None,
              help="Gas limit ceiling for contract calls [default: 200000]")
@click.option("--max-gas-price", envvar="WARDEN_MAX_GAS_PRICE", type=float, default=None,
              help="Fee ceiling in gwei [default: 21]")
@click.option("--network-timeout", envvar="WARDEN_NETWORK_TIMEOUT", type=float, default=None,
              help="RPC timeout in seconds [default: 10]")
@click.option("--verbose", "-v", count=True, help="Log chain queries (-vv for debug)")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
@click.pass_context
def cli(
    ctx: click.Context,
    rpc_url: Optional[str],
    gas_limit: Optional[int],
    max_gas_price: Optional[float],
    network_timeout: Optional[float],
    verbose: int,
    json_logs: bool,
) -> None:
    """Warden - a cautious Ethereum wallet for the command line."""
    level = {0: "WARNING", 1: "INFO"}.get(verbose, "DEBUG")
    setup_logging(level, json_format=json_logs)
    ctx.obj = {
        "rpc_url": rpc_url,
        "gas_limit": gas_limit,
        "max_gas_price": max_gas_price,
        "network_timeout": network_timeout,
    }


# ============ Commands ============

from .commands.account import generate, whoami
from .commands.balance import balance
from .commands.send import send
from .commands.token import token

cli.add_command(generate)
cli.add_command(whoami)
cli.add_command(balance)
cli.add_command(send)
cli.add_command(token)


# ============ Info ============


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show endpoint, chain and fee settings."""
    from .commands.common import connect, fail

    try:
        blockchain = connect(ctx)
    except WardenError as exc:
        fail(exc)

    click.secho("  Chain ──────────────────────────────────", fg="cyan")
    click.echo(click.style("  Endpoint:      ", dim=True) + blockchain.provider_url)
    click.echo(click.style("  Network id:    ", dim=True) + str(blockchain.network_id))
    fee_mode = "EIP-1559" if blockchain.is_eip1559 else "legacy"
    click.echo(click.style("  Fee market:    ", dim=True) + fee_mode)
    click.echo()

    click.secho("  Settings ───────────────────────────────", fg="cyan")
    click.echo(click.style("  gas_limit:       ", dim=True) + str(blockchain.get_option("gas_limit")))
    click.echo(
        click.style("  max_gas_price:   ", dim=True)
        + f"{blockchain.get_option('max_gas_price')} gwei"
    )
    click.echo(
        click.style("  network_timeout: ", dim=True)
        + f"{blockchain.get_option('network_timeout')} s"
    )
    click.echo()

    try:
        address = get_address(load_private_key())
        click.echo(click.style("  Account:       ", dim=True) + address.checksum)
    except ConfigurationError:
        click.echo(
            click.style("  Account:       ", dim=True)
            + click.style("not initialized", fg="yellow")
            + click.style("  (run: warden generate --save)", dim=True)
        )


# ============ Entry Points ============


def main() -> None:
    """Warden CLI entry point."""
    load_env()
    cli()


if __name__ == "__main__":
    main()
