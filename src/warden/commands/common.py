"""Helpers shared by the CLI commands."""

from __future__ import annotations

import sys
from typing import NoReturn, Optional

import click

from ..chain.blockchain import Blockchain
from ..chain.tx import TransactionDraft
from ..chain.units import Address, NativeWei
from ..config import Settings, get_provider_url
from ..errors import ValidationError, WardenError


def fail(exc: WardenError) -> NoReturn:
    """Abort the command with the error's exit code."""
    click.secho(f"ERROR: {exc}", fg="red", err=True)
    sys.exit(exc.exit_code)


def connect(ctx: click.Context) -> Blockchain:
    """Open the Blockchain facade from the group-level options."""
    obj = ctx.find_root().obj or {}
    options = {
        key: obj[key]
        for key in ("gas_limit", "max_gas_price", "network_timeout")
        if obj.get(key) is not None
    }
    settings = Settings.from_options(options)
    provider_url = obj.get("rpc_url") or get_provider_url()
    return Blockchain.connect(provider_url, settings)


def parse_address(value: str) -> Address:
    try:
        return Address(value)
    except ValidationError as exc:
        raise click.BadParameter(str(exc)) from exc


def format_wei(amount: NativeWei) -> str:
    return f"{amount.to_ether():f} ETH ({amount.wei} wei)"


def echo_draft(draft: TransactionDraft) -> None:
    """Print the draft fields and its advisory cost."""
    for key, value in draft.to_dict().items():
        if key == "accessList":
            continue
        click.echo(click.style(f"  {key + ':':<22}", dim=True) + str(value))
    cost = NativeWei(draft.cost_estimate())
    click.echo(click.style(f"  {'max cost:':<22}", dim=True) + format_wei(cost))


def confirm_or_abort(yes: bool, prompt: Optional[str] = None) -> None:
    if not yes:
        click.confirm(prompt or "Sign and send this transaction?", abort=True)
