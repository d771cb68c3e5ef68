"""
Account commands - create and inspect the local signing key.

The key lives in ~/.warden/.env as PRIVATE_KEY. ``generate`` prints only
the address unless --show-key is given.
"""

from __future__ import annotations

import click

from ..config import WARDEN_ENV
from ..errors import ConfigurationError
from ..keys import generate_account, get_address, load_private_key, save_private_key
from .common import fail


@click.command()
@click.option("--save", is_flag=True, help=f"Store the key as PRIVATE_KEY in {WARDEN_ENV}")
@click.option("--force", is_flag=True, help="Replace an already stored key")
@click.option("--show-key", is_flag=True, help="Print the private key to stdout")
def generate(save: bool, force: bool, show_key: bool) -> None:
    """Generate a new Ethereum account."""
    if save and not force:
        try:
            existing = get_address(load_private_key())
        except ConfigurationError:
            existing = None
        if existing is not None:
            fail(ConfigurationError(
                f"A key for {existing} is already stored. Use --force to replace it."
            ))

    private_key, address = generate_account()

    click.echo(f"Address: {address.checksum}")
    if show_key:
        click.secho(f"Private key: {private_key}", fg="yellow")
    if save:
        path = save_private_key(private_key)
        click.echo(f"Saved to: {path}")
    elif not show_key:
        click.secho(
            "The key was not stored. Re-run with --save or --show-key to keep it.",
            fg="yellow",
        )


@click.command()
def whoami() -> None:
    """Show the stored account address."""
    try:
        private_key = load_private_key()
    except ConfigurationError as exc:
        click.echo("No wallet found.")
        click.echo("Run 'warden generate --save' to create one.")
        fail(exc)

    try:
        address = get_address(private_key)
    except ConfigurationError as exc:
        fail(exc)
    click.echo(f"Address: {address.checksum}")
