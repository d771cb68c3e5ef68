"""
ECDSA / secp256k1 key management.

Keys are stored in ~/.warden/.env as PRIVATE_KEY (hex format). Key
generation and transaction signing are done by eth-account; the key
itself never leaves this module except through save_private_key.
"""

from __future__ import annotations

import os
import secrets
from pathlib import Path
from typing import Any, Optional

import structlog
from dotenv import load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount

from .chain.tx import SignedTransaction, TransactionDraft
from .chain.units import Address
from .config import WARDEN_ENV
from .errors import ConfigurationError

logger = structlog.get_logger(__name__)


def generate_account() -> tuple[str, Address]:
    """
    Generate a new ECDSA/secp256k1 keypair.

    Returns:
        Tuple of (private_key_hex, address)
        - private_key_hex: 0x-prefixed hex private key (66 chars)
        - address: the account's Address
    """
    private_key = "0x" + secrets.token_hex(32)
    account = Account.from_key(private_key)
    return private_key, Address(account.address)


def save_private_key(private_key: str, env_path: Optional[Path] = None) -> Path:
    """
    Save private key to .env file, preserving other entries.

    Returns:
        Path to the saved .env file
    """
    env_path = env_path or WARDEN_ENV
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        for line in env_path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                k, v = line.split("=", 1)
                existing[k.strip()] = v.strip()

    existing["PRIVATE_KEY"] = private_key

    # Write back in original order, key last if new
    lines = [f"{k}={v}" for k, v in existing.items()]
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    # Set secure permissions on Unix
    if os.name != "nt":
        env_path.chmod(0o600)

    logger.info("private_key_saved", path=str(env_path))
    return env_path


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load private key from the environment or the .env file.

    Returns:
        0x-prefixed hex private key

    Raises:
        ConfigurationError: If PRIVATE_KEY is not set anywhere
    """
    env_path = env_path or WARDEN_ENV

    if env_path.exists():
        load_dotenv(env_path, override=False)

    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        raise ConfigurationError(
            f"PRIVATE_KEY not found. Run 'warden generate --save' or set "
            f"PRIVATE_KEY in {env_path}"
        )

    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    """
    Get an eth-account LocalAccount; loads the key from .env if None.

    Raises:
        ConfigurationError: If the key is missing or not a valid secp256k1 key
    """
    if private_key is None:
        private_key = load_private_key()
    try:
        return Account.from_key(private_key)
    except ValueError as exc:
        # never echo the key itself
        raise ConfigurationError(
            "Invalid PRIVATE_KEY: expected 32 bytes of hex"
        ) from exc


def get_address(private_key: Optional[str] = None) -> Address:
    return Address(get_account(private_key).address)


def _signable(draft: TransactionDraft) -> dict[str, Any]:
    # eth-account wants a checksummed recipient and no null data field
    tx: dict[str, Any] = {
        "nonce": draft.nonce,
        "to": draft.to.checksum,
        "gas": draft.gas,
        "value": draft.value,
        "chainId": draft.chain_id,
        "data": draft.data or "0x",
    }
    fields = draft.fee.to_fields()
    for key, value in fields.items():
        tx[key] = int(value, 16) if isinstance(value, str) else value
    return tx


def sign_transaction(draft: TransactionDraft, private_key: Optional[str] = None) -> SignedTransaction:
    """Sign a draft. The sender is whoever owns ``private_key``."""
    account = get_account(private_key)
    signed = account.sign_transaction(_signable(draft))
    return SignedTransaction(
        raw_transaction="0x" + bytes(signed.raw_transaction).hex(),
        tx_hash="0x" + bytes(signed.hash).hex(),
    )
