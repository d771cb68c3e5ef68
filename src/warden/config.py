"""
Configuration for Warden.

Options are the three knobs the transaction assembler honours:

    gas_limit        upper bound handed to eth_estimateGas (gas units)
    max_gas_price    fee ceiling in gwei (may be fractional)
    network_timeout  per-request HTTP timeout in seconds

Values come from explicit options, or from WARDEN_* environment variables
after ~/.warden/.env has been loaded with python-dotenv.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields
from decimal import ROUND_CEILING, Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError


# Default config directory
WARDEN_DIR = Path.home() / ".warden"
WARDEN_ENV = WARDEN_DIR / ".env"

GWEI = 10**9

_ENV_PREFIX = "WARDEN_"


@dataclass(frozen=True)
class Settings:
    gas_limit: int = 200_000
    max_gas_price: float = 21
    network_timeout: float = 10

    def __post_init__(self) -> None:
        if self.gas_limit <= 0:
            raise ConfigurationError(f"gas_limit must be positive, got {self.gas_limit}")
        if self.max_gas_price <= 0:
            raise ConfigurationError(
                f"max_gas_price must be positive, got {self.max_gas_price}"
            )
        if self.network_timeout <= 0:
            raise ConfigurationError(
                f"network_timeout must be positive, got {self.network_timeout}"
            )

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]] = None) -> "Settings":
        """Build settings from a partial mapping merged over the defaults.

        Raises:
            ConfigurationError: If a key is unknown or a value is not numeric
        """
        options = dict(options or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ConfigurationError(f"Unknown option name provided: {', '.join(unknown)}")

        try:
            values = {
                "gas_limit": int(options.get("gas_limit", cls.gas_limit)),
                "max_gas_price": float(options.get("max_gas_price", cls.max_gas_price)),
                "network_timeout": float(options.get("network_timeout", cls.network_timeout)),
            }
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid option value: {exc}") from exc
        return cls(**values)

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "Settings":
        """Build settings from WARDEN_GAS_LIMIT, WARDEN_MAX_GAS_PRICE and
        WARDEN_NETWORK_TIMEOUT."""
        load_env(env_path)
        options = {}
        for f in fields(cls):
            value = os.environ.get(_ENV_PREFIX + f.name.upper())
            if value:
                options[f.name] = value
        return cls.from_options(options)

    def get_option(self, option_name: str) -> Any:
        values = asdict(self)
        if option_name not in values:
            raise ConfigurationError(f"Unknown option name requested: {option_name}")
        return values[option_name]

    @property
    def max_gas_price_wei(self) -> int:
        """Fee ceiling in wei, rounded up to a whole wei."""
        try:
            wei = Decimal(str(self.max_gas_price)) * GWEI
        except InvalidOperation as exc:
            raise ConfigurationError(f"Invalid max_gas_price: {self.max_gas_price}") from exc
        return int(wei.to_integral_value(rounding=ROUND_CEILING))


def load_env(env_path: Optional[Path] = None) -> None:
    """Load ~/.warden/.env into the process environment if it exists.

    Values already present in the environment win.
    """
    env_path = env_path or WARDEN_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)


def get_provider_url(env_path: Optional[Path] = None) -> str:
    """Get the JSON-RPC endpoint from WARDEN_RPC_URL.

    Raises:
        ConfigurationError: If no endpoint is configured
    """
    load_env(env_path)
    url = os.environ.get("WARDEN_RPC_URL", "").strip()
    if not url:
        raise ConfigurationError(
            f"WARDEN_RPC_URL not set. Pass --rpc-url or set it in {env_path or WARDEN_ENV}."
        )
    return url
