"""
Value objects for addresses and amounts, plus JSON-RPC quantity helpers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from eth_utils import to_checksum_address

from ..errors import ValidationError

NATIVE_COIN_DECIMALS = 18

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_DECIMAL_RE = re.compile(r"^[0-9]+$")

# uint256 has 78 decimal digits
_PRECISION = 100


def to_quantity(value: int) -> str:
    """Encode a non-negative integer as a JSON-RPC quantity ("0x0", "0x5208")."""
    if value < 0:
        raise ValidationError(f"Cannot hex-encode negative quantity: {value}")
    return hex(value)


def from_quantity(value: Union[str, int]) -> int:
    """Decode a JSON-RPC quantity. Plain ints pass through."""
    if isinstance(value, int):
        return value
    if value in ("0x", ""):
        return 0
    return int(value, 16)


@dataclass(frozen=True)
class Address:
    """A 20-byte account or contract identifier, stored lowercase."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not _ADDRESS_RE.fullmatch(self.value):
            raise ValidationError(f"Invalid address: {self.value!r}")
        object.__setattr__(self, "value", self.value.lower())

    def __str__(self) -> str:
        return self.value

    @property
    def checksum(self) -> str:
        """EIP-55 mixed-case form."""
        return to_checksum_address(self.value)


@dataclass(frozen=True)
class TokenAmount:
    """A non-negative integer amount in the smallest unit of a coin or token."""

    wei: str
    decimals: int

    def __post_init__(self) -> None:
        if isinstance(self.wei, int):
            object.__setattr__(self, "wei", str(self.wei))
        if not isinstance(self.wei, str) or not _DECIMAL_RE.fullmatch(self.wei):
            raise ValidationError(f"Amount must be a non-negative integer string: {self.wei!r}")
        if self.decimals < 0:
            raise ValidationError(f"Decimals must be non-negative: {self.decimals}")

    @property
    def as_int(self) -> int:
        return int(self.wei)

    def to_units(self) -> Decimal:
        """Human-readable amount (e.g. 1.5 for 1500000 at 6 decimals)."""
        with localcontext() as ctx:
            ctx.prec = _PRECISION
            return Decimal(self.as_int).scaleb(-self.decimals).normalize()

    @classmethod
    def from_units(cls, amount: Union[str, Decimal], decimals: int) -> "TokenAmount":
        """Convert a human-readable amount to its integer form.

        Raises:
            ValidationError: If the amount is negative, not a number, or has
                more fractional digits than ``decimals`` allows
        """
        try:
            units = Decimal(str(amount))
        except InvalidOperation as exc:
            raise ValidationError(f"Invalid amount: {amount!r}") from exc
        if not units.is_finite() or units < 0:
            raise ValidationError(f"Amount must be a non-negative number: {amount!r}")
        with localcontext() as ctx:
            ctx.prec = _PRECISION
            raw = units.scaleb(decimals)
        if raw != raw.to_integral_value():
            raise ValidationError(
                f"Amount {amount} has more than {decimals} fractional digits"
            )
        return cls(str(int(raw)), decimals)


@dataclass(frozen=True)
class NativeWei(TokenAmount):
    """Native-coin amount in wei. Decimals are fixed at 18."""

    decimals: int = NATIVE_COIN_DECIMALS

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.decimals != NATIVE_COIN_DECIMALS:
            raise ValidationError(
                f"Native coin has {NATIVE_COIN_DECIMALS} decimals, got {self.decimals}"
            )

    @classmethod
    def from_ether(cls, amount: Union[str, Decimal]) -> "NativeWei":
        return cls(TokenAmount.from_units(amount, NATIVE_COIN_DECIMALS).wei)

    def to_ether(self) -> Decimal:
        return self.to_units()
