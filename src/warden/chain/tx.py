"""
Transaction records: fee quotes, unsigned drafts, signed transactions.

A draft carries exactly one fee-pricing form, legacy ``gasPrice`` or the
EIP-1559 pair ``maxFeePerGas`` / ``maxPriorityFeePerGas``. The sender is
never part of a draft; the signer derives it from the private key.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from .units import Address, to_quantity


@dataclass(frozen=True)
class LegacyFee:
    gas_price_wei: int

    @property
    def price_wei(self) -> int:
        return self.gas_price_wei

    def to_fields(self) -> dict[str, Any]:
        return {"gasPrice": to_quantity(self.gas_price_wei)}


@dataclass(frozen=True)
class Eip1559Fee:
    max_fee_per_gas_wei: int
    max_priority_fee_per_gas_wei: int

    @property
    def price_wei(self) -> int:
        return self.max_fee_per_gas_wei

    def to_fields(self) -> dict[str, Any]:
        return {
            "accessList": [],
            "maxFeePerGas": to_quantity(self.max_fee_per_gas_wei),
            "maxPriorityFeePerGas": to_quantity(self.max_priority_fee_per_gas_wei),
        }


FeeQuote = Union[LegacyFee, Eip1559Fee]


@dataclass(frozen=True)
class TransactionDraft:
    """An unsigned transaction, ready for an external signer."""

    nonce: int
    to: Address
    gas: int
    value: int
    chain_id: int
    data: Optional[str]
    fee: FeeQuote

    def to_dict(self) -> dict[str, Any]:
        """Render the JSON-RPC style mapping handed to the signer."""
        tx: dict[str, Any] = {
            "nonce": to_quantity(self.nonce),
            "to": str(self.to),
            "gas": to_quantity(self.gas),
            "value": to_quantity(self.value),
            "chainId": self.chain_id,
            "data": self.data,
        }
        tx.update(self.fee.to_fields())
        return tx

    def cost_estimate(self) -> str:
        """Upper-bound cost in wei as a decimal string (gas x price).

        Advisory only: the amount actually charged depends on the gas used
        and the effective price at inclusion.
        """
        return str(self.gas * self.fee.price_wei)


@dataclass(frozen=True)
class SignedTransaction:
    raw_transaction: str  # 0x-prefixed RLP hex
    tx_hash: str
