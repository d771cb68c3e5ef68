"""
Pytest configuration and shared fixtures for the test suite.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Optional

import pytest
from eth_abi import encode

from warden.chain.blockchain import Blockchain
from warden.chain.contract import function_selector
from warden.config import Settings
from warden.errors import TransportError

GWEI = 10**9

PLAIN_ACCOUNT = "0x1111111111111111111111111111111111111111"
TOKEN_CONTRACT = "0x2222222222222222222222222222222222222222"
SENDER = "0x3333333333333333333333333333333333333333"

TOKEN_BYTECODE = "0x6080604052348015600f57600080fd5b50"


class FakeChain:
    """In-memory ChainQuery that records how often each query runs."""

    def __init__(
        self,
        *,
        base_fee: Optional[int] = None,
        gas_price: int = 20 * GWEI,
        codes: Optional[dict[str, str]] = None,
        gas_estimate: int = 52_000,
        nonce: int = 0,
        network_id: int = 1,
        balance: int = 0,
        call_results: Optional[dict[str, bytes]] = None,
    ) -> None:
        self.base_fee = base_fee
        self.gas_price = gas_price
        self.codes = codes if codes is not None else {TOKEN_CONTRACT: TOKEN_BYTECODE}
        self.gas_estimate = gas_estimate
        self.nonce = nonce
        self.network_id = network_id
        self.balance = balance
        self.call_results = call_results or {}
        self.calls: Counter[str] = Counter()
        self.estimate_requests: list[dict[str, Any]] = []
        self.sent: list[str] = []
        self.failing: set[str] = set()

    def _hit(self, name: str) -> None:
        self.calls[name] += 1
        if name in self.failing:
            raise TransportError(f"Failed to {name}", "connection refused")

    def get_latest_block(self) -> dict[str, Any]:
        self._hit("get_latest_block")
        block: dict[str, Any] = {"number": "0x10", "hash": "0x" + "00" * 32}
        if self.base_fee is not None:
            block["baseFeePerGas"] = hex(self.base_fee)
        return block

    def get_code(self, address: str) -> str:
        self._hit("get_code")
        return self.codes.get(address.lower(), "0x")

    def get_transaction_count(self, address: str) -> int:
        self._hit("get_transaction_count")
        return self.nonce

    def get_gas_price(self) -> int:
        self._hit("get_gas_price")
        return self.gas_price

    def estimate_gas(self, tx: dict[str, Any]) -> int:
        self._hit("estimate_gas")
        self.estimate_requests.append(dict(tx))
        return self.gas_estimate

    def get_network_id(self) -> int:
        self._hit("get_network_id")
        return self.network_id

    def send_raw_transaction(self, raw_tx: str) -> str:
        self._hit("send_raw_transaction")
        self.sent.append(raw_tx)
        return "0x" + "ab" * 32

    def get_balance(self, address: str) -> int:
        self._hit("get_balance")
        return self.balance

    def call(self, tx: dict[str, Any]) -> str:
        self._hit("call")
        selector = tx["data"][:10]
        return "0x" + self.call_results.get(selector, b"").hex()


def erc20_results(balance: int, decimals: int = 6, symbol: str = "USDC") -> dict[str, bytes]:
    """Canned eth_call results for the ERC-20 view functions."""
    return {
        "0x" + function_selector("balanceOf(address)").hex(): encode(["uint256"], [balance]),
        "0x" + function_selector("decimals()").hex(): encode(["uint8"], [decimals]),
        "0x" + function_selector("symbol()").hex(): encode(["string"], [symbol]),
    }


@pytest.fixture()
def legacy_chain() -> FakeChain:
    return FakeChain(gas_price=10 * GWEI, network_id=56)


@pytest.fixture()
def eip1559_chain() -> FakeChain:
    return FakeChain(base_fee=100 * GWEI, gas_price=105 * GWEI, network_id=1)


@pytest.fixture()
def settings() -> Settings:
    return Settings(gas_limit=200_000, max_gas_price=200, network_timeout=5)


@pytest.fixture()
def legacy_blockchain(legacy_chain: FakeChain, settings: Settings) -> Blockchain:
    return Blockchain(legacy_chain, settings, provider_url="http://node.test")


@pytest.fixture()
def eip1559_blockchain(eip1559_chain: FakeChain, settings: Settings) -> Blockchain:
    return Blockchain(eip1559_chain, settings, provider_url="http://node.test")
