"""
JSON-RPC client for EVM chains.

Lightweight alternative to web3.py: uses httpx for HTTP. Every call is
synchronous and blocks until the node answers or the configured timeout
elapses. Failures are raised as TransportError naming the operation, with
the underlying exception chained.
"""

from __future__ import annotations

import itertools
from typing import Any, Optional, Protocol

import httpx
import structlog

from ..errors import TransportError
from .units import from_quantity

logger = structlog.get_logger(__name__)


class ChainQuery(Protocol):
    """The chain operations the Blockchain facade depends on."""

    def get_latest_block(self) -> dict[str, Any]:
        ...

    def get_code(self, address: str) -> str:
        ...

    def get_transaction_count(self, address: str) -> int:
        ...

    def get_gas_price(self) -> int:
        ...

    def estimate_gas(self, tx: dict[str, Any]) -> int:
        ...

    def get_network_id(self) -> int:
        ...

    def send_raw_transaction(self, raw_tx: str) -> str:
        ...

    def get_balance(self, address: str) -> int:
        ...

    def call(self, tx: dict[str, Any]) -> str:
        ...


class RpcClient:
    """ChainQuery implementation speaking JSON-RPC 2.0 over HTTP."""

    def __init__(
        self,
        url: str,
        timeout: float = 10,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._transport = transport
        self._ids = itertools.count(1)

    def request(self, method: str, params: list, operation: str) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters
            operation: Human description used in error messages

        Returns:
            Result field from the RPC response (never None)

        Raises:
            TransportError: On connection failure, timeout, HTTP error,
                malformed body, RPC error member, or a null result
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }
        logger.debug("rpc_request", method=method, url=self.url)

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self.url, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as exc:
            logger.warning("rpc_timeout", method=method, timeout=self.timeout)
            raise TransportError(operation, f"timed out after {self.timeout}s") from exc
        except httpx.HTTPError as exc:
            logger.warning("rpc_call_failed", method=method, error=str(exc))
            raise TransportError(operation, str(exc)) from exc
        except ValueError as exc:
            raise TransportError(operation, "malformed JSON-RPC response") from exc

        if not isinstance(data, dict):
            raise TransportError(operation, "malformed JSON-RPC response")

        if data.get("error") is not None:
            logger.warning("rpc_error", method=method, error=data["error"])
            raise TransportError(operation, f"RPC error: {data['error']}")

        result = data.get("result")
        if result is None:
            raise TransportError(operation, "empty result")
        return result

    def get_latest_block(self) -> dict[str, Any]:
        block = self.request("eth_getBlockByNumber", ["latest", False], "Failed to get latest block")
        if not isinstance(block, dict):
            raise TransportError("Failed to get latest block", "malformed block")
        return block

    def get_code(self, address: str) -> str:
        return self.request("eth_getCode", [address, "latest"], "Failed to get contract code")

    def get_transaction_count(self, address: str) -> int:
        operation = "Failed to get account nonce"
        return self._quantity(
            self.request("eth_getTransactionCount", [address, "latest"], operation), operation
        )

    def get_gas_price(self) -> int:
        operation = "Failed to get gas price"
        return self._quantity(self.request("eth_gasPrice", [], operation), operation)

    def estimate_gas(self, tx: dict[str, Any]) -> int:
        operation = "Failed to estimate gas"
        return self._quantity(self.request("eth_estimateGas", [tx], operation), operation)

    def get_network_id(self) -> int:
        result = self.request("net_version", [], "Failed to get network id")
        try:
            return int(result)
        except (TypeError, ValueError) as exc:
            raise TransportError("Failed to get network id", f"malformed value {result!r}") from exc

    def send_raw_transaction(self, raw_tx: str) -> str:
        return self.request("eth_sendRawTransaction", [raw_tx], "Failed to send transaction")

    def get_balance(self, address: str) -> int:
        operation = "Failed to get account balance"
        return self._quantity(self.request("eth_getBalance", [address, "latest"], operation), operation)

    def call(self, tx: dict[str, Any]) -> str:
        return self.request("eth_call", [tx, "latest"], "Failed to call contract")

    @staticmethod
    def _quantity(value: Any, operation: str) -> int:
        try:
            return from_quantity(value)
        except (TypeError, ValueError) as exc:
            raise TransportError(operation, f"malformed quantity {value!r}") from exc
