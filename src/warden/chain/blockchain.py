"""
Blockchain facade: chain queries plus fee and transaction assembly.

The facade detects the chain's fee market (legacy or EIP-1559) and its
network id once, at construction, and keeps both for its whole lifetime.
A chain that changes fee market mid-process (hard fork) needs a new
Blockchain instance.

Contract bytecode is cached per address and never invalidated. Deployed
code is immutable, so this only goes stale when an address is redeployed
after self-destruct (CREATE2); that case is not handled.

Nonces are read from the chain for every draft with no local reservation.
Two drafts for the same sender built before either is mined will collide;
callers that submit concurrently must serialize build-then-send per sender.
"""

from __future__ import annotations

from typing import Any, Optional, Union

import structlog
from eth_abi.exceptions import DecodingError

from ..config import GWEI, Settings
from ..errors import ConfigurationError, TransportError, ValidationError
from .contract import Contract, decode_result, encode_call
from .rpc import ChainQuery, RpcClient
from .tx import Eip1559Fee, FeeQuote, LegacyFee, SignedTransaction, TransactionDraft
from .units import NATIVE_COIN_DECIMALS, Address, NativeWei, from_quantity, to_quantity

logger = structlog.get_logger(__name__)

# Intrinsic gas of a plain value transfer
TRANSFER_GAS = 21_000

# Smallest priority tip offered on EIP-1559 chains
MIN_PRIORITY_FEE_WEI = 1 * GWEI


class Blockchain:
    """Sequences chain queries into ready-to-sign transaction drafts."""

    def __init__(
        self,
        chain: ChainQuery,
        settings: Optional[Settings] = None,
        provider_url: str = "",
    ) -> None:
        self._chain = chain
        self.settings = settings or Settings()
        self._provider_url = provider_url
        self._address_to_code_cache: dict[str, str] = {}

        self._is_eip1559 = self._chain.get_latest_block().get("baseFeePerGas") is not None
        self._network_id = self._chain.get_network_id()
        logger.info(
            "chain_detected",
            network_id=self._network_id,
            eip1559=self._is_eip1559,
        )

    @classmethod
    def connect(cls, provider_url: str, settings: Optional[Settings] = None) -> "Blockchain":
        """Open a facade over a JSON-RPC endpoint.

        Raises:
            ConfigurationError: If provider_url is empty
            TransportError: If the initial chain detection fails
        """
        if not provider_url or not provider_url.strip():
            raise ConfigurationError("Empty provider_url value provided")
        settings = settings or Settings()
        client = RpcClient(provider_url, timeout=settings.network_timeout)
        return cls(client, settings, provider_url=provider_url)

    # ------------------------------------------------------------------
    # Chain properties
    # ------------------------------------------------------------------

    @property
    def provider_url(self) -> str:
        return self._provider_url

    @property
    def network_id(self) -> int:
        return self._network_id

    @property
    def is_eip1559(self) -> bool:
        return self._is_eip1559

    @property
    def native_coin_decimals(self) -> int:
        return NATIVE_COIN_DECIMALS

    def get_option(self, option_name: str) -> Any:
        return self.settings.get_option(option_name)

    def get_latest_block(self) -> dict[str, Any]:
        return self._chain.get_latest_block()

    # ------------------------------------------------------------------
    # Accounts and contracts
    # ------------------------------------------------------------------

    def get_account_nonce(self, address: Address) -> int:
        return self._chain.get_transaction_count(str(address))

    def get_address_balance(self, address: Address) -> NativeWei:
        return NativeWei(str(self._chain.get_balance(str(address))))

    def make_native_wei(self, wei: Union[str, int]) -> NativeWei:
        return NativeWei(str(wei))

    def get_contract_code(self, contract: Contract) -> str:
        return self._get_code(contract.address)

    def get_contract_method_data(self, contract: Contract, method: str, args: list) -> str:
        return encode_call(contract.abi, method, args)

    def call_contract_method(self, contract: Contract, method: str, args: list) -> Any:
        """Run a read-only contract call (eth_call at latest) and decode it."""
        data = encode_call(contract.abi, method, args)
        operation = f"Failed to call '{method}' on contract at {contract.address}"
        try:
            result = self._chain.call({"to": str(contract.address), "data": data})
        except TransportError as exc:
            raise TransportError(operation, str(exc)) from exc

        try:
            return decode_result(contract.abi, method, result)
        except (DecodingError, ValueError) as exc:
            raise TransportError(operation, f"undecodable result {result!r}") from exc

    def _get_code(self, address: Address) -> str:
        key = str(address)
        if key not in self._address_to_code_cache:
            self._address_to_code_cache[key] = self._chain.get_code(key)
        return self._address_to_code_cache[key]

    def _has_code(self, address: Address) -> bool:
        return self._get_code(address) not in ("0x", "")

    # ------------------------------------------------------------------
    # Transaction assembly
    # ------------------------------------------------------------------

    def make_transaction(
        self,
        sender: Address,
        to: Address,
        data: Union[str, bytes, None],
        value: NativeWei,
    ) -> TransactionDraft:
        """
        Build an unsigned transaction.

        Args:
            sender: Sending address (used for the nonce and gas estimate only)
            to: Recipient address
            data: Call payload, hex or bytes; empty for plain transfers
            value: Amount to transfer

        Returns:
            TransactionDraft with gas, nonce, chain id and fee fields set

        Raises:
            ConfigurationError: If the gas_limit option is too low for the call
            TransportError: If any chain query fails
            ValidationError: If the value is negative
        """
        value_wei = value.as_int
        if value_wei < 0:
            raise ValidationError(f"Transaction value must be non-negative: {value_wei}")
        payload = _normalize_data(data)

        nonce = self.get_account_nonce(sender)
        gas = self._get_gas_limit(sender, to, payload, value_wei)
        fee = self.fee_quote()

        draft = TransactionDraft(
            nonce=nonce,
            to=to,
            gas=gas,
            value=value_wei,
            chain_id=self._network_id,
            data=payload,
            fee=fee,
        )
        logger.info(
            "transaction_drafted",
            to=str(to),
            nonce=nonce,
            gas=gas,
            cost_estimate_wei=draft.cost_estimate(),
        )
        return draft

    def _get_gas_limit(
        self,
        sender: Address,
        to: Address,
        payload: Optional[str],
        value_wei: int,
    ) -> int:
        if not self._has_code(to):
            return TRANSFER_GAS

        ceiling = int(self.settings.gas_limit)
        estimate_tx: dict[str, Any] = {
            "from": str(sender),
            "to": str(to),
            "gas": to_quantity(ceiling),
            "value": to_quantity(value_wei),
        }
        if payload is not None:
            estimate_tx["data"] = payload

        estimate = self._chain.estimate_gas(estimate_tx)
        if estimate == ceiling:
            raise ConfigurationError(f"Too low gas_limit option specified: {to_quantity(ceiling)}")
        logger.debug("gas_estimated", to=str(to), estimate=estimate, ceiling=ceiling)
        return estimate

    def fee_quote(self) -> FeeQuote:
        """Compute fee fields from the current chain state.

        Legacy chains pay min(node gas price, ceiling). EIP-1559 chains tip
        max(node gas price - base fee, 1 gwei), capped at the ceiling, and
        offer twice the base fee plus the tip as the max fee.

        A zero node price falls back to the ceiling as a flat price on legacy
        chains only; on EIP-1559 chains it just hits the 1 gwei tip floor.
        """
        ceiling = self.settings.max_gas_price_wei
        gas_price = self._chain.get_gas_price()

        if not self._is_eip1559:
            if gas_price <= 0:
                logger.warning("gas_price_unavailable", fallback_wei=ceiling)
                return LegacyFee(ceiling)
            return LegacyFee(min(gas_price, ceiling))

        block = self._chain.get_latest_block()
        if block.get("baseFeePerGas") is None:
            raise TransportError("Failed to get latest block", "missing baseFeePerGas")
        base_fee = from_quantity(block["baseFeePerGas"])

        tip = max(gas_price - base_fee, MIN_PRIORITY_FEE_WEI)
        tip = min(tip, ceiling)
        # twice the base fee leaves room for it to grow before inclusion
        max_fee = 2 * base_fee + tip

        logger.debug("fee_quote_computed", base_fee=base_fee, tip=tip, max_fee=max_fee)
        return Eip1559Fee(max_fee_per_gas_wei=max_fee, max_priority_fee_per_gas_wei=tip)

    def send_transaction(self, signed: SignedTransaction) -> str:
        tx_hash = self._chain.send_raw_transaction(signed.raw_transaction)
        logger.info("transaction_sent", tx_hash=tx_hash)
        return tx_hash


def _normalize_data(data: Union[str, bytes, None]) -> Optional[str]:
    if data is None:
        return None
    if isinstance(data, (bytes, bytearray)):
        return "0x" + bytes(data).hex() if data else None

    hex_data = data[2:] if data[:2].lower() == "0x" else data
    if not hex_data:
        return None
    try:
        bytes.fromhex(hex_data)
    except ValueError as exc:
        raise ValidationError(f"Transaction data is not valid hex: {data!r}") from exc
    return "0x" + hex_data.lower()
