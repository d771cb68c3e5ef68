"""
Contract handles and ABI call plumbing.

Encoding and decoding are delegated to eth-abi; the function selector is the
first four bytes of the Keccak-256 hash of the canonical signature.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from eth_abi import decode, encode
from eth_hash.auto import keccak

from ..errors import ValidationError
from .units import Address, TokenAmount

if TYPE_CHECKING:
    from .blockchain import Blockchain


# Minimal ERC-20 ABI (balanceOf, transfer, decimals, symbol)
ERC20_ABI: list[dict] = [
    {
        "type": "function",
        "name": "balanceOf",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "transfer",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "decimals",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "symbol",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
    },
]


@dataclass(frozen=True)
class Contract:
    address: Address
    abi: list[dict[str, Any]] = field(default_factory=lambda: list(ERC20_ABI), compare=False)


def _find_function(abi: list, function_name: str) -> dict:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise ValidationError(f"Function {function_name} not found in ABI")


def _input_types(func: dict) -> list[str]:
    return [inp["type"] for inp in func.get("inputs", [])]


def function_selector(signature: str) -> bytes:
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(signature.encode("utf-8"))[:4]


def encode_call(abi: list, function_name: str, args: list) -> str:
    """
    ABI-encode a function call.

    Returns:
        0x-prefixed hex encoded calldata
    """
    func = _find_function(abi, function_name)
    input_types = _input_types(func)
    if len(args) != len(input_types):
        raise ValidationError(
            f"{function_name} takes {len(input_types)} arguments, got {len(args)}"
        )

    selector = function_selector(f"{function_name}({','.join(input_types)})")
    encoded_args = encode(input_types, args) if args else b""
    return "0x" + selector.hex() + encoded_args.hex()


def decode_result(abi: list, function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Returns:
        Decoded result (single value or tuple), None for no outputs or
        empty return data
    """
    func = _find_function(abi, function_name)
    output_types = [out["type"] for out in func.get("outputs", [])]
    if not output_types:
        return None

    raw = bytes.fromhex(data[2:] if data.startswith("0x") else data)
    if not raw:
        return None
    decoded = decode(output_types, raw)

    if len(decoded) == 1:
        return decoded[0]
    return decoded


# ---------------------------------------------------------------------------
# ERC-20 helpers
# ---------------------------------------------------------------------------

def erc20_decimals(blockchain: "Blockchain", token: Contract) -> int:
    return int(blockchain.call_contract_method(token, "decimals", []))


def erc20_symbol(blockchain: "Blockchain", token: Contract) -> str:
    return str(blockchain.call_contract_method(token, "symbol", []))


def erc20_balance(blockchain: "Blockchain", token: Contract, owner: Address) -> TokenAmount:
    decimals = erc20_decimals(blockchain, token)
    raw = blockchain.call_contract_method(token, "balanceOf", [owner.checksum]) or 0
    return TokenAmount(str(raw), decimals)


def erc20_transfer_data(token: Contract, recipient: Address, amount: TokenAmount) -> str:
    """Calldata for transfer(recipient, amount)."""
    return encode_call(token.abi, "transfer", [recipient.checksum, amount.as_int])
