__all__ = [
    # Facade
    "Blockchain",
    "ChainQuery",
    "RpcClient",
    # Values
    "Address",
    "NativeWei",
    "TokenAmount",
    # Transactions
    "LegacyFee",
    "Eip1559Fee",
    "TransactionDraft",
    "SignedTransaction",
    # Contracts
    "Contract",
    "ERC20_ABI",
    "encode_call",
    "decode_result",
    "erc20_balance",
    "erc20_decimals",
    "erc20_symbol",
    "erc20_transfer_data",
    # Keys
    "generate_account",
    "get_account",
    "get_address",
    "load_private_key",
    "save_private_key",
    "sign_transaction",
    # Configuration
    "Settings",
    # Errors
    "WardenError",
    "ConfigurationError",
    "TransportError",
    "ValidationError",
]

from .errors import ConfigurationError, TransportError, ValidationError, WardenError
from .config import Settings
from .chain.units import Address, NativeWei, TokenAmount
from .chain.tx import Eip1559Fee, LegacyFee, SignedTransaction, TransactionDraft
from .chain.rpc import ChainQuery, RpcClient
from .chain.contract import (
    ERC20_ABI,
    Contract,
    decode_result,
    encode_call,
    erc20_balance,
    erc20_decimals,
    erc20_symbol,
    erc20_transfer_data,
)
from .chain.blockchain import Blockchain
from .keys import (
    generate_account,
    get_account,
    get_address,
    load_private_key,
    save_private_key,
    sign_transaction,
)
