"""
Chain - on-chain interaction layer for Warden.

Provides the JSON-RPC client, value objects, contract call plumbing and the
Blockchain facade that assembles transactions.

Uses httpx + eth-abi instead of the heavyweight web3.py.
"""
