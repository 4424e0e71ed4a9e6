"""
Pneuma - On-chain interaction layer for arbsend.

Provides the JSON-RPC client, ABI helpers, fee estimation, transfer
building/broadcasting and receipt polling for EVM rollups.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
