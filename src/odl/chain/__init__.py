"""
Chain - On-chain interaction layer for the Open Data Library contract.

Provides the JSON-RPC provider, wallet transport selection, network
reconciliation, ABI loading and transaction submission.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
