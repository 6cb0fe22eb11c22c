# trusted_hint/chain/__init__.py
from trusted_hint.chain.chain_base import BaseChainClient, Chain, ChainCallError, ChainError
from trusted_hint.chain.chain_web3 import Web3ChainClient

__all__ = [
    "BaseChainClient",
    "Chain",
    "ChainCallError",
    "ChainError",
    "Web3ChainClient",
]
