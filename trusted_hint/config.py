# trusted_hint/config.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import os

from .chain.chain_web3 import Web3ChainClient
from .constants import (
    ENV_CHAIN_ID,
    ENV_DEPLOYMENTS,
    ENV_META_PRIVATE_KEY,
    ENV_PRIVATE_KEY,
    ENV_REGISTRY_ADDRESS,
    ENV_RPC_URL,
    ENV_WAIT_FOR_RECEIPT,
)
from .controller import TrustedHintController
from .deployments import load_deployments, static_lookup


def _flag(value) -> bool:
    """Env-style switch: only "1", "true", "yes" and "on" (any case) enable it."""
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass
class ControllerSettings:
    rpc_url: str
    chain_id: Optional[int] = None
    private_key: Optional[str] = None
    meta_private_key: Optional[str] = None
    registry_address: Optional[str] = None
    deployments: Optional[str] = None
    wait_for_receipt: bool = False

    @classmethod
    def from_env(cls, config: Optional[dict] = None) -> "ControllerSettings":
        """Explicit ``config`` entries win over TRUSTED_HINT_* environment variables."""
        config = config or {}
        rpc_url = config.get("rpc_url") or os.getenv(ENV_RPC_URL)
        if not rpc_url:
            raise ValueError(f"{ENV_RPC_URL} is not set")

        chain_id = config.get("chain_id") or os.getenv(ENV_CHAIN_ID)
        wait = config.get("wait_for_receipt")
        if wait is None:
            wait = os.getenv(ENV_WAIT_FOR_RECEIPT, "0")

        return cls(
            rpc_url=rpc_url,
            chain_id=int(chain_id) if chain_id else None,
            private_key=config.get("private_key") or os.getenv(ENV_PRIVATE_KEY),
            meta_private_key=config.get("meta_private_key") or os.getenv(ENV_META_PRIVATE_KEY),
            registry_address=config.get("registry_address") or os.getenv(ENV_REGISTRY_ADDRESS),
            deployments=config.get("deployments") or os.getenv(ENV_DEPLOYMENTS),
            wait_for_receipt=_flag(wait),
        )


async def build_controller(settings: Optional[ControllerSettings] = None) -> TrustedHintController:
    """
    Build a controller from settings (default: environment).

    With a private key the controller is writable; without one it is
    read-only. A meta private key adds the meta-transaction signer.
    """
    settings = settings or ControllerSettings.from_env()

    def client(key: Optional[str]) -> Web3ChainClient:
        return Web3ChainClient(settings.rpc_url, private_key=key, chain_id=settings.chain_id,
                               wait_for_receipt=settings.wait_for_receipt)

    primary = client(settings.private_key)
    if primary.chain is None:
        primary = await Web3ChainClient.connect(settings.rpc_url, private_key=settings.private_key,
                                                wait_for_receipt=settings.wait_for_receipt)
    chain_id = primary.chain.id

    meta = None
    if settings.meta_private_key:
        meta = Web3ChainClient(settings.rpc_url, private_key=settings.meta_private_key, chain_id=chain_id)

    lookup = static_lookup(load_deployments(settings.deployments)) if settings.deployments else None

    if settings.private_key:
        return TrustedHintController(wallet_client=primary, meta_transaction_wallet_client=meta,
                                     registry_address=settings.registry_address, deployment_lookup=lookup)
    return TrustedHintController(read_client=primary, registry_address=settings.registry_address,
                                 deployment_lookup=lookup)
