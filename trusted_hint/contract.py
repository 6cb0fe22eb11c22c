from __future__ import annotations
from typing import Any, Sequence

from .chain.chain_base import BaseChainClient
from .logger import get_logger
from .models import Principal
from .utils import to_address

log = get_logger("TrustedHint.Contract")


class RegistryContract:
    """Registry address bound to the client used for reads."""

    def __init__(self, address: str, client: BaseChainClient):
        self.address = to_address(address, "registry address")
        self.client = client

    async def read(self, method: str, args: Sequence[Any] = ()) -> Any:
        log.debug(f"[READ] {method} args={list(args)}")
        return await self.client.read(self.address, method, list(args))

    async def write(self, method: str, args: Sequence[Any], relayer: Principal) -> str:
        """Submit ``method`` from the relayer's account on the relayer's chain."""
        log.info(f"[WRITE] {method} from={relayer.address} chain={relayer.chain_id}")
        return await relayer.client.write(
            self.address,
            method,
            list(args),
            chain=relayer.client.chain,
            account=relayer.address,
        )
