from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from trusted_hint.errors import TrustedHintControllerError


class ChainError(TrustedHintControllerError):
    pass


class ChainCallError(ChainError):
    """A read, write or signing request failed inside the chain client."""

    def __init__(self, method: str, message: str):
        self.method = method
        super().__init__(f"{method}: {message}")


@dataclass(frozen=True)
class Chain:
    id: int
    name: str = ""


class BaseChainClient:
    """
    Chain interaction contract consumed by the controller.

    A client plays the role of a principal: ``chain`` and ``account`` are what
    it is bound to (either may be None for a read-only client). Reads go to the
    registry at ``address``; writes are signed by ``account`` and submitted on
    ``chain``; typed data is signed by ``account`` without touching the chain.
    """
    name: str = "base"
    chain: Optional[Chain] = None
    account: Optional[str] = None

    async def read(self, address: str, method: str, args: Sequence[Any]) -> Any:
        raise NotImplementedError

    async def write(
        self,
        address: str,
        method: str,
        args: Sequence[Any],
        *,
        chain: Chain,
        account: str,
    ) -> str:
        """Submit a transaction and return its hash as 0x hex."""
        raise NotImplementedError

    async def sign_typed_data(self, typed_data: Dict[str, Any], account: str) -> str:
        """Return an EIP-712 signature (0x hex, 65 bytes) over ``typed_data``."""
        raise NotImplementedError

