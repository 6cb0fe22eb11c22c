"""
trusted_hint.models
-------------------
Request-scoped value types. Nothing here outlives a single controller call.

- ListCoordinate / HintCoordinate: where a hint lives
- Principal: a configured client bound to a chain and an account
- ReadOnlyClients / WritableClients: the two exclusive controller shapes
- EIP712Domain / SignedRequest: what gets signed for a meta transaction
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .chain.chain_base import BaseChainClient
from .constants import META_TRANSACTION_WALLET_CLIENT, REGISTRY_NAME, WALLET_CLIENT
from .errors import ClientMisconfiguredError, ClientNotSetError
from .utils import to_address, to_bytes32


class Role(str, Enum):
    OWNER = "Owner"
    DELEGATE = "Delegate"


@dataclass(frozen=True)
class ListCoordinate:
    namespace: str
    list: str

    @classmethod
    def create(cls, namespace, list_id) -> "ListCoordinate":
        return cls(
            namespace=to_address(namespace, "namespace"),
            list=to_bytes32(list_id, "list"),
        )


@dataclass(frozen=True)
class HintCoordinate(ListCoordinate):
    key: str = ""

    @classmethod
    def create(cls, namespace, list_id, key) -> "HintCoordinate":
        return cls(
            namespace=to_address(namespace, "namespace"),
            list=to_bytes32(list_id, "list"),
            key=to_bytes32(key, "key"),
        )


@dataclass(frozen=True)
class Principal:
    """A client that is able to act: it has both a chain and an account."""
    label: str
    address: str
    chain_id: int
    client: BaseChainClient = field(compare=False, repr=False)

    @classmethod
    def from_client(cls, label: str, client: Optional[BaseChainClient]) -> "Principal":
        if client is None:
            raise ClientNotSetError(label)
        if client.chain is None or not client.account:
            raise ClientMisconfiguredError(f"{label} must have a chain and account set.")
        return cls(label=label, address=to_address(client.account, "account"),
                   chain_id=int(client.chain.id), client=client)


@dataclass(frozen=True)
class ReadOnlyClients:
    read_client: BaseChainClient

    @property
    def query_client(self) -> BaseChainClient:
        return self.read_client


@dataclass(frozen=True)
class WritableClients:
    wallet_client: BaseChainClient
    meta_transaction_wallet_client: Optional[BaseChainClient] = None

    @property
    def query_client(self) -> BaseChainClient:
        return self.wallet_client

    def relayer(self) -> Principal:
        return Principal.from_client(WALLET_CLIENT, self.wallet_client)

    def signer(self) -> Principal:
        return Principal.from_client(META_TRANSACTION_WALLET_CLIENT, self.meta_transaction_wallet_client)


ClientConfig = Union[ReadOnlyClients, WritableClients]


def resolve_client_config(
    wallet_client: Optional[BaseChainClient] = None,
    read_client: Optional[BaseChainClient] = None,
    meta_transaction_wallet_client: Optional[BaseChainClient] = None,
) -> ClientConfig:
    """Validate the constructor arguments into exactly one client shape."""
    if wallet_client is not None and read_client is not None:
        raise ClientMisconfiguredError("Provide either readClient or walletClient, not both")
    if wallet_client is not None:
        return WritableClients(wallet_client, meta_transaction_wallet_client)
    if read_client is not None:
        if meta_transaction_wallet_client is not None:
            raise ClientMisconfiguredError(
                f"{META_TRANSACTION_WALLET_CLIENT} requires a {WALLET_CLIENT} to relay its transactions"
            )
        return ReadOnlyClients(read_client)
    raise ClientMisconfiguredError("Either readClient or walletClient must be provided")


@dataclass(frozen=True)
class EIP712Domain:
    version: str
    chainId: int
    verifyingContract: str
    name: str = REGISTRY_NAME

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "chainId": self.chainId,
            "verifyingContract": self.verifyingContract,
        }


@dataclass
class SignedRequest:
    """Message values for one signed call, in schema order."""
    primary_type: str
    message: Dict[str, Any]
    signer: str
    nonce: int
    signature: Optional[str] = None

    def call_args(self, base_args: List[Any]) -> List[Any]:
        if self.signature is None:
            raise ValueError("request has not been signed")
        return list(base_args) + [self.signer, self.signature]
