"""
trusted_hint.controller
-----------------------
TrustedHintController: the client-side entry point to an ERC-7506 trusted
hint registry.

Every write runs the same linear pipeline:

    validate clients -> authorize -> [domain, nonce, schema, signature] -> submit

Direct calls are authorized against the wallet client (the relayer). Signed
calls are authorized against the meta-transaction wallet client (the signer),
whose EIP-712 signature is appended to the call; the relayer only pays gas.
Nothing is cached between calls: registry version, chain id, nonce and role
checks are all read fresh for each operation.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

from .authorization import AuthorizationGate
from .chain.chain_base import BaseChainClient
from .constants import DEPLOYMENT_TYPE_PROXY, READ_CLIENT, WALLET_CLIENT
from .contract import RegistryContract
from .deployments import DeploymentLookup, get_deployment
from .errors import (
    ClientMisconfiguredError,
    ClientNotSetError,
    DelegateManagementError,
    HintSetError,
    HintsSetError,
    ListOwnerError,
    ListStatusError,
    MetadataOperationError,
    OperationFailedError,
)
from .logger import get_logger
from .models import (
    EIP712Domain,
    HintCoordinate,
    ListCoordinate,
    Principal,
    ReadOnlyClients,
    Role,
    SignedRequest,
    WritableClients,
    resolve_client_config,
)
from .schemas import OperationKind, TypedSchema, build_typed_data, get_schema
from .utils import (
    HexLike,
    list_hash,
    to_address,
    to_bytes32,
    to_bytes32_list,
    to_hex_bytes,
    to_hex_bytes_list,
    to_uint256,
)

log = get_logger("TrustedHint.Controller")


@dataclass(frozen=True)
class Operation:
    """A family of registry writes sharing a schema kind, a role and an error."""
    kind: OperationKind
    role: Role
    error: Type[OperationFailedError]
    action: str

    def method(self, signed: bool) -> str:
        return self.kind.method + ("Signed" if signed else "")

    def describe(self, signed: bool) -> str:
        return self.action + (" signed" if signed else "")


K = OperationKind

SET_HINT = Operation(K.SET_HINT, Role.OWNER, HintSetError, "set hint")
SET_HINTS = Operation(K.SET_HINTS, Role.OWNER, HintsSetError, "set hints")
SET_HINT_DELEGATED = Operation(K.SET_HINT_DELEGATED, Role.DELEGATE, HintSetError, "set hint delegated")
SET_HINTS_DELEGATED = Operation(K.SET_HINTS_DELEGATED, Role.DELEGATE, HintsSetError, "set hints delegated")
ADD_LIST_DELEGATE = Operation(K.ADD_LIST_DELEGATE, Role.OWNER, DelegateManagementError, "add list delegate")
REMOVE_LIST_DELEGATE = Operation(K.REMOVE_LIST_DELEGATE, Role.OWNER, DelegateManagementError, "remove list delegate")
SET_LIST_STATUS = Operation(K.SET_LIST_STATUS, Role.OWNER, ListStatusError, "set list status")
SET_LIST_OWNER = Operation(K.SET_LIST_OWNER, Role.OWNER, ListOwnerError, "set list owner")
SET_METADATA = Operation(K.SET_METADATA, Role.OWNER, MetadataOperationError, "set metadata")
SET_METADATA_DELEGATED = Operation(K.SET_METADATA_DELEGATED, Role.DELEGATE, MetadataOperationError, "set metadata delegated")

del K


class TrustedHintController:
    """
    Exactly one of ``wallet_client`` (read + write) or ``read_client`` (read
    only) must be given. ``meta_transaction_wallet_client`` is the signer for
    the ``*_signed`` operations and requires a wallet client to relay them.
    Without ``registry_address`` the registry is resolved through
    ``deployment_lookup(chain_id, "proxy")``.
    """

    def __init__(
        self,
        wallet_client: Optional[BaseChainClient] = None,
        read_client: Optional[BaseChainClient] = None,
        meta_transaction_wallet_client: Optional[BaseChainClient] = None,
        registry_address: Optional[str] = None,
        deployment_lookup: Optional[DeploymentLookup] = None,
    ):
        self.config = resolve_client_config(wallet_client, read_client, meta_transaction_wallet_client)
        query_client = self.config.query_client

        if registry_address is None:
            if query_client.chain is None:
                raise ClientMisconfiguredError(f"No chainId found in provided {READ_CLIENT}")
            lookup = deployment_lookup or get_deployment
            registry_address = lookup(query_client.chain.id, DEPLOYMENT_TYPE_PROXY).registry

        self.contract = RegistryContract(registry_address, query_client)
        self.gate = AuthorizationGate(self.contract)
        log.debug(f"[INIT] registry={self.contract.address} mode={type(self.config).__name__}")

    @property
    def wallet_client(self) -> Optional[BaseChainClient]:
        return self.config.wallet_client if isinstance(self.config, WritableClients) else None

    @property
    def read_client(self) -> Optional[BaseChainClient]:
        return self.config.read_client if isinstance(self.config, ReadOnlyClients) else None

    @property
    def meta_transaction_wallet_client(self) -> Optional[BaseChainClient]:
        if isinstance(self.config, WritableClients):
            return self.config.meta_transaction_wallet_client
        return None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    async def get_hint(self, namespace: str, list_id: HexLike, key: HexLike) -> str:
        """Return the value stored at (namespace, list, key); zero bytes32 if unset."""
        c = HintCoordinate.create(namespace, list_id, key)
        return await self.contract.read("getHint", [c.namespace, c.list, c.key])

    async def get_metadata(self, namespace: str, list_id: HexLike, key: HexLike, value: HexLike) -> str:
        """Metadata is keyed by the value it annotates, not only by the hint slot."""
        c = HintCoordinate.create(namespace, list_id, key)
        return await self.contract.read("getMetadata", [c.namespace, c.list, c.key, to_bytes32(value)])

    async def is_list_owner(self, namespace: str, list_id: HexLike, identity: str) -> bool:
        c = ListCoordinate.create(namespace, list_id)
        return await self.gate.has_role(c, to_address(identity, "identity"), Role.OWNER)

    async def is_list_delegate(self, namespace: str, list_id: HexLike, identity: str) -> bool:
        c = ListCoordinate.create(namespace, list_id)
        return await self.gate.has_role(c, to_address(identity, "identity"), Role.DELEGATE)

    async def is_list_revoked(self, namespace: str, list_id: HexLike) -> bool:
        c = ListCoordinate.create(namespace, list_id)
        return bool(await self.contract.read("revokedLists", [list_hash(c.namespace, c.list)]))

    # ------------------------------------------------------------------
    # Hints
    # ------------------------------------------------------------------
    async def set_hint(self, namespace, list_id, key, value, metadata: Optional[HexLike] = None) -> str:
        """
        Set a hint value as the list owner, optionally with metadata.
        Returns the transaction hash.
        """
        return await self._hint(SET_HINT, False, namespace, list_id, key, value, metadata)

    async def set_hint_signed(self, namespace, list_id, key, value, metadata: Optional[HexLike] = None) -> str:
        """
        Set a hint via meta transaction: the meta-transaction wallet client
        (which must own the list) signs, the wallet client submits and pays.
        """
        return await self._hint(SET_HINT, True, namespace, list_id, key, value, metadata)

    async def set_hint_delegated(self, namespace, list_id, key, value, metadata: Optional[HexLike] = None) -> str:
        return await self._hint(SET_HINT_DELEGATED, False, namespace, list_id, key, value, metadata)

    async def set_hint_delegated_signed(self, namespace, list_id, key, value, metadata: Optional[HexLike] = None) -> str:
        return await self._hint(SET_HINT_DELEGATED, True, namespace, list_id, key, value, metadata)

    async def set_hints(self, namespace, list_id, keys, values, metadata: Optional[Sequence[HexLike]] = None) -> str:
        """
        Batch variant of set_hint. ``keys``, ``values`` and ``metadata`` are
        passed through in order; mismatched lengths are rejected by the
        registry, not here.
        """
        return await self._hints(SET_HINTS, False, namespace, list_id, keys, values, metadata)

    async def set_hints_signed(self, namespace, list_id, keys, values, metadata: Optional[Sequence[HexLike]] = None) -> str:
        return await self._hints(SET_HINTS, True, namespace, list_id, keys, values, metadata)

    async def set_hints_delegated(self, namespace, list_id, keys, values, metadata: Optional[Sequence[HexLike]] = None) -> str:
        return await self._hints(SET_HINTS_DELEGATED, False, namespace, list_id, keys, values, metadata)

    async def set_hints_delegated_signed(self, namespace, list_id, keys, values, metadata: Optional[Sequence[HexLike]] = None) -> str:
        return await self._hints(SET_HINTS_DELEGATED, True, namespace, list_id, keys, values, metadata)

    # ------------------------------------------------------------------
    # Delegates
    # ------------------------------------------------------------------
    async def add_list_delegate(self, namespace, list_id, delegate, until_timestamp) -> str:
        """Grant ``delegate`` rights on the list until ``until_timestamp`` (unix seconds)."""
        return await self._add_delegate(False, namespace, list_id, delegate, until_timestamp)

    async def add_list_delegate_signed(self, namespace, list_id, delegate, until_timestamp) -> str:
        return await self._add_delegate(True, namespace, list_id, delegate, until_timestamp)

    async def remove_list_delegate(self, namespace, list_id, delegate) -> str:
        return await self._remove_delegate(False, namespace, list_id, delegate)

    async def remove_list_delegate_signed(self, namespace, list_id, delegate) -> str:
        return await self._remove_delegate(True, namespace, list_id, delegate)

    # ------------------------------------------------------------------
    # List management
    # ------------------------------------------------------------------
    async def set_list_status(self, namespace, list_id, revoked: bool) -> str:
        """Revoke (True) or reinstate (False) a whole list."""
        return await self._list_status(False, namespace, list_id, revoked)

    async def set_list_status_signed(self, namespace, list_id, revoked: bool) -> str:
        return await self._list_status(True, namespace, list_id, revoked)

    async def set_list_owner(self, namespace, list_id, new_owner) -> str:
        return await self._list_owner(False, namespace, list_id, new_owner)

    async def set_list_owner_signed(self, namespace, list_id, new_owner) -> str:
        return await self._list_owner(True, namespace, list_id, new_owner)

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------
    async def set_metadata(self, namespace, list_id, key, value, metadata: HexLike) -> str:
        return await self._metadata(SET_METADATA, False, namespace, list_id, key, value, metadata)

    async def set_metadata_signed(self, namespace, list_id, key, value, metadata: HexLike) -> str:
        return await self._metadata(SET_METADATA, True, namespace, list_id, key, value, metadata)

    async def set_metadata_delegated(self, namespace, list_id, key, value, metadata: HexLike) -> str:
        return await self._metadata(SET_METADATA_DELEGATED, False, namespace, list_id, key, value, metadata)

    async def set_metadata_delegated_signed(self, namespace, list_id, key, value, metadata: HexLike) -> str:
        return await self._metadata(SET_METADATA_DELEGATED, True, namespace, list_id, key, value, metadata)

    # ------------------------------------------------------------------
    # Field builders
    # ------------------------------------------------------------------
    async def _hint(self, op, signed, namespace, list_id, key, value, metadata):
        c = HintCoordinate.create(namespace, list_id, key)
        fields = {"namespace": c.namespace, "list": c.list, "key": c.key, "value": to_bytes32(value)}
        if metadata is not None:
            fields["metadata"] = to_hex_bytes(metadata, "metadata")
        return await self._execute(op, signed, c, fields)

    async def _hints(self, op, signed, namespace, list_id, keys, values, metadata):
        c = ListCoordinate.create(namespace, list_id)
        fields = {
            "namespace": c.namespace,
            "list": c.list,
            "keys": to_bytes32_list(keys, "keys"),
            "values": to_bytes32_list(values, "values"),
        }
        if metadata is not None:
            fields["metadata"] = to_hex_bytes_list(metadata, "metadata")
        return await self._execute(op, signed, c, fields)

    async def _metadata(self, op, signed, namespace, list_id, key, value, metadata):
        c = HintCoordinate.create(namespace, list_id, key)
        fields = {
            "namespace": c.namespace,
            "list": c.list,
            "key": c.key,
            "value": to_bytes32(value),
            "metadata": to_hex_bytes(metadata, "metadata"),
        }
        return await self._execute(op, signed, c, fields)

    async def _add_delegate(self, signed, namespace, list_id, delegate, until_timestamp):
        c = ListCoordinate.create(namespace, list_id)
        fields = {
            "namespace": c.namespace,
            "list": c.list,
            "delegate": to_address(delegate, "delegate"),
            "untilTimestamp": to_uint256(until_timestamp, "untilTimestamp"),
        }
        return await self._execute(ADD_LIST_DELEGATE, signed, c, fields)

    async def _remove_delegate(self, signed, namespace, list_id, delegate):
        c = ListCoordinate.create(namespace, list_id)
        fields = {"namespace": c.namespace, "list": c.list, "delegate": to_address(delegate, "delegate")}
        return await self._execute(REMOVE_LIST_DELEGATE, signed, c, fields)

    async def _list_status(self, signed, namespace, list_id, revoked):
        c = ListCoordinate.create(namespace, list_id)
        fields = {"namespace": c.namespace, "list": c.list, "revoked": bool(revoked)}
        return await self._execute(SET_LIST_STATUS, signed, c, fields)

    async def _list_owner(self, signed, namespace, list_id, new_owner):
        c = ListCoordinate.create(namespace, list_id)
        fields = {"namespace": c.namespace, "list": c.list, "newOwner": to_address(new_owner, "newOwner")}
        return await self._execute(SET_LIST_OWNER, signed, c, fields)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def _principals(self, signed: bool) -> Tuple[Principal, Principal]:
        """Return (relayer, actor); the actor is the one whose role is checked."""
        if not isinstance(self.config, WritableClients):
            raise ClientNotSetError(WALLET_CLIENT)
        relayer = self.config.relayer()
        if not signed:
            return relayer, relayer

        signer = self.config.signer()
        if signer.chain_id != relayer.chain_id:
            raise ClientMisconfiguredError(
                "Provided WalletClient and MetaTransactionWalletClient must be on the same chain."
            )
        return relayer, signer

    async def _execute(self, op: Operation, signed: bool, coordinate: ListCoordinate, fields: Dict[str, Any]) -> str:
        relayer, actor = self._principals(signed)
        schema = get_schema(op.kind, "metadata" in fields)
        args = [fields[name] for name in schema.call_fields]
        action = op.describe(signed)

        try:
            await self.gate.authorize(coordinate, actor, op.role)
            if signed:
                args = await self._sign(schema, fields, args, relayer, actor)
            tx_hash = await self.contract.write(op.method(signed), args, relayer)
        except Exception as e:
            log.error(f"[{op.method(signed)}] Failed to {action}: {e}")
            raise op.error(action, e) from e

        log.info(f"[{op.method(signed)}] submitted tx={tx_hash}")
        return tx_hash

    async def _domain(self, relayer: Principal) -> EIP712Domain:
        version = await self.contract.read("version")
        return EIP712Domain(version=str(version), chainId=relayer.chain_id,
                            verifyingContract=self.contract.address)

    async def _sign(
        self,
        schema: TypedSchema,
        fields: Dict[str, Any],
        args: List[Any],
        relayer: Principal,
        signer: Principal,
    ) -> List[Any]:
        domain = await self._domain(relayer)
        # read last so the nonce is as fresh as possible when signed
        nonce = int(await self.contract.read("nonces", [signer.address]))

        request = SignedRequest(
            primary_type=schema.primary_type,
            message=schema.order_message(dict(fields, signer=signer.address, nonce=nonce)),
            signer=signer.address,
            nonce=nonce,
        )
        typed_data = build_typed_data(schema, domain, request.message)
        log.debug(f"[SIGN] {schema.primary_type} signer={signer.address} nonce={nonce} version={domain.version}")
        request.signature = await signer.client.sign_typed_data(typed_data, signer.address)
        return request.call_args(args)
