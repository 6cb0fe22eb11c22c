"""
trusted_hint.schemas
--------------------
EIP-712 typed-data schemas for every signed registry operation.

The registry recovers signers from a struct hash whose type string is fixed in
the contract, so each schema here must list the same fields in the same order
with the same Solidity types. The table is keyed by (operation kind, whether
metadata is supplied); a kind that takes optional metadata has two entries,
one with a trailing ``metadata`` field before ``signer`` and one without it.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Tuple

from eth_utils import keccak, to_hex

from .errors import InvalidOperationKindError
from .models import EIP712Domain


class OperationKind(str, Enum):
    SET_HINT = "SetHint"
    SET_HINTS = "SetHints"
    SET_HINT_DELEGATED = "SetHintDelegated"
    SET_HINTS_DELEGATED = "SetHintsDelegated"
    ADD_LIST_DELEGATE = "AddListDelegate"
    REMOVE_LIST_DELEGATE = "RemoveListDelegate"
    SET_LIST_STATUS = "SetListStatus"
    SET_LIST_OWNER = "SetListOwner"
    SET_METADATA = "SetMetadata"
    SET_METADATA_DELEGATED = "SetMetadataDelegated"

    @property
    def primary_type(self) -> str:
        return f"{self.value}Signed"

    @property
    def method(self) -> str:
        # contract function name of the direct call, e.g. setHint
        return self.value[0].lower() + self.value[1:]


@dataclass(frozen=True)
class TypedField:
    name: str
    type: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "type": self.type}


@dataclass(frozen=True)
class TypedSchema:
    primary_type: str
    fields: Tuple[TypedField, ...]

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    @property
    def call_fields(self) -> List[str]:
        """Fields passed positionally to the contract, ahead of signer/signature."""
        return [f.name for f in self.fields if f.name not in SIGNATURE_FIELDS]

    def encode_type(self) -> str:
        members = ",".join(f"{f.type} {f.name}" for f in self.fields)
        return f"{self.primary_type}({members})"

    def type_hash(self) -> str:
        return to_hex(keccak(text=self.encode_type()))

    def types(self) -> Dict[str, List[Dict[str, str]]]:
        return {self.primary_type: [f.to_dict() for f in self.fields]}

    def order_message(self, values: Dict[str, Any]) -> Dict[str, Any]:
        missing = [n for n in self.field_names if n not in values]
        if missing:
            raise KeyError(f"{self.primary_type} message is missing {missing}")
        return {n: values[n] for n in self.field_names}


EIP712_DOMAIN_FIELDS = (
    TypedField("name", "string"),
    TypedField("version", "string"),
    TypedField("chainId", "uint256"),
    TypedField("verifyingContract", "address"),
)

SIGNATURE_FIELDS = ("signer", "nonce")


def _f(*pairs: str) -> Tuple[TypedField, ...]:
    return tuple(TypedField(*p.split(":")) for p in pairs)


_LIST = _f("namespace:address", "list:bytes32")
_HINT = _LIST + _f("key:bytes32", "value:bytes32")
_HINTS = _LIST + _f("keys:bytes32[]", "values:bytes32[]")
_SIGNER = _f("signer:address", "nonce:uint256")
_METADATA = _f("metadata:bytes")
_METADATA_ARRAY = _f("metadata:bytes[]")


def _schema(kind: OperationKind, *fields: TypedField) -> TypedSchema:
    return TypedSchema(kind.primary_type, tuple(fields) + _SIGNER)


K = OperationKind

SCHEMAS: Dict[Tuple[OperationKind, bool], TypedSchema] = {
    (K.SET_HINT, False): _schema(K.SET_HINT, *_HINT),
    (K.SET_HINT, True): _schema(K.SET_HINT, *_HINT, *_METADATA),
    (K.SET_HINTS, False): _schema(K.SET_HINTS, *_HINTS),
    (K.SET_HINTS, True): _schema(K.SET_HINTS, *_HINTS, *_METADATA_ARRAY),
    (K.SET_HINT_DELEGATED, False): _schema(K.SET_HINT_DELEGATED, *_HINT),
    (K.SET_HINT_DELEGATED, True): _schema(K.SET_HINT_DELEGATED, *_HINT, *_METADATA),
    (K.SET_HINTS_DELEGATED, False): _schema(K.SET_HINTS_DELEGATED, *_HINTS),
    (K.SET_HINTS_DELEGATED, True): _schema(K.SET_HINTS_DELEGATED, *_HINTS, *_METADATA_ARRAY),
    (K.ADD_LIST_DELEGATE, False): _schema(
        K.ADD_LIST_DELEGATE, *_LIST, *_f("delegate:address", "untilTimestamp:uint256")
    ),
    (K.REMOVE_LIST_DELEGATE, False): _schema(K.REMOVE_LIST_DELEGATE, *_LIST, *_f("delegate:address")),
    (K.SET_LIST_STATUS, False): _schema(K.SET_LIST_STATUS, *_LIST, *_f("revoked:bool")),
    (K.SET_LIST_OWNER, False): _schema(K.SET_LIST_OWNER, *_LIST, *_f("newOwner:address")),
    (K.SET_METADATA, True): _schema(K.SET_METADATA, *_HINT, *_METADATA),
    (K.SET_METADATA_DELEGATED, True): _schema(K.SET_METADATA_DELEGATED, *_HINT, *_METADATA),
}

del K


def get_schema(kind: OperationKind, has_metadata: bool = False) -> TypedSchema:
    if not isinstance(kind, OperationKind):
        try:
            kind = OperationKind(kind)
        except ValueError:
            raise InvalidOperationKindError(kind)
    schema = SCHEMAS.get((kind, bool(has_metadata)))
    if schema is None:
        raise InvalidOperationKindError(kind.value, bool(has_metadata))
    return schema


def build_typed_data(schema: TypedSchema, domain: EIP712Domain, message: Dict[str, Any]) -> Dict[str, Any]:
    """Full EIP-712 document as consumed by ``eth_account.messages.encode_typed_data``."""
    types = {"EIP712Domain": [f.to_dict() for f in EIP712_DOMAIN_FIELDS]}
    types.update(schema.types())
    return {
        "types": types,
        "primaryType": schema.primary_type,
        "domain": domain.to_dict(),
        "message": schema.order_message(message),
    }
