"""
trusted_hint.utils
------------------
Normalization helpers for the values that cross the registry boundary:
checksum addresses, fixed 32-byte words, arbitrary hex byte strings and
uint256 timestamps. Everything is normalized once, before signing, so the
signed message and the submitted call arguments are identical.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Iterable, List, Union

from eth_utils import is_address, to_checksum_address, to_hex, keccak
from web3 import Web3

from .constants import UINT256_MAX
from .errors import InvalidArgumentError

HexLike = Union[str, bytes, bytearray]


def to_address(value: Any, field: str = "address") -> str:
    if isinstance(value, (bytes, bytearray)) and len(value) == 20:
        value = to_hex(bytes(value))
    if not isinstance(value, str) or not is_address(value):
        raise InvalidArgumentError(f"{field} must be a 20-byte hex address, got {value!r}")
    return to_checksum_address(value)


def to_hex_bytes(value: HexLike, field: str = "value") -> str:
    if isinstance(value, (bytes, bytearray)):
        return to_hex(bytes(value))
    if not isinstance(value, str) or not value.startswith("0x"):
        raise InvalidArgumentError(f"{field} must be 0x-prefixed hex, got {value!r}")
    body = value[2:]
    if len(body) % 2:
        raise InvalidArgumentError(f"{field} must have an even number of hex digits")
    try:
        bytes.fromhex(body)
    except ValueError:
        raise InvalidArgumentError(f"{field} is not valid hex: {value!r}")
    return "0x" + body.lower()


def to_bytes32(value: HexLike, field: str = "value") -> str:
    normalized = to_hex_bytes(value, field)
    if len(normalized) != 66:
        raise InvalidArgumentError(f"{field} must be exactly 32 bytes, got {(len(normalized) - 2) // 2}")
    return normalized


def to_bytes32_list(values: Iterable[HexLike], field: str = "values") -> List[str]:
    return [to_bytes32(v, f"{field}[{i}]") for i, v in enumerate(values)]


def to_hex_bytes_list(values: Iterable[HexLike], field: str = "metadata") -> List[str]:
    return [to_hex_bytes(v, f"{field}[{i}]") for i, v in enumerate(values)]


def to_uint256(value: Any, field: str = "value") -> int:
    """Accept an int, a decimal/0x string or a datetime (epoch seconds)."""
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{field} must be an integer, got bool")
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = int(value.timestamp())
    elif isinstance(value, str):
        try:
            value = int(value, 16) if value.lower().startswith("0x") else int(value)
        except ValueError:
            raise InvalidArgumentError(f"{field} is not an integer: {value!r}")
    if not isinstance(value, int):
        raise InvalidArgumentError(f"{field} must be an integer, got {type(value).__name__}")
    if value < 0 or value > UINT256_MAX:
        raise InvalidArgumentError(f"{field} is out of uint256 range")
    return value


def keccak_text(text: str) -> str:
    # keccak256(utf8(text)) as 0x hex, e.g. list/key identifiers
    return to_hex(keccak(text=text))


def list_hash(namespace: str, list_id: str) -> str:
    # keccak256(abi.encodePacked(namespace, list)), the revokedLists key
    return to_hex(Web3.solidity_keccak(["address", "bytes32"], [namespace, list_id]))
