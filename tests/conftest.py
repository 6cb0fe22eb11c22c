# tests/conftest.py
from typing import Any, Dict, List, Optional

import pytest
from eth_account import Account
from eth_utils import to_checksum_address

from trusted_hint.chain.chain_base import BaseChainClient, Chain
from trusted_hint.utils import keccak_text

from registry_emulator import EmulatedChainClient, RegistryEmulator

CHAIN_ID = 11155111

ALICE_KEY = "0x" + "11" * 32
BOB_KEY = "0x" + "22" * 32
CARO_KEY = "0x" + "33" * 32

ALICE = Account.from_key(ALICE_KEY).address
BOB = Account.from_key(BOB_KEY).address
CARO = Account.from_key(CARO_KEY).address

REGISTRY_ADDRESS = to_checksum_address("0x" + "5e" * 20)

LIST = keccak_text("list")
KEY = keccak_text("key")
VALUE = keccak_text("value")
METADATA = "0x1234"

SIGNATURE = "0x" + "ab" * 65
TX_HASH = "0x" + "cd" * 32


class RecordingChainClient(BaseChainClient):
    """
    Scripted chain client. ``reads`` maps a method to a value (or a callable
    taking the args); every read, write and signature request is recorded.
    """

    name = "recording"

    def __init__(self, account: Optional[str] = None, chain_id: Optional[int] = CHAIN_ID,
                 reads: Optional[Dict[str, Any]] = None, write_error: Optional[Exception] = None):
        self.account = account
        self.chain = Chain(chain_id) if chain_id is not None else None
        self.reads = {"version": "1.0.0", "nonces": 7, "identityIsOwner": True, "identityIsDelegate": True}
        self.reads.update(reads or {})
        self.write_error = write_error
        self.calls: List[tuple] = []

    async def read(self, address, method, args):
        self.calls.append(("read", method, list(args)))
        value = self.reads[method]
        return value(args) if callable(value) else value

    async def write(self, address, method, args, *, chain, account):
        self.calls.append(("write", method, list(args), chain, account))
        if self.write_error is not None:
            raise self.write_error
        return TX_HASH

    async def sign_typed_data(self, typed_data, account):
        self.calls.append(("sign", typed_data["primaryType"], typed_data, account))
        return SIGNATURE

    def recorded(self, kind: str, method: Optional[str] = None) -> List[tuple]:
        return [c for c in self.calls if c[0] == kind and (method is None or c[1] == method)]


@pytest.fixture
def registry():
    return RegistryEmulator(chain_id=CHAIN_ID, address=REGISTRY_ADDRESS)


@pytest.fixture
def alice_wallet(registry):
    return EmulatedChainClient(registry, ALICE_KEY)


@pytest.fixture
def bob_wallet(registry):
    return EmulatedChainClient(registry, BOB_KEY)


@pytest.fixture
def caro_wallet(registry):
    return EmulatedChainClient(registry, CARO_KEY)


@pytest.fixture
def reader(registry):
    return EmulatedChainClient(registry)
