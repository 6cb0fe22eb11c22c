# tests/test_chain_web3.py
# CMD Line Usage: pytest -v -s --log-cli-level=DEBUG tests/test_chain_web3.py
# No node is contacted: reads and writes go through an in-process JSON-RPC provider.
import pytest
from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector, to_hex
from web3 import AsyncWeb3
from web3.providers.async_base import AsyncBaseProvider
from eth_account import Account
from eth_account.messages import encode_typed_data

from trusted_hint.abi import function_names, load_abi
from trusted_hint.chain import ChainCallError, Web3ChainClient
from trusted_hint.models import EIP712Domain
from trusted_hint.schemas import OperationKind, build_typed_data, get_schema

from conftest import ALICE, ALICE_KEY, BOB, CHAIN_ID, KEY, LIST, METADATA, REGISTRY_ADDRESS, TX_HASH, VALUE

RPC_URL = "http://127.0.0.1:8545"


def typed_list_status():
    domain = EIP712Domain(version="1.0.0", chainId=CHAIN_ID, verifyingContract=REGISTRY_ADDRESS)
    message = {"namespace": ALICE, "list": LIST, "revoked": True, "signer": ALICE, "nonce": 0}
    return build_typed_data(get_schema(OperationKind.SET_LIST_STATUS), domain, message)


def test_requires_rpc_url_or_w3():
    with pytest.raises(ValueError):
        Web3ChainClient()


def test_binds_account_and_chain():
    client = Web3ChainClient(RPC_URL, private_key=ALICE_KEY, chain_id=str(CHAIN_ID))
    assert client.account == ALICE
    assert client.chain.id == CHAIN_ID


def test_without_key_is_read_only():
    client = Web3ChainClient(RPC_URL)
    assert client.account is None
    assert client.chain is None


@pytest.mark.asyncio
async def test_sign_typed_data_recovers_to_account():
    client = Web3ChainClient(RPC_URL, private_key=ALICE_KEY, chain_id=CHAIN_ID)
    typed = typed_list_status()

    signature = await client.sign_typed_data(typed, ALICE)

    assert len(bytes.fromhex(signature[2:])) == 65
    recovered = Account.recover_message(encode_typed_data(full_message=typed), signature=signature)
    assert recovered == ALICE


@pytest.mark.asyncio
async def test_refuses_to_sign_for_another_account():
    client = Web3ChainClient(RPC_URL, private_key=ALICE_KEY, chain_id=CHAIN_ID)
    with pytest.raises(ChainCallError, match="not " + BOB):
        await client.sign_typed_data(typed_list_status(), BOB)


@pytest.mark.asyncio
async def test_read_only_client_cannot_write():
    client = Web3ChainClient(RPC_URL, chain_id=CHAIN_ID)
    with pytest.raises(ChainCallError, match="no private key"):
        await client.write(REGISTRY_ADDRESS, "setListStatus", [ALICE, LIST, True],
                           chain=client.chain, account=ALICE)


def test_bundled_abi_covers_registry_surface():
    names = function_names()
    for name in ("getHint", "getMetadata", "identityIsOwner", "identityIsDelegate",
                 "revokedLists", "nonces", "version"):
        assert name in names
    for kind in OperationKind:
        assert kind.method in names
        assert kind.method + "Signed" in names
    assert load_abi() is load_abi()


# ---------------------------
# JSON-RPC backed reads and writes
# ---------------------------
BLOCK_HASH = "0x" + "bb" * 32
GWEI = "0x3b9aca00"


class RpcFailure(Exception):
    """Scripted JSON-RPC error payload for ScriptedProvider."""

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message


class ScriptedProvider(AsyncBaseProvider):
    """Answers JSON-RPC methods from a table and records every request."""

    def __init__(self, **responses):
        super().__init__()
        self.responses = {
            "eth_chainId": hex(CHAIN_ID),
            "eth_getTransactionCount": "0x3",
            "eth_estimateGas": "0x5208",
            "eth_gasPrice": GWEI,
            "eth_maxPriorityFeePerGas": GWEI,
            "eth_getBlockByNumber": {
                "number": "0x10",
                "hash": BLOCK_HASH,
                "parentHash": "0x" + "aa" * 32,
                "timestamp": "0x6553f100",
                "gasLimit": "0x1c9c380",
                "gasUsed": "0x0",
                "baseFeePerGas": GWEI,
                "transactions": [],
            },
            "eth_sendRawTransaction": TX_HASH,
            "eth_getTransactionReceipt": receipt(1),
        }
        self.responses.update(responses)
        self.requests = []

    async def make_request(self, method, params):
        self.requests.append((method, params))
        result = self.responses[method]
        if isinstance(result, RpcFailure):
            return {"jsonrpc": "2.0", "id": len(self.requests),
                    "error": {"code": result.code, "message": result.message}}
        return {"jsonrpc": "2.0", "id": len(self.requests), "result": result}

    def methods(self):
        return [m for m, _ in self.requests]

    def params(self, method):
        return next(p for m, p in self.requests if m == method)


def receipt(status: int) -> dict:
    return {
        "transactionHash": TX_HASH,
        "blockHash": BLOCK_HASH,
        "blockNumber": "0x10",
        "transactionIndex": "0x0",
        "status": hex(status),
        "gasUsed": "0x5208",
        "cumulativeGasUsed": "0x5208",
        "logs": [],
    }


def rpc_client(provider, private_key=ALICE_KEY, **kwargs):
    return Web3ChainClient(w3=AsyncWeb3(provider), private_key=private_key, chain_id=CHAIN_ID, **kwargs)


def selector(signature: str) -> str:
    return to_hex(function_signature_to_4byte_selector(signature))


@pytest.mark.asyncio
async def test_read_returns_bytes32_as_hex():
    provider = ScriptedProvider(eth_call=to_hex(encode(["bytes32"], [bytes.fromhex(VALUE[2:])])))
    client = rpc_client(provider, private_key=None)

    assert await client.read(REGISTRY_ADDRESS, "getHint", [ALICE, LIST, KEY]) == VALUE

    call = provider.params("eth_call")[0]
    assert call["to"].lower() == REGISTRY_ADDRESS.lower()
    assert call["data"].startswith(selector("getHint(address,bytes32,bytes32)"))


@pytest.mark.asyncio
async def test_read_returns_empty_bytes_as_0x():
    provider = ScriptedProvider(eth_call=to_hex(encode(["bytes"], [b""])))
    client = rpc_client(provider, private_key=None)

    assert await client.read(REGISTRY_ADDRESS, "getMetadata", [ALICE, LIST, KEY, VALUE]) == "0x"


@pytest.mark.asyncio
async def test_read_passes_plain_values_through():
    provider = ScriptedProvider(eth_call=to_hex(encode(["bool"], [True])))
    client = rpc_client(provider, private_key=None)

    assert await client.read(REGISTRY_ADDRESS, "identityIsOwner", [ALICE, LIST, ALICE]) is True


@pytest.mark.asyncio
async def test_rpc_error_becomes_chain_call_error():
    provider = ScriptedProvider(eth_call=RpcFailure(-32000, "header not found"))
    client = rpc_client(provider, private_key=None)

    with pytest.raises(ChainCallError, match="^getHint: ") as exc:
        await client.read(REGISTRY_ADDRESS, "getHint", [ALICE, LIST, KEY])
    assert exc.value.method == "getHint"
    assert "header not found" in str(exc.value)


@pytest.mark.asyncio
@pytest.mark.parametrize("args,signature", [
    ([ALICE, LIST, KEY, VALUE], "setHint(address,bytes32,bytes32,bytes32)"),
    ([ALICE, LIST, KEY, VALUE, METADATA], "setHint(address,bytes32,bytes32,bytes32,bytes)"),
])
async def test_write_picks_overload_by_argument_count(args, signature):
    provider = ScriptedProvider()
    client = rpc_client(provider)

    await client.write(REGISTRY_ADDRESS, "setHint", args, chain=client.chain, account=ALICE)

    data = provider.params("eth_estimateGas")[0]["data"]
    data = data if isinstance(data, str) else to_hex(data)
    assert data.startswith(selector(signature))


@pytest.mark.asyncio
async def test_write_signs_and_sends_raw_transaction():
    provider = ScriptedProvider()
    client = rpc_client(provider)

    tx_hash = await client.write(REGISTRY_ADDRESS, "setListStatus", [ALICE, LIST, True],
                                 chain=client.chain, account=ALICE)

    assert tx_hash == TX_HASH
    assert list(provider.params("eth_getTransactionCount")) == [ALICE, "pending"]
    assert provider.methods()[-1] == "eth_sendRawTransaction"
    assert "eth_getTransactionReceipt" not in provider.methods()

    raw = provider.params("eth_sendRawTransaction")[0]
    assert Account.recover_transaction(raw) == ALICE


@pytest.mark.asyncio
async def test_write_waits_for_successful_receipt():
    provider = ScriptedProvider()
    client = rpc_client(provider, wait_for_receipt=True)

    assert await client.write(REGISTRY_ADDRESS, "setListStatus", [ALICE, LIST, False],
                              chain=client.chain, account=ALICE) == TX_HASH
    assert provider.methods()[-1] == "eth_getTransactionReceipt"


@pytest.mark.asyncio
async def test_reverted_receipt_raises():
    provider = ScriptedProvider(eth_getTransactionReceipt=receipt(0))
    client = rpc_client(provider, wait_for_receipt=True)

    with pytest.raises(ChainCallError, match=f"setListOwner: transaction {TX_HASH} reverted"):
        await client.write(REGISTRY_ADDRESS, "setListOwner", [ALICE, LIST, BOB],
                           chain=client.chain, account=ALICE)


@pytest.mark.asyncio
async def test_send_error_becomes_chain_call_error():
    provider = ScriptedProvider(eth_sendRawTransaction=RpcFailure(-32000, "nonce too low"))
    client = rpc_client(provider)

    with pytest.raises(ChainCallError, match="nonce too low"):
        await client.write(REGISTRY_ADDRESS, "setListStatus", [ALICE, LIST, True],
                           chain=client.chain, account=ALICE)
