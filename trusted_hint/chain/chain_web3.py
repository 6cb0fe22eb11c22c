# trusted_hint/chain/chain_web3.py
from __future__ import annotations
from typing import Any, Dict, Optional, Sequence

from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address, to_hex
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import Web3Exception

from trusted_hint.abi import load_abi
from trusted_hint.chain.chain_base import BaseChainClient, Chain, ChainCallError
from trusted_hint.logger import get_logger

log = get_logger("TrustedHint.Chain.Web3")


def _normalize(value: Any) -> Any:
    # bytes32 / bytes results come back as bytes; the controller speaks 0x hex
    if isinstance(value, (bytes, bytearray)):
        return to_hex(bytes(value))
    if isinstance(value, (list, tuple)):
        return [_normalize(v) for v in value]
    return value


class Web3ChainClient(BaseChainClient):
    """
    Chain client over web3.py's AsyncWeb3.

    - Reads are ``eth_call`` against the bundled registry ABI.
    - Writes are built, signed locally with the client's private key and sent
      raw; optionally waits for the receipt and raises on revert.
    - Typed data is signed locally, nothing is sent to the node.

    A client without a private key is read-only (``account`` is None).
    """

    name = "web3"

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        private_key: Optional[str] = None,
        chain_id: Optional[int] = None,
        w3: Optional[AsyncWeb3] = None,
        wait_for_receipt: bool = False,
        abi: Optional[list] = None,
    ):
        if w3 is None and not rpc_url:
            raise ValueError("Web3ChainClient needs an rpc_url or an AsyncWeb3 instance")
        self.w3 = w3 or AsyncWeb3(AsyncHTTPProvider(rpc_url))
        self.wait_for_receipt = wait_for_receipt
        self.abi = abi or load_abi()
        self._account: Optional[LocalAccount] = Account.from_key(private_key) if private_key else None
        self.account = self._account.address if self._account else None
        self.chain = Chain(int(chain_id)) if chain_id is not None else None

    @classmethod
    async def connect(cls, rpc_url: str, private_key: Optional[str] = None, **kwargs) -> "Web3ChainClient":
        """Create a client and bind it to the chain id reported by the node."""
        client = cls(rpc_url, private_key=private_key, **kwargs)
        chain_id = await client.w3.eth.chain_id
        client.chain = Chain(int(chain_id))
        log.info(f"[WEB3] connected {rpc_url} chain={chain_id} account={client.account}")
        return client

    def _function(self, address: str, method: str, args: Sequence[Any]):
        contract = self.w3.eth.contract(address=to_checksum_address(address), abi=self.abi)
        return getattr(contract.functions, method)(*args)

    def _require_account(self, account: str) -> LocalAccount:
        if self._account is None:
            raise ChainCallError("account", "client has no private key")
        if self._account.address.lower() != account.lower():
            raise ChainCallError("account", f"client is bound to {self._account.address}, not {account}")
        return self._account

    async def read(self, address: str, method: str, args: Sequence[Any]) -> Any:
        try:
            result = await self._function(address, method, args).call()
        except (Web3Exception, ValueError) as e:
            raise ChainCallError(method, str(e)) from e
        return _normalize(result)

    async def write(self, address: str, method: str, args: Sequence[Any], *, chain: Chain, account: str) -> str:
        signer = self._require_account(account)
        try:
            nonce = await self.w3.eth.get_transaction_count(signer.address, "pending")
            tx = await self._function(address, method, args).build_transaction({
                "from": signer.address,
                "chainId": chain.id,
                "nonce": nonce,
            })
            signed = signer.sign_transaction(tx)
            tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
            log.info(f"[WEB3 TX] {method} hash={to_hex(tx_hash)}")

            if self.wait_for_receipt:
                receipt = await self.w3.eth.wait_for_transaction_receipt(tx_hash)
                if receipt["status"] != 1:
                    raise ChainCallError(method, f"transaction {to_hex(tx_hash)} reverted")
        except (Web3Exception, ValueError) as e:
            raise ChainCallError(method, str(e)) from e

        return to_hex(tx_hash)

    async def sign_typed_data(self, typed_data: Dict[str, Any], account: str) -> str:
        signer = self._require_account(account)
        signable = encode_typed_data(full_message=typed_data)
        return to_hex(signer.sign_message(signable).signature)
