"""
Owner credentials.

The pipeline and auth flow only depend on the `Credential` protocol: an
address and EIP-191 message signing. Two variants ship here: a local private
key and an external account reached over JSON-RPC.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_utils import to_checksum_address

from smart_wallet.core.recovery.errors import RpcError, SigningError
from smart_wallet.providers.base import JsonRpcProvider


@runtime_checkable
class Credential(Protocol):
    async def get_address(self) -> str:
        ...

    async def sign_message(self, message: bytes) -> str:
        """Sign raw bytes with the EIP-191 personal-message prefix; returns 0x hex."""
        ...


class LocalAccountSigner:
    """Credential backed by a private key held in process."""

    def __init__(self, private_key: str) -> None:
        try:
            self._account = Account.from_key(private_key)
        except (ValueError, TypeError) as exc:
            raise SigningError("Invalid private key") from exc

    @classmethod
    def create(cls) -> "LocalAccountSigner":
        return cls(Account.create().key.hex())

    async def get_address(self) -> str:
        return self._account.address

    async def sign_message(self, message: bytes) -> str:
        try:
            signed = self._account.sign_message(encode_defunct(primitive=message))
        except (ValueError, TypeError) as exc:
            raise SigningError(str(exc), signer=self._account.address) from exc
        signature = signed.signature.hex()
        return signature if signature.startswith("0x") else f"0x{signature}"


class RemoteSignerError(RpcError):
    provider = "remote_signer"


class RemoteSigner(JsonRpcProvider):
    """
    Credential backed by an external wallet that exposes `eth_accounts` and
    `personal_sign` over JSON-RPC (a node-managed account or a signer bridge).
    """

    name = "remote_signer"
    error_cls = RemoteSignerError

    def __init__(self, rpc_url: str, address: Optional[str] = None, timeout_s: int = 60) -> None:
        super().__init__(rpc_url, timeout_s=timeout_s)
        self._address = to_checksum_address(address) if address else None

    async def get_address(self) -> str:
        if self._address is None:
            accounts = await self._rpc_call("eth_accounts", [])
            if not accounts:
                raise SigningError("Remote signer exposes no accounts", signer=self.rpc_url)
            self._address = to_checksum_address(accounts[0])
        return self._address

    async def sign_message(self, message: bytes) -> str:
        address = await self.get_address()
        try:
            signature = await self._rpc_call("personal_sign", ["0x" + message.hex(), address])
        except RemoteSignerError as exc:
            raise SigningError(str(exc), signer=address) from exc
        if not isinstance(signature, str) or not signature.startswith("0x"):
            raise SigningError("Remote signer returned an invalid signature", signer=address)
        return signature
