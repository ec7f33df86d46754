"""
Owner authentication against the backend API.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from eth_utils import keccak
from pydantic import BaseModel, ConfigDict, Field

from .signer import Credential


class AuthDto(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    owner_address: str = Field(alias="ownerAddress")
    signature: str
    hash: str
    smart_wallet_address: Optional[str] = Field(default=None, alias="smartWalletAddress")

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class SmartWalletAuth:
    """Builds the signed proof of key ownership the backend exchanges for a JWT."""

    @staticmethod
    async def signer(credentials: Credential, smart_wallet_address: Optional[str] = None) -> AuthDto:
        owner_address = await credentials.get_address()
        digest = keccak(bytes.fromhex(owner_address[2:]))
        signature = await credentials.sign_message(digest)
        return AuthDto(
            owner_address=owner_address,
            signature=signature,
            hash="0x" + digest.hex(),
            smart_wallet_address=smart_wallet_address,
        )
