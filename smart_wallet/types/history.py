"""
Historical UserOperations and NFT holdings as served by the backend's indexer.
"""

import base64
import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .tokens import amount_from_json


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Erc20Transfer(_Model):
    from_address: str = Field(alias="from")
    to: str
    value: int = 0
    contract_address: str = Field(alias="contractAddress")
    name: str = ""
    symbol: str = ""
    decimals: int = 0

    @field_validator("value", mode="before")
    @classmethod
    def _parse_value(cls, value: Any) -> int:
        return amount_from_json(value)


class Erc721Transfer(_Model):
    from_address: str = Field(alias="from")
    to: str
    contract_address: str = Field(alias="contractAddress")
    token_id: str = Field(alias="tokenId")
    name: str = ""
    symbol: str = ""


class UserOpRecord(_Model):
    transaction_hash: Optional[str] = Field(default=None, alias="transactionHash")
    user_op_hash: str = Field(alias="userOpHash")
    sender: str
    entry_point: Optional[str] = Field(default=None, alias="entryPoint")
    paymaster: Optional[str] = None
    paymaster_and_data: Optional[str] = Field(default=None, alias="paymasterAndData")
    nonce: Optional[str] = None
    success: Optional[bool] = None
    revert_reason: Optional[str] = Field(default=None, alias="revertReason")
    block_time: Optional[str] = Field(default=None, alias="blockTime")
    block_number: Optional[str] = Field(default=None, alias="blockNumber")
    target: Optional[str] = None
    beneficiary: Optional[str] = None
    erc20_transfers: List[Erc20Transfer] = Field(default_factory=list, alias="erc20Transfers")
    erc721_transfers: List[Erc721Transfer] = Field(default_factory=list, alias="erc721Transfers")

    @field_validator("erc20_transfers", "erc721_transfers", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return value or []


class Collection(_Model):
    name: str = Field(default="", alias="collectionName")
    symbol: str = Field(default="", alias="collectionSymbol")
    address: str = Field(default="", alias="collectionAddress")


class Collectible(_Model):
    description: Optional[str] = None
    name: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageURL")
    descriptor_uri: str = Field(default="", alias="descriptorUri")
    created_at: Optional[str] = Field(default=None, alias="created")
    token_id: str = Field(alias="tokenId")
    collection: Optional[Collection] = None
    owner: Optional[Dict[str, Any]] = None
    creator: Optional[Dict[str, Any]] = None

    def decode_descriptor_uri(self) -> Optional[Dict[str, Any]]:
        if not self.descriptor_uri.startswith("data:application/json"):
            return None
        content = self.descriptor_uri.split(",")[-1]
        if not content:
            return None
        return json.loads(base64.b64decode(content).decode("utf-8"))

    @property
    def image(self) -> Optional[str]:
        if self.image_url:
            return self.image_url
        metadata = self.decode_descriptor_uri()
        if metadata and "image" in metadata:
            return metadata["image"]
        return None


class NftAccount(_Model):
    id: str
    address: str
    collectibles: List[Collectible] = Field(default_factory=list)
