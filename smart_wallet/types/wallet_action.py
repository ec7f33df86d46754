"""
Wallet action history: the backend's per-wallet activity feed.

Each action is tagged by `name` and carries the token events it sent and
received. Pages follow the backend's paginate response (`docs`, `totalDocs`,
`hasNextPage`, ...).
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config import settings
from .tokens import UnknownTokenTypeError, _Token, amount_from_json


class UnknownWalletActionError(ValueError):
    """The backend returned a wallet action whose `name` tag is not modelled."""

    def __init__(self, name: Any):
        super().__init__(f"Unknown wallet action: {name!r}")
        self.name = name


class _TokenEvent(_Token):
    value: int = 0
    to: Optional[str] = None
    from_address: Optional[str] = Field(default=None, alias="from")

    @field_validator("value", mode="before")
    @classmethod
    def _parse_value(cls, value: Any) -> int:
        return amount_from_json(value)


class NativeTokenEvent(_TokenEvent):
    type: Literal["native"] = "native"
    address: str = Field(default_factory=lambda: settings.native_token_address.lower())
    decimals: int = 18

    @field_validator("address", mode="before")
    @classmethod
    def _default_address(cls, value: Any) -> str:
        return (value or settings.native_token_address).lower()

    @field_validator("decimals", mode="before")
    @classmethod
    def _default_decimals(cls, value: Any) -> int:
        return 18 if value in (None, "") else int(value)


class Erc20TokenEvent(_TokenEvent):
    type: Literal["ERC-20"] = "ERC-20"
    decimals: int = 0


class Erc721TokenEvent(_TokenEvent):
    type: Literal["ERC-721"] = "ERC-721"
    token_id: Optional[int] = Field(default=None, alias="tokenId")


TokenEvent = Union[NativeTokenEvent, Erc20TokenEvent, Erc721TokenEvent]

_TOKEN_EVENTS: Dict[str, Type[_TokenEvent]] = {
    "native": NativeTokenEvent,
    "ERC-20": Erc20TokenEvent,
    "ERC-721": Erc721TokenEvent,
}


def parse_token_event(data: Dict[str, Any]) -> TokenEvent:
    event_cls = _TOKEN_EVENTS.get(data.get("type"))
    if event_cls is None:
        raise UnknownTokenTypeError(data.get("type"))
    return event_cls.model_validate(data)


class WalletAction(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    id: str = Field(alias="_id")
    updated_at: datetime = Field(alias="updatedAt")
    tx_hash: Optional[str] = Field(default=None, alias="txHash")
    status: str
    block_number: Optional[int] = Field(default=None, alias="blockNumber")
    description: str = ""
    sent: List[TokenEvent] = Field(default_factory=list)
    received: List[TokenEvent] = Field(default_factory=list)

    @field_validator("sent", "received", mode="before")
    @classmethod
    def _parse_events(cls, value: Any) -> List[TokenEvent]:
        return [parse_token_event(item) for item in value or []]

    @property
    def timestamp(self) -> int:
        """Milliseconds since the epoch; naive backend times are UTC."""
        updated_at = self.updated_at
        if updated_at.tzinfo is None:
            updated_at = updated_at.replace(tzinfo=timezone.utc)
        return int(updated_at.timestamp() * 1000)

    def is_pending(self) -> bool:
        return self.status in ("pending", "started")

    def is_failed(self) -> bool:
        return self.status == "failed"

    def is_confirmed(self) -> bool:
        return self.status in ("confirmed", "success", "succeeded")


class BatchTransaction(WalletAction):
    name: Literal["batchTransaction"] = "batchTransaction"


class TokenTransfer(WalletAction):
    name: Literal["tokenTransfer"] = "tokenTransfer"


class TokenReceive(WalletAction):
    name: Literal["tokenReceive"] = "tokenReceive"


class NftReceive(WalletAction):
    name: Literal["nftReceive"] = "nftReceive"


class SwapTokens(WalletAction):
    name: Literal["swapTokens"] = "swapTokens"


class NftTransfer(WalletAction):
    name: Literal["nftTransfer"] = "nftTransfer"


class ApproveToken(WalletAction):
    name: Literal["approveToken"] = "approveToken"


class StakeTokensAction(WalletAction):
    name: Literal["stakeTokens"] = "stakeTokens"


class UnstakeTokensAction(WalletAction):
    name: Literal["unstakeTokens"] = "unstakeTokens"


_WALLET_ACTIONS: Dict[str, Type[WalletAction]] = {
    cls.model_fields["name"].default: cls
    for cls in (
        BatchTransaction,
        TokenTransfer,
        TokenReceive,
        NftReceive,
        SwapTokens,
        NftTransfer,
        ApproveToken,
        StakeTokensAction,
        UnstakeTokensAction,
    )
}


def parse_wallet_action(data: Dict[str, Any]) -> WalletAction:
    """Decode one action by its `name` tag. Unknown tags raise instead of guessing."""
    action_cls = _WALLET_ACTIONS.get(data.get("name"))
    if action_cls is None:
        raise UnknownWalletActionError(data.get("name"))
    return action_cls.model_validate(data)


class WalletActionResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    has_next_page: bool = Field(default=False, alias="hasNextPage")
    has_prev_page: bool = Field(default=False, alias="hasPrevPage")
    next_page: Optional[int] = Field(default=None, alias="nextPage")
    prev_page: Optional[int] = Field(default=None, alias="prevPage")
    page: Optional[int] = None
    total_docs: int = Field(default=0, alias="totalDocs")
    limit: int = 0
    total_pages: int = Field(default=0, alias="totalPages")
    paging_counter: int = Field(default=0, alias="pagingCounter")
    actions: List[WalletAction] = Field(default_factory=list, alias="docs")

    @field_validator("actions", mode="before")
    @classmethod
    def _parse_actions(cls, value: Any) -> List[WalletAction]:
        return [parse_wallet_action(item) for item in value or []]
