"""
Token DTOs returned by the backend, modelled as a tagged union on `type`.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config import settings


class UnknownTokenTypeError(ValueError):
    """The backend returned a token whose `type` tag is not modelled."""

    def __init__(self, token_type: Any):
        super().__init__(f"Unknown token type: {token_type!r}")
        self.token_type = token_type


def name_from_json(token_name: Optional[str]) -> str:
    name = token_name or ""
    return name.replace(" on Fuse", "") if name.endswith("on Fuse") else name


def amount_from_json(value: Any) -> int:
    return int(value) if value not in (None, "") else 0


def decimals_from_json(value: Any) -> int:
    return int(value) if value not in (None, "") else 0


class _Token(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    symbol: str = ""
    name: str = ""
    address: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def _strip_network_suffix(cls, value: Any) -> str:
        return name_from_json(value)

    @field_validator("address", mode="before")
    @classmethod
    def _lower_address(cls, value: Any) -> str:
        return (value or "").lower()


class NativeToken(BaseModel):
    type: Literal["native"] = "native"
    symbol: str = Field(default_factory=lambda: settings.native_token_symbol)
    name: str = Field(default_factory=lambda: settings.native_token_name)
    address: str = Field(default_factory=lambda: settings.native_token_address)
    decimals: int = 18
    amount: int = 0


class LpUnderlyingToken(_Token):
    pass


class LiquidityPoolToken(_Token):
    type: Literal["lp"] = "lp"
    decimals: int = 0
    underlying_tokens: List[LpUnderlyingToken] = Field(default_factory=list, alias="underlyingTokens")


class BridgedToken(_Token):
    type: Literal["bridged"] = "bridged"
    logo_uri: Optional[str] = Field(default=None, alias="logoURI")
    decimals: int = 0


class MiscToken(_Token):
    type: Literal["misc"] = "misc"
    logo_uri: Optional[str] = Field(default=None, alias="logoURI")
    decimals: int = 0


class ERC20Token(_Token):
    type: Literal["ERC-20"] = "ERC-20"
    decimals: int = 0
    amount: int = 0


class ERC721Token(_Token):
    type: Literal["ERC-721"] = "ERC-721"
    decimals: int = 0
    amount: int = 0


Token = Union[NativeToken, ERC20Token, ERC721Token, LiquidityPoolToken, BridgedToken, MiscToken]


def _fungible_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        **data,
        "address": data.get("contractAddress") or data.get("address"),
        "decimals": decimals_from_json(data.get("decimals")),
        "amount": amount_from_json(data.get("balance")),
    }


def parse_token_details(data: Dict[str, Any]) -> Token:
    """Decode one backend token object. Unknown tags raise instead of guessing."""
    token_type = data.get("type")
    if token_type == "native":
        return NativeToken(amount=amount_from_json(data.get("amount", data.get("balance"))))
    if token_type == "ERC-20":
        return ERC20Token.model_validate(_fungible_fields(data))
    if token_type == "ERC-721":
        return ERC721Token.model_validate({**_fungible_fields(data), "decimals": 0})
    if token_type == "lp":
        return LiquidityPoolToken.model_validate(data)
    if token_type == "bridged":
        return BridgedToken.model_validate({**data, "decimals": decimals_from_json(data.get("decimals"))})
    if token_type == "misc":
        return MiscToken.model_validate({**data, "decimals": decimals_from_json(data.get("decimals"))})
    raise UnknownTokenTypeError(token_type)


class TokenDetails(BaseModel):
    """On-chain ERC-20 metadata read directly from the token contract."""

    symbol: str
    name: str
    decimals: int
    address: str
    amount: int = 0
