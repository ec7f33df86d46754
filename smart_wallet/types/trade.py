from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from ..config import settings


class TimeFrame(str, Enum):
    HOUR = "HOUR"
    DAY = "DAY"
    WEEK = "WEEK"
    MONTH = "MONTH"
    YEAR = "YEAR"
    MAX = "MAX"


class TradeRequest(BaseModel):
    """A swap of `input_amount` raw units; exact_in picks which side is fixed."""

    input_token: str
    output_token: str
    input_amount: int = Field(ge=0)
    exact_in: bool = True

    def _token_param(self, token_address: str) -> str:
        if token_address.lower() == settings.native_token_address.lower():
            return settings.native_token_symbol
        return token_address

    def get_params(self) -> Dict[str, Any]:
        params = {
            "sellToken": self._token_param(self.input_token),
            "buyToken": self._token_param(self.output_token),
        }
        if self.exact_in:
            params["sellAmount"] = str(self.input_amount)
        else:
            params["buyAmount"] = str(self.input_amount)
        return params


class TradeData(BaseModel):
    """Quote from the trade API, including the call that executes it."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    chain_id: int = Field(default=0, alias="chainId")
    estimated_price_impact: str = Field(default="0", alias="estimatedPriceImpact")
    to: str
    data: str
    value: str = "0"
    buy_token_address: str = Field(alias="buyTokenAddress")
    sell_token_address: str = Field(alias="sellTokenAddress")
    buy_amount: str = Field(alias="buyAmount")
    sell_amount: str = Field(alias="sellAmount")
    allowance_target: str = Field(alias="allowanceTarget")


class IntervalStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    timestamp: int = 0
    price_change: float = Field(default=0.0, alias="priceChange")
    previous_price: float = Field(default=0.0, alias="previousPrice")
    current_price: float = Field(default=0.0, alias="currentPrice")
