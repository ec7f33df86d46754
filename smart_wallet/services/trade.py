"""Token swap quotes and price data."""

from __future__ import annotations

from typing import List

from ..providers.backend import BackendClient
from ..types.tokens import Token, parse_token_details
from ..types.trade import IntervalStats, TimeFrame, TradeData, TradeRequest


class TradeModule:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def quote(self, trade_request: TradeRequest) -> TradeData:
        """Fetch a swap quote, including the call the wallet must execute."""
        data = await self._client.get("/v1/trade/quote", **trade_request.get_params())
        return TradeData.model_validate(data)

    async def price(self, token_address: str) -> str:
        data = await self._client.get(f"/v0/trade/price/{token_address}")
        return (data.get("data") or {}).get("price") or "0"

    async def price_change(self, token_address: str) -> str:
        data = await self._client.get(f"/v0/trade/pricechange/{token_address}")
        return (data.get("data") or {}).get("priceChange") or "0"

    async def interval(self, token_address: str, time_frame: TimeFrame) -> List[IntervalStats]:
        frame = TimeFrame(time_frame.upper() if isinstance(time_frame, str) else time_frame)
        data = await self._client.get(f"/v0/trade/pricechange/interval/{frame.value}/{token_address}")
        return [IntervalStats.model_validate(item) for item in data.get("data") or []]

    async def fetch_tokens(self) -> List[Token]:
        data = await self._client.get("/v0/trade/tokens")
        tokens = (data.get("data") or {}).get("tokens") or []
        return [parse_token_details(item) for item in tokens]
