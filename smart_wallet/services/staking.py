from __future__ import annotations

from typing import List

from ..providers.backend import BackendClient
from ..types.staking import (
    StakedTokenResponse,
    StakeRequestBody,
    StakeResponseBody,
    StakingOption,
    UnstakeRequestBody,
    UnstakeResponseBody,
)


class StakingModule:
    """Staking options and the calls that stake or unstake through them."""

    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def get_staking_options(self) -> List[StakingOption]:
        data = await self._client.get("/v0/staking/staking_options")
        return [StakingOption.model_validate(item) for item in data]

    async def stake(self, body: StakeRequestBody) -> StakeResponseBody:
        data = await self._client.post("/v0/staking/stake", body.to_json())
        return StakeResponseBody.model_validate(data)

    async def unstake(self, body: UnstakeRequestBody) -> UnstakeResponseBody:
        data = await self._client.post("/v0/staking/unstake", body.to_json())
        return UnstakeResponseBody.model_validate(data)

    async def get_staked_tokens(self, wallet_address: str) -> StakedTokenResponse:
        data = await self._client.get(f"/v0/staking/staked_tokens/{wallet_address}")
        return StakedTokenResponse.model_validate(data)
