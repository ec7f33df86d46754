from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class StakingOption(_CamelModel):
    token_address: str = Field(alias="tokenAddress")
    token_symbol: str = Field(alias="tokenSymbol")
    token_name: str = Field(alias="tokenName")
    token_logo_uri: str = Field(default="", alias="tokenLogoURI")
    expired: bool = False
    unstake_token_address: str = Field(alias="unStakeTokenAddress")
    staking_apr: float = Field(default=0.0, alias="stakingApr")
    tvl: float = 0.0


class StakeRequestBody(_CamelModel):
    account_address: str = Field(alias="accountAddress")
    token_amount: str = Field(alias="tokenAmount", description="Human-readable amount, e.g. '0.01'")
    token_address: str = Field(alias="tokenAddress")


class UnstakeRequestBody(StakeRequestBody):
    pass


class StakeResponseBody(_CamelModel):
    """Target contract and encoded call the wallet should send to stake."""

    contract_address: str = Field(alias="contractAddress")
    encoded_abi: str = Field(alias="encodedABI")


class UnstakeResponseBody(StakeResponseBody):
    pass


class StakedToken(_CamelModel):
    token_address: str = Field(alias="tokenAddress")
    token_symbol: str = Field(alias="tokenSymbol")
    token_name: str = Field(alias="tokenName")
    token_logo_uri: str = Field(default="", alias="tokenLogoURI")
    staked_amount: float = Field(default=0.0, alias="stakedAmount")
    staked_amount_usd: float = Field(default=0.0, alias="stakedAmountUSD")
    earned_amount_usd: float = Field(default=0.0, alias="earnedAmountUSD")
    unstake_token_address: str = Field(alias="unStakeTokenAddress")
    staking_apr: float = Field(default=0.0, alias="stakingApr")


class StakedTokenResponse(_CamelModel):
    total_staked_amount_usd: float = Field(default=0.0, alias="totalStakedAmountUSD")
    total_earned_amount_usd: float = Field(default=0.0, alias="totalEarnedAmountUSD")
    staked_tokens: List[StakedToken] = Field(default_factory=list, alias="stakedTokens")
