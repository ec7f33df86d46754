from __future__ import annotations

from typing import List

from ..providers.backend import BackendClient
from ..types.history import NftAccount
from ..types.tokens import Token, parse_token_details


def empty_nft_account(wallet_address: str) -> NftAccount:
    return NftAccount(id=wallet_address, address=wallet_address, collectibles=[])


class BalancesModule:
    """Token and NFT holdings of a wallet."""

    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def get_token_list(self, wallet_address: str) -> List[Token]:
        data = await self._client.get(f"/v0/balances/assets/{wallet_address}")
        return [parse_token_details(item) for item in data.get("result") or []]

    async def get_nfts(self, wallet_address: str) -> NftAccount:
        data = await self._client.get(f"/v0/balances/nft-assets/{wallet_address}")
        account = ((data or {}).get("data") or {}).get("account")
        if not account:
            return empty_nft_account(wallet_address)
        return NftAccount.model_validate(account)
