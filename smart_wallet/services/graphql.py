from __future__ import annotations

from typing import List

from ..providers.backend import BackendClient
from ..types.history import NftAccount, UserOpRecord
from .balances import empty_nft_account


class GraphQLModule:
    """Indexed collectibles and UserOperation history."""

    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def get_collectibles_by_owner(self, wallet_address: str) -> NftAccount:
        data = await self._client.get(f"/v0/graphql/collectibles/{wallet_address}")
        account = ((data or {}).get("data") or {}).get("account")
        if not account:
            return empty_nft_account(wallet_address)
        return NftAccount.model_validate(account)

    async def get_user_ops_by_sender(self, sender: str) -> List[UserOpRecord]:
        data = await self._client.get(f"/v0/graphql/userops/{sender}")
        ops = ((data or {}).get("data") or {}).get("userOps") or []
        return [UserOpRecord.model_validate(op) for op in ops]
