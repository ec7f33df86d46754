"""Block explorer queries (etherscan-style module/action API)."""

from __future__ import annotations

import json
from typing import Any, List

from ..core.execution.resolver import is_native_token
from ..providers.backend import BackendClient
from ..types.tokens import NativeToken, Token, parse_token_details


class ExplorerModule:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def _query(self, module: str, action: str, **params: Any) -> Any:
        data = await self._client.get("/v0/explorer", module=module, action=action, **params)
        return data.get("result")

    async def get_native_balance(self, wallet_address: str) -> int:
        return int(await self._query("account", "balance", address=wallet_address))

    async def get_abi(self, address: str) -> str:
        result = await self._query("contract", "getabi", address=address)
        return json.dumps(json.loads(result))

    async def get_token_list(self, wallet_address: str) -> List[Token]:
        result = await self._query("account", "tokenlist", address=wallet_address)
        return [parse_token_details(item) for item in result or []]

    async def get_token_details(self, contract_address: str) -> Token:
        if is_native_token(contract_address):
            return NativeToken(amount=0)
        result = await self._query("token", "getToken", contractaddress=contract_address)
        return parse_token_details({**result, "balance": "0"})

    async def get_token_balance(self, contract_address: str, wallet_address: str) -> int:
        if is_native_token(contract_address):
            return await self.get_native_balance(wallet_address)
        result = await self._query(
            "account", "tokenbalance", contractaddress=contract_address, address=wallet_address
        )
        return int(result)
