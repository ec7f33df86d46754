from abc import ABC, abstractmethod
from typing import Any, Optional, Type

import httpx

from ..core.recovery.errors import RpcError


class Provider(ABC):
    """Base provider interface"""

    name: str
    timeout_s: int = 10

    @abstractmethod
    async def ready(self) -> bool:
        """Check if provider is ready to serve requests"""
        pass


class JsonRpcProvider(Provider):
    """Provider backed by a single JSON-RPC endpoint."""

    error_cls: Type[RpcError] = RpcError

    def __init__(self, rpc_url: str, timeout_s: Optional[int] = None) -> None:
        self.rpc_url = rpc_url
        if timeout_s is not None:
            self.timeout_s = timeout_s
        self._client: Optional[httpx.AsyncClient] = None
        self._request_id = 0

    async def ready(self) -> bool:
        return bool(self.rpc_url)

    async def _rpc_call(self, method: str, params: list[Any]) -> Any:
        if not await self.ready():
            raise self.error_cls(f"{self.name} provider is not configured")
        if not self._client or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout_s)

        self._request_id += 1
        response = await self._client.post(
            self.rpc_url,
            json={"jsonrpc": "2.0", "id": self._request_id, "method": method, "params": params},
        )
        response.raise_for_status()
        payload = response.json()
        if "error" in payload:
            raise self.error_cls(payload["error"])
        return payload.get("result")

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
