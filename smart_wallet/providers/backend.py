"""Async client for the wallet backend REST API."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..config import settings
from ..core.wallet.auth import AuthDto


class BackendError(Exception):
    """The backend answered with an unusable payload."""


class BackendClient:
    """
    Shared HTTP layer for the backend modules.

    Every request carries the public API key as the `apiKey` query parameter;
    once `jwt_token` is set it is also sent as a bearer token.
    """

    def __init__(
        self,
        public_api_key: str,
        *,
        base_url: Optional[str] = None,
        jwt_token: Optional[str] = None,
        timeout_s: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.public_api_key = public_api_key
        self.base_url = settings.api_base_url(base_url or "")
        self.jwt_token = jwt_token
        self.timeout_s = timeout_s or settings.request_timeout_seconds
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {
            "accept": "application/json",
            "content-type": "application/json",
        }
        if self.jwt_token:
            headers["authorization"] = f"Bearer {self.jwt_token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        merged_params = {**(params or {}), "apiKey": self.public_api_key}
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout_s,
            transport=self._transport,
        ) as client:
            response = await client.request(
                method, path, json=json, params=merged_params, headers=self._headers()
            )
            response.raise_for_status()
            return response

    async def get(self, path: str, **params: Any) -> Any:
        resp = await self._request("GET", path, params=params or None)
        return resp.json()

    async def post(self, path: str, payload: Dict[str, Any]) -> Any:
        resp = await self._request("POST", path, json=payload)
        return resp.json()

    async def authenticate(self, auth: AuthDto) -> str:
        """Exchange a signed ownership proof for a JWT and keep it for later calls."""
        data = await self.post("/v2/smart-wallets/auth", auth.to_json())
        token = data.get("jwt") if isinstance(data, dict) else None
        if not token:
            raise BackendError("Authentication response did not include a jwt")
        self.jwt_token = token
        return token
