"""
Chain JSON-RPC provider: read-only calls, nonces and fee data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .base import JsonRpcProvider
from ..config import settings
from ..core.execution.userop_builder import build_entrypoint_get_nonce_call
from ..core.recovery.errors import RpcError


class ChainRpcError(RpcError):
    """Chain node error (including eth_call reverts, which carry revert data)."""

    provider = "chain"

    @property
    def revert_data(self) -> Optional[str]:
        data = self.data
        if isinstance(data, dict):
            data = data.get("data")
        if isinstance(data, str) and data.startswith("0x"):
            return data
        return None


@dataclass
class FeeData:
    max_fee_per_gas: int
    max_priority_fee_per_gas: int


class ChainProvider(JsonRpcProvider):
    name = "chain"
    error_cls = ChainRpcError

    def __init__(self, rpc_url: Optional[str] = None) -> None:
        super().__init__(rpc_url or settings.chain_rpc_url, timeout_s=settings.request_timeout_seconds)
        self._chain_id: Optional[int] = None

    async def call(self, to: str, data: str) -> str:
        return await self._rpc_call("eth_call", [{"to": to, "data": data}, "latest"])

    async def call_uint(self, to: str, data: str) -> int:
        result = await self.call(to, data)
        if not result or result == "0x":
            raise ChainRpcError(f"Empty eth_call result from {to}")
        return int(result, 16)

    async def chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = int(await self._rpc_call("eth_chainId", []), 16)
        return self._chain_id

    async def get_nonce(self, entry_point: str, sender: str, key: int = 0) -> int:
        return await self.call_uint(entry_point, build_entrypoint_get_nonce_call(sender, key))

    async def get_balance(self, address: str) -> int:
        return int(await self._rpc_call("eth_getBalance", [address, "latest"]), 16)

    async def get_fee_data(self) -> FeeData:
        """
        EIP-1559 fee data: tip + 13% buffer, max fee = 2 * base fee + tip.

        Falls back to eth_gasPrice for both fields when the node has no
        eth_maxPriorityFeePerGas; if both fail the errors are combined.
        """
        try:
            tip = int(await self._rpc_call("eth_maxPriorityFeePerGas", []), 16)
            block = await self._rpc_call("eth_getBlockByNumber", ["latest", False])
            priority = tip + tip // 100 * 13
            base_fee = (block or {}).get("baseFeePerGas")
            if base_fee:
                max_fee = int(base_fee, 16) * 2 + priority
            else:
                max_fee = priority
            return FeeData(max_fee_per_gas=max_fee, max_priority_fee_per_gas=priority)
        except RpcError as eip1559_error:
            try:
                gas_price = int(await self._rpc_call("eth_gasPrice", []), 16)
            except RpcError as legacy_error:
                raise ChainRpcError(f"{eip1559_error}, {legacy_error}") from legacy_error
            return FeeData(max_fee_per_gas=gas_price, max_priority_fee_per_gas=gas_price)
