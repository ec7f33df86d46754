"""
ERC-4337 Bundler Provider.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .base import JsonRpcProvider
from ..config import settings
from ..core.execution.userop import UserOperation, UserOpGasEstimate, UserOpReceipt
from ..core.recovery.errors import RpcError


class BundlerError(RpcError):
    """Bundler provider error."""

    provider = "bundler"


@dataclass
class BundlerConfig:
    rpc_url: str


class BundlerProvider(JsonRpcProvider):
    name = "bundler"
    error_cls = BundlerError

    def __init__(self, config: Optional[BundlerConfig] = None) -> None:
        config = config or BundlerConfig(
            rpc_url=settings.override_bundler_rpc or settings.bundler_url(),
        )
        super().__init__(config.rpc_url, timeout_s=settings.request_timeout_seconds)
        self._config = config

    async def send_user_operation(
        self,
        user_op: UserOperation,
        entry_point: str,
    ) -> str:
        result = await self._rpc_call(
            "eth_sendUserOperation",
            [user_op.to_rpc_dict(), entry_point],
        )
        if not isinstance(result, str):
            raise BundlerError("Invalid bundler response for eth_sendUserOperation")
        return result

    async def estimate_user_operation_gas(
        self,
        user_op: UserOperation,
        entry_point: str,
    ) -> UserOpGasEstimate:
        result = await self._rpc_call(
            "eth_estimateUserOperationGas",
            [user_op.to_rpc_dict(), entry_point],
        )
        if not isinstance(result, dict):
            raise BundlerError("Invalid bundler response for eth_estimateUserOperationGas")
        return UserOpGasEstimate.from_rpc(result)

    async def get_user_operation_receipt(self, user_op_hash: str) -> Optional[UserOpReceipt]:
        result = await self._rpc_call(
            "eth_getUserOperationReceipt",
            [user_op_hash],
        )
        if not result:
            return None
        return UserOpReceipt.from_rpc(user_op_hash, result)
