"""
ERC-4337 Paymaster Provider.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .base import JsonRpcProvider
from ..config import settings
from ..core.execution.userop import PaymasterSponsorship, UserOperation
from ..core.recovery.errors import RpcError


class PaymasterError(RpcError):
    """Paymaster provider error."""

    provider = "paymaster"


@dataclass
class PaymasterConfig:
    rpc_url: str
    rpc_method: str = "pm_sponsorUserOperation"


class PaymasterProvider(JsonRpcProvider):
    name = "paymaster"
    error_cls = PaymasterError

    def __init__(self, config: Optional[PaymasterConfig] = None) -> None:
        config = config or PaymasterConfig(
            rpc_url=settings.paymaster_url(),
            rpc_method=settings.paymaster_rpc_method,
        )
        super().__init__(config.rpc_url, timeout_s=settings.request_timeout_seconds)
        self._config = config

    async def sponsor_user_operation(
        self,
        user_op: UserOperation,
        entry_point: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> PaymasterSponsorship:
        params: list[Any] = [user_op.to_rpc_dict(), entry_point, context or {}]
        result = await self._rpc_call(self._config.rpc_method, params)
        if isinstance(result, dict):
            sponsorship = PaymasterSponsorship.from_rpc(result)
            if sponsorship.paymaster_and_data != "0x":
                return sponsorship
        if isinstance(result, str) and result:
            return PaymasterSponsorship(paymaster_and_data=result)
        raise PaymasterError("Invalid paymaster response")
