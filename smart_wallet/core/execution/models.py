"""
Execution options and result types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from .userop import UserOpReceipt


class TransactionType(str, Enum):
    """Types of wallet actions, used to label submissions."""
    CALL = "call"
    BATCH = "batch"
    TRANSFER = "transfer"
    APPROVE = "approve"
    SWAP = "swap"
    STAKE = "stake"
    UNSTAKE = "unstake"


@dataclass(frozen=True)
class TxOptions:
    """
    Per-call transaction options.

    fee_per_gas of None means "use network fee data". custom_nonce_key only
    applies when use_nonce_sequence is set.
    """
    fee_per_gas: Optional[int] = None
    fee_increment_percentage: int = 10
    with_retry: bool = False
    use_nonce_sequence: bool = False
    custom_nonce_key: Optional[int] = None

    def __post_init__(self) -> None:
        if self.fee_per_gas is not None and self.fee_per_gas < 0:
            raise ValueError("fee_per_gas must be non-negative")
        if self.fee_increment_percentage < 0:
            raise ValueError("fee_increment_percentage must be non-negative")
        if self.custom_nonce_key is not None and self.custom_nonce_key < 0:
            raise ValueError("custom_nonce_key must be non-negative")


@dataclass(frozen=True)
class WalletOptions:
    """Smart wallet construction options."""
    entry_point: Optional[str] = None
    factory: Optional[str] = None
    salt: int = 0
    nonce_key: int = 0
    override_bundler_rpc: Optional[str] = None
    chain_rpc_url: Optional[str] = None
    with_paymaster: bool = False
    paymaster_context: Dict[str, Any] = field(default_factory=dict)


@dataclass
class OperationResult:
    """
    A submitted UserOperation.

    `wait()` polls the bundler until the operation is mined and returns its
    receipt; it raises ReceiptTimeoutError when the bundler never reports one.
    Abandoning `wait()` does not affect the submitted operation.
    """
    user_op_hash: str
    _waiter: Callable[[str], Awaitable[UserOpReceipt]] = field(repr=False)

    async def wait(self) -> UserOpReceipt:
        return await self._waiter(self.user_op_hash)
