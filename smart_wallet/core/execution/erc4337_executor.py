"""
ERC-4337 UserOperation submission with a single fee-escalation retry.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

from smart_wallet.config import settings
from smart_wallet.core.recovery.errors import ErrorCategory, ReceiptTimeoutError, classify_error

from .models import OperationResult, TransactionType, TxOptions
from .nonce_manager import NonceSequencer
from .smart_account import SmartAccount
from .userop import Call, UserOpReceipt
from .userop_builder import build_call_data


logger = logging.getLogger(__name__)


def increase_fee_by_percentage(fee: int, percentage: int) -> int:
    """fee + fee * percentage / 100, truncated."""
    if fee < 0 or percentage < 0:
        raise ValueError("Fee and percentage must be non-negative")
    return fee + (fee * percentage) // 100


class UserOpExecutor:
    """
    Builds and sends UserOperations for one smart wallet.

    A bundler rejection containing "fee too low" is retried exactly once when
    the caller enables `with_retry`: the live network fee (never less than the
    floor that was just rejected) is bumped by `fee_increment_percentage` and
    the operation is rebuilt from scratch. Any other error, and any error on
    the retry, propagates unchanged.
    """

    def __init__(
        self,
        account: SmartAccount,
        nonce_sequencer: Optional[NonceSequencer] = None,
        *,
        poll_interval_s: Optional[float] = None,
        receipt_timeout_s: Optional[float] = None,
    ) -> None:
        self.account = account
        self.nonce_sequencer = nonce_sequencer or NonceSequencer()
        self.poll_interval_s = poll_interval_s or settings.receipt_poll_interval_seconds
        self.receipt_timeout_s = receipt_timeout_s or settings.receipt_timeout_seconds

    def next_nonce_key(self, tx_options: TxOptions) -> Optional[int]:
        """Nonce key for this submission, or None to use the wallet's key."""
        if not tx_options.use_nonce_sequence:
            return None
        self.nonce_sequencer.increment()
        if tx_options.custom_nonce_key is not None:
            return tx_options.custom_nonce_key
        return self.nonce_sequencer.retrieve()

    async def submit(
        self,
        calls: Sequence[Call],
        tx_options: Optional[TxOptions] = None,
        *,
        batch: Optional[bool] = None,
        action: TransactionType = TransactionType.CALL,
    ) -> OperationResult:
        """
        Submit `calls` as one UserOperation.

        A single call is encoded with execute() unless `batch` is set; several
        calls always go through executeBatch() and run atomically.
        """
        tx_options = tx_options or TxOptions()
        call_data = build_call_data(calls, batch)

        nonce_key = self.next_nonce_key(tx_options)
        fee_floor = tx_options.fee_per_gas
        if fee_floor is None:
            fee_floor = self.account.fee_floor

        try:
            return await self._send(call_data, fee_floor, nonce_key, action)
        except Exception as exc:
            if not tx_options.with_retry or classify_error(exc).category != ErrorCategory.UNDERPRICED:
                raise
            rejected_fee = fee_floor
            bumped_fee = await self._bumped_fee(rejected_fee, tx_options.fee_increment_percentage)
            logger.warning(
                "%s rejected as underpriced (fee=%s); retrying once with fee=%s",
                action.value,
                rejected_fee,
                bumped_fee,
                extra={"rejected_fee": rejected_fee, "bumped_fee": bumped_fee},
            )

        return await self._send(call_data, bumped_fee, nonce_key, action)

    async def _bumped_fee(self, rejected_fee: Optional[int], percentage: int) -> int:
        fees = await self.account.chain.get_fee_data()
        base_fee = max(fees.max_fee_per_gas, rejected_fee or 0)
        return increase_fee_by_percentage(base_fee, percentage)

    async def _send(
        self,
        call_data: str,
        fee_floor: Optional[int],
        nonce_key: Optional[int],
        action: TransactionType,
    ) -> OperationResult:
        user_op = await self.account.build(call_data, fee_floor=fee_floor, nonce_key=nonce_key)
        user_op_hash = await self.account.bundler.send_user_operation(user_op, self.account.entry_point)
        logger.info(
            "Submitted %s user operation %s (sender=%s, nonce=%s)",
            action.value,
            user_op_hash,
            user_op.sender,
            hex(user_op.nonce),
            extra={"user_op_hash": user_op_hash, "sender": user_op.sender, "call_data": user_op.call_data},
        )
        return OperationResult(user_op_hash=user_op_hash, _waiter=self.wait_for_receipt)

    async def wait_for_receipt(self, user_op_hash: str) -> UserOpReceipt:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.receipt_timeout_s
        while True:
            receipt = await self.account.bundler.get_user_operation_receipt(user_op_hash)
            if receipt is not None:
                if not receipt.success:
                    logger.warning("User operation %s reverted: %s", user_op_hash, receipt.reason)
                return receipt
            if loop.time() >= deadline:
                raise ReceiptTimeoutError(user_op_hash, self.receipt_timeout_s)
            await asyncio.sleep(self.poll_interval_s)
