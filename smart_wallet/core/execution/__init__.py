"""
UserOperation Execution Layer

Builds, signs and submits ERC-4337 UserOperations for a smart wallet:
- SmartAccount: counterfactual wallet and the population pipeline
- UserOpExecutor: submission with a single fee-escalation retry
- resolve_spend_calls: approve + call batching for token spends
- NonceSequencer: independent nonce keys for concurrent streams

Usage:
    from smart_wallet.core.execution import SmartAccount, UserOpExecutor, TxOptions

    account = await SmartAccount.init(signer)
    executor = UserOpExecutor(account)
    result = await executor.submit([Call(to=recipient, value=10**12)], TxOptions(with_retry=True))
    receipt = await result.wait()
"""

from .models import (
    OperationResult,
    TransactionType,
    TxOptions,
    WalletOptions,
)

from .userop import (
    Call,
    PaymasterSponsorship,
    UserOpGasEstimate,
    UserOperation,
    UserOpReceipt,
)

from .nonce_manager import NonceSequencer

from .pipeline import (
    PopulationContext,
    Stage,
    default_stages,
    run_pipeline,
)

from .smart_account import SmartAccount, resolve_sender_address

from .erc4337_executor import UserOpExecutor, increase_fee_by_percentage

from .resolver import get_allowance, is_native_token, resolve_spend_calls

__all__ = [
    # Models
    "OperationResult",
    "TransactionType",
    "TxOptions",
    "WalletOptions",
    # UserOperation
    "Call",
    "PaymasterSponsorship",
    "UserOpGasEstimate",
    "UserOperation",
    "UserOpReceipt",
    # Nonce keys
    "NonceSequencer",
    # Pipeline
    "PopulationContext",
    "Stage",
    "default_stages",
    "run_pipeline",
    # Account
    "SmartAccount",
    "resolve_sender_address",
    # Executor
    "UserOpExecutor",
    "increase_fee_by_percentage",
    # Resolver
    "get_allowance",
    "is_native_token",
    "resolve_spend_calls",
]
