"""
Error Classification

Defines the error types raised while building and submitting UserOperations.
Only an underpriced-fee rejection is recoverable; the executor retries it once
when the caller asks for it. Everything else propagates to the caller.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


FEE_TOO_LOW_MESSAGE = "fee too low"


class ErrorCategory(str, Enum):
    """Categories of errors for recovery decisions."""

    UNDERPRICED = "underpriced"        # Bundler rejected the quoted fee
    NETWORK = "network"                # Transport/connectivity issues
    TIMEOUT = "timeout"                # Receipt or request timed out
    TRANSACTION_REVERTED = "transaction_reverted"
    BUILD = "build"                    # Address resolution, signing, malformed call
    PROVIDER = "provider"              # Bundler/paymaster/chain RPC error
    VALIDATION = "validation"          # Input validation error
    UNKNOWN = "unknown"


@dataclass
class ErrorContext:
    """Additional context about an error."""

    category: ErrorCategory = ErrorCategory.UNKNOWN
    recoverable: bool = False
    suggested_action: Optional[str] = None
    provider: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


class RecoverableError(Exception):
    """Base class for errors the executor may retry."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.context = context or ErrorContext(category=category, recoverable=True)


class UnrecoverableError(Exception):
    """
    Base class for errors that are surfaced to the caller immediately.

    - Address prediction failed
    - Signing failed
    - Malformed call
    - Transaction reverts
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.context = context or ErrorContext(category=category, recoverable=False)


class RpcError(Exception):
    """JSON-RPC error returned by a bundler, paymaster or chain node."""

    provider = "rpc"

    def __init__(self, error: Any):
        if isinstance(error, dict):
            self.code = error.get("code")
            self.rpc_message = str(error.get("message", ""))
            self.data = error.get("data")
        else:
            self.code = None
            self.rpc_message = str(error)
            self.data = None
        super().__init__(self.rpc_message)


class FeeTooLowError(RecoverableError):
    """Bundler rejected the operation because the quoted fee is below its minimum."""

    def __init__(self, message: str = FEE_TOO_LOW_MESSAGE, fee_per_gas: Optional[int] = None):
        super().__init__(
            message,
            category=ErrorCategory.UNDERPRICED,
            context=ErrorContext(
                category=ErrorCategory.UNDERPRICED,
                recoverable=True,
                suggested_action="Resubmit with a higher fee per gas",
                details={"fee_per_gas": fee_per_gas} if fee_per_gas is not None else {},
            ),
        )


class AccountResolutionError(UnrecoverableError):
    """The smart wallet address could not be derived from the factory."""

    def __init__(self, message: str = "Could not resolve smart wallet address", init_code: Optional[str] = None):
        super().__init__(
            message,
            category=ErrorCategory.BUILD,
            context=ErrorContext(
                category=ErrorCategory.BUILD,
                recoverable=False,
                suggested_action="Check the factory and entry point addresses",
                details={"init_code": init_code} if init_code else {},
            ),
        )


class SigningError(UnrecoverableError):
    """The owner credential failed to sign."""

    def __init__(self, message: str = "Signing failed", signer: Optional[str] = None):
        super().__init__(
            message,
            category=ErrorCategory.BUILD,
            context=ErrorContext(
                category=ErrorCategory.BUILD,
                recoverable=False,
                details={"signer": signer} if signer else {},
            ),
        )


class ReceiptTimeoutError(UnrecoverableError):
    """No receipt for a submitted UserOperation within the configured window."""

    def __init__(self, user_op_hash: str, timeout_seconds: float):
        super().__init__(
            f"Timed out after {timeout_seconds}s waiting for receipt of {user_op_hash}",
            category=ErrorCategory.TIMEOUT,
            context=ErrorContext(
                category=ErrorCategory.TIMEOUT,
                recoverable=False,
                suggested_action="Query the receipt again later; the operation may still be mined",
                details={"user_op_hash": user_op_hash, "timeout_seconds": timeout_seconds},
            ),
        )
        self.user_op_hash = user_op_hash


def is_fee_too_low(error: BaseException) -> bool:
    """True if the error is the bundler's underpriced-fee rejection."""
    if isinstance(error, FeeTooLowError):
        return True
    return FEE_TOO_LOW_MESSAGE in str(error)


def classify_error(error: Exception) -> ErrorContext:
    """
    Classify an exception and return its error context.

    Generic exceptions are classified by message; the fee check runs first
    because bundlers wrap it in otherwise generic validation errors.
    """
    if isinstance(error, (RecoverableError, UnrecoverableError)):
        return error.context

    message = str(error).lower()

    if is_fee_too_low(error):
        return ErrorContext(
            category=ErrorCategory.UNDERPRICED,
            recoverable=True,
            suggested_action="Resubmit with a higher fee per gas",
        )

    timeout_patterns = ["timeout", "timed out", "deadline"]
    if any(p in message for p in timeout_patterns):
        return ErrorContext(
            category=ErrorCategory.TIMEOUT,
            recoverable=False,
            suggested_action="Retry with longer timeout",
        )

    network_patterns = [
        "connection",
        "network",
        "unreachable",
        "refused",
        "dns",
        "socket",
        "ssl",
    ]
    if any(p in message for p in network_patterns):
        return ErrorContext(
            category=ErrorCategory.NETWORK,
            recoverable=False,
            suggested_action="Check network connectivity",
        )

    revert_patterns = [
        "revert",
        "execution reverted",
        "out of gas",
        "aa2",
        "aa3",
    ]
    if any(p in message for p in revert_patterns):
        return ErrorContext(
            category=ErrorCategory.TRANSACTION_REVERTED,
            recoverable=False,
            suggested_action="Review call parameters",
        )

    if isinstance(error, RpcError):
        return ErrorContext(
            category=ErrorCategory.PROVIDER,
            recoverable=False,
            provider=error.provider,
            details={"code": error.code, "data": error.data},
        )

    if isinstance(error, ValueError):
        return ErrorContext(category=ErrorCategory.VALIDATION, recoverable=False)

    return ErrorContext(category=ErrorCategory.UNKNOWN, recoverable=False)
