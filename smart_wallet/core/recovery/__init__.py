"""
Error Classification Module

Error types raised while building and submitting UserOperations, and the
classifier that decides whether a failure is the retryable fee rejection.
"""

from .errors import (
    AccountResolutionError,
    ErrorCategory,
    ErrorContext,
    FeeTooLowError,
    ReceiptTimeoutError,
    RecoverableError,
    RpcError,
    SigningError,
    UnrecoverableError,
    classify_error,
    is_fee_too_low,
)

__all__ = [
    "AccountResolutionError",
    "ErrorCategory",
    "ErrorContext",
    "FeeTooLowError",
    "ReceiptTimeoutError",
    "RecoverableError",
    "RpcError",
    "SigningError",
    "UnrecoverableError",
    "classify_error",
    "is_fee_too_low",
]
