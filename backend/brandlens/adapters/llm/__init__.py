"""
Provider error handling shared with the orchestration layer
"""

from .base import (
    ProviderError,
    ProviderAuthenticationError,
    ProviderRateLimitError,
    ProviderPaymentError,
    ProviderInvalidRequestError,
    ProviderTimeoutError,
    RetryPolicy,
    call_with_retry,
    error_for_status,
)

__all__ = [
    # Exceptions
    "ProviderError",
    "ProviderAuthenticationError",
    "ProviderRateLimitError",
    "ProviderPaymentError",
    "ProviderInvalidRequestError",
    "ProviderTimeoutError",
    "error_for_status",
    # Retry
    "RetryPolicy",
    "call_with_retry",
]
