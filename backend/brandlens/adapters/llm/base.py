"""
Provider error types and retry policy
Shared by whatever orchestration layer calls the upstream AI providers
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from brandlens.config import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProviderError(Exception):
    """Base exception for upstream provider errors"""

    retryable = False

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        retryable: Optional[bool] = None
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.details = details or {}
        if retryable is not None:
            self.retryable = retryable


class ProviderAuthenticationError(ProviderError):
    """Authentication failed"""
    pass


class ProviderRateLimitError(ProviderError):
    """Rate limit exceeded"""
    retryable = True


class ProviderPaymentError(ProviderError):
    """Quota or billing exhausted"""
    retryable = True


class ProviderInvalidRequestError(ProviderError):
    """Invalid request parameters"""
    pass


class ProviderTimeoutError(ProviderError):
    """Request timed out"""
    retryable = True


def error_for_status(provider: str, status_code: int, body: str = "") -> ProviderError:
    """Map a failed provider HTTP status to its typed error"""
    details = {"status_code": status_code, "response": body}

    if status_code in (401, 403):
        return ProviderAuthenticationError("Invalid API key", provider, status_code, details)
    if status_code == 402:
        return ProviderPaymentError("Payment required", provider, status_code, details)
    if status_code == 429:
        return ProviderRateLimitError("Rate limit exceeded", provider, status_code, details)
    if status_code == 400:
        return ProviderInvalidRequestError(f"Invalid request: {body}", provider, status_code, details)
    if status_code in (408, 504):
        return ProviderTimeoutError("Upstream timed out", provider, status_code, details)

    # Server-side failures are worth another attempt, other 4xx are not
    return ProviderError(
        f"API error: {body}",
        provider,
        status_code,
        details,
        retryable=status_code >= 500,
    )


@dataclass
class RetryPolicy:
    """Exponential backoff for retryable provider errors"""
    max_retries: int = 3
    base_delay: float = 2.0  # seconds

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        settings = get_settings()
        return cls(
            max_retries=settings.PROVIDER_MAX_RETRIES,
            base_delay=settings.PROVIDER_RETRY_DELAY,
        )

    def should_retry(self, error: Exception, attempt: int) -> bool:
        """
        Whether to try again after a failure.

        Args:
            error: The failure raised by the attempt
            attempt: Zero-based index of the attempt that failed
        """
        if attempt >= self.max_retries:
            return False
        return isinstance(error, ProviderError) and error.retryable

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait before the retry following `attempt`"""
        return self.base_delay * (2 ** attempt)


async def call_with_retry(
    call: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
) -> T:
    """Run a provider call, retrying per the policy; the last error propagates"""
    policy = policy or RetryPolicy.from_settings()
    attempt = 0
    while True:
        try:
            return await call()
        except ProviderError as e:
            if not policy.should_retry(e, attempt):
                raise
            delay = policy.delay_for(attempt)
            logger.warning(
                f"{e.provider} call failed ({type(e).__name__}), retrying in {delay:.1f}s"
            )
            await sleep(delay)
            attempt += 1
