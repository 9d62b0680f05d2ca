"""Retry envelope shared by the provider gateways."""
from __future__ import annotations
import logging
import time
from typing import Callable, Type, TypeVar

import openai

from superfeynman.core.config import PROVIDER_BACKOFF_SECONDS, PROVIDER_MAX_ATTEMPTS
from superfeynman.domain.common.errors import (
    InvalidCredentials,
    ProviderCallFailed,
    ProviderError,
    RateLimited,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_retryable(exc: Exception) -> bool:
    """Transport failures, 5xx and 429 are worth another attempt; other 4xx are not."""
    if isinstance(exc, openai.RateLimitError):
        return True
    if isinstance(exc, openai.APIStatusError):
        return exc.status_code >= 500
    return isinstance(exc, openai.APIConnectionError)


def call_with_retry(
    fn: Callable[[], T],
    label: str,
    max_attempts: int = PROVIDER_MAX_ATTEMPTS,
    backoff_seconds: float = PROVIDER_BACKOFF_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Call fn up to max_attempts times, sleeping backoff * 2^(n-1) after failed attempt n.
    Raises the last openai error once attempts run out or on the first non-retryable one.
    """
    for attempt in range(1, max_attempts + 1):
        try:
            return fn()
        except openai.APIError as e:
            if not is_retryable(e) or attempt == max_attempts:
                raise
            delay = backoff_seconds * (2 ** (attempt - 1))
            logger.warning(
                "%s failed (attempt %d/%d): %s. Retrying in %.1fs",
                label, attempt, max_attempts, e, delay,
            )
            sleep(delay)
    raise RuntimeError("max_attempts must be at least 1")


def translate_provider_error(
    exc: openai.APIError,
    action: str,
    fallback: Type[ProviderError] = ProviderCallFailed,
) -> ProviderError:
    """Map an openai SDK error onto the error kinds callers can act on."""
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return InvalidCredentials(f"Invalid provider API key ({action})")
    if isinstance(exc, openai.RateLimitError):
        return RateLimited("Provider rate limit exceeded. Please try again later.")
    return fallback(f"{action} failed: {getattr(exc, 'message', None) or exc}")
