"""
Retry helpers with exponential backoff for TicketScan.

Provider adapters retry only transient transport failures (connection
resets, timeouts). HTTP error statuses and malformed payloads are not
retried; the adapter turns them into an empty result.
"""

import logging
from typing import Tuple, Type

import httpx
from tenacity import (
    AsyncRetrying,
    after_log,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

# Exceptions that trigger a retry of an upstream API call
API_RETRIABLE_EXCEPTIONS: Tuple[Type[Exception], ...] = (
    ConnectionError,
    TimeoutError,
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)


def api_retrying(
    max_attempts: int = 3,
    min_wait_seconds: int = 2,
    max_wait_seconds: int = 10,
) -> AsyncRetrying:
    """
    Build a tenacity AsyncRetrying for one external API call.

    Used as an async iterator so the attempt count can come from each
    adapter's own configuration:

    Examples:
        >>> async for attempt in api_retrying(max_attempts=3):
        ...     with attempt:
        ...         response = await client.get("https://api.example.com")

    Args:
        max_attempts: Maximum number of attempts (default: 3)
        min_wait_seconds: Minimum wait time between retries (default: 2)
        max_wait_seconds: Maximum wait time between retries (default: 10)

    Returns:
        AsyncRetrying that re-raises the last exception once attempts run out
    """
    return AsyncRetrying(
        retry=retry_if_exception_type(API_RETRIABLE_EXCEPTIONS),
        stop=stop_after_attempt(max(1, max_attempts)),
        wait=wait_exponential(multiplier=1, min=min_wait_seconds, max=max_wait_seconds),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        after=after_log(logger, logging.DEBUG),
        reraise=True,
    )
