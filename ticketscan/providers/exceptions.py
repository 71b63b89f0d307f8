"""
Exception hierarchy for flight data providers.

These exceptions are raised inside an adapter and caught at the adapter's
boundary; callers of ``FlightProvider.search`` only ever see an empty list.

Exception Hierarchy:
    ProviderError (base)
    ├── ProviderAPIError
    │   ├── ProviderAuthenticationError
    │   └── ProviderRateLimitError
    └── ProviderParsingError
"""

import logging
from typing import Optional


class ProviderError(Exception):
    """
    Base exception for all provider errors.

    Attributes:
        message: Human-readable error description
        provider_name: Tag of the provider that raised the error
        recoverable: Whether a later retry could succeed
        original_error: Original exception if this wraps another error
    """

    def __init__(
        self,
        message: str,
        provider_name: Optional[str] = None,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.provider_name = provider_name
        self.recoverable = recoverable
        self.original_error = original_error

        full_message = message
        if provider_name:
            full_message = f"[{provider_name}] {message}"

        super().__init__(full_message)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"provider_name={self.provider_name!r}, "
            f"recoverable={self.recoverable})"
        )


class ProviderAPIError(ProviderError):
    """
    Raised when an upstream API answers with a non-2xx status.

    Attributes:
        status_code: HTTP status code returned by the provider
        url: Request URL
    """

    def __init__(
        self,
        message: str,
        provider_name: Optional[str] = None,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        recoverable: bool = False,
    ):
        super().__init__(
            message=message,
            provider_name=provider_name,
            recoverable=recoverable,
        )
        self.status_code = status_code
        self.url = url


class ProviderAuthenticationError(ProviderAPIError):
    """Raised when credentials are rejected (401/403) or a token cannot be obtained."""

    def __init__(
        self,
        message: str,
        provider_name: Optional[str] = None,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            provider_name=provider_name,
            status_code=status_code,
            url=url,
            recoverable=False,
        )


class ProviderRateLimitError(ProviderAPIError):
    """
    Raised when the provider answers 429.

    Attributes:
        retry_after: Seconds to wait before retrying, when the provider says so
    """

    def __init__(
        self,
        message: str,
        provider_name: Optional[str] = None,
        url: Optional[str] = None,
        retry_after: Optional[int] = None,
    ):
        super().__init__(
            message=message,
            provider_name=provider_name,
            status_code=429,
            url=url,
            recoverable=True,
        )
        self.retry_after = retry_after


class ProviderParsingError(ProviderError):
    """Raised when a provider payload is not valid JSON or has an unexpected shape."""

    pass


def log_provider_error(logger: logging.Logger, error: ProviderError) -> None:
    """
    Log a provider error with consistent formatting.

    Rate limiting and upstream API errors are expected in production and are
    logged at WARNING without a traceback; anything else is logged at ERROR.

    Args:
        logger: Logger instance
        error: ProviderError instance
    """
    error_details = {
        "provider": error.provider_name,
        "recoverable": error.recoverable,
        "error_type": error.__class__.__name__,
    }

    if isinstance(error, ProviderRateLimitError):
        error_details["retry_after"] = error.retry_after
    if isinstance(error, ProviderAPIError):
        error_details["status_code"] = error.status_code
        error_details["url"] = error.url
        logger.warning(f"{error.message} | Details: {error_details}")
        return

    logger.error(
        f"{error.message} | Details: {error_details}",
        exc_info=error.original_error if error.original_error else True,
    )
