"""
Custom exceptions for the TicketScan application.

Provider-level failures live in ``ticketscan.providers.exceptions`` and never
leave an adapter. The exceptions here are the ones that may cross module
boundaries.
"""

from typing import Optional


class TicketScanException(Exception):
    """Base exception class for all TicketScan exceptions."""

    pass


class ConfigurationException(TicketScanException):
    """Exception raised for configuration errors."""

    pass


class AggregationError(TicketScanException):
    """
    Raised when the aggregation pipeline itself faults.

    Provider failures are absorbed by the orchestrator; this is reserved for
    faults in the orchestrator's own steps (for example the mock fallback
    generator raising). The API maps it to a generic 500 response.

    Attributes:
        stage: Pipeline stage that failed ('fallback', 'merge', ...)
        original_error: The underlying exception
    """

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.stage = stage
        self.original_error = original_error

        full_message = message
        if stage:
            full_message = f"[{stage}] {message}"

        super().__init__(full_message)


class SavedSearchNotFoundError(TicketScanException):
    """Raised when a saved search id does not exist."""

    def __init__(self, search_id: str):
        self.search_id = search_id
        super().__init__(f"Saved search '{search_id}' not found")
