"""
Domain models for TicketScan.
"""

from ticketscan.models.flight import (
    MOCK_ID_PREFIX,
    REAL_PROVIDER_TAGS,
    FlightEndpoint,
    FlightOffer,
    FlightSegment,
    OfferPrice,
    ProviderTag,
)
from ticketscan.models.saved_search import DestinationSummary, SavedSearch, SavedSearchParams
from ticketscan.models.search import SearchRequest, SearchResult, SourceAvailability

__all__ = [
    "MOCK_ID_PREFIX",
    "REAL_PROVIDER_TAGS",
    "FlightEndpoint",
    "FlightOffer",
    "FlightSegment",
    "OfferPrice",
    "ProviderTag",
    "DestinationSummary",
    "SavedSearch",
    "SavedSearchParams",
    "SearchRequest",
    "SearchResult",
    "SourceAvailability",
]
