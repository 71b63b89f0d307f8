"""
Pydantic schemas for the search, provider and airport endpoints.
"""

from datetime import date, datetime
from typing import Dict, List

from pydantic import BaseModel, Field

from ticketscan.models import DestinationSummary, SearchResult


class CompareParams(BaseModel):
    """Echo of a multi-destination search."""

    origin: str
    destinations: List[str]
    departure_date: date
    return_date: date
    adults: int
    infants: int


class CompareResponse(BaseModel):
    """Response for a multi-destination comparison."""

    searched_at: datetime
    params: CompareParams
    summaries: List[DestinationSummary] = Field(description="Cheapest offer per destination")
    results: Dict[str, SearchResult] = Field(description="Full result per destination")


class ProviderStatus(BaseModel):
    name: str
    enabled: bool
    configured: bool


class ProvidersResponse(BaseModel):
    """Which providers will be queried on the next search."""

    providers: List[ProviderStatus]
    available: List[str] = Field(description="Enabled providers with credentials")
    mock_fallback: bool


class AirportSchema(BaseModel):
    code: str
    name: str
    city: str


class AirportsResponse(BaseModel):
    """Selectable airports for the search form."""

    origins: List[AirportSchema] = Field(description="Japanese departure airports")
    destinations: List[AirportSchema] = Field(description="Popular destinations")
