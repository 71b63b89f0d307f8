"""
Search request and aggregated search result models.
"""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ticketscan.models.flight import FlightOffer, ProviderTag


class SearchRequest(BaseModel):
    """
    Normalized search parameters.

    ``return_date >= departure_date`` is checked by the callers (API route,
    CLI) before a request is built.
    """

    model_config = ConfigDict(frozen=True)

    origin: str = Field(min_length=3, max_length=3, description="Origin IATA code")
    destination: str = Field(min_length=3, max_length=3, description="Destination IATA code")
    departure_date: date
    return_date: date
    adults: int = Field(default=2, ge=1)
    infants: int = Field(default=0, ge=0)

    @field_validator("origin", "destination", mode="before")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().upper()
        return v


class SourceAvailability(BaseModel):
    """Which sources contributed offers to a result."""

    amadeus: bool = False
    skyscanner: bool = False
    googleflights: bool = False
    mock: bool = False


class SearchResult(BaseModel):
    """Output of one aggregated search."""

    offers: List[FlightOffer] = Field(default_factory=list)
    searched_at: datetime
    params: SearchRequest
    sources: SourceAvailability = Field(default_factory=SourceAvailability)
    counts: Dict[str, int] = Field(
        default_factory=dict, description="Offers contributed per provider tag"
    )

    def best_by_source(self) -> Dict[ProviderTag, FlightOffer]:
        """Cheapest offer per source tag."""
        best: Dict[ProviderTag, FlightOffer] = {}
        for offer in self.offers:
            current = best.get(offer.source)
            if current is None or offer.price.total < current.price.total:
                best[offer.source] = offer
        return best

    @property
    def cheapest(self) -> Optional[FlightOffer]:
        """Lowest priced offer, if any."""
        return self.offers[0] if self.offers else None
