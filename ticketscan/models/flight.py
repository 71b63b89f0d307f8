"""
Normalized flight offer value types.

Every provider adapter converts its native payload into these models, so the
aggregator and everything downstream only ever see one shape.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

MOCK_ID_PREFIX = "mock-"


class ProviderTag(str, Enum):
    """Source tag carried by every offer."""

    AMADEUS = "amadeus"
    SKYSCANNER = "skyscanner"
    GOOGLE_FLIGHTS = "googleflights"
    MOCK = "mock"


REAL_PROVIDER_TAGS: List[ProviderTag] = [
    ProviderTag.AMADEUS,
    ProviderTag.SKYSCANNER,
    ProviderTag.GOOGLE_FLIGHTS,
]


class FlightEndpoint(BaseModel):
    """Departure or arrival point of a segment."""

    model_config = ConfigDict(frozen=True)

    airport: str = Field(description="Airport IATA code")
    time: str = Field(description="Local time as HH:MM")


class FlightSegment(BaseModel):
    """One non-stop leg."""

    model_config = ConfigDict(frozen=True)

    departure: FlightEndpoint
    arrival: FlightEndpoint
    airline: str
    flight_number: str
    duration: str = Field(description="Human readable duration, e.g. '4h 30m'")


class OfferPrice(BaseModel):
    """Per-traveler and total price in whole currency units."""

    model_config = ConfigDict(frozen=True)

    adult: int = Field(ge=0, description="Fare per adult")
    infant: int = Field(ge=0, description="Fare per lap infant")
    total: int = Field(ge=0, description="adult * adults + infant * infants")
    currency: str


class FlightOffer(BaseModel):
    """
    One priced itinerary as normalized by TicketScan.

    ``stops`` is always derived from the outbound segment count; the model
    refuses to be built with an inconsistent value.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    source: ProviderTag
    price: OfferPrice
    outbound: List[FlightSegment] = Field(default_factory=list)
    inbound: List[FlightSegment] = Field(default_factory=list)
    airline: str
    stops: int = Field(ge=0)
    duration: str
    booking_url: Optional[str] = None

    @model_validator(mode="after")
    def check_stops(self) -> "FlightOffer":
        expected = max(0, len(self.outbound) - 1)
        if self.stops != expected:
            raise ValueError(
                f"stops={self.stops} does not match {len(self.outbound)} outbound segments"
            )
        return self

    @property
    def is_mock(self) -> bool:
        """True for synthetic fallback offers."""
        return self.source == ProviderTag.MOCK or self.id.startswith(MOCK_ID_PREFIX)
