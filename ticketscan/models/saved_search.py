"""
Saved search records.

A saved search stores a summary of a (possibly multi-destination) search,
never the offers themselves.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class SavedSearchParams(BaseModel):
    """Parameters of the search that was saved."""

    origin: str = Field(min_length=3, max_length=3)
    destinations: List[str] = Field(min_length=1)
    departure_date: date
    return_date: date
    adults: int = Field(ge=1)
    infants: int = Field(ge=0)

    @field_validator("origin", mode="before")
    @classmethod
    def normalize_origin(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("destinations")
    @classmethod
    def normalize_destinations(cls, v: List[str]) -> List[str]:
        codes: List[str] = []
        for code in v:
            code = code.strip().upper()
            if len(code) != 3 or not code.isalpha():
                raise ValueError(f"Invalid destination code '{code}'")
            if code not in codes:
                codes.append(code)
        return codes


class DestinationSummary(BaseModel):
    """Cheapest result for one destination of a saved search."""

    destination: str
    cheapest_price: Optional[int] = None
    airline: Optional[str] = None
    flight_count: int = 0


class SavedSearch(BaseModel):
    """One entry of the saved search document."""

    id: str
    saved_at: datetime
    params: SavedSearchParams
    results: List[DestinationSummary] = Field(default_factory=list)
    note: Optional[str] = None
