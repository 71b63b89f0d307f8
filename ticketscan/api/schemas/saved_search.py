"""
Pydantic schemas for the saved-search endpoints.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from ticketscan.models import DestinationSummary, SavedSearch, SavedSearchParams


class SavedSearchCreate(BaseModel):
    """
    Request body for saving a search.

    When ``results`` is omitted the search is run first and its per-destination
    summary is stored.
    """

    params: SavedSearchParams
    results: Optional[List[DestinationSummary]] = None
    note: Optional[str] = Field(None, max_length=500)


class NoteUpdate(BaseModel):
    note: Optional[str] = Field(None, max_length=500)


class SavedSearchListResponse(BaseModel):
    searches: List[SavedSearch]
    total: int
