"""
Saved search CRUD endpoints.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.concurrency import run_in_threadpool

from ticketscan.api.dependencies import get_orchestrator, get_saved_search_store
from ticketscan.api.schemas.saved_search import (
    NoteUpdate,
    SavedSearchCreate,
    SavedSearchListResponse,
)
from ticketscan.exceptions import SavedSearchNotFoundError
from ticketscan.models import SavedSearch
from ticketscan.orchestration import FlightOrchestrator
from ticketscan.storage import SavedSearchStore, summarize_results
from ticketscan.utils.validators import validate_trip_dates

logger = logging.getLogger(__name__)

# Store calls do blocking file I/O; plain def handlers run in the threadpool
router = APIRouter()


def _not_found(search_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=str(SavedSearchNotFoundError(search_id)),
    )


@router.get("", response_model=SavedSearchListResponse)
def list_saved_searches(
    store: SavedSearchStore = Depends(get_saved_search_store),
) -> SavedSearchListResponse:
    """List saved searches, newest first."""
    searches = store.list()
    return SavedSearchListResponse(searches=searches, total=len(searches))


@router.get("/{search_id}", response_model=SavedSearch)
def get_saved_search(
    search_id: str,
    store: SavedSearchStore = Depends(get_saved_search_store),
) -> SavedSearch:
    saved = store.get(search_id)
    if saved is None:
        raise _not_found(search_id)
    return saved


@router.post("", response_model=SavedSearch, status_code=status.HTTP_201_CREATED)
async def create_saved_search(
    body: SavedSearchCreate,
    store: SavedSearchStore = Depends(get_saved_search_store),
    orchestrator: FlightOrchestrator = Depends(get_orchestrator),
) -> SavedSearch:
    """
    Save a search.

    Without ``results`` in the body, the search is run now and the cheapest
    offer per destination is recorded.
    """
    params = body.params
    try:
        validate_trip_dates(params.departure_date, params.return_date)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    results = body.results
    if results is None:
        by_destination = await orchestrator.search_many(
            origin=params.origin,
            destinations=params.destinations,
            departure_date=params.departure_date,
            return_date=params.return_date,
            adults=params.adults,
            infants=params.infants,
        )
        results = summarize_results(params.destinations, by_destination)

    return await run_in_threadpool(store.save, params, results, note=body.note)


@router.delete("/{search_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_saved_search(
    search_id: str,
    store: SavedSearchStore = Depends(get_saved_search_store),
) -> Response:
    if not store.delete(search_id):
        raise _not_found(search_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{search_id}/note", response_model=SavedSearch)
def update_saved_search_note(
    search_id: str,
    body: NoteUpdate,
    store: SavedSearchStore = Depends(get_saved_search_store),
) -> SavedSearch:
    """Replace the free-text note of a saved search."""
    updated = store.update_note(search_id, body.note)
    if updated is None:
        raise _not_found(search_id)
    return updated
