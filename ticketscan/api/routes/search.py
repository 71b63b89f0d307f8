"""
Flight search endpoints.

Query parameters are validated here and not by FastAPI's own coercion, so
that every malformed request gets a 400 with a readable ``detail`` instead
of a 422 validation dump.
"""

import logging
from datetime import date, datetime, timezone
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ticketscan.api.dependencies import get_orchestrator
from ticketscan.api.schemas.search import CompareParams, CompareResponse
from ticketscan.config import settings
from ticketscan.models import SearchRequest, SearchResult
from ticketscan.orchestration import FlightOrchestrator
from ticketscan.storage import summarize_results
from ticketscan.utils.validators import (
    validate_airport_code,
    validate_airport_codes_list,
    validate_date,
    validate_travelers,
    validate_trip_dates,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _bad_request(error: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


def _parse_count(value: Optional[str], field: str, default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{field} must be an integer (got '{value}')")


def _parse_common(
    origin: Optional[str],
    departure_date: Optional[str],
    return_date: Optional[str],
    adults: Optional[str],
    infants: Optional[str],
) -> Tuple[str, date, date, int, int]:
    origin_code = validate_airport_code(origin or settings.default_origin, field="origin")
    departure = validate_date(departure_date, "departure_date")
    ret = validate_date(return_date, "return_date")
    validate_trip_dates(departure, ret)
    adult_count = _parse_count(adults, "adults", settings.default_adults)
    infant_count = _parse_count(infants, "infants", settings.default_infants)
    validate_travelers(adult_count, infant_count)
    return origin_code, departure, ret, adult_count, infant_count


def search_request_params(
    origin: Optional[str] = Query(None, description="Origin IATA code (default NRT)"),
    destination: Optional[str] = Query(None, description="Destination IATA code"),
    departure_date: Optional[str] = Query(None, description="Outbound date, YYYY-MM-DD"),
    return_date: Optional[str] = Query(None, description="Return date, YYYY-MM-DD"),
    adults: Optional[str] = Query(None, description="Number of adults (default 2)"),
    infants: Optional[str] = Query(None, description="Number of lap infants (default 1)"),
) -> SearchRequest:
    """Build a SearchRequest from query parameters or answer 400."""
    try:
        origin_code, departure, ret, adult_count, infant_count = _parse_common(
            origin, departure_date, return_date, adults, infants
        )
        destination_code = validate_airport_code(destination, field="destination")
    except ValueError as e:
        raise _bad_request(e)

    return SearchRequest(
        origin=origin_code,
        destination=destination_code,
        departure_date=departure,
        return_date=ret,
        adults=adult_count,
        infants=infant_count,
    )


@router.get("", response_model=SearchResult)
async def search_flights(
    request: SearchRequest = Depends(search_request_params),
    orchestrator: FlightOrchestrator = Depends(get_orchestrator),
) -> SearchResult:
    """
    Search round-trip offers across all providers.

    Offers are sorted by total family price. ``sources`` tells which providers
    contributed and whether the result is synthetic fallback data.
    """
    logger.info(f"Search API: {request.origin} -> {request.destination}")
    return await orchestrator.search(request)


@router.get("/compare", response_model=CompareResponse)
async def compare_destinations(
    origin: Optional[str] = Query(None, description="Origin IATA code (default NRT)"),
    destinations: Optional[str] = Query(None, description="Comma-separated IATA codes"),
    departure_date: Optional[str] = Query(None, description="Outbound date, YYYY-MM-DD"),
    return_date: Optional[str] = Query(None, description="Return date, YYYY-MM-DD"),
    adults: Optional[str] = Query(None),
    infants: Optional[str] = Query(None),
    orchestrator: FlightOrchestrator = Depends(get_orchestrator),
) -> CompareResponse:
    """
    Search several destinations at once and summarize the cheapest offer of
    each.
    """
    try:
        origin_code, departure, ret, adult_count, infant_count = _parse_common(
            origin, departure_date, return_date, adults, infants
        )
        codes: List[str] = validate_airport_codes_list(destinations)
    except ValueError as e:
        raise _bad_request(e)

    results = await orchestrator.search_many(
        origin=origin_code,
        destinations=codes,
        departure_date=departure,
        return_date=ret,
        adults=adult_count,
        infants=infant_count,
    )

    return CompareResponse(
        searched_at=datetime.now(timezone.utc),
        params=CompareParams(
            origin=origin_code,
            destinations=codes,
            departure_date=departure,
            return_date=ret,
            adults=adult_count,
            infants=infant_count,
        ),
        summaries=summarize_results(codes, results),
        results=results,
    )
