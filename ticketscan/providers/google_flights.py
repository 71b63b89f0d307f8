"""
Google Flights integration via the RapidAPI flights-scraper.

The scraper only searches one-way trips, so a round trip is two sequential
calls (outbound, then return) whose results are paired by position.

Host: flights-scraper-data.p.rapidapi.com
Auth: X-RapidAPI-Key header
"""

import logging
import time
from datetime import date
from typing import Any, Dict, List

import httpx

from ticketscan.models import FlightEndpoint, FlightOffer, FlightSegment, ProviderTag, SearchRequest
from ticketscan.providers.base import (
    ProviderConfig,
    build_offer,
    check_response,
    get_random_user_agent,
    read_json,
)
from ticketscan.providers.exceptions import ProviderError, ProviderParsingError, log_provider_error
from ticketscan.utils.date_utils import format_duration, format_local_time
from ticketscan.utils.retry import API_RETRIABLE_EXCEPTIONS, api_retrying

logger = logging.getLogger(__name__)


class GoogleFlightsProvider:
    """
    Adapter for Google Flights results scraped through RapidAPI.

    Examples:
        >>> provider = GoogleFlightsProvider(ProviderConfig(api_key="rapidapi-key"))
        >>> offers = await provider.search(request)
    """

    name = ProviderTag.GOOGLE_FLIGHTS

    DEFAULT_HOST = "flights-scraper-data.p.rapidapi.com"
    SEARCH_ENDPOINT = "/flights/search-one-way"
    MAX_RESULTS = 15

    def __init__(self, config: ProviderConfig):
        self.config = config
        self.host = config.base_url or self.DEFAULT_HOST

    @property
    def is_configured(self) -> bool:
        return bool(self.config.api_key)

    async def search(self, request: SearchRequest) -> List[FlightOffer]:
        """
        Search outbound and return flights and pair them into round trips.

        A failed or empty return search is tolerated: offers then carry no
        inbound segments and the outbound price stands in for the return price.

        Returns:
            Normalized offers, or [] when unconfigured or when the outbound
            search fails
        """
        if not self.is_configured:
            logger.info("[googleflights] RapidAPI key not configured, skipping")
            return []

        logger.info(f"[googleflights] Searching {request.origin} -> {request.destination}")

        try:
            async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                outbound_results = await self._search_one_way(
                    client, request.origin, request.destination, request.departure_date, request
                )
                if not outbound_results:
                    logger.info("[googleflights] No outbound results")
                    return []

                try:
                    return_results = await self._search_one_way(
                        client, request.destination, request.origin, request.return_date, request
                    )
                except ProviderError as e:
                    log_provider_error(logger, e)
                    return_results = []
                except (httpx.HTTPError, ConnectionError, TimeoutError) as e:
                    logger.warning(f"[googleflights] Return search failed: {e}")
                    return_results = []

            offers = self._pair_results(outbound_results, return_results, request)
            logger.info(f"[googleflights] Found {len(offers)} offers")
            return offers

        except ProviderError as e:
            log_provider_error(logger, e)
            return []
        except API_RETRIABLE_EXCEPTIONS as e:
            logger.error(f"[googleflights] Network error after retries: {e}")
            return []
        except httpx.HTTPError as e:
            logger.error(f"[googleflights] HTTP error: {e}")
            return []

    async def _search_one_way(
        self,
        client: httpx.AsyncClient,
        origin: str,
        destination: str,
        day: date,
        request: SearchRequest,
    ) -> List[Dict[str, Any]]:
        """
        Run one one-way search.

        Returns:
            best_flights followed by other_flights; [] when the scraper
            reports no results
        """
        params = {
            "origin": origin,
            "destination": destination,
            "date": day.isoformat(),
            "adults": str(request.adults),
            "children": "0",
            "infants_in_seat": "0",
            "infants_on_lap": str(request.infants),
            "currency": self.config.currency,
        }
        headers = {
            "X-RapidAPI-Key": self.config.api_key,
            "X-RapidAPI-Host": self.host,
            "User-Agent": get_random_user_agent(),
        }

        async for attempt in api_retrying(max_attempts=self.config.max_retries):
            with attempt:
                response = await client.get(
                    f"https://{self.host}{self.SEARCH_ENDPOINT}", params=params, headers=headers
                )

        check_response(response, self.name.value)
        payload = read_json(response, self.name.value)

        if not isinstance(payload, dict):
            raise ProviderParsingError(
                "Unexpected response shape: body is not an object",
                provider_name=self.name.value,
            )
        data = payload.get("data")
        if not payload.get("status") or not isinstance(data, dict):
            return []

        results: List[Dict[str, Any]] = []
        for key in ("best_flights", "other_flights"):
            flights = data.get(key) or []
            if not isinstance(flights, list):
                raise ProviderParsingError(
                    f"Unexpected response shape: '{key}' is not a list",
                    provider_name=self.name.value,
                )
            results.extend(flights)
        return results

    def _pair_results(
        self,
        outbound_results: List[Dict[str, Any]],
        return_results: List[Dict[str, Any]],
        request: SearchRequest,
    ) -> List[FlightOffer]:
        stamp = int(time.time() * 1000)
        offers: List[FlightOffer] = []

        for i, outbound in enumerate(outbound_results[: self.MAX_RESULTS]):
            inbound = return_results[i % len(return_results)] if return_results else None
            try:
                offers.append(self._build(i, stamp, outbound, inbound, request))
            except (AttributeError, KeyError, TypeError, ValueError, IndexError) as e:
                logger.warning(f"[googleflights] Skipping malformed result {i}: {e}")

        return offers

    def _build(
        self,
        index: int,
        stamp: int,
        outbound: Dict[str, Any],
        inbound: Any,
        request: SearchRequest,
    ) -> FlightOffer:
        outbound_price = _number(outbound.get("price"))
        inbound_price = _number(inbound.get("price")) if inbound else 0
        adult_fare = outbound_price + (inbound_price or outbound_price)

        outbound_segments = self._convert_segments(_first_segment_group(outbound))
        inbound_segments = self._convert_segments(_first_segment_group(inbound)) if inbound else []

        return build_offer(
            offer_id=f"googleflights-{index}-{stamp}",
            source=self.name,
            adult_fare=adult_fare,
            request=request,
            currency=self.config.currency,
            outbound=outbound_segments,
            inbound=inbound_segments,
            airline=outbound_segments[0].airline if outbound_segments else "Unknown",
            duration=format_duration(outbound.get("total_duration")),
        )

    @staticmethod
    def _convert_segments(segments: List[Dict[str, Any]]) -> List[FlightSegment]:
        return [
            FlightSegment(
                departure=FlightEndpoint(
                    airport=seg["departure_airport"]["id"],
                    time=format_local_time(seg["departure_airport"].get("time")),
                ),
                arrival=FlightEndpoint(
                    airport=seg["arrival_airport"]["id"],
                    time=format_local_time(seg["arrival_airport"].get("time")),
                ),
                airline=seg.get("airline") or "Unknown",
                flight_number=str(seg.get("flight_number", "")),
                duration=format_duration(seg.get("duration")),
            )
            for seg in segments
        ]


def _first_segment_group(result: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Segments of a result; ``flights`` is a list of segment lists."""
    flights = result.get("flights") or []
    if not flights:
        return []
    if isinstance(flights[0], list):
        return flights[0]
    return flights


def _number(value: Any) -> float:
    try:
        return max(0.0, float(value))
    except (TypeError, ValueError):
        return 0.0
