"""
Skyscanner live pricing integration via RapidAPI.

One POST creates a live search session; the create response already carries
the first page of itineraries, which is all this adapter reads.

Host: skyscanner-api.p.rapidapi.com
Auth: X-RapidAPI-Key header
"""

import logging
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
from ticketscan.utils.date_utils import format_duration, format_local_time, split_date
from ticketscan.utils.retry import API_RETRIABLE_EXCEPTIONS, api_retrying

logger = logging.getLogger(__name__)


class SkyscannerProvider:
    """
    Adapter for the Skyscanner live search API.

    The itinerary price is the per-adult fare; infant fares are derived with
    the fare model since Skyscanner does not break them out.
    """

    name = ProviderTag.SKYSCANNER

    DEFAULT_HOST = "skyscanner-api.p.rapidapi.com"
    CREATE_ENDPOINT = "/v3/flights/live/search/create"
    MAX_ITINERARIES = 20

    def __init__(self, config: ProviderConfig):
        self.config = config
        self.host = config.base_url or self.DEFAULT_HOST

    @property
    def is_configured(self) -> bool:
        return bool(self.config.api_key)

    async def search(self, request: SearchRequest) -> List[FlightOffer]:
        """
        Search round-trip itineraries for the request.

        Returns:
            Normalized offers, or [] when unconfigured or on any upstream failure
        """
        if not self.is_configured:
            logger.info("[skyscanner] RapidAPI key not configured, skipping")
            return []

        url = f"https://{self.host}{self.CREATE_ENDPOINT}"
        headers = {
            "Content-Type": "application/json",
            "X-RapidAPI-Key": self.config.api_key,
            "X-RapidAPI-Host": self.host,
            "User-Agent": get_random_user_agent(),
        }

        try:
            async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                async for attempt in api_retrying(max_attempts=self.config.max_retries):
                    with attempt:
                        response = await client.post(
                            url, json={"query": self._build_query(request)}, headers=headers
                        )

            check_response(response, self.name.value)
            offers = self._parse_itineraries(read_json(response, self.name.value), request)
            logger.info(
                f"[skyscanner] {len(offers)} offers for {request.origin} -> {request.destination}"
            )
            return offers

        except ProviderError as e:
            log_provider_error(logger, e)
            return []
        except API_RETRIABLE_EXCEPTIONS as e:
            logger.error(f"[skyscanner] Network error after retries: {e}")
            return []
        except httpx.HTTPError as e:
            logger.error(f"[skyscanner] HTTP error: {e}")
            return []

    def _build_query(self, request: SearchRequest) -> Dict[str, Any]:
        def leg(origin: str, destination: str, day) -> Dict[str, Any]:
            year, month, dom = split_date(day)
            return {
                "originPlaceId": {"iata": origin},
                "destinationPlaceId": {"iata": destination},
                "date": {"year": year, "month": month, "day": dom},
            }

        return {
            "market": self.config.market,
            "locale": self.config.locale,
            "currency": self.config.currency,
            "queryLegs": [
                leg(request.origin, request.destination, request.departure_date),
                leg(request.destination, request.origin, request.return_date),
            ],
            "adults": request.adults,
            "infants": request.infants,
            "cabinClass": "CABIN_CLASS_ECONOMY",
        }

    def _parse_itineraries(self, data: Any, request: SearchRequest) -> List[FlightOffer]:
        if not isinstance(data, dict):
            raise ProviderParsingError(
                "Unexpected response shape: body is not an object",
                provider_name=self.name.value,
            )

        body = data.get("data") or {}
        if not isinstance(body, dict):
            raise ProviderParsingError(
                "Unexpected response shape: 'data' is not an object",
                provider_name=self.name.value,
            )

        itineraries = body.get("itineraries") or []
        if not isinstance(itineraries, list):
            raise ProviderParsingError(
                "Unexpected response shape: 'itineraries' is not a list",
                provider_name=self.name.value,
            )

        cap = min(self.MAX_ITINERARIES, self.config.max_offers)
        offers: List[FlightOffer] = []
        for itinerary in itineraries[:cap]:
            try:
                offers.append(self._parse_itinerary(itinerary, request))
            except (AttributeError, KeyError, TypeError, ValueError, IndexError) as e:
                logger.warning(f"[skyscanner] Skipping malformed itinerary: {e}")
        return offers

    def _parse_itinerary(self, itinerary: Dict[str, Any], request: SearchRequest) -> FlightOffer:
        legs = itinerary.get("legs") or []
        outbound_leg = legs[0] if legs else None
        inbound_leg = legs[1] if len(legs) > 1 else None

        outbound = self._convert_leg(outbound_leg) if outbound_leg else []
        marketing = ((outbound_leg or {}).get("carriers") or {}).get("marketing") or []
        airline = marketing[0].get("name") if marketing else None

        airline_code = None
        if outbound_leg and outbound_leg.get("segments"):
            airline_code = (outbound_leg["segments"][0].get("marketingCarrier") or {}).get(
                "alternateId"
            )

        return build_offer(
            offer_id=f"skyscanner-{itinerary['id']}",
            source=self.name,
            adult_fare=(itinerary.get("price") or {}).get("raw"),
            request=request,
            currency=self.config.currency,
            outbound=outbound,
            inbound=self._convert_leg(inbound_leg) if inbound_leg else [],
            airline=airline or "Unknown",
            airline_code=airline_code,
            duration=format_duration(outbound_leg.get("durationInMinutes") if outbound_leg else 0),
            booking_url=itinerary.get("deeplink"),
        )

    @staticmethod
    def _convert_leg(leg: Dict[str, Any]) -> List[FlightSegment]:
        return [
            FlightSegment(
                departure=FlightEndpoint(
                    airport=seg["origin"]["displayCode"],
                    time=format_local_time(seg.get("departure")),
                ),
                arrival=FlightEndpoint(
                    airport=seg["destination"]["displayCode"],
                    time=format_local_time(seg.get("arrival")),
                ),
                airline=(seg.get("marketingCarrier") or {}).get("name", ""),
                flight_number=str(seg.get("flightNumber", "")),
                duration=format_duration(seg.get("durationInMinutes")),
            )
            for seg in leg.get("segments") or []
        ]
