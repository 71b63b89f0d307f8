"""
Amadeus Self-Service API integration for flight searching.

Uses the Flight Offers Search endpoint with an explicit traveler list, so
lap infants (HELD_INFANT) are priced by Amadeus itself whenever the carrier
files an infant fare.

API Documentation: https://developers.amadeus.com/self-service/category/flights
Base URL: https://test.api.amadeus.com (test) / https://api.amadeus.com (production)
Auth: OAuth2 client credentials
"""

import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from ticketscan.models import FlightEndpoint, FlightOffer, FlightSegment, ProviderTag, SearchRequest
from ticketscan.providers.base import (
    ProviderConfig,
    build_offer,
    check_response,
    get_random_user_agent,
    read_json,
)
from ticketscan.providers.exceptions import (
    ProviderAuthenticationError,
    ProviderError,
    ProviderParsingError,
    log_provider_error,
)
from ticketscan.utils.date_utils import format_iso_duration, format_local_time
from ticketscan.utils.retry import API_RETRIABLE_EXCEPTIONS, api_retrying

logger = logging.getLogger(__name__)


class AmadeusProvider:
    """
    Adapter for the Amadeus Flight Offers Search API.

    Examples:
        >>> provider = AmadeusProvider(ProviderConfig(api_key="id", api_secret="secret"))
        >>> offers = await provider.search(request)
        >>> print(f"Found {len(offers)} Amadeus offers")
    """

    name = ProviderTag.AMADEUS

    DEFAULT_BASE_URL = "https://test.api.amadeus.com"
    TOKEN_ENDPOINT = "/v1/security/oauth2/token"
    SEARCH_ENDPOINT = "/v2/shopping/flight-offers"

    # Refresh the token slightly before Amadeus expires it
    TOKEN_EXPIRY_MARGIN = 60

    def __init__(self, config: ProviderConfig):
        """
        Initialize the Amadeus adapter.

        Args:
            config: Adapter configuration; api_key is the OAuth client id and
                api_secret the client secret
        """
        self.config = config
        self.base_url = (config.base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self._access_token: Optional[str] = None
        self._token_expires_at: float = 0.0

    @property
    def is_configured(self) -> bool:
        return bool(self.config.api_key and self.config.api_secret)

    async def search(self, request: SearchRequest) -> List[FlightOffer]:
        """
        Search round-trip offers for the request.

        Returns:
            Normalized offers, or [] when unconfigured or on any upstream failure
        """
        if not self.is_configured:
            logger.info("[amadeus] API credentials not configured, skipping")
            return []

        try:
            async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                token = await self._get_access_token(client)
                data = await self._search_offers(client, token, request)
            offers = self._parse_offers(data, request)
            logger.info(
                f"[amadeus] {len(offers)} offers for {request.origin} -> {request.destination}"
            )
            return offers

        except ProviderError as e:
            log_provider_error(logger, e)
            return []
        except API_RETRIABLE_EXCEPTIONS as e:
            logger.error(f"[amadeus] Network error after retries: {e}")
            return []
        except httpx.HTTPError as e:
            logger.error(f"[amadeus] HTTP error: {e}")
            return []

    async def _get_access_token(self, client: httpx.AsyncClient) -> str:
        """
        Return a cached OAuth2 token, requesting a new one when expired.

        Raises:
            ProviderAuthenticationError: If Amadeus does not issue a token
        """
        if self._access_token and time.monotonic() < self._token_expires_at:
            return self._access_token

        async for attempt in api_retrying(max_attempts=self.config.max_retries):
            with attempt:
                response = await client.post(
                    f"{self.base_url}{self.TOKEN_ENDPOINT}",
                    data={
                        "grant_type": "client_credentials",
                        "client_id": self.config.api_key,
                        "client_secret": self.config.api_secret,
                    },
                )

        check_response(response, self.name.value)
        payload = read_json(response, self.name.value)

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise ProviderAuthenticationError(
                "Token response did not contain an access_token",
                provider_name=self.name.value,
                status_code=response.status_code,
            )

        try:
            expires_in = int(payload.get("expires_in", 0))
        except (TypeError, ValueError):
            expires_in = 0

        self._access_token = token
        self._token_expires_at = time.monotonic() + max(0, expires_in - self.TOKEN_EXPIRY_MARGIN)
        logger.debug(f"[amadeus] Obtained access token, expires in {expires_in}s")
        return token

    def _build_payload(self, request: SearchRequest) -> Dict[str, Any]:
        travelers: List[Dict[str, str]] = [
            {"id": str(i + 1), "travelerType": "ADULT"} for i in range(request.adults)
        ]
        # Each lap infant sits with a distinct adult; infants never exceed adults upstream
        for i in range(request.infants):
            travelers.append(
                {
                    "id": str(request.adults + i + 1),
                    "travelerType": "HELD_INFANT",
                    "associatedAdultId": str((i % request.adults) + 1),
                }
            )

        return {
            "currencyCode": self.config.currency,
            "originDestinations": [
                {
                    "id": "1",
                    "originLocationCode": request.origin,
                    "destinationLocationCode": request.destination,
                    "departureDateTimeRange": {"date": request.departure_date.isoformat()},
                },
                {
                    "id": "2",
                    "originLocationCode": request.destination,
                    "destinationLocationCode": request.origin,
                    "departureDateTimeRange": {"date": request.return_date.isoformat()},
                },
            ],
            "travelers": travelers,
            "sources": ["GDS"],
            "searchCriteria": {"maxFlightOffers": self.config.max_offers},
        }

    async def _search_offers(
        self,
        client: httpx.AsyncClient,
        token: str,
        request: SearchRequest,
    ) -> Any:
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "User-Agent": get_random_user_agent(),
        }
        url = f"{self.base_url}{self.SEARCH_ENDPOINT}"

        async for attempt in api_retrying(max_attempts=self.config.max_retries):
            with attempt:
                response = await client.post(
                    url, json=self._build_payload(request), headers=headers
                )

        if response.status_code == 401:
            # Stale token; the next search fetches a fresh one
            self._access_token = None
        check_response(response, self.name.value)
        return read_json(response, self.name.value)

    def _parse_offers(self, data: Any, request: SearchRequest) -> List[FlightOffer]:
        """
        Convert the Amadeus response body to normalized offers.

        Raises:
            ProviderParsingError: If the body has no offer list
        """
        if not isinstance(data, dict) or not isinstance(data.get("data", []), list):
            raise ProviderParsingError(
                "Unexpected response shape: missing 'data' list",
                provider_name=self.name.value,
            )

        offers: List[FlightOffer] = []
        for raw in data.get("data", [])[: self.config.max_offers]:
            try:
                offers.append(self._parse_offer(raw, request))
            except (AttributeError, KeyError, TypeError, ValueError, IndexError) as e:
                logger.warning(f"[amadeus] Skipping malformed offer: {e}")
        return offers

    def _parse_offer(self, raw: Dict[str, Any], request: SearchRequest) -> FlightOffer:
        pricings = raw.get("travelerPricings") or []
        adult_pricing = next((tp for tp in pricings if tp.get("travelerType") == "ADULT"), None)
        infant_pricing = next(
            (tp for tp in pricings if tp.get("travelerType") == "HELD_INFANT"), None
        )

        adult_fare = adult_pricing["price"]["total"] if adult_pricing else 0
        infant_fare = infant_pricing["price"]["total"] if infant_pricing else None

        itineraries = raw.get("itineraries") or []
        outbound = [self._convert_segment(s) for s in itineraries[0]["segments"]] if itineraries else []
        inbound = (
            [self._convert_segment(s) for s in itineraries[1]["segments"]]
            if len(itineraries) > 1
            else []
        )

        validating = raw.get("validatingAirlineCodes") or []
        airline_code = validating[0] if validating else None

        return build_offer(
            offer_id=f"amadeus-{raw['id']}",
            source=self.name,
            adult_fare=adult_fare,
            infant_fare=infant_fare,
            request=request,
            currency=(raw.get("price") or {}).get("currency") or self.config.currency,
            outbound=outbound,
            inbound=inbound,
            airline=airline_code or "Unknown",
            airline_code=airline_code,
            duration=format_iso_duration(itineraries[0].get("duration") if itineraries else None),
        )

    @staticmethod
    def _convert_segment(segment: Dict[str, Any]) -> FlightSegment:
        carrier = segment.get("carrierCode", "")
        return FlightSegment(
            departure=FlightEndpoint(
                airport=segment["departure"]["iataCode"],
                time=format_local_time(segment["departure"].get("at")),
            ),
            arrival=FlightEndpoint(
                airport=segment["arrival"]["iataCode"],
                time=format_local_time(segment["arrival"].get("at")),
            ),
            airline=carrier,
            flight_number=f"{carrier}{segment.get('number', '')}",
            duration=format_iso_duration(segment.get("duration")),
        )
