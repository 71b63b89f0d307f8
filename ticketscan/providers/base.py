"""
Provider adapter contract and shared adapter helpers.

Every flight data source is wrapped in an adapter that satisfies the
``FlightProvider`` protocol. Adapters are independent classes; what they have
in common (configuration, response checks, segment-derived fields) lives in
the functions below rather than in a base class.

Contract:
    - ``search(request)`` returns offers in the common ``FlightOffer`` shape.
    - It never raises for expected failures (missing credentials, non-2xx
      responses, malformed payloads, network errors); it logs the cause and
      returns an empty list.
    - Missing credentials short-circuit before any network call.

Usage:
    >>> provider = SkyscannerProvider(ProviderConfig(api_key="..."))
    >>> offers = await provider.search(request)
"""

import random
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, Sequence, runtime_checkable

import httpx

from ticketscan.models import FlightOffer, FlightSegment, OfferPrice, ProviderTag, SearchRequest
from ticketscan.providers.exceptions import (
    ProviderAPIError,
    ProviderAuthenticationError,
    ProviderParsingError,
    ProviderRateLimitError,
)
from ticketscan.utils.price_utils import derive_infant_fare, round_fare

# Rotated per request so upstream caches do not key on a single client
USER_AGENTS: List[str] = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.2 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
]


@runtime_checkable
class FlightProvider(Protocol):
    """Capability implemented by every provider adapter."""

    name: ProviderTag

    @property
    def is_configured(self) -> bool:
        """Whether the adapter has the credentials it needs."""
        ...

    async def search(self, request: SearchRequest) -> List[FlightOffer]:
        """Search offers for a request; returns [] on expected failures."""
        ...


@dataclass(frozen=True)
class ProviderConfig:
    """
    Explicit configuration handed to an adapter at construction.

    Attributes:
        api_key: API key or OAuth client id
        api_secret: OAuth client secret (Amadeus only)
        base_url: Base URL or RapidAPI host, adapter specific
        timeout: HTTP timeout per request in seconds
        max_retries: Attempts per request on transient network errors
        currency: Currency requested from the provider
        market: Market code sent where the provider supports it
        locale: Locale sent where the provider supports it
        max_offers: Upper bound on offers considered per call
    """

    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    base_url: Optional[str] = None
    timeout: int = 30
    max_retries: int = 3
    currency: str = "JPY"
    market: str = "JP"
    locale: str = "ja-JP"
    max_offers: int = 20


def get_random_user_agent() -> str:
    """Pick a browser User-Agent for an outgoing request."""
    return random.choice(USER_AGENTS)


def stops_for(segments: Sequence[FlightSegment]) -> int:
    """Number of stops for an itinerary: segment count minus one, floored at 0."""
    return max(0, len(segments) - 1)


def check_response(response: httpx.Response, provider_name: str) -> None:
    """
    Raise the matching ProviderAPIError for a non-2xx response.

    Args:
        response: Upstream HTTP response
        provider_name: Provider tag used in error messages

    Raises:
        ProviderAuthenticationError: On 401/403
        ProviderRateLimitError: On 429
        ProviderAPIError: On any other non-2xx status
    """
    status_code = response.status_code
    if 200 <= status_code < 300:
        return

    url = str(response.request.url) if _has_request(response) else None

    if status_code in (401, 403):
        raise ProviderAuthenticationError(
            f"Credentials rejected (status {status_code})",
            provider_name=provider_name,
            status_code=status_code,
            url=url,
        )
    if status_code == 429:
        retry_after = response.headers.get("Retry-After")
        raise ProviderRateLimitError(
            "API rate limit exceeded",
            provider_name=provider_name,
            url=url,
            retry_after=int(retry_after) if str(retry_after).isdigit() else None,
        )
    raise ProviderAPIError(
        f"API request failed with status {status_code}",
        provider_name=provider_name,
        status_code=status_code,
        url=url,
        recoverable=status_code >= 500,
    )


def _has_request(response: httpx.Response) -> bool:
    try:
        response.request
    except RuntimeError:
        return False
    return True


def read_json(response: httpx.Response, provider_name: str) -> Any:
    """
    Decode a JSON response body.

    Raises:
        ProviderParsingError: If the body is not JSON
    """
    try:
        return response.json()
    except ValueError as e:
        raise ProviderParsingError(
            "Response body is not valid JSON",
            provider_name=provider_name,
            original_error=e,
        ) from e


def build_offer(
    *,
    offer_id: str,
    source: ProviderTag,
    adult_fare: Any,
    request: SearchRequest,
    currency: str,
    outbound: List[FlightSegment],
    inbound: List[FlightSegment],
    airline: str,
    duration: str,
    airline_code: Optional[str] = None,
    infant_fare: Optional[Any] = None,
    booking_url: Optional[str] = None,
) -> FlightOffer:
    """
    Assemble a normalized offer from parsed provider fields.

    The adult fare is rounded to whole units. When the provider does not
    quote an infant fare (or quotes a non-positive one) it is derived from
    the adult fare with the carrier's infant rate.

    Args:
        offer_id: Globally unique offer id, already prefixed with the tag
        source: Provider tag
        adult_fare: Fare per adult as reported upstream
        request: Search request (traveler counts)
        currency: Currency code of the fare
        outbound: Outbound segments
        inbound: Return segments
        airline: Display name of the marketing airline
        duration: Outbound duration as 'Nh Mm'
        airline_code: Carrier code for the infant rate lookup
        infant_fare: Infant fare quoted by the provider, if any
        booking_url: Deep link, if the provider supplies one

    Returns:
        FlightOffer with stops derived from the outbound segments
    """
    adult = round_fare(adult_fare)
    quoted_infant = round_fare(infant_fare) if infant_fare is not None else 0
    infant = quoted_infant if quoted_infant > 0 else derive_infant_fare(adult, airline_code)

    return FlightOffer(
        id=offer_id,
        source=source,
        price=OfferPrice(
            adult=adult,
            infant=infant,
            total=adult * request.adults + infant * request.infants,
            currency=currency,
        ),
        outbound=outbound,
        inbound=inbound,
        airline=airline,
        stops=stops_for(outbound),
        duration=duration,
        booking_url=booking_url,
    )
