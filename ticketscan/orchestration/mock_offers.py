"""
Synthetic fallback offers.

When no provider returns anything, the aggregator fills the result with
plausible offers generated here. Every synthetic offer is
tagged with source ``mock`` and an id starting with ``mock-``.
"""

import random
from dataclasses import dataclass
from typing import Dict, List, Optional

from ticketscan.config import settings
from ticketscan.models import (
    MOCK_ID_PREFIX,
    REAL_PROVIDER_TAGS,
    FlightEndpoint,
    FlightOffer,
    FlightSegment,
    OfferPrice,
    ProviderTag,
    SearchRequest,
)
from ticketscan.utils.date_utils import format_duration
from ticketscan.utils.price_utils import compute_family_price, round_fare


@dataclass(frozen=True)
class MockAirline:
    code: str
    name: str
    hub: str


MOCK_AIRLINES: List[MockAirline] = [
    MockAirline(code="JAL", name="Japan Airlines", hub="HND"),
    MockAirline(code="ANA", name="All Nippon Airways", hub="HND"),
    MockAirline(code="SQ", name="Singapore Airlines", hub="SIN"),
    MockAirline(code="CX", name="Cathay Pacific", hub="HKG"),
    MockAirline(code="TG", name="Thai Airways", hub="BKK"),
]

# Adult round-trip base fare in JPY by destination
MOCK_BASE_PRICES: Dict[str, int] = {
    "ICN": 35000,
    "TPE": 40000,
    "HKG": 45000,
    "BKK": 50000,
    "SIN": 55000,
    "HNL": 80000,
    "LAX": 100000,
    "LHR": 120000,
    "CDG": 115000,
}
DEFAULT_MOCK_BASE_PRICE = 60000

PRICE_JITTER = 0.10
PROVIDER_PRICE_STEP = 2000
ONE_STOP_PROBABILITY = 0.3


def get_mock_base_price(destination: str) -> int:
    """Base fare for a destination, with a default for unknown airports."""
    return MOCK_BASE_PRICES.get(destination.upper(), DEFAULT_MOCK_BASE_PRICE)


def _segment(
    airline: MockAirline,
    origin: str,
    destination: str,
    departs: str,
    arrives: str,
    number: int,
    minutes: int,
) -> FlightSegment:
    return FlightSegment(
        departure=FlightEndpoint(airport=origin, time=departs),
        arrival=FlightEndpoint(airport=destination, time=arrives),
        airline=airline.name,
        flight_number=f"{airline.code}{number}",
        duration=format_duration(minutes),
    )


def _outbound(
    airline: MockAirline, airline_index: int, request: SearchRequest, one_stop: bool
) -> List[FlightSegment]:
    number = 100 + airline_index
    if one_stop and airline.hub not in (request.origin, request.destination):
        return [
            _segment(airline, request.origin, airline.hub, "10:00", "12:00", number, 120),
            _segment(airline, airline.hub, request.destination, "13:30", "17:00", number + 10, 210),
        ]
    return [_segment(airline, request.origin, request.destination, "10:00", "14:00", number, 240)]


def generate_mock_offers(
    request: SearchRequest,
    rng: Optional[random.Random] = None,
    currency: Optional[str] = None,
) -> List[FlightOffer]:
    """
    Generate fallback offers for a search request.

    One offer per airline and provider tag. The adult fare is the destination
    base price with a uniform +/-10% jitter plus a fixed step per provider
    tag, and the family price goes through the fare model with the airline
    code. About 30% of offers connect through the airline hub.

    Args:
        request: Search request being answered
        rng: Random source (defaults to a fresh unseeded generator)
        currency: Currency code (defaults to the configured currency)

    Returns:
        Unsorted offers, all tagged as mock
    """
    rng = rng or random.Random()
    currency = currency or settings.default_currency
    base_price = get_mock_base_price(request.destination)

    offers: List[FlightOffer] = []
    for i, airline in enumerate(MOCK_AIRLINES):
        for j, provider in enumerate(REAL_PROVIDER_TAGS):
            jitter = rng.uniform(-PRICE_JITTER, PRICE_JITTER) * base_price
            adult_fare = round_fare(base_price + jitter + PROVIDER_PRICE_STEP * j)

            breakdown = compute_family_price(
                adult_fare, request.adults, request.infants, currency, airline.code
            )

            outbound = _outbound(airline, i, request, rng.random() < ONE_STOP_PROBABILITY)
            inbound = [
                _segment(airline, request.destination, request.origin, "15:00", "21:00", 200 + i, 360)
            ]

            offers.append(
                FlightOffer(
                    id=f"{MOCK_ID_PREFIX}{provider.value}-{airline.code}-{i}-{j}",
                    source=ProviderTag.MOCK,
                    price=OfferPrice(
                        adult=round_fare(breakdown.adult_price),
                        infant=breakdown.infant_price,
                        total=round_fare(breakdown.grand_total),
                        currency=currency,
                    ),
                    outbound=outbound,
                    inbound=inbound,
                    airline=airline.name,
                    stops=max(0, len(outbound) - 1),
                    duration=format_duration(420 if len(outbound) > 1 else 240),
                    booking_url=f"https://example.com/book/{airline.code}",
                )
            )

    return offers
