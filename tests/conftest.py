"""
Pytest configuration and shared fixtures for TicketScan tests.
"""

import os
import tempfile
from datetime import date
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from dotenv import load_dotenv

# Load test environment variables before any ticketscan imports
env_file = Path(__file__).parent.parent / ".env.test"
if env_file.exists():
    load_dotenv(env_file, override=True)
else:
    # No real provider is ever called from the test suite
    os.environ["AMADEUS_CLIENT_ID"] = ""
    os.environ["AMADEUS_CLIENT_SECRET"] = ""
    os.environ["RAPIDAPI_KEY"] = ""
    os.environ.setdefault("DEBUG", "False")
    os.environ.setdefault("LOG_LEVEL", "WARNING")
    os.environ.setdefault(
        "SAVED_SEARCHES_PATH",
        str(Path(tempfile.mkdtemp(prefix="ticketscan-tests-")) / "saved_searches.json"),
    )

from ticketscan.models import (  # noqa: E402
    FlightEndpoint,
    FlightOffer,
    FlightSegment,
    OfferPrice,
    ProviderTag,
    SearchRequest,
)


@pytest.fixture
def search_request():
    """Family round trip NRT -> BKK, two adults and one lap infant."""
    return SearchRequest(
        origin="NRT",
        destination="BKK",
        departure_date=date(2025, 3, 1),
        return_date=date(2025, 3, 8),
        adults=2,
        infants=1,
    )


def make_offer(
    offer_id: str,
    total: int,
    source: ProviderTag = ProviderTag.SKYSCANNER,
    airline: str = "Thai Airways",
) -> FlightOffer:
    """Build a nonstop offer with the given total."""
    segment = FlightSegment(
        departure=FlightEndpoint(airport="NRT", time="10:00"),
        arrival=FlightEndpoint(airport="BKK", time="15:00"),
        airline=airline,
        flight_number="TG641",
        duration="7h 0m",
    )
    return FlightOffer(
        id=offer_id,
        source=source,
        price=OfferPrice(adult=total // 2, infant=0, total=total, currency="JPY"),
        outbound=[segment],
        inbound=[],
        airline=airline,
        stops=0,
        duration="7h 0m",
    )


@pytest.fixture
def offer_factory():
    """Factory for simple offers: offer_factory(id, total, source=..., airline=...)."""
    return make_offer


def make_response(status_code: int = 200, json_data=None, json_error: Exception = None):
    """
    Build a mocked httpx response.

    Args:
        status_code: HTTP status
        json_data: Value returned by .json()
        json_error: Exception raised by .json() instead
    """
    response = MagicMock()
    response.status_code = status_code
    response.headers = {}
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def mock_response():
    """Factory for mocked httpx responses: mock_response(status, json_data)."""
    return make_response
