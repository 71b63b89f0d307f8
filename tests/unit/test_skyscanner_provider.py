"""
Unit tests for the Skyscanner provider adapter.
"""

from typing import Any, Dict
from unittest.mock import patch

import httpx
import pytest

from ticketscan.models import ProviderTag
from ticketscan.providers import ProviderConfig, SkyscannerProvider


@pytest.fixture
def provider() -> SkyscannerProvider:
    return SkyscannerProvider(ProviderConfig(api_key="rapidapi-key", max_retries=1))


def _itinerary(itinerary_id: str, price: float, segments: int = 1) -> Dict[str, Any]:
    outbound_segments = [
        {
            "origin": {"displayCode": "NRT"},
            "destination": {"displayCode": "BKK" if segments == 1 else "HKG"},
            "departure": "2025-03-01T09:05:00",
            "arrival": "2025-03-01T14:35:00",
            "durationInMinutes": 390,
            "flightNumber": "TG677",
            "marketingCarrier": {"name": "Thai Airways", "alternateId": "TG"},
        }
    ]
    if segments == 2:
        outbound_segments.append(
            {
                "origin": {"displayCode": "HKG"},
                "destination": {"displayCode": "BKK"},
                "departure": "2025-03-01T16:00:00",
                "arrival": "2025-03-01T18:00:00",
                "durationInMinutes": 180,
                "flightNumber": "CX653",
                "marketingCarrier": {"name": "Cathay Pacific", "alternateId": "CX"},
            }
        )
    return {
        "id": itinerary_id,
        "price": {"raw": price, "formatted": f"¥{price:,.0f}"},
        "deeplink": f"https://www.skyscanner.jp/transport_deeplink/{itinerary_id}",
        "legs": [
            {
                "durationInMinutes": 390,
                "stopCount": segments - 1,
                "carriers": {"marketing": [{"id": 1, "name": "Thai Airways"}]},
                "segments": outbound_segments,
            },
            {
                "durationInMinutes": 360,
                "stopCount": 0,
                "carriers": {"marketing": [{"id": 1, "name": "Thai Airways"}]},
                "segments": [
                    {
                        "origin": {"displayCode": "BKK"},
                        "destination": {"displayCode": "NRT"},
                        "departure": "2025-03-08T22:30:00",
                        "arrival": "2025-03-09T06:30:00",
                        "durationInMinutes": 360,
                        "flightNumber": "TG676",
                        "marketingCarrier": {"name": "Thai Airways", "alternateId": "TG"},
                    }
                ],
            },
        ],
    }


class TestSkyscannerSearch:
    @pytest.mark.asyncio
    async def test_unconfigured_returns_empty(self, search_request):
        provider = SkyscannerProvider(ProviderConfig(api_key=""))

        with patch("httpx.AsyncClient.post") as mock_post:
            assert await provider.search(search_request) == []

        mock_post.assert_not_called()

    @pytest.mark.asyncio
    async def test_search_parses_itinerary(self, provider, search_request, mock_response):
        body = {"data": {"itineraries": [_itinerary("abc", 48500.4)]}}

        with patch("httpx.AsyncClient.post", return_value=mock_response(200, body)):
            offers = await provider.search(search_request)

        assert len(offers) == 1
        offer = offers[0]
        assert offer.id == "skyscanner-abc"
        assert offer.source == ProviderTag.SKYSCANNER
        assert offer.airline == "Thai Airways"
        assert offer.booking_url == "https://www.skyscanner.jp/transport_deeplink/abc"
        assert offer.duration == "6h 30m"
        assert offer.stops == 0
        assert offer.outbound[0].departure.time == "09:05"
        assert offer.inbound[0].arrival.airport == "NRT"

        # 48500.4 -> 48500, infant 10% -> 4850
        assert offer.price.adult == 48500
        assert offer.price.infant == 4850
        assert offer.price.total == 48500 * 2 + 4850

    @pytest.mark.asyncio
    async def test_stops_follow_segments(self, provider, search_request, mock_response):
        body = {"data": {"itineraries": [_itinerary("two", 60000, segments=2)]}}

        with patch("httpx.AsyncClient.post", return_value=mock_response(200, body)):
            offers = await provider.search(search_request)

        assert offers[0].stops == 1
        assert offers[0].outbound[1].flight_number == "CX653"

    @pytest.mark.asyncio
    async def test_itineraries_are_capped(self, provider, search_request, mock_response):
        body = {"data": {"itineraries": [_itinerary(str(i), 50000 + i) for i in range(30)]}}

        with patch("httpx.AsyncClient.post", return_value=mock_response(200, body)):
            offers = await provider.search(search_request)

        assert len(offers) == 20

    @pytest.mark.asyncio
    async def test_query_payload(self, provider, search_request, mock_response):
        body = {"data": {"itineraries": []}}

        with patch("httpx.AsyncClient.post", return_value=mock_response(200, body)) as mock_post:
            await provider.search(search_request)

        call = mock_post.call_args
        assert call.args[0] == "https://skyscanner-api.p.rapidapi.com/v3/flights/live/search/create"
        assert call.kwargs["headers"]["X-RapidAPI-Key"] == "rapidapi-key"
        query = call.kwargs["json"]["query"]
        assert query["market"] == "JP"
        assert query["currency"] == "JPY"
        assert query["queryLegs"][0]["date"] == {"year": 2025, "month": 3, "day": 1}
        assert query["queryLegs"][1]["originPlaceId"] == {"iata": "BKK"}
        assert query["infants"] == 1


class TestSkyscannerFailures:
    @pytest.mark.asyncio
    async def test_rate_limited(self, provider, search_request, mock_response):
        with patch("httpx.AsyncClient.post", return_value=mock_response(429, {})):
            assert await provider.search(search_request) == []

    @pytest.mark.asyncio
    async def test_non_json_body(self, provider, search_request, mock_response):
        response = mock_response(200, json_error=ValueError("Expecting value"))

        with patch("httpx.AsyncClient.post", return_value=response):
            assert await provider.search(search_request) == []

    @pytest.mark.asyncio
    async def test_unexpected_shape(self, provider, search_request, mock_response):
        with patch("httpx.AsyncClient.post", return_value=mock_response(200, ["not", "an", "object"])):
            assert await provider.search(search_request) == []

    @pytest.mark.asyncio
    async def test_data_not_an_object(self, provider, search_request, mock_response):
        with patch("httpx.AsyncClient.post", return_value=mock_response(200, {"data": ["x"]})):
            assert await provider.search(search_request) == []

    @pytest.mark.asyncio
    async def test_timeout(self, provider, search_request):
        with patch("httpx.AsyncClient.post", side_effect=httpx.ReadTimeout("timed out")):
            assert await provider.search(search_request) == []
