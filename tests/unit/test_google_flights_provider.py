"""
Unit tests for the Google Flights provider adapter.

The adapter makes two GET calls per search (outbound, then return).
"""

from typing import Any, Dict, List
from unittest.mock import patch

import httpx
import pytest

from ticketscan.models import ProviderTag
from ticketscan.providers import GoogleFlightsProvider, ProviderConfig


@pytest.fixture
def provider() -> GoogleFlightsProvider:
    return GoogleFlightsProvider(ProviderConfig(api_key="rapidapi-key", max_retries=1))


def _result(origin: str, destination: str, price: Any, airline: str = "ANA") -> Dict[str, Any]:
    return {
        "flights": [
            [
                {
                    "departure_airport": {"id": origin, "name": origin, "time": "2025-03-01 8:15"},
                    "arrival_airport": {"id": destination, "name": destination, "time": "2025-03-01 13:45"},
                    "duration": 450,
                    "flight_number": "NH 805",
                    "airline": airline,
                }
            ]
        ],
        "total_duration": 450,
        "price": price,
        "type": "One way",
    }


def _body(results: List[Dict[str, Any]], status: bool = True) -> Dict[str, Any]:
    return {"status": status, "data": {"best_flights": results[:1], "other_flights": results[1:]}}


class TestGoogleFlightsSearch:
    @pytest.mark.asyncio
    async def test_unconfigured_returns_empty(self, search_request):
        provider = GoogleFlightsProvider(ProviderConfig())

        with patch("httpx.AsyncClient.get") as mock_get:
            assert await provider.search(search_request) == []

        mock_get.assert_not_called()

    @pytest.mark.asyncio
    async def test_pairs_outbound_and_return(self, provider, search_request, mock_response):
        outbound = _body([_result("NRT", "BKK", 30000), _result("NRT", "BKK", 32000, "JAL")])
        inbound = _body([_result("BKK", "NRT", 25000)])

        with patch(
            "httpx.AsyncClient.get",
            side_effect=[mock_response(200, outbound), mock_response(200, inbound)],
        ) as mock_get:
            offers = await provider.search(search_request)

        assert mock_get.call_count == 2
        assert mock_get.call_args_list[0].kwargs["params"]["origin"] == "NRT"
        assert mock_get.call_args_list[1].kwargs["params"]["origin"] == "BKK"
        assert mock_get.call_args_list[1].kwargs["params"]["date"] == "2025-03-08"
        assert mock_get.call_args_list[0].kwargs["params"]["infants_on_lap"] == "1"

        assert len(offers) == 2
        first, second = offers
        assert first.source == ProviderTag.GOOGLE_FLIGHTS
        assert first.id.startswith("googleflights-0-")
        assert second.id.startswith("googleflights-1-")
        assert first.airline == "ANA"
        assert second.airline == "JAL"

        # Both outbounds pair with the single return result (i % 1 == 0)
        assert first.price.adult == 55000
        assert second.price.adult == 57000
        assert first.price.infant == 5500
        assert first.price.total == 55000 * 2 + 5500

        assert first.outbound[0].departure.time == "08:15"
        assert first.inbound[0].departure.airport == "BKK"
        assert first.duration == "7h 30m"

    @pytest.mark.asyncio
    async def test_failed_return_search_is_tolerated(self, provider, search_request, mock_response):
        outbound = _body([_result("NRT", "BKK", 30000)])

        with patch(
            "httpx.AsyncClient.get",
            side_effect=[mock_response(200, outbound), mock_response(503, {})],
        ):
            offers = await provider.search(search_request)

        assert len(offers) == 1
        assert offers[0].inbound == []
        # Return price falls back to the outbound price
        assert offers[0].price.adult == 60000

    @pytest.mark.asyncio
    async def test_results_are_capped(self, provider, search_request, mock_response):
        outbound = _body([_result("NRT", "BKK", 30000 + i) for i in range(20)])
        inbound = _body([])

        with patch(
            "httpx.AsyncClient.get",
            side_effect=[mock_response(200, outbound), mock_response(200, inbound)],
        ):
            offers = await provider.search(search_request)

        assert len(offers) == 15

    @pytest.mark.asyncio
    async def test_no_outbound_results_skips_return_search(self, provider, search_request, mock_response):
        with patch(
            "httpx.AsyncClient.get", return_value=mock_response(200, _body([], status=False))
        ) as mock_get:
            offers = await provider.search(search_request)

        assert offers == []
        assert mock_get.call_count == 1


class TestGoogleFlightsFailures:
    @pytest.mark.asyncio
    async def test_outbound_error(self, provider, search_request, mock_response):
        with patch("httpx.AsyncClient.get", return_value=mock_response(500, {})):
            assert await provider.search(search_request) == []

    @pytest.mark.asyncio
    async def test_outbound_network_error(self, provider, search_request):
        with patch("httpx.AsyncClient.get", side_effect=httpx.ConnectError("unreachable")):
            assert await provider.search(search_request) == []

    @pytest.mark.asyncio
    async def test_malformed_body(self, provider, search_request, mock_response):
        response = mock_response(200, json_error=ValueError("bad json"))

        with patch("httpx.AsyncClient.get", return_value=response):
            assert await provider.search(search_request) == []

    @pytest.mark.asyncio
    async def test_outbound_flights_not_a_list(self, provider, search_request, mock_response):
        body = {"status": True, "data": {"best_flights": 5}}

        with patch("httpx.AsyncClient.get", return_value=mock_response(200, body)):
            assert await provider.search(search_request) == []

    @pytest.mark.asyncio
    async def test_return_flights_not_a_list_is_tolerated(self, provider, search_request, mock_response):
        outbound = _body([_result("NRT", "BKK", 30000)])
        inbound = {"status": True, "data": {"best_flights": [], "other_flights": 7}}

        with patch(
            "httpx.AsyncClient.get",
            side_effect=[mock_response(200, outbound), mock_response(200, inbound)],
        ):
            offers = await provider.search(search_request)

        assert len(offers) == 1
        assert offers[0].inbound == []
