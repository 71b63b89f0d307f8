"""
Unit tests for the Amadeus provider adapter.

Tests the adapter with mocked HTTP responses.
"""

from typing import Any, Dict
from unittest.mock import patch

import httpx
import pytest

from ticketscan.models import ProviderTag
from ticketscan.providers import AmadeusProvider, ProviderConfig

TOKEN_RESPONSE = {"access_token": "token-123", "expires_in": 1799, "token_type": "Bearer"}


@pytest.fixture
def provider() -> AmadeusProvider:
    return AmadeusProvider(
        ProviderConfig(api_key="client-id", api_secret="client-secret", max_retries=1)
    )


@pytest.fixture
def sample_offers() -> Dict[str, Any]:
    """Sample Flight Offers Search response with one connecting itinerary."""
    return {
        "data": [
            {
                "id": "1",
                "price": {"currency": "JPY", "total": "110000", "grandTotal": "110000"},
                "validatingAirlineCodes": ["TG"],
                "itineraries": [
                    {
                        "duration": "PT9H15M",
                        "segments": [
                            {
                                "departure": {"iataCode": "NRT", "at": "2025-03-01T10:30:00"},
                                "arrival": {"iataCode": "TPE", "at": "2025-03-01T13:10:00"},
                                "carrierCode": "TG",
                                "number": "641",
                                "duration": "PT3H40M",
                            },
                            {
                                "departure": {"iataCode": "TPE", "at": "2025-03-01T15:00:00"},
                                "arrival": {"iataCode": "BKK", "at": "2025-03-01T17:45:00"},
                                "carrierCode": "TG",
                                "number": "635",
                                "duration": "PT3H45M",
                            },
                        ],
                    },
                    {
                        "duration": "PT6H",
                        "segments": [
                            {
                                "departure": {"iataCode": "BKK", "at": "2025-03-08T23:50:00"},
                                "arrival": {"iataCode": "NRT", "at": "2025-03-09T07:50:00"},
                                "carrierCode": "TG",
                                "number": "642",
                                "duration": "PT6H",
                            }
                        ],
                    },
                ],
                "travelerPricings": [
                    {"travelerType": "ADULT", "price": {"currency": "JPY", "total": "50000"}},
                    {"travelerType": "ADULT", "price": {"currency": "JPY", "total": "50000"}},
                    {"travelerType": "HELD_INFANT", "price": {"currency": "JPY", "total": "7500"}},
                ],
            }
        ]
    }


class TestAmadeusConfiguration:
    def test_unconfigured_without_secret(self):
        provider = AmadeusProvider(ProviderConfig(api_key="client-id"))
        assert provider.is_configured is False

    @pytest.mark.asyncio
    async def test_unconfigured_makes_no_request(self, search_request):
        provider = AmadeusProvider(ProviderConfig())

        with patch("httpx.AsyncClient.post") as mock_post:
            offers = await provider.search(search_request)

        assert offers == []
        mock_post.assert_not_called()


class TestAmadeusSearch:
    @pytest.mark.asyncio
    async def test_search_parses_offer(self, provider, search_request, sample_offers, mock_response):
        responses = [mock_response(200, TOKEN_RESPONSE), mock_response(200, sample_offers)]

        with patch("httpx.AsyncClient.post", side_effect=responses):
            offers = await provider.search(search_request)

        assert len(offers) == 1
        offer = offers[0]
        assert offer.id == "amadeus-1"
        assert offer.source == ProviderTag.AMADEUS
        assert offer.airline == "TG"
        assert offer.stops == 1
        assert offer.duration == "9h 15m"
        assert offer.booking_url is None

        assert offer.outbound[0].flight_number == "TG641"
        assert offer.outbound[0].departure.time == "10:30"
        assert offer.outbound[1].arrival.airport == "BKK"
        assert offer.inbound[0].duration == "6h 0m"

    @pytest.mark.asyncio
    async def test_quoted_infant_fare_is_used(self, provider, search_request, sample_offers, mock_response):
        responses = [mock_response(200, TOKEN_RESPONSE), mock_response(200, sample_offers)]

        with patch("httpx.AsyncClient.post", side_effect=responses):
            offers = await provider.search(search_request)

        price = offers[0].price
        assert price.adult == 50000
        assert price.infant == 7500
        assert price.total == 50000 * 2 + 7500

    @pytest.mark.asyncio
    async def test_missing_infant_fare_is_derived(self, provider, search_request, sample_offers, mock_response):
        sample_offers["data"][0]["travelerPricings"] = [
            {"travelerType": "ADULT", "price": {"currency": "JPY", "total": "50000"}},
        ]
        responses = [mock_response(200, TOKEN_RESPONSE), mock_response(200, sample_offers)]

        with patch("httpx.AsyncClient.post", side_effect=responses):
            offers = await provider.search(search_request)

        assert offers[0].price.infant == 5000
        assert offers[0].price.total == 105000

    @pytest.mark.asyncio
    async def test_request_payload(self, provider, search_request, sample_offers, mock_response):
        responses = [mock_response(200, TOKEN_RESPONSE), mock_response(200, sample_offers)]

        with patch("httpx.AsyncClient.post", side_effect=responses) as mock_post:
            await provider.search(search_request)

        token_call, search_call = mock_post.call_args_list
        assert token_call.kwargs["data"]["grant_type"] == "client_credentials"

        payload = search_call.kwargs["json"]
        assert search_call.kwargs["headers"]["Authorization"] == "Bearer token-123"
        assert payload["sources"] == ["GDS"]
        assert payload["searchCriteria"]["maxFlightOffers"] == 20
        assert [od["originLocationCode"] for od in payload["originDestinations"]] == ["NRT", "BKK"]
        travelers = payload["travelers"]
        assert [t["travelerType"] for t in travelers] == ["ADULT", "ADULT", "HELD_INFANT"]
        assert travelers[2]["associatedAdultId"] == "1"

    @pytest.mark.asyncio
    async def test_token_is_cached(self, provider, search_request, sample_offers, mock_response):
        responses = [
            mock_response(200, TOKEN_RESPONSE),
            mock_response(200, sample_offers),
            mock_response(200, sample_offers),
        ]

        with patch("httpx.AsyncClient.post", side_effect=responses) as mock_post:
            await provider.search(search_request)
            await provider.search(search_request)

        assert mock_post.call_count == 3


class TestAmadeusFailures:
    @pytest.mark.asyncio
    async def test_token_rejected(self, provider, search_request, mock_response):
        with patch("httpx.AsyncClient.post", return_value=mock_response(401, {})):
            offers = await provider.search(search_request)

        assert offers == []

    @pytest.mark.asyncio
    async def test_server_error(self, provider, search_request, mock_response):
        responses = [mock_response(200, TOKEN_RESPONSE), mock_response(500, {"errors": []})]

        with patch("httpx.AsyncClient.post", side_effect=responses):
            offers = await provider.search(search_request)

        assert offers == []

    @pytest.mark.asyncio
    async def test_malformed_body(self, provider, search_request, mock_response):
        responses = [
            mock_response(200, TOKEN_RESPONSE),
            mock_response(200, json_error=ValueError("not json")),
        ]

        with patch("httpx.AsyncClient.post", side_effect=responses):
            offers = await provider.search(search_request)

        assert offers == []

    @pytest.mark.asyncio
    async def test_network_error(self, provider, search_request, mock_response):
        with patch("httpx.AsyncClient.post", side_effect=httpx.ConnectError("connection refused")):
            offers = await provider.search(search_request)

        assert offers == []

    @pytest.mark.asyncio
    async def test_malformed_offer_is_skipped(self, provider, search_request, sample_offers, mock_response):
        sample_offers["data"].append({"id": "2", "itineraries": [{"segments": [{}]}]})
        responses = [mock_response(200, TOKEN_RESPONSE), mock_response(200, sample_offers)]

        with patch("httpx.AsyncClient.post", side_effect=responses):
            offers = await provider.search(search_request)

        assert [o.id for o in offers] == ["amadeus-1"]
