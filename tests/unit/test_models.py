"""
Unit tests for the normalized offer, search and saved search models.
"""

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from ticketscan.models import (
    FlightEndpoint,
    FlightOffer,
    FlightSegment,
    OfferPrice,
    ProviderTag,
    SavedSearchParams,
    SearchRequest,
    SearchResult,
)


def _segment(origin: str, destination: str) -> FlightSegment:
    return FlightSegment(
        departure=FlightEndpoint(airport=origin, time="10:00"),
        arrival=FlightEndpoint(airport=destination, time="14:00"),
        airline="Cathay Pacific",
        flight_number="CX501",
        duration="4h 0m",
    )


class TestFlightOffer:
    def test_stops_must_match_segments(self):
        with pytest.raises(ValidationError, match="stops"):
            FlightOffer(
                id="x",
                source=ProviderTag.SKYSCANNER,
                price=OfferPrice(adult=1, infant=0, total=1, currency="JPY"),
                outbound=[_segment("NRT", "HKG"), _segment("HKG", "BKK")],
                airline="Cathay Pacific",
                stops=0,
                duration="8h 0m",
            )

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            OfferPrice(adult=-1, infant=0, total=0, currency="JPY")

    def test_is_mock(self, offer_factory):
        assert offer_factory("mock-amadeus-JAL-0-0", 1, ProviderTag.MOCK).is_mock is True
        assert offer_factory("skyscanner-1", 1).is_mock is False

    def test_offers_are_immutable(self, offer_factory):
        offer = offer_factory("skyscanner-1", 1000)

        with pytest.raises(ValidationError):
            offer.stops = 3


class TestSearchRequest:
    def test_codes_are_normalized(self):
        request = SearchRequest(
            origin=" nrt",
            destination="bkk",
            departure_date=date(2025, 3, 1),
            return_date=date(2025, 3, 8),
        )

        assert request.origin == "NRT"
        assert request.destination == "BKK"
        assert request.adults == 2
        assert request.infants == 0

    def test_needs_an_adult(self):
        with pytest.raises(ValidationError):
            SearchRequest(
                origin="NRT",
                destination="BKK",
                departure_date=date(2025, 3, 1),
                return_date=date(2025, 3, 8),
                adults=0,
            )


class TestSearchResult:
    def test_cheapest_and_best_by_source(self, offer_factory, search_request):
        result = SearchResult(
            offers=[
                offer_factory("skyscanner-1", 90000),
                offer_factory("amadeus-1", 95000, ProviderTag.AMADEUS),
                offer_factory("skyscanner-2", 99000),
            ],
            searched_at=datetime.now(timezone.utc),
            params=search_request,
        )

        assert result.cheapest.id == "skyscanner-1"
        best = result.best_by_source()
        assert best[ProviderTag.SKYSCANNER].id == "skyscanner-1"
        assert best[ProviderTag.AMADEUS].id == "amadeus-1"

    def test_empty(self, search_request):
        result = SearchResult(searched_at=datetime.now(timezone.utc), params=search_request)

        assert result.cheapest is None
        assert result.best_by_source() == {}


class TestSavedSearchParams:
    def test_destinations_are_normalized(self):
        params = SavedSearchParams(
            origin="kix",
            destinations=["bkk", " sin ", "BKK"],
            departure_date=date(2025, 3, 1),
            return_date=date(2025, 3, 8),
            adults=2,
            infants=0,
        )

        assert params.origin == "KIX"
        assert params.destinations == ["BKK", "SIN"]

    @pytest.mark.parametrize("destinations", [[], ["BANGKOK"], ["B1K"]])
    def test_invalid_destinations(self, destinations):
        with pytest.raises(ValidationError):
            SavedSearchParams(
                origin="NRT",
                destinations=destinations,
                departure_date=date(2025, 3, 1),
                return_date=date(2025, 3, 8),
                adults=2,
                infants=0,
            )
