"""
Unit tests for airport_utils module.
"""

from ticketscan.utils.airport_utils import (
    ALL_AIRPORTS,
    JAPANESE_AIRPORTS,
    POPULAR_DESTINATIONS,
    airport_label,
    get_airport,
)


class TestAirportTables:
    def test_codes_are_unique(self):
        codes = [airport.code for airport in ALL_AIRPORTS]
        assert len(codes) == len(set(codes))

    def test_codes_are_iata_shaped(self):
        for airport in ALL_AIRPORTS:
            assert len(airport.code) == 3
            assert airport.code.isalpha() and airport.code.isupper()

    def test_origins_and_destinations_do_not_overlap(self):
        origins = {airport.code for airport in JAPANESE_AIRPORTS}
        destinations = {airport.code for airport in POPULAR_DESTINATIONS}
        assert not origins & destinations
        assert "NRT" in origins
        assert "BKK" in destinations


class TestLookup:
    def test_case_insensitive(self):
        assert get_airport("bkk").city == "Bangkok"
        assert get_airport(" NRT ").city == "Tokyo"

    def test_unknown(self):
        assert get_airport("XXX") is None
        assert get_airport("") is None
        assert get_airport(None) is None

    def test_label(self):
        assert airport_label("NRT") == "Tokyo (NRT)"
        assert airport_label("zzz") == "ZZZ"
