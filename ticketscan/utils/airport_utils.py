"""
Static airport metadata.

TicketScan searches from Japanese airports to a fixed list of popular
destinations. The tables here back the airport pickers of the API and CLI
and the display labels of search results.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Airport:
    """Airport shown in pickers and result headers."""

    code: str
    name: str
    city: str


JAPANESE_AIRPORTS: List[Airport] = [
    Airport("NRT", "Narita International Airport", "Tokyo"),
    Airport("HND", "Haneda Airport", "Tokyo"),
    Airport("KIX", "Kansai International Airport", "Osaka"),
    Airport("NGO", "Chubu Centrair International Airport", "Nagoya"),
    Airport("FUK", "Fukuoka Airport", "Fukuoka"),
    Airport("CTS", "New Chitose Airport", "Sapporo"),
    Airport("OKA", "Naha Airport", "Okinawa"),
]

POPULAR_DESTINATIONS: List[Airport] = [
    # Asia
    Airport("ICN", "Incheon International Airport", "Seoul"),
    Airport("TPE", "Taoyuan International Airport", "Taipei"),
    Airport("HKG", "Hong Kong International Airport", "Hong Kong"),
    Airport("BKK", "Suvarnabhumi Airport", "Bangkok"),
    Airport("SIN", "Changi Airport", "Singapore"),
    Airport("MNL", "Ninoy Aquino International Airport", "Manila"),
    Airport("SGN", "Tan Son Nhat International Airport", "Ho Chi Minh City"),
    Airport("HAN", "Noi Bai International Airport", "Hanoi"),
    Airport("KUL", "Kuala Lumpur International Airport", "Kuala Lumpur"),
    Airport("DPS", "Ngurah Rai International Airport", "Bali"),
    # China
    Airport("PVG", "Shanghai Pudong International Airport", "Shanghai"),
    Airport("PEK", "Beijing Capital International Airport", "Beijing"),
    # Oceania
    Airport("SYD", "Sydney Airport", "Sydney"),
    Airport("AKL", "Auckland Airport", "Auckland"),
    # Hawaii and Guam
    Airport("HNL", "Daniel K. Inouye International Airport", "Honolulu"),
    Airport("GUM", "Guam International Airport", "Guam"),
    # North America
    Airport("LAX", "Los Angeles International Airport", "Los Angeles"),
    Airport("SFO", "San Francisco International Airport", "San Francisco"),
    Airport("JFK", "John F. Kennedy International Airport", "New York"),
    # Europe
    Airport("LHR", "Heathrow Airport", "London"),
    Airport("CDG", "Charles de Gaulle Airport", "Paris"),
    Airport("FRA", "Frankfurt Airport", "Frankfurt"),
]

ALL_AIRPORTS: List[Airport] = JAPANESE_AIRPORTS + POPULAR_DESTINATIONS

_AIRPORTS_BY_CODE: Dict[str, Airport] = {airport.code: airport for airport in ALL_AIRPORTS}


def get_airport(code: Optional[str]) -> Optional[Airport]:
    """
    Look up an airport by IATA code (case-insensitive).

    Examples:
        >>> get_airport("bkk").city
        'Bangkok'
        >>> get_airport("XXX") is None
        True
    """
    if not code:
        return None
    return _AIRPORTS_BY_CODE.get(code.strip().upper())


def airport_label(code: str) -> str:
    """
    Display label for an airport code: the city when known, else the code.

    Examples:
        >>> airport_label("NRT")
        'Tokyo (NRT)'
        >>> airport_label("ZZZ")
        'ZZZ'
    """
    airport = get_airport(code)
    if airport is None:
        return code.upper()
    return f"{airport.city} ({airport.code})"
