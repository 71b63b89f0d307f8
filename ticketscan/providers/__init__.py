"""
Flight data provider adapters.

Each adapter turns one upstream API into normalized ``FlightOffer`` objects
and never raises for expected failures.
"""

from ticketscan.providers.amadeus import AmadeusProvider
from ticketscan.providers.base import FlightProvider, ProviderConfig
from ticketscan.providers.factory import build_providers
from ticketscan.providers.google_flights import GoogleFlightsProvider
from ticketscan.providers.skyscanner import SkyscannerProvider

__all__ = [
    "AmadeusProvider",
    "FlightProvider",
    "GoogleFlightsProvider",
    "ProviderConfig",
    "SkyscannerProvider",
    "build_providers",
]
