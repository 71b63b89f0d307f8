"""
Construction of provider adapters from application settings.

Credentials are read once from ``Settings`` here and handed to each adapter
explicitly; adapters never look up configuration at call time.
"""

import logging
from typing import List, Optional

from ticketscan.config import Settings, get_settings
from ticketscan.providers.amadeus import AmadeusProvider
from ticketscan.providers.base import FlightProvider, ProviderConfig
from ticketscan.providers.google_flights import GoogleFlightsProvider
from ticketscan.providers.skyscanner import SkyscannerProvider

logger = logging.getLogger(__name__)


def _base_config(settings: Settings, **overrides) -> ProviderConfig:
    values = {
        "timeout": settings.provider_timeout,
        "max_retries": settings.provider_max_retries,
        "currency": settings.default_currency,
        "market": settings.market,
        "locale": settings.locale,
        "max_offers": settings.provider_max_offers,
    }
    values.update(overrides)
    return ProviderConfig(**values)


def build_providers(settings: Optional[Settings] = None) -> List[FlightProvider]:
    """
    Build the enabled provider adapters.

    Disabled providers are left out entirely. Enabled but unconfigured ones
    are kept: they short-circuit to an empty result and are reported as
    unavailable in the search result.

    Args:
        settings: Application settings (defaults to the cached settings)

    Returns:
        Adapters in query order: Amadeus, Skyscanner, Google Flights
    """
    settings = settings or get_settings()
    providers: List[FlightProvider] = []

    if settings.enable_amadeus:
        providers.append(
            AmadeusProvider(
                _base_config(
                    settings,
                    api_key=settings.amadeus_client_id,
                    api_secret=settings.amadeus_client_secret,
                    base_url=settings.amadeus_base_url,
                )
            )
        )
    if settings.enable_skyscanner:
        providers.append(
            SkyscannerProvider(
                _base_config(
                    settings,
                    api_key=settings.rapidapi_key,
                    base_url=settings.skyscanner_rapidapi_host,
                )
            )
        )
    if settings.enable_google_flights:
        providers.append(
            GoogleFlightsProvider(
                _base_config(
                    settings,
                    api_key=settings.rapidapi_key,
                    base_url=settings.google_flights_rapidapi_host,
                )
            )
        )

    configured = [p.name.value for p in providers if p.is_configured]
    logger.debug(f"Built {len(providers)} providers, configured: {configured or 'none'}")
    return providers
