"""
Read-only catalog endpoints: providers and airports.
"""

from fastapi import APIRouter

from ticketscan.api.schemas.search import (
    AirportSchema,
    AirportsResponse,
    ProviderStatus,
    ProvidersResponse,
)
from ticketscan.config import settings
from ticketscan.utils.airport_utils import JAPANESE_AIRPORTS, POPULAR_DESTINATIONS

router = APIRouter()


@router.get("/providers", response_model=ProvidersResponse, tags=["Providers"])
async def list_providers() -> ProvidersResponse:
    """Report which providers are enabled and have credentials."""
    providers = [
        ProviderStatus(
            name="amadeus",
            enabled=settings.enable_amadeus,
            configured=settings.amadeus_configured,
        ),
        ProviderStatus(
            name="skyscanner",
            enabled=settings.enable_skyscanner,
            configured=settings.rapidapi_configured,
        ),
        ProviderStatus(
            name="googleflights",
            enabled=settings.enable_google_flights,
            configured=settings.rapidapi_configured,
        ),
    ]
    return ProvidersResponse(
        providers=providers,
        available=settings.get_available_providers(),
        mock_fallback=settings.enable_mock_fallback,
    )


@router.get("/airports", response_model=AirportsResponse, tags=["Airports"])
async def list_airports() -> AirportsResponse:
    return AirportsResponse(
        origins=[AirportSchema(code=a.code, name=a.name, city=a.city) for a in JAPANESE_AIRPORTS],
        destinations=[
            AirportSchema(code=a.code, name=a.name, city=a.city) for a in POPULAR_DESTINATIONS
        ],
    )
