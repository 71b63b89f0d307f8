"""
Configuration management using Pydantic Settings.
Loads environment variables with validation and type checking.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="TicketScan", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=False, description="Emit JSON formatted console logs")
    log_file: Optional[str] = Field(default=None, description="Optional rotating log file path")
    environment: str = Field(default="development", description="Environment name")

    # Provider credentials
    amadeus_client_id: Optional[str] = Field(default=None, description="Amadeus API client id")
    amadeus_client_secret: Optional[str] = Field(
        default=None, description="Amadeus API client secret"
    )
    amadeus_base_url: str = Field(
        default="https://test.api.amadeus.com", description="Amadeus API base URL"
    )
    rapidapi_key: Optional[str] = Field(
        default=None, description="RapidAPI key (Skyscanner and Google Flights)"
    )
    skyscanner_rapidapi_host: str = Field(
        default="skyscanner-api.p.rapidapi.com", description="Skyscanner RapidAPI host"
    )
    google_flights_rapidapi_host: str = Field(
        default="flights-scraper-data.p.rapidapi.com",
        description="Google Flights scraper RapidAPI host",
    )

    # Provider toggles
    enable_amadeus: bool = Field(default=True, description="Query Amadeus")
    enable_skyscanner: bool = Field(default=True, description="Query Skyscanner")
    enable_google_flights: bool = Field(default=True, description="Query Google Flights")

    # Search defaults
    default_currency: str = Field(default="JPY", description="Currency requested from providers")
    market: str = Field(default="JP", description="Market sent to providers")
    locale: str = Field(default="ja-JP", description="Locale sent to providers")
    default_origin: str = Field(default="NRT", description="Origin used when none is given")
    default_adults: int = Field(default=2, description="Adult count used when none is given")
    default_infants: int = Field(default=1, description="Infant count used when none is given")

    # Provider behaviour
    provider_timeout: int = Field(default=30, description="Per-provider timeout in seconds")
    provider_max_retries: int = Field(
        default=3, description="Attempts per upstream request on transient network errors"
    )
    provider_max_offers: int = Field(
        default=20, description="Maximum offers considered per provider call"
    )
    enable_mock_fallback: bool = Field(
        default=True, description="Synthesize mock offers when no provider returns data"
    )

    # Saved searches
    saved_searches_path: str = Field(
        default="data/saved_searches.json", description="Saved search JSON document"
    )
    saved_searches_limit: int = Field(default=50, description="Saved searches kept")

    # HTTP
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        description="Allowed CORS origins (comma-separated)",
    )

    @field_validator("default_currency", "market", "default_origin")
    @classmethod
    def uppercase_codes(cls, v: str) -> str:
        """Normalize currency, market and airport codes to upper case."""
        return v.strip().upper()

    @field_validator("provider_timeout", "provider_max_retries", "provider_max_offers")
    @classmethod
    def at_least_one(cls, v: int) -> int:
        """Clamp provider limits to a usable minimum."""
        return max(1, v)

    @property
    def amadeus_configured(self) -> bool:
        """Both Amadeus credentials are present."""
        return bool(self.amadeus_client_id and self.amadeus_client_secret)

    @property
    def rapidapi_configured(self) -> bool:
        """A RapidAPI key is present."""
        return bool(self.rapidapi_key)

    def get_available_providers(self) -> List[str]:
        """
        Get the providers that are both enabled and have credentials.

        Returns:
            Provider tags in query order (e.g. ['amadeus', 'skyscanner'])
        """
        available = []
        if self.enable_amadeus and self.amadeus_configured:
            available.append("amadeus")
        if self.enable_skyscanner and self.rapidapi_configured:
            available.append("skyscanner")
        if self.enable_google_flights and self.rapidapi_configured:
            available.append("googleflights")
        return available

    def get_allowed_origins_list(self) -> List[str]:
        """Get list of allowed origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to avoid re-reading environment variables.
    """
    return Settings()


# Global settings instance
settings = get_settings()
