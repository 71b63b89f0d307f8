"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from ticketscan import __app_name__, __version__
from ticketscan.config import settings
from ticketscan.exceptions import AggregationError
from ticketscan.utils.logging_config import configure_logging

logger = logging.getLogger(__name__)


def validate_startup_config() -> None:
    """
    Warn about missing optional configuration.

    Nothing here is fatal: without provider credentials every search is
    answered from the mock fallback.
    """
    warnings = []

    if settings.enable_amadeus and not settings.amadeus_configured:
        warnings.append(
            "AMADEUS_CLIENT_ID / AMADEUS_CLIENT_SECRET not set - Amadeus will be skipped"
        )
    if (settings.enable_skyscanner or settings.enable_google_flights) and not settings.rapidapi_configured:
        warnings.append("RAPIDAPI_KEY not set - Skyscanner and Google Flights will be skipped")

    available_providers = settings.get_available_providers()
    if not available_providers:
        if settings.enable_mock_fallback:
            warnings.append("No flight providers are configured - all searches return mock offers")
        else:
            warnings.append("No flight providers are configured and mock fallback is disabled")

    if warnings:
        logger.warning("Startup configuration warnings:")
        for warning in warnings:
            logger.warning(f"  - {warning}")
    else:
        logger.info("Startup configuration validated successfully")

    if available_providers:
        logger.info(f"Available providers: {', '.join(available_providers)}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Configures logging and validates configuration on startup.
    """
    configure_logging(settings)

    logger.info(f"Starting {__app_name__} v{__version__}")
    logger.info(f"Environment: {settings.environment}")

    validate_startup_config()

    yield

    logger.info("Application shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Family flight fare meta-search across multiple providers",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Origins are configured via ALLOWED_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)


def _internal_error_content(request: Request, exc: Exception) -> Dict[str, Any]:
    # Details only leave the server in debug mode
    if settings.debug:
        return {
            "error": "Internal server error",
            "message": str(exc),
            "type": exc.__class__.__name__,
            "path": str(request.url.path),
            "method": request.method,
        }
    return {
        "error": "Internal server error",
        "message": "An unexpected error occurred. Please check the logs or contact support.",
    }


# Exception handlers
@app.exception_handler(AggregationError)
async def aggregation_exception_handler(request: Request, exc: AggregationError) -> JSONResponse:
    """The search pipeline itself failed (not a provider)."""
    logger.error(
        f"Aggregation failed during {request.method} {request.url.path}: {exc}",
        exc_info=exc.original_error or True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_internal_error_content(request, exc),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for unhandled exceptions."""
    logger.error(
        f"Unhandled exception during {request.method} {request.url.path}: {exc}",
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_internal_error_content(request, exc),
    )


# Health check endpoint
@app.get("/health", tags=["Health"], status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint.

    The service has no hard dependencies, so it is healthy whenever it
    answers; provider availability is reported for information.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "environment": settings.environment,
        "providers": settings.get_available_providers(),
        "mock_fallback": settings.enable_mock_fallback,
    }


@app.get("/api", tags=["Root"])
async def api_root() -> Dict[str, Any]:
    """API root endpoint with version information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "api_versions": {
            "v1": {
                "status": "stable",
                "prefix": "/api/v1",
                "endpoints": {
                    "search": "/api/v1/search",
                    "compare": "/api/v1/search/compare",
                    "saved_searches": "/api/v1/saved-searches",
                    "providers": "/api/v1/providers",
                    "airports": "/api/v1/airports",
                },
            },
        },
        "docs": "/docs",
        "health": "/health",
    }


# Import and include routers
from ticketscan.api.routes import router as v1_router  # noqa: E402

app.include_router(v1_router, prefix="/api/v1")
