"""
API v1 routes aggregator.
"""

from fastapi import APIRouter

from ticketscan.api.routes import catalog, saved_searches, search

# Create v1 router
router = APIRouter()

# Include sub-routers
router.include_router(search.router, prefix="/search", tags=["Search"])
router.include_router(saved_searches.router, prefix="/saved-searches", tags=["Saved Searches"])
router.include_router(catalog.router)
