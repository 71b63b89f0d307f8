"""
Shared FastAPI dependencies.

Both the orchestrator and the saved-search store are process-wide
singletons; tests replace them through ``app.dependency_overrides``.
"""

from functools import lru_cache

from ticketscan.orchestration import FlightOrchestrator
from ticketscan.storage import SavedSearchStore


@lru_cache()
def get_orchestrator() -> FlightOrchestrator:
    """Orchestrator built from settings; keeps provider tokens across requests."""
    return FlightOrchestrator()


@lru_cache()
def get_saved_search_store() -> SavedSearchStore:
    return SavedSearchStore()
