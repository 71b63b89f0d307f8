"""
Search orchestration: provider fan-out, merging and fallback.
"""

from ticketscan.orchestration.flight_orchestrator import FlightOrchestrator
from ticketscan.orchestration.mock_offers import generate_mock_offers

__all__ = ["FlightOrchestrator", "generate_mock_offers"]
