"""
Persistence for saved searches.
"""

from ticketscan.storage.saved_searches import SavedSearchStore, summarize_results

__all__ = ["SavedSearchStore", "summarize_results"]
