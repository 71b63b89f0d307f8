"""
File-backed store for saved searches.

The whole list lives in one JSON document. Every mutation reads the
document, changes it and writes it back (last writer wins across
processes; a lock serializes writers within one process). Newest entries
come first and the list is capped at ``limit`` entries.
"""

import json
import logging
import secrets
import string
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Union

from pydantic import TypeAdapter, ValidationError

from ticketscan.config import settings
from ticketscan.models import (
    DestinationSummary,
    FlightOffer,
    SavedSearch,
    SavedSearchParams,
    SearchResult,
)

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase
_SAVED_SEARCH_LIST = TypeAdapter(List[SavedSearch])


def new_search_id() -> str:
    """Id of the form ``search-<epoch ms>-<7 base36 chars>``."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(7))
    return f"search-{int(time.time() * 1000)}-{suffix}"


def summarize_results(
    destinations: Sequence[str],
    results_by_destination: Mapping[str, Union[SearchResult, Sequence[FlightOffer]]],
) -> List[DestinationSummary]:
    """
    Build the per-destination summary rows stored with a saved search.

    Args:
        destinations: Destinations in display order
        results_by_destination: SearchResult (or plain offer list) per destination

    Returns:
        One DestinationSummary per destination; destinations without offers
        get no cheapest price or airline
    """
    summaries: List[DestinationSummary] = []
    for destination in destinations:
        result = results_by_destination.get(destination)
        if isinstance(result, SearchResult):
            offers = list(result.offers)
        else:
            offers = list(result or [])

        cheapest = min(offers, key=lambda offer: offer.price.total) if offers else None
        summaries.append(
            DestinationSummary(
                destination=destination,
                cheapest_price=cheapest.price.total if cheapest else None,
                airline=cheapest.airline if cheapest else None,
                flight_count=len(offers),
            )
        )
    return summaries


class SavedSearchStore:
    """
    Saved searches persisted as a JSON list on disk.

    Examples:
        >>> store = SavedSearchStore("data/saved_searches.json")
        >>> saved = store.save(params, summaries, note="Golden Week")
        >>> store.update_note(saved.id, "Golden Week, flexible")
        >>> store.delete(saved.id)
        True
    """

    def __init__(self, path: Union[str, Path, None] = None, limit: Optional[int] = None):
        self.path = Path(path or settings.saved_searches_path)
        self.limit = max(1, limit if limit is not None else settings.saved_searches_limit)
        self._lock = threading.Lock()

    def _read(self) -> List[SavedSearch]:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
            if not raw.strip():
                return []
            return _SAVED_SEARCH_LIST.validate_json(raw)
        except (OSError, ValidationError, ValueError) as e:
            logger.warning(f"Could not read saved searches from {self.path}, treating as empty: {e}")
            return []

    def _write(self, searches: List[SavedSearch]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = _SAVED_SEARCH_LIST.dump_python(searches, mode="json")
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)

    def list(self) -> List[SavedSearch]:
        """All saved searches, newest first."""
        return self._read()

    def get(self, search_id: str) -> Optional[SavedSearch]:
        return next((s for s in self._read() if s.id == search_id), None)

    def save(
        self,
        params: SavedSearchParams,
        results: Sequence[DestinationSummary],
        note: Optional[str] = None,
    ) -> SavedSearch:
        """
        Save a search at the front of the list, dropping the oldest entries
        beyond the limit.

        Returns:
            The stored entry with its generated id and timestamp
        """
        entry = SavedSearch(
            id=new_search_id(),
            saved_at=datetime.now(timezone.utc),
            params=params,
            results=list(results),
            note=note,
        )

        with self._lock:
            searches = self._read()
            searches.insert(0, entry)
            dropped = len(searches) - self.limit
            self._write(searches[: self.limit])

        if dropped > 0:
            logger.info(f"Saved search limit {self.limit} reached, dropped {dropped} oldest")
        logger.info(f"Saved search {entry.id} ({params.origin} -> {', '.join(params.destinations)})")
        return entry

    def delete(self, search_id: str) -> bool:
        """
        Delete a saved search.

        Returns:
            True if an entry was removed
        """
        with self._lock:
            searches = self._read()
            remaining = [s for s in searches if s.id != search_id]
            if len(remaining) == len(searches):
                return False
            self._write(remaining)

        logger.info(f"Deleted saved search {search_id}")
        return True

    def update_note(self, search_id: str, note: Optional[str]) -> Optional[SavedSearch]:
        """
        Replace the note of a saved search.

        Returns:
            The updated entry, or None if the id does not exist
        """
        with self._lock:
            searches = self._read()
            for index, search in enumerate(searches):
                if search.id == search_id:
                    updated = search.model_copy(update={"note": note})
                    searches[index] = updated
                    self._write(searches)
                    return updated
        return None

    def __len__(self) -> int:
        return len(self._read())
