"""
SummaryStore — latest world→count snapshot for the overlay.

Snapshots are tuples and are swapped whole, so the overlay can read
current() from any thread without a lock. Writers serialise on _lock so an
optimistic update never overwrites a concurrent replace with stale data
built from the previous snapshot.
"""

import threading
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import log


@dataclass(frozen=True)
class SummaryEntry:
    location_id: int
    count: int


Summary = Tuple[SummaryEntry, ...]

EMPTY: Summary = ()


def parse_summary(body) -> Optional[Summary]:
    """
    Decode a GET /summary body ({"worlds": [{"world", "count"}, ...]}).

    Returns None when the body or its "worlds" list is missing/malformed.
    Bad rows are skipped; a repeated world keeps its first row.
    """
    if not isinstance(body, dict):
        return None
    worlds = body.get("worlds")
    if not isinstance(worlds, list):
        return None

    entries = []
    seen = set()
    for row in worlds:
        if not isinstance(row, dict):
            continue
        world = row.get("world")
        count = row.get("count")
        if isinstance(world, bool) or isinstance(count, bool):
            continue
        if not isinstance(world, int) or not isinstance(count, int):
            continue
        if world in seen:
            continue
        seen.add(world)
        entries.append(SummaryEntry(world, count))
    return tuple(entries)


class SummaryStore:

    def __init__(self):
        self._snapshot: Summary = EMPTY
        self._lock = threading.Lock()

    def current(self) -> Summary:
        return self._snapshot

    def is_empty(self) -> bool:
        return not self._snapshot

    def optimistic_update(self, location_id, participant_count):
        """Overwrite the count for location_id, or insert it at the front."""
        if location_id <= 0:
            return
        with self._lock:
            snapshot = list(self._snapshot)
            for i, entry in enumerate(snapshot):
                if entry.location_id == location_id:
                    snapshot[i] = SummaryEntry(location_id, participant_count)
                    break
            else:
                snapshot.insert(0, SummaryEntry(location_id, participant_count))
            self._snapshot = tuple(snapshot)

    def replace_if_non_empty(self, new_summary) -> bool:
        """Swap in new_summary unless it is empty/None. Returns True if swapped."""
        if not new_summary:
            return False
        with self._lock:
            self._snapshot = tuple(new_summary)
        return True

    def clear(self) -> bool:
        """Reset to empty. Returns False if it was already empty."""
        with self._lock:
            if not self._snapshot:
                return False
            self._snapshot = EMPTY
        log.debug("Summary cleared")
        return True
