"""
Value types passed between ticks and network calls, plus SessionState.

SessionState is the scheduler's own bookkeeping. The heartbeat fields are
only touched from the heartbeat path, the lifecycle fields only from the
session signal handlers. Shared, cross-thread data lives in SummaryStore.
"""

import time
from dataclasses import dataclass
from typing import Optional

from .constants import INCLUDE_PLAYER_COUNT


@dataclass(frozen=True)
class LocationSample:
    location_id: int
    activity: Optional[str] = None

    @property
    def in_zone(self) -> bool:
        return self.activity is not None


@dataclass(frozen=True)
class PresenceReport:
    activity: str
    location_id: int
    participant_count: int

    def to_payload(self, include_count=INCLUDE_PLAYER_COUNT):
        """POST /beacon body."""
        payload = {"activity": self.activity, "world": self.location_id}
        if include_count:
            payload["players"] = self.participant_count
        return payload


STOPPED = "STOPPED"
RUNNING = "RUNNING"


@dataclass
class SessionState:
    # ── Lifecycle ─────────────────────────────────────────────
    status: str = STOPPED
    started_at: float = 0.0

    # ── Heartbeat (region tracking + zone-exit detection) ─────
    last_logged_region: int = -1
    was_in_zone: bool = False

    # ── Post bookkeeping ──────────────────────────────────────
    posts_sent: int = 0

    @property
    def running(self) -> bool:
        return self.status == RUNNING

    def on_started(self):
        self.status = RUNNING
        self.started_at = time.time()

    def on_stopped(self):
        """Back to a fresh stopped state; counters and region tracking reset."""
        self.status = STOPPED
        self.started_at = 0.0
        self.last_logged_region = -1
        self.was_in_zone = False
        self.posts_sent = 0
