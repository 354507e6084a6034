"""
Game state sources — what the scheduler reads every tick.

The scheduler only needs four plain values. A client bridge implements
GameStateSource; StaticGameState serves the CLI and tests.
"""

import threading


class GameStateSource:
    """Interface read by BeaconScheduler. region_id is None with no local player."""

    @property
    def logged_in(self) -> bool:
        raise NotImplementedError

    @property
    def region_id(self):
        raise NotImplementedError

    @property
    def world(self) -> int:
        raise NotImplementedError

    @property
    def player_count(self) -> int:
        raise NotImplementedError


class StaticGameState(GameStateSource):
    """Values set by hand (CLI flags, tests). Thread-safe setters."""

    def __init__(self, region_id=None, world=0, player_count=0, logged_in=True):
        self._lock = threading.Lock()
        self._region_id = region_id
        self._world = world
        self._player_count = player_count
        self._logged_in = logged_in

    @property
    def logged_in(self):
        with self._lock:
            return self._logged_in

    @property
    def region_id(self):
        with self._lock:
            return self._region_id

    @property
    def world(self):
        with self._lock:
            return self._world

    @property
    def player_count(self):
        with self._lock:
            return self._player_count

    def update(self, **values):
        """Set any of region_id, world, player_count, logged_in."""
        with self._lock:
            for key, value in values.items():
                if key not in ("region_id", "world", "player_count", "logged_in"):
                    raise AttributeError(key)
                setattr(self, "_" + key, value)
