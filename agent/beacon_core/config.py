"""
Paths, logging setup, config load/save, BeaconConfig, ConfigStore.
"""

import os
import json
import sys
import logging
import threading
from dataclasses import dataclass, asdict, fields
from pathlib import Path

from .constants import (
    DEFAULT_SERVER_URL, DEPRECATED_KEYS, AREA_GATE_STRICT, AREA_GATE_OPEN,
    FETCH_INTERVAL_DEFAULT, FETCH_INTERVAL_MIN, FETCH_INTERVAL_MAX,
    MIN_INTERVAL_DEFAULT, MIN_INTERVAL_MIN, MIN_INTERVAL_MAX,
)


# ─── Paths ───────────────────────────────────────────────────────
# One config/log per user. Overridable for tests and portable installs.
BASE_DIR = Path(os.environ.get("MASSBEACON_HOME", Path.home() / ".massbeacon"))

CONFIG_FILE = BASE_DIR / "config.json"
LOG_FILE = BASE_DIR / "beacon.log"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

log = logging.getLogger("beacon")


# ─── Logging ─────────────────────────────────────────────────────

def setup_logging(log_file=None, level=logging.INFO):
    """File log in BASE_DIR (truncated past 1 MB) plus console output."""
    log_file = Path(log_file) if log_file else LOG_FILE
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        if log_file.exists() and log_file.stat().st_size > 1_000_000:
            log_file.write_text("")
    except OSError:
        pass

    log.setLevel(level)
    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)
    try:
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setFormatter(formatter)
        log.addHandler(file_handler)
    except OSError as e:
        sys.stderr.write(f"Cannot open log file {log_file}: {e}\n")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    log.addHandler(console_handler)
    return log


# ─── Config Management ──────────────────────────────────────────

def load_config(path=None):
    """Load config from disk. Returns dict or None."""
    path = Path(path) if path else CONFIG_FILE
    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (ValueError, OSError):
            return None
        if not isinstance(data, dict):
            return None
        for key in DEPRECATED_KEYS:
            if data.pop(key, None) is not None:
                log.info("Dropped deprecated config key: %s", key)
        return data
    return None


def save_config(config, path=None):
    """Save config dict to disk."""
    path = Path(path) if path else CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)
    log.info("Config saved to %s", path)


def clamp(value, lo, hi):
    return min(max(value, lo), hi)


def _as_bool(value, default):
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    if value is None:
        return default
    return bool(value)


def _as_str(value, default):
    if isinstance(value, str):
        return value.strip()
    return default


def _as_int(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class BeaconConfig:
    """User-tunable settings. Field names mirror the camelCase keys in config.json."""

    webhookUrl: str = ""
    fetchIntervalSec: int = FETCH_INTERVAL_DEFAULT
    minIntervalSec: int = MIN_INTERVAL_DEFAULT
    onlyAtBA: bool = True
    onlyAtCorp: bool = True
    showOverlay: bool = True
    areaGate: str = AREA_GATE_STRICT
    serverUrl: str = DEFAULT_SERVER_URL

    @property
    def fetch_interval(self) -> int:
        return clamp(self.fetchIntervalSec, FETCH_INTERVAL_MIN, FETCH_INTERVAL_MAX)

    @classmethod
    def from_dict(cls, data):
        """Build from a loaded dict. Unknown keys are ignored, bad values fall back to defaults."""
        data = data or {}
        defaults = cls()
        area_gate = str(data.get("areaGate", defaults.areaGate)).lower()
        if area_gate not in (AREA_GATE_STRICT, AREA_GATE_OPEN):
            log.warning("Unknown areaGate %r, using %s", area_gate, AREA_GATE_STRICT)
            area_gate = AREA_GATE_STRICT
        return cls(
            webhookUrl=_as_str(data.get("webhookUrl"), defaults.webhookUrl),
            fetchIntervalSec=clamp(
                _as_int(data.get("fetchIntervalSec"), defaults.fetchIntervalSec),
                FETCH_INTERVAL_MIN, FETCH_INTERVAL_MAX,
            ),
            minIntervalSec=clamp(
                _as_int(data.get("minIntervalSec"), defaults.minIntervalSec),
                MIN_INTERVAL_MIN, MIN_INTERVAL_MAX,
            ),
            onlyAtBA=_as_bool(data.get("onlyAtBA"), defaults.onlyAtBA),
            onlyAtCorp=_as_bool(data.get("onlyAtCorp"), defaults.onlyAtCorp),
            showOverlay=_as_bool(data.get("showOverlay"), defaults.showOverlay),
            areaGate=area_gate,
            serverUrl=(_as_str(data.get("serverUrl"), "") or defaults.serverUrl).rstrip("/"),
        )

    def to_dict(self):
        return asdict(self)


_FIELD_NAMES = frozenset(f.name for f in fields(BeaconConfig))


class ConfigStore:
    """
    Holds the live BeaconConfig and notifies listeners with the changed key.

    Listeners run on the thread that called set(), after the new config is
    published.
    """

    def __init__(self, config=None, path=None):
        self._config = config or BeaconConfig()
        self._path = path
        self._lock = threading.Lock()
        self._listeners = []

    @classmethod
    def from_disk(cls, path=None):
        return cls(BeaconConfig.from_dict(load_config(path)), path=path)

    @property
    def config(self) -> BeaconConfig:
        return self._config

    def subscribe(self, listener):
        with self._lock:
            self._listeners.append(listener)

    def set(self, key, value, persist=False):
        """Update one key. Returns True if the effective value changed."""
        if key not in _FIELD_NAMES:
            raise KeyError(f"Unknown config key: {key}")
        with self._lock:
            old = self._config
            data = old.to_dict()
            data[key] = value
            new = BeaconConfig.from_dict(data)
            if new == old:
                return False
            self._config = new
            listeners = list(self._listeners)

        log.info("Config changed: %s=%r", key, getattr(new, key))
        if persist:
            save_config(new.to_dict(), self._path)
        for listener in listeners:
            try:
                listener(key)
            except Exception as e:
                log.error("Config listener failed for %s: %s", key, e, exc_info=True)
        return True
