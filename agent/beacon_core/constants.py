"""
Constants, cadences, endpoints, and zone tables.
"""

AGENT_VERSION = "1.2.0"

# ─── Cadences ────────────────────────────────────────────────────
POST_INTERVAL_SEC = 15          # Post cadence (fixed, not user-configurable)
IMMEDIATE_SYNC_DELAY_SEC = 1    # One-shot sync after login
HEARTBEAT_SEC = 0.6             # Zone-exit sampling (one game tick)
NOTIFY_COOLDOWN_SEC = 60        # Same webhook signature is not resent within this window

FETCH_INTERVAL_DEFAULT = 20
FETCH_INTERVAL_MIN = 5
FETCH_INTERVAL_MAX = 120

MIN_INTERVAL_DEFAULT = 3
MIN_INTERVAL_MIN = 1
MIN_INTERVAL_MAX = 30

# ─── Network ─────────────────────────────────────────────────────
DEFAULT_SERVER_URL = "https://massbeacon-worker.dskill4.workers.dev"
BEACON_PATH = "/beacon"
SUMMARY_PATH = "/summary"
API_TIMEOUT_POST = 10
API_TIMEOUT_FETCH = 10
API_TIMEOUT_WEBHOOK = 10
NETWORK_WORKERS = 3
INCLUDE_PLAYER_COUNT = True

# ─── Zones ───────────────────────────────────────────────────────
# Checked in this order. Region ids are disjoint across zones.
ACTIVITY_BA = "Barbarian Assault"
ACTIVITY_CORP = "Corporeal Beast"

BA_REGIONS = frozenset({
    10322,   # outpost / lobby
    10039,   # approach, just outside the lobby
})
CORP_REGIONS = frozenset({
    11842,
    11844,
})

AREA_GATE_STRICT = "strict"
AREA_GATE_OPEN = "open"

# ─── Config keys ─────────────────────────────────────────────────
KEY_FETCH_INTERVAL = "fetchIntervalSec"

# Keys written by older releases; removed on load.
DEPRECATED_KEYS = (
    "autoPost",
    "beaconEndpoint",
    "copyHotkey",
    "customActivityEnabled",
    "customActivityName",
    "includePlayerCount",
    "enableNetworkBeacons",
    "corpRegionIds",
)

# ─── Overlay ─────────────────────────────────────────────────────
OVERLAY_TITLE = "MassBeacon"
OVERLAY_MAX_ROWS = 5
OVERLAY_REFRESH_MS = 1000

THEME = {
    "bg_card":       "#1e293b",   # panel background
    "text_primary":  "#f1f5f9",   # white text
    "text_muted":    "#94a3b8",   # muted text
    "success":       "#22c55e",   # counts
}
