"""
beacon_core — MassBeacon presence agent
=======================================
Architecture: timer threads + small network worker pool. Zero busy-wait.

  constants.py    → Version, cadences, endpoints, zone tables
  config.py       → Paths, logging, config load/save, BeaconConfig, ConfigStore
  http_client.py  → HTTP session with pooling, no retries
  state.py        → LocationSample, PresenceReport, SessionState
  zones.py        → Zone resolver (region → activity, gate policy)
  dedupe.py       → Webhook notification debounce
  summary.py      → SummaryStore (snapshot swap, optimistic merge)
  api.py          → Beacon service calls (post, fetch, webhook)
  game.py         → Game state source interface + static source
  scheduling.py   → Fixed-delay and one-shot timers
  app.py          → BeaconScheduler (session lifecycle, ticks, continuations)
  overlay.py      → SummaryOverlay (Tk panel, polled render)
  runner.py       → main() + auto-restart wrapper
"""
