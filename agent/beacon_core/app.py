"""
BeaconScheduler — session lifecycle, timers, and network continuations.

Timers (armed on session start, cancelled on session end):
  immediate sync  — one-shot, 1s after login                (post + fetch)
  fetch timer     — every fetchIntervalSec, fixed delay     (fetch)
  post timer      — every 15s, fixed delay                  (post → notify → fetch)
  heartbeat       — every game tick, optional               (zone-exit detection)

Network calls run on a small worker pool. Their results are handled in
future callbacks: a finished post applies the optimistic update, sends
the webhook if one was approved, then chains a fetch for the same activity.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from functools import partial

from .constants import (
    AGENT_VERSION, POST_INTERVAL_SEC, IMMEDIATE_SYNC_DELAY_SEC,
    HEARTBEAT_SEC, NETWORK_WORKERS, KEY_FETCH_INTERVAL,
)
from .config import log, ConfigStore
from .state import SessionState, LocationSample, PresenceReport
from .summary import SummaryStore
from .dedupe import NotificationDeduplicator
from .zones import DEFAULT_ZONES, ZoneConfig, resolve, zones_containing
from .scheduling import FixedDelayTimer, OneShotTimer
from . import api


class BeaconScheduler:
    """
    Owns the timers and the session. Host code forwards three signals:
      on_session_started()   — logged in
      on_session_ended()     — logged out / plugin stopped
      on_config_changed(key) — also subscribed automatically to the ConfigStore
    and optionally calls on_game_tick() once per game tick.
    """

    def __init__(self, game, config_store=None, *, store=None, deduplicator=None,
                 zones=DEFAULT_ZONES, executor=None, clock=time.time,
                 run_heartbeat=False, strict_post=False,
                 timer_factory=FixedDelayTimer, one_shot_factory=OneShotTimer):
        self._game = game
        self._config_store = config_store or ConfigStore()
        self.store = store or SummaryStore()
        self.deduplicator = deduplicator or NotificationDeduplicator()
        self.state = SessionState()
        self._zones = zones
        self._clock = clock
        self._run_heartbeat = run_heartbeat
        self._strict_post = strict_post
        self._timer_factory = timer_factory
        self._one_shot_factory = one_shot_factory

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=NETWORK_WORKERS, thread_name_prefix="beacon-net",
        )

        self._lock = threading.RLock()
        self._generation = 0
        self._fetch_timer = None
        self._post_timer = None
        self._heartbeat_timer = None
        self._immediate = None

        self._config_store.subscribe(self.on_config_changed)

    # ─── Accessors ───────────────────────────────────────────

    @property
    def config(self):
        return self._config_store.config

    @property
    def running(self) -> bool:
        return self.state.running

    def latest_summary(self):
        """Read-only snapshot for the display layer."""
        return self.store.current()

    # ─── Session lifecycle ───────────────────────────────────

    def on_session_started(self):
        with self._lock:
            if not self.state.running:
                self.state.on_started()
                self._generation += 1
                self._arm_fetch_timer()
                self._post_timer = self._timer_factory(
                    "post", POST_INTERVAL_SEC, self.post_tick,
                ).start()
                if self._run_heartbeat:
                    self._heartbeat_timer = self._timer_factory(
                        "heartbeat", HEARTBEAT_SEC, self.on_game_tick,
                    ).start()
                log.info(
                    "v%s started (fetch=%ds, post=%ds, gates BA=%s Corp=%s, area=%s)",
                    AGENT_VERSION, self.config.fetch_interval, POST_INTERVAL_SEC,
                    self.config.onlyAtBA, self.config.onlyAtCorp, self.config.areaGate,
                )

            if self._immediate is not None:
                self._immediate.cancel()
            self._immediate = self._one_shot_factory(
                "immediate", IMMEDIATE_SYNC_DELAY_SEC, self.immediate_sync,
            ).start()

    def on_session_ended(self):
        with self._lock:
            if not self.state.running:
                return
            uptime = time.time() - self.state.started_at
            posts = self.state.posts_sent
            self.state.on_stopped()
            self._generation += 1
            for timer in (self._immediate, self._fetch_timer, self._post_timer, self._heartbeat_timer):
                if timer is not None:
                    timer.cancel()
            self._immediate = None
            self._fetch_timer = None
            self._post_timer = None
            self._heartbeat_timer = None
            self.store.clear()
            self.deduplicator.reset()
        log.info("Beacon stopped after %.0fs (%d posts).", uptime, posts)

    def on_config_changed(self, key):
        if key != KEY_FETCH_INTERVAL:
            return
        with self._lock:
            if self.state.running:
                self._arm_fetch_timer()

    def shutdown(self):
        """Stop the session and release the worker pool (does not wait for in-flight calls)."""
        self.on_session_ended()
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def _arm_fetch_timer(self):
        if self._fetch_timer is not None:
            self._fetch_timer.cancel()
        secs = self.config.fetch_interval
        self._fetch_timer = self._timer_factory("fetch", secs, self.fetch_tick).start()
        log.debug("Scheduled fetch every %ds", secs)

    # ─── Readiness + zone ────────────────────────────────────

    def _is_ready(self) -> bool:
        return self._game.logged_in and self._game.region_id is not None

    def _zone_config(self):
        return ZoneConfig.from_beacon_config(self.config)

    def _sample(self) -> LocationSample:
        region = self._game.region_id
        if region is None:
            region = -1
        return LocationSample(region, resolve(region, self._zone_config(), self._zones))

    def _build_report(self, activity) -> PresenceReport:
        return PresenceReport(
            activity=activity,
            location_id=self._game.world,
            participant_count=self._game.player_count,
        )

    # ─── Ticks ───────────────────────────────────────────────

    def immediate_sync(self):
        try:
            self._do_immediate_sync()
        except Exception as e:
            log.error("immediate sync error: %s", e, exc_info=True)

    def _do_immediate_sync(self):
        if not self.state.running or not self._is_ready():
            return
        sample = self._sample()
        if not sample.in_zone:
            log.info("Immediate tick outside target area; skipping post/fetch (region=%d)",
                     sample.location_id)
            return

        report = self._build_report(sample.activity)
        log.info("IMMEDIATE POST -> '%s' W%d players=%d",
                 report.activity, report.location_id, report.participant_count)
        self._post_with_decision(report)
        self._submit_fetch(report.activity)

    def post_tick(self):
        try:
            self._do_post_tick()
        except Exception as e:
            log.error("post tick error: %s", e, exc_info=True)

    def _do_post_tick(self):
        if not self.state.running or not self._is_ready():
            return
        sample = self._sample()
        if not sample.in_zone:
            return
        report = self._build_report(sample.activity)
        self._post_with_decision(report)

    def _post_with_decision(self, report):
        generation = self._generation
        now = self._clock()
        notify = self.deduplicator.should_notify(
            report.activity, report.location_id, report.participant_count, now,
            ready=self._game.logged_in,
        )
        log.debug("POST tick -> '%s' W%d players=%d notify=%s",
                  report.activity, report.location_id, report.participant_count, notify)

        self._submit_post(report, notify, generation)

        # Teardown may have run while the post was being dispatched.
        with self._lock:
            if not self._is_current(generation):
                return
            self.state.posts_sent += 1
            if notify:
                self.deduplicator.record(
                    report.activity, report.location_id, report.participant_count, now,
                )

    def fetch_tick(self):
        try:
            self._do_fetch_tick()
        except Exception as e:
            log.error("fetch tick error: %s", e, exc_info=True)

    def _do_fetch_tick(self):
        if not self.state.running or not self._is_ready():
            return
        sample = self._sample()
        if not sample.in_zone:
            return
        self._submit_fetch(sample.activity)

    def on_game_tick(self):
        try:
            self._do_game_tick()
        except Exception as e:
            log.error("game tick error: %s", e, exc_info=True)

    def _do_game_tick(self):
        if not self.state.running:
            return
        region = self._game.region_id
        if region is None:
            return

        if region != self.state.last_logged_region:
            self.state.last_logged_region = region
            membership = zones_containing(region, self._zones)
            log.info("Region change -> region=%d %s", region,
                     " ".join(f"{name}={inside}" for name, inside in membership.items()))

        in_zone = resolve(region, self._zone_config(), self._zones) is not None
        if in_zone != self.state.was_in_zone:
            if not in_zone and self.store.clear():
                log.info("Left target area (region=%d), overlay cleared", region)
            self.state.was_in_zone = in_zone

    # ─── Network dispatch + continuations ────────────────────

    def _submit(self, fn, *args):
        try:
            return self._executor.submit(fn, *args)
        except RuntimeError as e:
            # Pool already shut down during teardown.
            log.debug("Dropped %s: %s", getattr(fn, "__name__", fn), e)
            return None

    def _is_current(self, generation) -> bool:
        return self.state.running and generation == self._generation

    def _submit_post(self, report, notify, generation):
        future = self._submit(api.post_beacon, self.config.serverUrl, report)
        if future is not None:
            future.add_done_callback(partial(self._on_post_done, report, notify, generation))

    def _on_post_done(self, report, notify, generation, future):
        try:
            status = future.result()
        except Exception as e:
            log.warning("POST worker error: %s", e)
            return
        if status is None:
            return
        if self._strict_post and not (200 <= status < 300):
            log.info("Strict mode: skipping optimistic update after HTTP %d", status)
            return
        if not self._is_current(generation):
            log.debug("POST completed after teardown; ignoring")
            return

        self.store.optimistic_update(report.location_id, report.participant_count)
        if notify:
            self._submit_notify(report)
        self._submit_fetch(report.activity)

    def _submit_fetch(self, activity):
        future = self._submit(api.fetch_summary, self.config.serverUrl, activity)
        if future is not None:
            future.add_done_callback(partial(self._on_fetch_done, self._generation))

    def _on_fetch_done(self, generation, future):
        try:
            summary = future.result()
        except Exception as e:
            log.warning("GET worker error: %s", e)
            return
        if summary is None or not self._is_current(generation):
            return
        self.store.replace_if_non_empty(summary)

    def _submit_notify(self, report):
        future = self._submit(
            api.send_webhook, self.config.webhookUrl,
            report.activity, report.location_id, report.participant_count,
        )
        if future is not None:
            future.add_done_callback(self._on_notify_done)

    @staticmethod
    def _on_notify_done(future):
        try:
            future.result()
        except Exception as e:
            log.warning("Webhook worker error: %s", e)
