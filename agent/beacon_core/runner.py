"""
Entry point and auto-restart wrapper.
"""

import argparse
import logging
import threading
import time

from .constants import AGENT_VERSION
from .config import CONFIG_FILE, log, setup_logging, ConfigStore
from .game import StaticGameState
from .app import BeaconScheduler
from . import http_client


def build_parser():
    parser = argparse.ArgumentParser(
        prog="massbeacon",
        description="Post presence beacons for a fixed location and show the summary.",
    )
    parser.add_argument("--region", type=int, required=True, help="Region id of the local player")
    parser.add_argument("--world", type=int, required=True, help="World number reported in the beacon")
    parser.add_argument("--players", type=int, default=0, help="Players in view")
    parser.add_argument("--webhook", help="Webhook URL (saved to config)")
    parser.add_argument("--fetch-interval", type=int, help="Fetch interval in seconds (5-120)")
    parser.add_argument("--config", help="Path to config.json")
    parser.add_argument("--no-overlay", action="store_true", help="Run headless")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


def main(argv=None):
    """Primary agent entry point."""
    _run(build_parser().parse_args(argv))


def _run(args):
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO)
    log.info("MassBeacon v%s", AGENT_VERSION)

    config_store = ConfigStore.from_disk(args.config)
    if args.webhook is not None:
        config_store.set("webhookUrl", args.webhook, persist=True)
    if args.fetch_interval is not None:
        config_store.set("fetchIntervalSec", args.fetch_interval, persist=True)

    game = StaticGameState(region_id=args.region, world=args.world, player_count=args.players)
    scheduler = BeaconScheduler(game, config_store, run_heartbeat=True)
    scheduler.on_session_started()

    try:
        if args.no_overlay or not config_store.config.showOverlay:
            threading.Event().wait()
        else:
            from .overlay import SummaryOverlay
            SummaryOverlay(scheduler, config_store).run()
    finally:
        scheduler.shutdown()


def _describe_run(args):
    return "config=%s region=%d world=%d" % (
        args.config or CONFIG_FILE, args.region, args.world,
    )


def run_with_auto_restart(argv=None):
    """
    Run the agent, restarting it after a crash.

    Arguments are parsed once up front, so a bad command line exits instead
    of looping. Each crash is logged with the config path and location the
    run was using, then the shared HTTP session is rebuilt before the next
    attempt. Backoff grows 10 s per rapid crash up to 60 s, and drops to a
    flat 120 s after ten crashes that each came within two minutes of start.
    """
    args = build_parser().parse_args(argv)
    context = _describe_run(args)
    crash_count = 0
    crash_window = 120
    max_rapid_crashes = 10

    while True:
        start_time = time.time()
        try:
            _run(args)
            break
        except KeyboardInterrupt:
            log.info("Agent stopped by user.")
            break
        except SystemExit as e:
            if e.code in (0, None, 2):
                raise
            log.error("Agent exited with code %s (%s)", e.code, context)
        except Exception as e:
            elapsed = time.time() - start_time
            if elapsed > crash_window:
                crash_count = 0
            crash_count += 1
            log.error(
                "MassBeacon v%s crashed after %.0fs with %s (%s): %s",
                AGENT_VERSION, elapsed, type(e).__name__, context, e, exc_info=True,
            )

            if crash_count >= max_rapid_crashes:
                wait = 120
                log.warning("Many rapid crashes (%d). Waiting %ds...", crash_count, wait)
            else:
                wait = min(10 * crash_count, 60)

            log.info("Restarting in %ds (crash %d)...", wait, crash_count)
            time.sleep(wait)

            http_client.http = http_client.reset_session(http_client.http)
