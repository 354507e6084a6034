"""
Beacon service calls — post beacon, fetch summary, webhook notify.

All functions are blocking (run on the scheduler's worker pool, never on a
timer thread). Each is try-once: a failure is logged and reported to the
caller as None/False, never raised.
"""

import requests

from .config import log
from .constants import (
    BEACON_PATH, SUMMARY_PATH,
    API_TIMEOUT_POST, API_TIMEOUT_FETCH, API_TIMEOUT_WEBHOOK,
)
from .summary import parse_summary
from . import http_client


def _is_success(status):
    return 200 <= status < 300


# ─── Beacon ──────────────────────────────────────────────────────

def post_beacon(server_url, report):
    """
    POST one PresenceReport. Returns the HTTP status, or None when the
    request never completed (DNS/connect/timeout).
    """
    url = f"{server_url}{BEACON_PATH}"
    payload = report.to_payload()

    log.info("POST %s -> '%s' W%d players=%d",
             BEACON_PATH, report.activity, report.location_id, report.participant_count)
    try:
        resp = http_client.http.post(url, json=payload, timeout=API_TIMEOUT_POST)
    except requests.RequestException as e:
        log.warning("POST failed: %s", e)
        return None

    status = resp.status_code
    resp.close()
    log.info("POST %s HTTP %d", BEACON_PATH, status)
    if not _is_success(status):
        log.warning("POST non-2xx (%d), body likely rejected", status)
    return status


# ─── Summary ─────────────────────────────────────────────────────

def fetch_summary(server_url, activity):
    """
    GET the aggregated summary for one activity.

    Returns a Summary (possibly empty) or None on transport failure,
    non-2xx, or an unparseable body. Callers keep their previous snapshot
    for None and for an empty result.
    """
    url = f"{server_url}{SUMMARY_PATH}"
    log.info("GET %s?activity=%s", SUMMARY_PATH, activity)
    try:
        resp = http_client.http.get(url, params={"activity": activity}, timeout=API_TIMEOUT_FETCH)
    except requests.RequestException as e:
        log.warning("GET failed: %s", e)
        return None

    if not _is_success(resp.status_code):
        log.warning("GET non-2xx: HTTP %d (keeping previous)", resp.status_code)
        return None

    try:
        body = resp.json() if resp.content else None
    except ValueError:
        log.info("Summary parse failed (keeping previous)")
        return None

    summary = parse_summary(body)
    if summary is None:
        log.info("Summary parse -> null (keeping previous)")
        return None
    if not summary:
        log.info("Summary empty (keeping previous)")
        return summary

    log.info("Summary worlds %d", len(summary))
    return summary


# ─── Webhook ─────────────────────────────────────────────────────

def format_notification(activity, location_id, participant_count):
    return f"\U0001F514 **{activity}** mass at **W{location_id}** ({participant_count} players)"


def send_webhook(webhook_url, activity, location_id, participant_count):
    """Post a one-line notification. No-op without a URL. Returns True on 2xx."""
    if not webhook_url:
        return False

    payload = {"content": format_notification(activity, location_id, participant_count)}
    try:
        resp = http_client.http.post(webhook_url, json=payload, timeout=API_TIMEOUT_WEBHOOK)
    except requests.RequestException as e:
        log.warning("Webhook failed: %s", e)
        return False

    status = resp.status_code
    resp.close()
    log.info("Webhook HTTP %d", status)
    return _is_success(status)
