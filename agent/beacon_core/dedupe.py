"""
Webhook notification debounce.

Remembers only the last signature sent. A repeat of that signature inside
the cooldown is suppressed; anything else goes through.
"""

import threading

from .constants import NOTIFY_COOLDOWN_SEC


def signature(activity, location_id, participant_count):
    return f"{activity}|{location_id}|{participant_count}"


class NotificationDeduplicator:

    def __init__(self, cooldown_sec=NOTIFY_COOLDOWN_SEC):
        self._cooldown = cooldown_sec
        self._lock = threading.Lock()
        self._last_sig = None
        self._last_sent_at = 0.0

    @property
    def last_signature(self):
        return self._last_sig

    def should_notify(self, activity, location_id, participant_count, now, ready=True) -> bool:
        if participant_count <= 0:
            return False
        if not ready:
            return False
        sig = signature(activity, location_id, participant_count)
        with self._lock:
            if sig == self._last_sig and now < self._last_sent_at + self._cooldown:
                return False
        return True

    def record(self, activity, location_id, participant_count, now):
        """Call after a positive should_notify(), not after delivery."""
        with self._lock:
            self._last_sig = signature(activity, location_id, participant_count)
            self._last_sent_at = now

    def reset(self):
        with self._lock:
            self._last_sig = None
            self._last_sent_at = 0.0
