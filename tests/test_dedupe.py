from __future__ import annotations

from beacon_core.dedupe import NotificationDeduplicator, signature

T = 1_000.0


def _sent(dedupe: NotificationDeduplicator) -> NotificationDeduplicator:
    assert dedupe.should_notify("Barbarian Assault", 301, 12, T)
    dedupe.record("Barbarian Assault", 301, 12, T)
    return dedupe


def test_signature_format() -> None:
    assert signature("Barbarian Assault", 301, 12) == "Barbarian Assault|301|12"


def test_same_signature_suppressed_inside_cooldown() -> None:
    dedupe = _sent(NotificationDeduplicator())
    assert not dedupe.should_notify("Barbarian Assault", 301, 12, T + 30)


def test_same_signature_allowed_after_cooldown() -> None:
    dedupe = _sent(NotificationDeduplicator())
    assert dedupe.should_notify("Barbarian Assault", 301, 12, T + 61)


def test_changed_count_is_a_new_signature() -> None:
    dedupe = _sent(NotificationDeduplicator())
    assert dedupe.should_notify("Barbarian Assault", 301, 13, T + 1)


def test_only_last_signature_remembered() -> None:
    dedupe = _sent(NotificationDeduplicator())
    dedupe.record("Barbarian Assault", 302, 4, T + 2)
    assert dedupe.should_notify("Barbarian Assault", 301, 12, T + 3)


def test_empty_events_never_notify() -> None:
    dedupe = NotificationDeduplicator()
    assert not dedupe.should_notify("Corporeal Beast", 301, 0, T)
    assert not dedupe.should_notify("Corporeal Beast", 301, -1, T)


def test_not_ready_never_notifies() -> None:
    assert not NotificationDeduplicator().should_notify("Corporeal Beast", 301, 5, T, ready=False)


def test_decision_alone_does_not_record() -> None:
    dedupe = NotificationDeduplicator()
    assert dedupe.should_notify("Corporeal Beast", 301, 5, T)
    assert dedupe.should_notify("Corporeal Beast", 301, 5, T + 1)
    assert dedupe.last_signature is None


def test_reset_forgets_signature() -> None:
    dedupe = _sent(NotificationDeduplicator())
    dedupe.reset()
    assert dedupe.last_signature is None
    assert dedupe.should_notify("Barbarian Assault", 301, 12, T + 1)
