"""Tests for the watch feed dedupe buffer."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from pweather.ui.event_buffer import EventBuffer


def test_warning_events_dedupe_within_window() -> None:
    buffer = EventBuffer(max_entries=10, dedupe_window_seconds=30)
    start = datetime(2024, 6, 10, 12, 0, tzinfo=UTC)
    buffer.add(severity="WARN", message="Request timed out", ts=start)
    merged = buffer.add(
        severity="WARN", message="Request timed out", ts=start + timedelta(seconds=5)
    )

    entries = buffer.entries()
    assert len(entries) == 1
    assert merged is entries[0]
    assert entries[0].count == 2
    assert entries[0].last_seen == start + timedelta(seconds=5)


def test_warning_events_new_entry_after_window() -> None:
    buffer = EventBuffer(max_entries=10, dedupe_window_seconds=5)
    start = datetime(2024, 6, 10, 12, 0, tzinfo=UTC)
    buffer.add(severity="WARN", message="Repeated warning", ts=start)
    buffer.add(severity="WARN", message="Repeated warning", ts=start + timedelta(seconds=6))

    entries = buffer.entries()
    assert len(entries) == 2
    assert all(entry.count == 1 for entry in entries)


def test_info_events_are_not_deduped() -> None:
    buffer = EventBuffer(max_entries=10, dedupe_window_seconds=60)
    now = datetime(2024, 6, 10, 12, 0, tzinfo=UTC)
    buffer.add(severity="INFO", message="state: loading", ts=now)
    buffer.add(severity="INFO", message="state: loading", ts=now + timedelta(seconds=1))

    assert len(buffer) == 2


def test_buffer_keeps_most_recent_entries() -> None:
    buffer = EventBuffer(max_entries=2)
    for index in range(3):
        buffer.add(severity="INFO", message=f"event {index}")

    assert [entry.message for entry in buffer.entries()] == ["event 1", "event 2"]
    assert [entry.message for entry in buffer.entries(newest_first=True)] == [
        "event 2",
        "event 1",
    ]
