"""Bounded feed of state changes and advisories with repeat collapsing."""

from __future__ import annotations

from collections import deque
from datetime import UTC, datetime

from .models import FeedEntry, Severity


class EventBuffer:
    """Keep recent feed entries; identical warnings/errors inside the window merge."""

    def __init__(self, *, max_entries: int = 50, dedupe_window_seconds: float = 30.0) -> None:
        self.dedupe_window_seconds = dedupe_window_seconds
        self._entries: deque[FeedEntry] = deque(maxlen=max_entries)

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, *, severity: Severity, message: str, ts: datetime | None = None) -> FeedEntry:
        now = ts or datetime.now(UTC)
        entry = FeedEntry(ts=now, severity=severity, message=message)

        key = entry.dedupe_key
        if key is not None:
            for existing in reversed(self._entries):
                if existing.dedupe_key != key or existing.last_seen is None:
                    continue
                if (entry.ts - existing.last_seen).total_seconds() <= self.dedupe_window_seconds:
                    existing.count += 1
                    existing.last_seen = entry.ts
                    return existing
                break

        self._entries.append(entry)
        return entry

    def entries(self, *, newest_first: bool = False) -> list[FeedEntry]:
        items = list(self._entries)
        if newest_first:
            items.reverse()
        return items
