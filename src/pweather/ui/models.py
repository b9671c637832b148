"""Feed entry model for the terminal front-end."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Literal

Severity = Literal["INFO", "WARN", "ERROR"]


@dataclass(slots=True)
class FeedEntry:
    """One line in the watch feed; repeats of the same warning bump `count`."""

    ts: datetime
    severity: Severity
    message: str
    count: int = 1
    last_seen: datetime | None = None

    def __post_init__(self) -> None:
        self.ts = self.ts.replace(tzinfo=UTC) if self.ts.tzinfo is None else self.ts
        if self.last_seen is None:
            self.last_seen = self.ts

    @property
    def dedupe_key(self) -> str | None:
        if self.severity == "INFO":
            return None
        return f"{self.severity}:{self.message}"
