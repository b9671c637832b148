"""Terminal view of a running coordinator for `pweather watch`."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..core.coordinator import CoordinatorState
from ..redaction import sanitize_text
from .event_buffer import EventBuffer
from .models import Severity

_SEVERITY_STYLES: dict[Severity, str] = {"INFO": "cyan", "WARN": "yellow", "ERROR": "bold red"}


def _severity_from_level(level_no: int) -> Severity:
    if level_no >= logging.ERROR:
        return "ERROR"
    if level_no >= logging.WARNING:
        return "WARN"
    return "INFO"


class _FeedLogHandler(logging.Handler):
    """Route logger output into the feed instead of JSON lines."""

    def __init__(self, dashboard: WatchDashboard) -> None:
        super().__init__()
        self.dashboard = dashboard

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.dashboard.record(
                severity=_severity_from_level(record.levelno),
                message=sanitize_text(record.getMessage()),
            )
        except Exception:
            self.handleError(record)


class WatchDashboard:
    """Collects coordinator state changes and log lines into a deduped feed."""

    def __init__(
        self,
        *,
        console: Console,
        max_entries: int = 50,
        dedupe_window_seconds: float = 30.0,
        echo: bool = True,
    ) -> None:
        self.console = console
        self.echo = echo
        self.feed = EventBuffer(
            max_entries=max_entries,
            dedupe_window_seconds=dedupe_window_seconds,
        )
        self.states: list[CoordinatorState] = []
        self._logger: logging.Logger | None = None
        self._original_handlers: list[logging.Handler] = []

    def attach_logger(self, logger: logging.Logger) -> None:
        self._logger = logger
        self._original_handlers = list(logger.handlers)
        logger.handlers = [_FeedLogHandler(self)]

    def detach_logger(self) -> None:
        if self._logger is None:
            return
        self._logger.handlers = self._original_handlers
        self._logger = None
        self._original_handlers = []

    def record(self, *, severity: Severity, message: str) -> None:
        entry = self.feed.add(severity=severity, message=message)
        if self.echo and entry.count == 1:
            style = _SEVERITY_STYLES[severity]
            self.console.print(f"[{style}]{severity:<5}[/{style}] {escape(message)}")

    def on_state(self, state: CoordinatorState) -> None:
        """Coordinator listener."""
        previous = self.states[-1] if self.states else None
        self.states.append(state)

        content = state.content_state
        if previous is None or previous.content_state != content:
            if content.is_blocking_error:
                actions = " / ".join(content.actions)
                self.record(severity="ERROR", message=f"{content.message} [{actions}]")
            else:
                self.record(severity="INFO", message=f"state: {content.kind}")
        if state.advisory and (previous is None or previous.advisory != state.advisory):
            self.record(severity="WARN", message=state.advisory)

    def summary_panel(self) -> Panel:
        table = Table.grid(padding=(0, 1))
        table.add_column(justify="right")
        table.add_column()
        table.add_column(overflow="fold")
        for entry in self.feed.entries():
            style = _SEVERITY_STYLES[entry.severity]
            repeat = f" x{entry.count}" if entry.count > 1 else ""
            table.add_row(
                entry.ts.strftime("%H:%M:%S"),
                f"[{style}]{entry.severity}[/{style}]",
                f"{escape(entry.message)}{repeat}",
            )
        return Panel(table, title="Session feed")
