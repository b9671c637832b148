"""Terminal presentation helpers."""

from .dashboard import WatchDashboard
from .event_buffer import EventBuffer
from .models import FeedEntry

__all__ = ["EventBuffer", "FeedEntry", "WatchDashboard"]
