"""City reconciliation, weather cache and screen-state coordination."""

from .city import City, is_same_city
from .content_state import ContentState, ContentStateDecision, resolve_content_state
from .reconcile import reconcile_cities

__all__ = [
    "City",
    "ContentState",
    "ContentStateDecision",
    "is_same_city",
    "reconcile_cities",
    "resolve_content_state",
]
