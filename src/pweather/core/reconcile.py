"""Merge the current-location city with the saved-city list."""

from __future__ import annotations

from collections.abc import Sequence

from .city import City, is_same_city


def reconcile_cities(current: City | None, saved: Sequence[City]) -> list[City]:
    """Return the display list: current location first, then non-duplicate saved cities.

    Filtering is presentation-only; callers must not write the result back to
    storage.
    """
    if current is None:
        return list(saved)
    return [current, *(city for city in saved if not is_same_city(city, current))]
