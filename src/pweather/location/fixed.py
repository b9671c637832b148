"""Location provider that reports configured coordinates."""

from __future__ import annotations

import logging

from .base import LocationProvider
from .models import AuthorizationStatus, Coordinate


class FixedLocationProvider(LocationProvider):
    """Reports a fixed position, for terminals and tests without device GPS."""

    def __init__(
        self,
        coordinate: Coordinate | None,
        *,
        logger: logging.Logger,
        grant_permission: bool = True,
        distance_filter_meters: float = 100.0,
        authorization_status: AuthorizationStatus = "not_determined",
    ) -> None:
        super().__init__(
            logger=logger,
            distance_filter_meters=distance_filter_meters,
            authorization_status=authorization_status,
        )
        self._coordinate = coordinate
        self._grant_permission = grant_permission
        self._updating = False

    @property
    def is_updating(self) -> bool:
        return self._updating

    def request_authorization(self) -> None:
        self._set_authorization("granted" if self._grant_permission else "denied")

    def start_updating(self) -> None:
        if not self.is_authorized:
            self.request_authorization()
            return
        self._updating = True
        if self._coordinate is None:
            self._report_failure("no position available")
            return
        self._report_location(self._coordinate)

    def stop_updating(self) -> None:
        self._updating = False

    def move_to(self, coordinate: Coordinate) -> bool:
        """Simulate a new fix; returns whether it passed the distance filter."""
        self._coordinate = coordinate
        if not self._updating:
            return False
        return self._report_location(coordinate)

    def fail(self, reason: str) -> None:
        self._report_failure(reason)
