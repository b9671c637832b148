"""Permission-gated device location interface."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from ..exceptions import LocationError
from .models import AuthorizationStatus, Coordinate, LocationEvent

LocationListener = Callable[[LocationEvent], None]


class LocationProvider(ABC):
    """Observable location source.

    Subclasses drive the platform API and report through `_set_authorization`,
    `_report_location` and `_report_failure`; listeners receive one
    `LocationEvent` per change.
    """

    def __init__(
        self,
        *,
        logger: logging.Logger,
        distance_filter_meters: float = 100.0,
        authorization_status: AuthorizationStatus = "not_determined",
    ) -> None:
        self.logger = logger
        self.distance_filter_meters = distance_filter_meters
        self._location: Coordinate | None = None
        self._authorization_status: AuthorizationStatus = authorization_status
        self._error: LocationError | None = None
        self._listeners: list[LocationListener] = []

    @property
    def location(self) -> Coordinate | None:
        return self._location

    @property
    def authorization_status(self) -> AuthorizationStatus:
        return self._authorization_status

    @property
    def error(self) -> LocationError | None:
        return self._error

    @property
    def is_authorized(self) -> bool:
        return self._authorization_status == "granted"

    def subscribe(self, listener: LocationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    @abstractmethod
    def request_authorization(self) -> None:
        """Ask the user for location permission."""

    @abstractmethod
    def start_updating(self) -> None:
        """Begin delivering location updates."""

    @abstractmethod
    def stop_updating(self) -> None:
        """Stop delivering location updates."""

    def retry(self) -> None:
        """Re-run the permission/update flow after a user-initiated retry."""
        if self._authorization_status in ("denied", "restricted"):
            self._error = LocationError.authorization_denied()
            self._emit(LocationEvent(kind="error", error=self._error))
            return
        if self._authorization_status == "not_determined":
            self.request_authorization()
            return
        if self._error is not None:
            self._error = None
            self._emit(LocationEvent(kind="error", error=None))
        self.start_updating()

    def _set_authorization(self, status: AuthorizationStatus) -> None:
        self._authorization_status = status
        self.logger.info("Location authorization status: %s", status)
        self._emit(LocationEvent(kind="authorization", status=status))

        if status == "granted":
            self.start_updating()
        elif status in ("denied", "restricted"):
            self._location = None
            self._error = LocationError.authorization_denied()
            self._emit(LocationEvent(kind="error", error=self._error))

    def _report_location(self, coordinate: Coordinate) -> bool:
        """Publish a fix unless it is within the distance filter of the last one."""
        if (
            self._location is not None
            and self._location.distance_to(coordinate) <= self.distance_filter_meters
        ):
            return False
        self._location = coordinate
        self._error = None
        self._emit(LocationEvent(kind="location", location=coordinate))
        return True

    def _report_failure(self, reason: str) -> None:
        self._error = LocationError.update_failed(reason)
        self.logger.warning("Location update failed: %s", reason)
        self._emit(LocationEvent(kind="error", error=self._error))

    def _emit(self, event: LocationEvent) -> None:
        for listener in list(self._listeners):
            listener(event)
