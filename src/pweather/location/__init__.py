"""Device location providers."""

from .base import LocationProvider
from .fixed import FixedLocationProvider
from .models import AuthorizationStatus, Coordinate, LocationEvent

__all__ = [
    "AuthorizationStatus",
    "Coordinate",
    "FixedLocationProvider",
    "LocationEvent",
    "LocationProvider",
]
