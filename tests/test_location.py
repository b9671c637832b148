"""Tests for the permission-gated location provider contract."""

from __future__ import annotations

import logging

import pytest

from pweather.location.fixed import FixedLocationProvider
from pweather.location.models import Coordinate, LocationEvent

LOGGER = logging.getLogger("test_location")

ZURICH = Coordinate(latitude=47.3769, longitude=8.5417)


def _subscribe(provider: FixedLocationProvider) -> list[LocationEvent]:
    events: list[LocationEvent] = []
    provider.subscribe(events.append)
    return events


def test_distance_between_zurich_and_bern() -> None:
    bern = Coordinate(latitude=46.9480, longitude=7.4474)
    assert ZURICH.distance_to(bern) == pytest.approx(95_500, rel=0.02)
    assert ZURICH.distance_to(ZURICH) == 0.0


def test_granted_permission_reports_location() -> None:
    provider = FixedLocationProvider(ZURICH, logger=LOGGER)
    events = _subscribe(provider)

    provider.request_authorization()

    assert provider.authorization_status == "granted"
    assert provider.is_updating
    assert provider.location == ZURICH
    assert [event.kind for event in events] == ["authorization", "location"]


def test_denied_permission_sets_error_with_settings_hint() -> None:
    provider = FixedLocationProvider(ZURICH, logger=LOGGER, grant_permission=False)
    events = _subscribe(provider)

    provider.request_authorization()

    assert provider.authorization_status == "denied"
    assert provider.location is None
    assert provider.error is not None
    assert provider.error.kind == "authorization_denied"
    assert "Settings" in str(provider.error)
    assert events[-1].kind == "error"


def test_retry_after_denial_re_emits_error_without_prompting() -> None:
    provider = FixedLocationProvider(
        ZURICH, logger=LOGGER, grant_permission=False, authorization_status="denied"
    )
    events = _subscribe(provider)

    provider.retry()

    assert provider.authorization_status == "denied"
    assert [event.kind for event in events] == ["error"]


def test_missing_position_is_reported_as_update_failure() -> None:
    provider = FixedLocationProvider(None, logger=LOGGER, authorization_status="granted")
    provider.start_updating()

    assert provider.error is not None
    assert provider.error.kind == "update_failed"
    assert str(provider.error) == "Location update failed: no position available"


def test_retry_clears_error_and_restarts_updates() -> None:
    provider = FixedLocationProvider(ZURICH, logger=LOGGER, authorization_status="granted")
    provider.start_updating()
    provider.fail("signal lost")
    assert provider.error is not None

    provider.retry()

    assert provider.error is None
    assert provider.location == ZURICH


def test_distance_filter_drops_small_moves() -> None:
    provider = FixedLocationProvider(
        ZURICH, logger=LOGGER, distance_filter_meters=100.0, authorization_status="granted"
    )
    provider.start_updating()
    events = _subscribe(provider)

    nearby = Coordinate(latitude=47.3770, longitude=8.5418)
    far = Coordinate(latitude=47.3900, longitude=8.5417)

    assert provider.move_to(nearby) is False
    assert provider.move_to(far) is True
    assert provider.location == far
    assert [event.location for event in events] == [far]


def test_move_ignored_while_stopped() -> None:
    provider = FixedLocationProvider(ZURICH, logger=LOGGER, authorization_status="granted")
    assert provider.move_to(Coordinate(latitude=0.0, longitude=0.0)) is False
    assert provider.location is None
