"""Level-triggered derivation of the top-level screen state."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

ContentKind = Literal["requesting_location", "location_error", "error", "loading", "ready"]
ContentAction = Literal["retry", "open_settings"]

_PERMISSION_HINTS = ("permission", "denied", "authoriz", "not allowed")


def suggests_permission_problem(message: str) -> bool:
    lowered = message.lower()
    return any(hint in lowered for hint in _PERMISSION_HINTS)


class ContentState(BaseModel):
    """What the top-level screen should show."""

    model_config = ConfigDict(frozen=True)

    kind: ContentKind
    message: str | None = None

    @classmethod
    def requesting_location(cls) -> ContentState:
        return cls(kind="requesting_location")

    @classmethod
    def location_error(cls, message: str) -> ContentState:
        return cls(kind="location_error", message=message)

    @classmethod
    def error(cls, message: str) -> ContentState:
        return cls(kind="error", message=message)

    @classmethod
    def loading(cls) -> ContentState:
        return cls(kind="loading")

    @classmethod
    def ready(cls) -> ContentState:
        return cls(kind="ready")

    @property
    def is_blocking_error(self) -> bool:
        return self.kind in ("location_error", "error")

    @property
    def actions(self) -> tuple[ContentAction, ...]:
        """User actions offered alongside a blocking error."""
        if not self.is_blocking_error:
            return ()
        if self.message and suggests_permission_problem(self.message):
            return ("retry", "open_settings")
        return ("retry",)


class ContentStateDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    state: ContentState
    advisory: str | None = None


def resolve_content_state(
    *,
    has_saved_cities: bool,
    has_location: bool,
    location_error: str | None,
    has_current_weather: bool,
    current_weather_error: str | None,
    is_ready_to_show: bool,
) -> ContentStateDecision:
    """Derive the screen state from current signals; first matching rule wins.

    Errors are demoted to a non-blocking advisory whenever saved cities can be
    shown instead.
    """
    advisory: str | None = None

    if location_error is not None:
        if not has_saved_cities:
            return ContentStateDecision(state=ContentState.location_error(location_error))
        advisory = location_error

    if not has_location and not has_saved_cities:
        return ContentStateDecision(state=ContentState.requesting_location())

    if current_weather_error is not None:
        if not has_saved_cities:
            return ContentStateDecision(state=ContentState.error(current_weather_error))
        advisory = current_weather_error

    if has_saved_cities:
        return ContentStateDecision(state=ContentState.ready(), advisory=advisory)

    if not has_current_weather or not is_ready_to_show:
        return ContentStateDecision(state=ContentState.loading())

    return ContentStateDecision(state=ContentState.ready())
