"""WeatherAPI.com forecast provider implementation."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..exceptions import WeatherProviderError
from ..redaction import sanitize_text
from .base import WeatherProvider
from .models import WeatherSnapshot


class WeatherAPIProvider(WeatherProvider):
    """Fetches and validates forecast snapshots from api.weatherapi.com."""

    provider_name = "weatherapi"
    forecast_endpoint = "/forecast.json"

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        max_retries: int | None = None,
        retry_delay_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self._max_retries = (
            settings.weather_max_retries if max_retries is None else max_retries
        )
        self._retry_delay = (
            settings.weather_retry_delay_seconds
            if retry_delay_seconds is None
            else retry_delay_seconds
        )
        self._client = httpx.AsyncClient(
            base_url=str(settings.weather_api_base_url).rstrip("/"),
            timeout=settings.weather_timeout_seconds,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> WeatherAPIProvider:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_by_coordinates(self, lat: float, lon: float) -> WeatherSnapshot:
        """Fetch forecast for a latitude/longitude pair."""
        if not (-90 <= lat <= 90):
            raise WeatherProviderError(
                f"Invalid latitude {lat}; expected between -90 and 90.",
                category="invalid_input",
            )
        if not (-180 <= lon <= 180):
            raise WeatherProviderError(
                f"Invalid longitude {lon}; expected between -180 and 180.",
                category="invalid_input",
            )
        return await self._fetch(query=f"{lat},{lon}", context="coordinate forecast")

    async def fetch_by_name(self, name: str) -> WeatherSnapshot:
        """Fetch forecast for a city name."""
        query = name.strip()
        if not query:
            raise WeatherProviderError("City name must not be empty.", category="invalid_input")
        return await self._fetch(query=query, context="city forecast")

    async def _fetch(self, *, query: str, context: str) -> WeatherSnapshot:
        params = {
            "key": self.settings.weather_api_key,
            "q": query,
            "days": str(self.settings.weather_forecast_days),
            "aqi": "yes",
            "alerts": "yes",
        }
        payload = await self._request_json(params, context=context)
        try:
            snapshot = WeatherSnapshot.model_validate(payload)
        except ValidationError as exc:
            raise WeatherProviderError(
                f"WeatherAPI {context} returned an unexpected payload: "
                f"{exc.error_count()} validation error(s), first at "
                f"{'.'.join(str(part) for part in exc.errors()[0]['loc'])}.",
                category="decoding",
            ) from exc
        self.logger.info(
            "Fetched %s for %s (%d forecast days)",
            context,
            snapshot.location.name,
            len(snapshot.forecast.forecastday),
        )
        return snapshot

    async def _request_json(self, params: dict[str, str], context: str) -> dict[str, Any]:
        last_error: Exception | None = None
        for attempt in range(self._max_retries + 1):
            try:
                response = await self._client.get(self.forecast_endpoint, params=params)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                # Don't retry 4xx client errors except 429 rate-limit.
                if 400 <= status < 500 and status != 429:
                    raise WeatherProviderError(
                        f"WeatherAPI {context} failed with status {status}: "
                        f"{self._describe_error_body(exc.response)}",
                        category="http_status",
                        status_code=status,
                    ) from exc
                last_error = exc
                if attempt < self._max_retries:
                    self.logger.warning(
                        "WeatherAPI %s failed (HTTP %d); retrying",
                        context, status,
                    )
                    await asyncio.sleep(self._retry_delay)
                    continue
                raise WeatherProviderError(
                    f"WeatherAPI {context} failed with status {status}: "
                    f"{self._describe_error_body(exc.response)}",
                    category="http_status",
                    status_code=status,
                ) from exc
            except httpx.HTTPError as exc:
                last_error = exc
                if attempt < self._max_retries:
                    self.logger.warning(
                        "WeatherAPI %s request failed (%s); retrying",
                        context, type(exc).__name__,
                    )
                    await asyncio.sleep(self._retry_delay)
                    continue
                raise WeatherProviderError(
                    f"WeatherAPI {context} request failed: {sanitize_text(str(exc))}",
                    category="transport",
                ) from exc

            try:
                payload = response.json()
            except ValueError as exc:
                raise WeatherProviderError(
                    f"WeatherAPI {context} returned non-JSON response.",
                    category="decoding",
                ) from exc

            if not isinstance(payload, dict):
                raise WeatherProviderError(
                    f"WeatherAPI {context} returned unexpected payload type "
                    f"{type(payload).__name__}.",
                    category="decoding",
                )
            return payload

        raise WeatherProviderError(
            f"WeatherAPI {context} failed after retries: {sanitize_text(str(last_error))}",
            category="transport",
        )

    @staticmethod
    def _describe_error_body(response: httpx.Response) -> str:
        """Prefer the API's own `error.message`, else a truncated body."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and isinstance(error.get("message"), str):
                return error["message"]
        return sanitize_text(response.text[:300])
