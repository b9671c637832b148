"""City search by free-text name."""

from __future__ import annotations

import logging

from ..exceptions import WeatherProviderError
from ..weather.base import WeatherProvider
from ..weather.models import WeatherSnapshot


class CitySearch:
    """Holds the latest search results and error for a search screen."""

    def __init__(self, provider: WeatherProvider, logger: logging.Logger) -> None:
        self.provider = provider
        self.logger = logger
        self.results: list[WeatherSnapshot] = []
        self.error: WeatherProviderError | None = None
        self.is_loading = False

    async def search(self, name: str) -> list[WeatherSnapshot]:
        """Search for `name`; blank input clears results without a request."""
        query = name.strip()
        if not query:
            self.clear_results()
            return []

        self.is_loading = True
        self.error = None
        try:
            snapshot = await self.provider.fetch_by_name(query)
        except WeatherProviderError as exc:
            self.error = exc
            self.logger.warning("Search failed for %r: %s", query, exc)
        else:
            self.results = [snapshot]
            self.logger.info("Found weather for %s", snapshot.location.name)
        finally:
            self.is_loading = False
        return list(self.results)

    def clear_results(self) -> None:
        self.results = []
        self.error = None

    def clear_error(self) -> None:
        self.error = None
