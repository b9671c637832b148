"""Offline smoke tests for the pweather CLI."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from pweather.cli import main
from pweather.exceptions import WeatherProviderError
from pweather.weather.base import WeatherProvider
from pweather.weather.models import WeatherSnapshot


def _snapshot(name: str, lat: float, lon: float) -> WeatherSnapshot:
    source = Path(__file__).parent / "fixtures" / "weatherapi_forecast.json"
    payload = json.loads(source.read_text(encoding="utf-8"))
    payload["location"].update({"name": name, "lat": lat, "lon": lon})
    return WeatherSnapshot.model_validate(payload)


class _OfflineProvider(WeatherProvider):
    """Stands in for WeatherAPIProvider inside build_container."""

    def __init__(self, settings: Any, logger: logging.Logger) -> None:
        self.settings = settings
        self.logger = logger

    async def fetch_by_coordinates(self, lat: float, lon: float) -> WeatherSnapshot:
        return _snapshot("Zurich", lat, lon)

    async def fetch_by_name(self, name: str) -> WeatherSnapshot:
        if name == "Atlantis":
            raise WeatherProviderError(
                "No matching location found.", category="http_status", status_code=400
            )
        return _snapshot(name, 46.948, 7.4474)

    async def aclose(self) -> None:
        return None


@pytest.fixture
def offline_env(monkeypatch: Any, tmp_path: Path) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("APP_ENV", "dev")
    monkeypatch.setenv("WEATHER_API_KEY", "test-secret-key")
    monkeypatch.setenv("PREFERENCES_PATH", str(tmp_path / "state" / "preferences.json"))
    monkeypatch.setenv("LOCATION_DEBOUNCE_SECONDS", "0.01")
    monkeypatch.setenv("SETTLE_WINDOW_SECONDS", "0.01")
    monkeypatch.delenv("DEFAULT_LAT", raising=False)
    monkeypatch.delenv("DEFAULT_LON", raising=False)
    monkeypatch.setattr("pweather.app.WeatherAPIProvider", _OfflineProvider)
    return tmp_path


def test_missing_api_key_is_config_failure(monkeypatch: Any, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("WEATHER_API_KEY", raising=False)
    assert main(["cities", "list"]) == 2


def test_corrupt_preferences_file_is_store_failure(offline_env: Path) -> None:
    path = offline_env / "state" / "preferences.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("{broken", encoding="utf-8")
    assert main(["cities", "list"]) == 3


def test_search_save_then_list_and_remove(offline_env: Path, capsys: Any) -> None:
    assert main(["search", "Bern", "--save"]) == 0
    assert "Saved Bern as bern_46.9480_7.4474." in capsys.readouterr().out

    assert main(["search", "Bern", "--save"]) == 0
    assert "Bern is already saved." in capsys.readouterr().out

    assert main(["cities", "list"]) == 0
    assert "bern_46.9480_7.4474" in capsys.readouterr().out

    assert main(["cities", "remove", "0"]) == 0
    output = capsys.readouterr().out
    assert "Deleted bern_46.9480_7.4474." in output
    assert "No saved cities." in output


def test_failed_search_exits_with_weather_code(offline_env: Path) -> None:
    assert main(["search", "Atlantis"]) == 4


def test_current_requires_a_location(offline_env: Path) -> None:
    assert main(["current"]) == 4
    assert main(["current", "--lat", "47.37"]) == 4


def test_current_prints_forecast(offline_env: Path, capsys: Any) -> None:
    assert main(["current", "--lat", "47.37", "--lon", "8.55", "--max-print", "1"]) == 0
    output = capsys.readouterr().out
    assert "Zurich" in output
    assert "Thunderstorms" in output


def test_settings_set_persists_units(offline_env: Path, capsys: Any) -> None:
    assert main(["settings", "set", "--temperature-unit", "F", "--theme", "dark"]) == 0
    capsys.readouterr()

    assert main(["settings", "show"]) == 0
    output = capsys.readouterr().out
    assert "Dark" in output
    assert "test-secret-key" not in output

    stored = json.loads((offline_env / "state" / "preferences.json").read_text(encoding="utf-8"))
    assert stored["TemperatureUnit"] == "F"
    assert stored["themeMode"] == "dark"


def test_watch_loads_current_location(offline_env: Path, capsys: Any) -> None:
    assert main(["watch", "--lat", "47.37", "--lon", "8.55", "--timeout", "5"]) == 0
    output = capsys.readouterr().out
    assert "state: ready" in output
    assert "current_zurich" in output


def test_watch_with_denied_location_reports_blocking_error(
    offline_env: Path, capsys: Any
) -> None:
    code = main(["watch", "--lat", "47.37", "--lon", "8.55", "--deny-location", "--timeout", "5"])
    assert code == 4
    output = capsys.readouterr().out
    assert "Location permission denied" in output
    assert "open_settings" in output
