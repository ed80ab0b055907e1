"""Tests for WeatherSource — Open-Meteo parsing and request parameters."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from skynet.core.config import WeatherFeedConfig
from skynet.feeds.exceptions import FeedParseError
from skynet.feeds.weather import WeatherSource, _parse_current

# ── Helpers ─────────────────────────────────────────────────────


def _current(**overrides: object) -> dict[str, object]:
    current: dict[str, object] = {
        "temperature_2m": 58.1,
        "relative_humidity_2m": 71,
        "surface_pressure": 1012.4,
        "wind_speed_10m": 9.3,
        "wind_direction_10m": 240,
        "visibility": 24140.0,
        "weather_code": 3,
    }
    current.update(overrides)
    return {"current": current}


def _cfg() -> WeatherFeedConfig:
    return WeatherFeedConfig(base_url="https://test.open-meteo/forecast")


def _mock_response(body: dict[str, object]) -> httpx.Response:
    return httpx.Response(
        status_code=200,
        json=body,
        request=httpx.Request("GET", "https://test.open-meteo/forecast"),
    )


# ── _parse_current ─────────────────────────────────────────────


class TestParseCurrent:
    def test_maps_all_fields(self) -> None:
        reading = _parse_current(_current())
        assert reading.temperature == 58.1
        assert reading.humidity == 71
        assert reading.pressure == 1012.4
        assert reading.wind_speed == 9.3
        assert reading.wind_direction == 240
        assert reading.visibility == 24140.0
        assert reading.weather_code == 3

    def test_missing_and_null_fields_default_to_zero(self) -> None:
        reading = _parse_current({"current": {"temperature_2m": None}})
        assert reading.temperature == 0
        assert reading.wind_speed == 0
        assert reading.visibility == 0
        assert reading.weather_code == 0

    def test_missing_current_block_raises(self) -> None:
        with pytest.raises(FeedParseError):
            _parse_current({"hourly": {}})


# ── WeatherSource ──────────────────────────────────────────────


class TestWeatherSourceFetch:
    async def test_fetch_uses_given_coordinates_and_units(self) -> None:
        async with WeatherSource(config=_cfg()) as source:
            with patch.object(source._http, "get", new_callable=AsyncMock) as mock_get:  # type: ignore[union-attr]
                mock_get.return_value = _mock_response(_current())
                reading = await source.fetch(51.5, -0.12)

        assert reading.wind_speed == 9.3
        params = mock_get.call_args.kwargs["params"]
        assert params["latitude"] == 51.5
        assert params["longitude"] == -0.12
        assert params["wind_speed_unit"] == "mph"
        assert params["temperature_unit"] == "fahrenheit"
        assert "weather_code" in params["current"]

    async def test_fetch_without_coordinates_uses_fallback(self) -> None:
        async with WeatherSource(config=_cfg()) as source:
            with patch.object(source._http, "get", new_callable=AsyncMock) as mock_get:  # type: ignore[union-attr]
                mock_get.return_value = _mock_response(_current())
                await source.fetch()

        params = mock_get.call_args.kwargs["params"]
        assert (params["latitude"], params["longitude"]) == (40.7128, -74.0060)

    def test_fallback_coordinates_from_config(self) -> None:
        source = WeatherSource(config=WeatherFeedConfig(fallback_lat=1.0, fallback_lon=2.0))
        assert source.fallback_coordinates == (1.0, 2.0)
