"""Weather source — Open-Meteo current conditions for a coordinate pair."""

from __future__ import annotations

from typing import Any

from skynet.core.config import WeatherFeedConfig, get_settings
from skynet.core.types import WeatherReading
from skynet.feeds.base import BaseSource
from skynet.feeds.exceptions import FeedParseError

# Open-Meteo ``current`` variable → WeatherReading field.
_CURRENT_FIELDS: dict[str, str] = {
    "temperature_2m": "temperature",
    "wind_speed_10m": "wind_speed",
    "wind_direction_10m": "wind_direction",
    "relative_humidity_2m": "humidity",
    "surface_pressure": "pressure",
    "visibility": "visibility",
    "weather_code": "weather_code",
}


def _as_float(value: object) -> float:
    """Coerce a provider value to float; missing, null or garbage become 0."""
    if value is None:
        return 0.0
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0


def _parse_current(data: dict[str, Any]) -> WeatherReading:
    """Parse an Open-Meteo forecast response into a WeatherReading.

    Expected structure::

        {
            "current": {
                "temperature_2m": 58.1,
                "relative_humidity_2m": 71,
                "surface_pressure": 1012.4,
                "wind_speed_10m": 9.3,
                "wind_direction_10m": 240,
                "visibility": 24140.0,
                "weather_code": 3
            }
        }
    """
    current = data.get("current")
    if not isinstance(current, dict):
        raise FeedParseError("weather response missing 'current' block")

    values = {field: _as_float(current.get(key)) for key, field in _CURRENT_FIELDS.items()}
    values["weather_code"] = int(values["weather_code"])
    return WeatherReading(**values)


class WeatherSource(BaseSource[WeatherReading]):
    """Current weather at a latitude/longitude, in mph and °F."""

    name = "weather"

    def __init__(self, config: WeatherFeedConfig | None = None) -> None:
        cfg = config or get_settings().feeds.weather
        super().__init__(timeout_secs=cfg.timeout_secs)
        self._config = cfg

    @property
    def fallback_coordinates(self) -> tuple[float, float]:
        return self._config.fallback_lat, self._config.fallback_lon

    async def fetch(self, lat: float | None = None, lon: float | None = None) -> WeatherReading:
        """Fetch current conditions; missing coordinates use the configured fallback."""
        fallback_lat, fallback_lon = self.fallback_coordinates
        params = {
            "latitude": lat if lat is not None else fallback_lat,
            "longitude": lon if lon is not None else fallback_lon,
            "current": ",".join(_CURRENT_FIELDS),
            "wind_speed_unit": "mph",
            "temperature_unit": "fahrenheit",
        }
        body = await self._get_json(self._config.base_url, params=params)
        if not isinstance(body, dict):
            raise FeedParseError("weather response is not an object")
        return _parse_current(body)
