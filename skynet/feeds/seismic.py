"""Seismic source — USGS GeoJSON summary feed of recent earthquakes."""

from __future__ import annotations

from typing import Any

import structlog

from skynet.core.config import SeismicFeedConfig, get_settings
from skynet.core.types import EarthquakeReading
from skynet.feeds.base import BaseSource
from skynet.feeds.exceptions import FeedParseError

logger = structlog.stdlib.get_logger()


def _parse_feature(feature: dict[str, Any]) -> EarthquakeReading | None:
    """Parse a single GeoJSON feature, or None if it has no usable magnitude.

    Expected structure::

        {
            "properties": {"mag": 5.1, "place": "...", "time": 1718000000000},
            "geometry": {"coordinates": [142.3, 38.1, 10.0]}
        }
    """
    props = feature.get("properties")
    if not isinstance(props, dict):
        return None

    try:
        magnitude = float(props["mag"])
    except (KeyError, TypeError, ValueError):
        return None

    depth = 0.0
    geometry = feature.get("geometry")
    if isinstance(geometry, dict):
        coords = geometry.get("coordinates")
        if isinstance(coords, list) and len(coords) >= 3:
            try:
                depth = float(coords[2])
            except (TypeError, ValueError):
                depth = 0.0

    try:
        event_time = int(props.get("time") or 0)
    except (TypeError, ValueError):
        event_time = 0

    return EarthquakeReading(
        magnitude=magnitude,
        place=str(props.get("place") or ""),
        time=event_time,
        depth=depth,
    )


def _parse_feed(data: dict[str, Any], max_events: int) -> list[EarthquakeReading]:
    features = data.get("features")
    if not isinstance(features, list):
        raise FeedParseError("seismic response missing 'features' list")

    readings: list[EarthquakeReading] = []
    for feature in features[:max_events]:
        if not isinstance(feature, dict):
            continue
        reading = _parse_feature(feature)
        if reading is not None:
            readings.append(reading)
    return readings


class SeismicSource(BaseSource[list[EarthquakeReading]]):
    """Most recent earthquakes above the feed's magnitude threshold."""

    name = "seismic"

    def __init__(self, config: SeismicFeedConfig | None = None) -> None:
        cfg = config or get_settings().feeds.seismic
        super().__init__(timeout_secs=cfg.timeout_secs)
        self._config = cfg

    async def fetch(self) -> list[EarthquakeReading]:
        body = await self._get_json(self._config.base_url)
        if not isinstance(body, dict):
            raise FeedParseError("seismic response is not an object")
        readings = _parse_feed(body, self._config.max_events)
        logger.debug("seismic_events_parsed", count=len(readings))
        return readings
