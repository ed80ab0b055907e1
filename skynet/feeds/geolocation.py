"""Geolocation source — ipapi.co lookup of the caller's public IP."""

from __future__ import annotations

from typing import Any

from skynet.core.config import GeolocationFeedConfig, get_settings
from skynet.core.types import GeolocationReading
from skynet.feeds.base import BaseSource
from skynet.feeds.exceptions import FeedParseError


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def _parse_ipapi(data: dict[str, Any]) -> GeolocationReading:
    """Parse an ipapi.co ``/json/`` response.

    ipapi signals failures in-band with ``{"error": true, "reason": ...}``.
    """
    if data.get("error"):
        raise FeedParseError(f"geolocation lookup failed: {data.get('reason', 'unknown')}")

    def text(key: str) -> str:
        value = data.get(key)
        return "" if value is None else str(value)

    return GeolocationReading(
        ip=text("ip"),
        status="success",
        country=text("country_name"),
        country_code=text("country_code"),
        region=text("region_code"),
        region_name=text("region"),
        city=text("city"),
        zip=text("postal"),
        lat=_optional_float(data.get("latitude")),
        lon=_optional_float(data.get("longitude")),
        timezone=text("timezone"),
        isp=text("org"),
        org=text("org"),
        asn=text("asn"),
    )


class GeolocationSource(BaseSource[GeolocationReading]):
    name = "geolocation"

    def __init__(self, config: GeolocationFeedConfig | None = None) -> None:
        cfg = config or get_settings().feeds.geolocation
        super().__init__(timeout_secs=cfg.timeout_secs)
        self._config = cfg

    async def fetch(self) -> GeolocationReading:
        body = await self._get_json(self._config.base_url)
        if not isinstance(body, dict):
            raise FeedParseError("geolocation response is not an object")
        return _parse_ipapi(body)
