"""Tests for GeolocationSource — ipapi.co parsing."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from skynet.core.config import GeolocationFeedConfig
from skynet.feeds.exceptions import FeedParseError
from skynet.feeds.geolocation import GeolocationSource, _parse_ipapi

_IPAPI_BODY: dict[str, object] = {
    "ip": "203.0.113.7",
    "city": "Los Angeles",
    "region": "California",
    "region_code": "CA",
    "country_code": "US",
    "country_name": "United States",
    "postal": "90012",
    "latitude": 34.05,
    "longitude": -118.24,
    "timezone": "America/Los_Angeles",
    "asn": "AS64500",
    "org": "Example Networks",
}


class TestParseIpapi:
    def test_maps_fields(self) -> None:
        reading = _parse_ipapi(dict(_IPAPI_BODY))
        assert reading.ip == "203.0.113.7"
        assert reading.status == "success"
        assert reading.country == "United States"
        assert reading.region == "CA"
        assert reading.region_name == "California"
        assert reading.zip == "90012"
        assert reading.lat == 34.05
        assert reading.lon == -118.24
        assert reading.isp == "Example Networks"
        assert reading.asn == "AS64500"

    def test_missing_coordinates_are_none(self) -> None:
        body = dict(_IPAPI_BODY)
        del body["latitude"]
        reading = _parse_ipapi(body)
        assert reading.lat is None

    def test_error_body_raises(self) -> None:
        with pytest.raises(FeedParseError, match="RateLimited"):
            _parse_ipapi({"error": True, "reason": "RateLimited"})


class TestGeolocationSourceFetch:
    async def test_fetch(self) -> None:
        cfg = GeolocationFeedConfig(base_url="https://test.ipapi/json/")
        async with GeolocationSource(config=cfg) as source:
            with patch.object(source._http, "get", new_callable=AsyncMock) as mock_get:  # type: ignore[union-attr]
                mock_get.return_value = httpx.Response(
                    status_code=200,
                    json=_IPAPI_BODY,
                    request=httpx.Request("GET", "https://test.ipapi/json/"),
                )
                reading = await source.fetch()
        assert reading.city == "Los Angeles"
