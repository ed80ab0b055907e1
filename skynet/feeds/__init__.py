"""Data sources — thin HTTP wrappers over the external threat feeds."""

from skynet.feeds.base import BaseSource
from skynet.feeds.crypto import CryptoSource
from skynet.feeds.exceptions import FeedConnectionError, FeedError, FeedParseError
from skynet.feeds.geolocation import GeolocationSource
from skynet.feeds.seismic import SeismicSource
from skynet.feeds.weather import WeatherSource

__all__ = [
    "BaseSource",
    "CryptoSource",
    "FeedConnectionError",
    "FeedError",
    "FeedParseError",
    "GeolocationSource",
    "SeismicSource",
    "WeatherSource",
]
