"""Threat aggregator — parallel feed fetch, scoring, and a single-slot TTL cache."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from types import TracebackType
from typing import TypeVar

import structlog

from skynet.core.config import AggregatorConfig, get_settings
from skynet.core.types import GeolocationReading, ThreatSnapshot
from skynet.feeds.crypto import CryptoSource
from skynet.feeds.exceptions import FeedError
from skynet.feeds.geolocation import GeolocationSource
from skynet.feeds.seismic import SeismicSource
from skynet.feeds.weather import WeatherSource
from skynet.threat.scoring import build_snapshot, default_snapshot

logger = structlog.stdlib.get_logger()

T = TypeVar("T")

# Monotonic seconds; injectable so tests can move time.
Clock = Callable[[], float]


class ThreatAggregator:
    """Builds ThreatSnapshots from the four external feeds.

    - Geolocation is resolved first and picks the weather coordinates.
    - Weather, seismic and crypto are then fetched concurrently; each branch
      is bounded by ``fetch_timeout_secs`` and degrades to ``None`` on any
      failure without affecting its siblings.
    - A successful snapshot is cached for ``cache_ttl_secs``. A cycle that
      fails outright yields the default snapshot, which is never cached.
    - At most one aggregation runs at a time; concurrent callers await the
      in-flight cycle instead of starting their own.

    Usage::

        async with ThreatAggregator() as aggregator:
            snapshot = await aggregator.get_snapshot()
    """

    def __init__(
        self,
        weather: WeatherSource | None = None,
        seismic: SeismicSource | None = None,
        crypto: CryptoSource | None = None,
        geolocation: GeolocationSource | None = None,
        config: AggregatorConfig | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self._weather = weather or WeatherSource()
        self._seismic = seismic or SeismicSource()
        self._crypto = crypto or CryptoSource()
        self._geolocation = geolocation or GeolocationSource()
        self._config = config or get_settings().aggregator
        self._clock = clock
        self._cache: tuple[ThreatSnapshot, float] | None = None
        self._inflight: asyncio.Task[ThreatSnapshot] | None = None
        self._fetch_count = 0

    @property
    def cached_snapshot(self) -> ThreatSnapshot | None:
        return self._cache[0] if self._cache is not None else None

    @property
    def fetched_at(self) -> float | None:
        """Clock value at which the cached snapshot was fetched."""
        return self._cache[1] if self._cache is not None else None

    @property
    def fetch_count(self) -> int:
        """Number of aggregation cycles that reached the network."""
        return self._fetch_count

    # ── Public API ──────────────────────────────────────────────

    async def get_snapshot(self) -> ThreatSnapshot:
        """Return the cached snapshot if fresh, otherwise run one aggregation."""
        cached = self._fresh_snapshot()
        if cached is not None:
            return cached

        if self._inflight is None:
            task = asyncio.create_task(self._refresh())
            task.add_done_callback(self._clear_inflight)
            self._inflight = task
        else:
            logger.debug("threat_aggregation_joined")

        # Shielded so one cancelled caller does not cancel the shared cycle.
        return await asyncio.shield(self._inflight)

    # ── Internal ────────────────────────────────────────────────

    def _fresh_snapshot(self) -> ThreatSnapshot | None:
        if self._cache is None:
            return None
        snapshot, fetched_at = self._cache
        if self._clock() - fetched_at < self._config.cache_ttl_secs:
            return snapshot
        return None

    def _clear_inflight(self, task: asyncio.Task[ThreatSnapshot]) -> None:
        if self._inflight is task:
            self._inflight = None

    async def _refresh(self) -> ThreatSnapshot:
        started_at = self._clock()
        self._fetch_count += 1
        try:
            snapshot = await self._aggregate()
        except Exception:
            logger.exception("threat_aggregation_failed")
            return default_snapshot()

        self._cache = (snapshot, started_at)
        logger.info(
            "threat_snapshot_refreshed",
            atmospheric=snapshot.atmospheric.level,
            seismic=snapshot.seismic.level,
            economic=snapshot.economic.level,
            geolocation=snapshot.geolocation.status,
        )
        return snapshot

    async def _aggregate(self) -> ThreatSnapshot:
        geolocation = await self._guarded("geolocation", self._geolocation.fetch())
        lat, lon = self._weather_coordinates(geolocation)

        weather, quakes, crypto = await asyncio.gather(
            self._guarded("weather", self._weather.fetch(lat, lon)),
            self._guarded("seismic", self._seismic.fetch()),
            self._guarded("crypto", self._crypto.fetch()),
        )
        return build_snapshot(weather, quakes, crypto, geolocation)

    def _weather_coordinates(
        self, geolocation: GeolocationReading | None,
    ) -> tuple[float, float]:
        fallback_lat, fallback_lon = self._weather.fallback_coordinates
        if geolocation is None or not geolocation.lat or not geolocation.lon:
            return fallback_lat, fallback_lon
        return geolocation.lat, geolocation.lon

    async def _guarded(self, branch: str, fetch: Awaitable[T]) -> T | None:
        """Await one feed branch, converting any failure into ``None``."""
        try:
            return await asyncio.wait_for(fetch, timeout=self._config.fetch_timeout_secs)
        except TimeoutError:
            logger.warning(
                "feed_branch_timeout",
                branch=branch,
                timeout_secs=self._config.fetch_timeout_secs,
            )
        except FeedError as exc:
            logger.warning("feed_branch_failed", branch=branch, error=str(exc))
        except Exception:
            logger.exception("feed_branch_error", branch=branch)
        return None

    # ── Lifecycle ───────────────────────────────────────────────

    def _sources(self) -> tuple[WeatherSource, SeismicSource, CryptoSource, GeolocationSource]:
        return self._weather, self._seismic, self._crypto, self._geolocation

    async def connect(self) -> None:
        for source in self._sources():
            await source.connect()

    async def close(self) -> None:
        if self._inflight is not None:
            self._inflight.cancel()
            try:
                await self._inflight
            except asyncio.CancelledError:
                pass
            self._inflight = None
        for source in self._sources():
            try:
                await source.close()
            except Exception:
                logger.exception("feed_close_error", source=source.name)

    async def __aenter__(self) -> ThreatAggregator:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
