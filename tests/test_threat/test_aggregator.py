"""Tests for ThreatAggregator — caching, branch isolation, fallback, in-flight join."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import patch

from skynet.core.config import AggregatorConfig
from skynet.core.types import (
    CryptoReading,
    EarthquakeReading,
    GeolocationReading,
    WeatherReading,
)
from skynet.feeds.exceptions import FeedConnectionError
from skynet.threat.aggregator import ThreatAggregator

# ── Helpers ─────────────────────────────────────────────────────


class FakeSource:
    """In-memory source: returns a canned result or raises a canned error."""

    def __init__(
        self,
        name: str,
        result: Any = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.name = name
        self.result = result
        self.error = error
        self.delay = delay
        self.calls: list[tuple[Any, ...]] = []
        self.connected = False
        self.fallback_coordinates = (40.7128, -74.0060)

    async def fetch(self, *args: Any) -> Any:
        self.calls.append(args)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result

    async def connect(self) -> None:
        self.connected = True

    async def close(self) -> None:
        self.connected = False


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _sources(**overrides: FakeSource) -> dict[str, FakeSource]:
    sources = {
        "weather": FakeSource(
            "weather", WeatherReading(wind_speed=30.0, visibility=20000.0, pressure=1013.0),
        ),
        "seismic": FakeSource("seismic", [EarthquakeReading(magnitude=6.2)]),
        "crypto": FakeSource("crypto", CryptoReading(price=60000.0, change_24h=-11.0, volatility=11.0)),
        "geolocation": FakeSource(
            "geolocation", GeolocationReading(city="Los Angeles", lat=34.05, lon=-118.24),
        ),
    }
    sources.update(overrides)
    return sources


def _aggregator(
    sources: dict[str, FakeSource] | None = None,
    clock: FakeClock | None = None,
    ttl: float = 300.0,
    timeout: float = 1.0,
) -> ThreatAggregator:
    srcs = sources or _sources()
    return ThreatAggregator(
        weather=srcs["weather"],  # type: ignore[arg-type]
        seismic=srcs["seismic"],  # type: ignore[arg-type]
        crypto=srcs["crypto"],  # type: ignore[arg-type]
        geolocation=srcs["geolocation"],  # type: ignore[arg-type]
        config=AggregatorConfig(cache_ttl_secs=ttl, fetch_timeout_secs=timeout),
        clock=clock or FakeClock(),
    )


def _total_calls(sources: dict[str, FakeSource]) -> int:
    return sum(len(s.calls) for s in sources.values())


# ── Composition ────────────────────────────────────────────────


class TestComposition:
    async def test_scores_every_category(self) -> None:
        snap = await _aggregator().get_snapshot()
        assert (snap.atmospheric.level, snap.atmospheric.status) == (2, "HIGH WINDS")
        assert (snap.seismic.level, snap.seismic.status) == (2, "SIGNIFICANT ACTIVITY")
        assert (snap.economic.level, snap.economic.status) == (3, "HIGH VOLATILITY")
        assert snap.geolocation.status == "LOCKED"
        assert snap.geolocation.data is not None
        assert snap.geolocation.data.city == "Los Angeles"

    async def test_weather_uses_geolocated_coordinates(self) -> None:
        sources = _sources()
        await _aggregator(sources).get_snapshot()
        assert sources["weather"].calls == [(34.05, -118.24)]

    async def test_weather_falls_back_when_geolocation_fails(self) -> None:
        sources = _sources(geolocation=FakeSource("geolocation", error=FeedConnectionError("down")))
        snap = await _aggregator(sources).get_snapshot()
        assert sources["weather"].calls == [(40.7128, -74.0060)]
        assert snap.geolocation.data is None
        assert snap.geolocation.status == "OFFLINE"

    async def test_weather_falls_back_when_coordinates_missing(self) -> None:
        sources = _sources(geolocation=FakeSource("geolocation", GeolocationReading(city="X")))
        await _aggregator(sources).get_snapshot()
        assert sources["weather"].calls == [(40.7128, -74.0060)]


# ── Branch isolation ───────────────────────────────────────────


class TestBranchIsolation:
    async def test_failed_weather_degrades_only_atmospheric(self) -> None:
        sources = _sources(weather=FakeSource("weather", error=FeedConnectionError("503")))
        snap = await _aggregator(sources).get_snapshot()
        assert snap.atmospheric.data is None
        assert snap.atmospheric.level == 1
        assert snap.atmospheric.status == "OFFLINE"
        assert snap.seismic.level == 2
        assert snap.economic.level == 3

    async def test_failed_seismic_reports_offline(self) -> None:
        sources = _sources(seismic=FakeSource("seismic", error=ValueError("boom")))
        snap = await _aggregator(sources).get_snapshot()
        assert snap.seismic.data is None
        assert snap.seismic.level == 0
        assert snap.seismic.status == "OFFLINE"
        assert snap.atmospheric.data is not None

    async def test_failed_crypto_reports_offline(self) -> None:
        sources = _sources(crypto=FakeSource("crypto", error=FeedConnectionError("429")))
        snap = await _aggregator(sources).get_snapshot()
        assert snap.economic.data is None
        assert snap.economic.level == 1
        assert snap.economic.status == "OFFLINE"

    async def test_slow_branch_times_out_without_blocking_siblings(self) -> None:
        sources = _sources(crypto=FakeSource("crypto", CryptoReading(price=1.0), delay=5.0))
        snap = await _aggregator(sources, timeout=0.05).get_snapshot()
        assert snap.economic.data is None
        assert snap.economic.status == "OFFLINE"
        assert snap.atmospheric.data is not None
        assert snap.seismic.data is not None

    async def test_branches_run_concurrently(self) -> None:
        sources = _sources(
            weather=FakeSource("weather", WeatherReading(), delay=0.2),
            seismic=FakeSource("seismic", [], delay=0.2),
            crypto=FakeSource("crypto", CryptoReading(price=1.0), delay=0.2),
        )
        loop = asyncio.get_running_loop()
        started = loop.time()
        await _aggregator(sources).get_snapshot()
        assert loop.time() - started < 0.5


# ── Cache ──────────────────────────────────────────────────────


class TestCache:
    async def test_second_call_within_ttl_hits_cache(self) -> None:
        sources = _sources()
        clock = FakeClock()
        agg = _aggregator(sources, clock=clock)

        first = await agg.get_snapshot()
        clock.now += 299.0
        second = await agg.get_snapshot()

        assert second is first
        assert agg.fetch_count == 1
        assert _total_calls(sources) == 4

    async def test_call_after_ttl_refetches(self) -> None:
        sources = _sources()
        clock = FakeClock()
        agg = _aggregator(sources, clock=clock)

        first = await agg.get_snapshot()
        sources["crypto"].result = CryptoReading(price=1.0, volatility=20.0)
        clock.now += 300.0
        second = await agg.get_snapshot()

        assert agg.fetch_count == 2
        assert second is not first
        assert second.economic.level == 4

    async def test_cache_records_fetch_time(self) -> None:
        clock = FakeClock(now=42.0)
        agg = _aggregator(clock=clock)
        assert agg.cached_snapshot is None
        snap = await agg.get_snapshot()
        assert agg.cached_snapshot is snap
        assert agg.fetched_at == 42.0

    async def test_degraded_branches_are_still_cached(self) -> None:
        sources = _sources(weather=FakeSource("weather", error=FeedConnectionError("down")))
        agg = _aggregator(sources)
        await agg.get_snapshot()
        await agg.get_snapshot()
        assert agg.fetch_count == 1


# ── Whole-cycle failure ────────────────────────────────────────


class TestTotalFailure:
    async def test_unexpected_error_returns_default_snapshot(self) -> None:
        agg = _aggregator()
        with patch(
            "skynet.threat.aggregator.build_snapshot", side_effect=RuntimeError("bad"),
        ):
            snap = await agg.get_snapshot()

        assert (snap.atmospheric.level, snap.atmospheric.status) == (1, "MONITORING")
        assert (snap.seismic.level, snap.seismic.status) == (0, "STABLE")
        assert (snap.economic.level, snap.economic.status) == (1, "VOLATILE")
        assert snap.geolocation.status == "OFFLINE"

    async def test_default_snapshot_is_not_cached(self) -> None:
        agg = _aggregator()
        with patch(
            "skynet.threat.aggregator.build_snapshot", side_effect=RuntimeError("bad"),
        ):
            await agg.get_snapshot()
        assert agg.cached_snapshot is None

        snap = await agg.get_snapshot()
        assert agg.fetch_count == 2
        assert snap.atmospheric.status == "HIGH WINDS"


# ── In-flight guard ────────────────────────────────────────────


class TestInFlight:
    async def test_concurrent_callers_share_one_cycle(self) -> None:
        sources = _sources(seismic=FakeSource("seismic", [], delay=0.05))
        agg = _aggregator(sources)

        results = await asyncio.gather(*(agg.get_snapshot() for _ in range(5)))

        assert agg.fetch_count == 1
        assert all(r is results[0] for r in results)
        assert len(sources["seismic"].calls) == 1


# ── Lifecycle ──────────────────────────────────────────────────


class TestLifecycle:
    async def test_context_manager_connects_and_closes_sources(self) -> None:
        sources = _sources()
        async with _aggregator(sources):
            assert all(s.connected for s in sources.values())
        assert not any(s.connected for s in sources.values())
