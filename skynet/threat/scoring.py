"""Pure threat scoring — raw readings to bounded levels and status labels.

Every function here is total: a missing reading (``None``) is a valid input
and maps to a fixed "no data" level/label rather than raising.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from skynet.core.types import (
    AtmosphericAssessment,
    CryptoReading,
    EarthquakeReading,
    EconomicAssessment,
    GeolocationAssessment,
    GeolocationReading,
    SeismicAssessment,
    ThreatSnapshot,
    WeatherReading,
)

MAX_CATEGORY_LEVEL = 5
MIN_OVERALL_LEVEL = 1
MAX_OVERALL_LEVEL = 10

OFFLINE = "OFFLINE"


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


# ── Levels ──────────────────────────────────────────────────────


def atmospheric_level(reading: WeatherReading | None) -> int:
    """Score wind, visibility and pressure extremes into 0..5.

    No reading scores 1 so that "sensors offline" is distinguishable from
    genuinely calm conditions.
    """
    if reading is None:
        return 1

    level = 0
    if reading.wind_speed > 40:
        level += 3
    elif reading.wind_speed > 25:
        level += 2
    elif reading.wind_speed > 15:
        level += 1

    if reading.visibility < 1000:
        level += 2
    elif reading.visibility < 5000:
        level += 1

    if reading.pressure < 980 or reading.pressure > 1040:
        level += 1

    return min(level, MAX_CATEGORY_LEVEL)


def seismic_level(readings: Sequence[EarthquakeReading] | None) -> int:
    """Sum per-event contributions (M7+ → 3, M6+ → 2, M5+ → 1), capped at 5."""
    if not readings:
        return 0

    level = 0
    for quake in readings:
        if quake.magnitude >= 7.0:
            level += 3
        elif quake.magnitude >= 6.0:
            level += 2
        elif quake.magnitude >= 5.0:
            level += 1
    return min(level, MAX_CATEGORY_LEVEL)


def economic_level(reading: CryptoReading | None) -> int:
    if reading is None:
        return 1

    volatility = reading.volatility
    if volatility > 15:
        return 4
    if volatility > 10:
        return 3
    if volatility > 5:
        return 2
    if volatility > 2:
        return 1
    return 0


# ── Status labels (first matching rule wins) ────────────────────


def atmospheric_status(reading: WeatherReading | None) -> str:
    if reading is None:
        return OFFLINE
    if reading.wind_speed > 40:
        return "SEVERE WINDS"
    if reading.wind_speed > 25:
        return "HIGH WINDS"
    if reading.visibility < 1000:
        return "LOW VISIBILITY"
    return "STABLE"


def seismic_status(readings: Sequence[EarthquakeReading] | None) -> str:
    if readings is None:
        return OFFLINE
    if not readings:
        return "QUIET"
    max_magnitude = max(quake.magnitude for quake in readings)
    if max_magnitude >= 7.0:
        return "MAJOR ACTIVITY"
    if max_magnitude >= 6.0:
        return "SIGNIFICANT ACTIVITY"
    return "MINOR ACTIVITY"


def economic_status(reading: CryptoReading | None) -> str:
    if reading is None:
        return OFFLINE
    if reading.volatility > 15:
        return "EXTREME VOLATILITY"
    if reading.volatility > 10:
        return "HIGH VOLATILITY"
    if reading.volatility > 5:
        return "MODERATE VOLATILITY"
    return "STABLE"


def geolocation_status(reading: GeolocationReading | None) -> str:
    if reading is None:
        return OFFLINE
    if reading.status == "success":
        return "LOCKED"
    return "SEARCHING"


# ── Assessments ─────────────────────────────────────────────────


def assess_atmospheric(reading: WeatherReading | None) -> AtmosphericAssessment:
    return AtmosphericAssessment(
        level=atmospheric_level(reading),
        data=reading,
        status=atmospheric_status(reading),
    )


def assess_seismic(readings: Sequence[EarthquakeReading] | None) -> SeismicAssessment:
    return SeismicAssessment(
        level=seismic_level(readings),
        data=list(readings) if readings is not None else None,
        status=seismic_status(readings),
    )


def assess_economic(reading: CryptoReading | None) -> EconomicAssessment:
    return EconomicAssessment(
        level=economic_level(reading),
        data=reading,
        status=economic_status(reading),
    )


def assess_geolocation(reading: GeolocationReading | None) -> GeolocationAssessment:
    return GeolocationAssessment(data=reading, status=geolocation_status(reading))


def build_snapshot(
    weather: WeatherReading | None,
    quakes: Sequence[EarthquakeReading] | None,
    crypto: CryptoReading | None,
    geolocation: GeolocationReading | None,
) -> ThreatSnapshot:
    """Score every category and compose a complete ThreatSnapshot."""
    return ThreatSnapshot(
        atmospheric=assess_atmospheric(weather),
        seismic=assess_seismic(quakes),
        economic=assess_economic(crypto),
        geolocation=assess_geolocation(geolocation),
    )


def default_snapshot() -> ThreatSnapshot:
    """Fixed snapshot used when a whole aggregation cycle fails."""
    return ThreatSnapshot(
        atmospheric=AtmosphericAssessment(level=1, data=None, status="MONITORING"),
        seismic=SeismicAssessment(level=0, data=[], status="STABLE"),
        economic=EconomicAssessment(level=1, data=None, status="VOLATILE"),
        geolocation=GeolocationAssessment(data=None, status=OFFLINE),
    )


# ── Overall level ───────────────────────────────────────────────


def overall_threat_level(snapshot: ThreatSnapshot) -> int:
    """``ceil`` of the mean category level, clamped to 1..10."""
    levels = list(snapshot.category_levels.values())
    mean = sum(levels) / len(levels)
    return _clamp(math.ceil(mean), MIN_OVERALL_LEVEL, MAX_OVERALL_LEVEL)


def apply_threat_delta(overall: int, delta: int) -> int:
    """Raise *overall* by a conversational delta; never lowers it, caps at 10."""
    if delta <= 0:
        return overall
    return min(MAX_OVERALL_LEVEL, overall + delta)
