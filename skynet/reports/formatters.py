"""Pure functions that render a ThreatSnapshot into fixed text reports.

Each report takes the snapshot (``None`` before the first successful load)
and the current overall threat level, and returns plain text. Missing data
yields a fixed in-character message rather than an exception.
"""

from __future__ import annotations

import math

from skynet.core.types import ThreatCategory, ThreatSnapshot, WeatherReading

STATUS_UNAVAILABLE = "Threat data unavailable. Recommend system refresh."
BRIEF_UNAVAILABLE = "Unable to generate safety brief. System refresh required."
SENSORS_OFFLINE = (
    "ATMOSPHERIC SENSORS OFFLINE. Unable to generate weather assessment. "
    "Recommend immediate system diagnostics."
)

BAR_HIGH = "▂"
BAR_LOW = "▁"
BAR_SEGMENTS = 5

# (upper bound inclusive, description) — WMO weather interpretation codes.
_WMO_DESCRIPTIONS: tuple[tuple[int, str], ...] = (
    (0, "CLEAR SKIES"),
    (3, "PARTLY CLOUDY"),
    (48, "FOG DETECTED"),
    (67, "PRECIPITATION"),
    (77, "SNOW CONDITIONS"),
    (82, "RAIN SHOWERS"),
    (86, "SNOW SHOWERS"),
    (99, "THUNDERSTORM ACTIVITY"),
)
_WMO_UNKNOWN = "UNKNOWN CONDITIONS"

# (minimum atmospheric level, outdoor ops, navigation, equipment), checked in order.
_OPERATIONAL_BANDS: tuple[tuple[int, str, str, str], ...] = (
    (4, "COMPROMISED", "IMPAIRED", "ENHANCED PROTECTION"),
    (3, "RESTRICTED", "REDUCED", "PROTECTIVE GEAR"),
    (2, "CAUTION", "STANDARD", "STANDARD ISSUE"),
)
_OPERATIONAL_DEFAULT = ("CLEAR", "OPTIMAL", "STANDARD ISSUE")


# ── Helpers ─────────────────────────────────────────────────────


def micro_bar(value: float, max_value: float = 5, segments: int = BAR_SEGMENTS) -> str:
    """Render *value* as a fixed-width bar of filled and empty glyphs."""
    ratio = min(value / max_value, 1.0)
    filled = max(0, math.floor(ratio * segments))
    return BAR_HIGH * filled + BAR_LOW * (segments - filled)


def weather_description(code: int) -> str:
    """Map a WMO weather code onto a short description."""
    for upper, description in _WMO_DESCRIPTIONS:
        if code <= upper:
            return description
    return _WMO_UNKNOWN


def vigilance_label(overall: int) -> str:
    if overall < 4:
        return "NORMAL"
    if overall < 7:
        return "ELEVATED"
    return "HIGH"


def operational_status(level: int) -> tuple[str, str, str]:
    """Return (outdoor ops, navigation, equipment) posture for an atmospheric level."""
    for minimum, outdoor, nav, equipment in _OPERATIONAL_BANDS:
        if level >= minimum:
            return outdoor, nav, equipment
    return _OPERATIONAL_DEFAULT


def _plain(value: float) -> str:
    """Print a number without a trailing ``.0`` when it is integral."""
    return str(int(value)) if float(value).is_integer() else str(value)


# Per-metric sub-scores (1..5) for the scan gauges. These use their own
# thresholds and are independent of the category-level atmospheric score.


def temperature_score(temp_f: float) -> int:
    if temp_f > 100 or temp_f < 0:
        return 5
    if temp_f > 90 or temp_f < 20:
        return 4
    if temp_f > 85 or temp_f < 32:
        return 3
    if temp_f > 80 or temp_f < 40:
        return 2
    return 1


def wind_score(wind_mph: float) -> int:
    if wind_mph > 40:
        return 5
    if wind_mph > 25:
        return 4
    if wind_mph > 15:
        return 3
    if wind_mph > 10:
        return 2
    return 1


def humidity_score(humidity: float) -> int:
    if humidity > 95 or humidity < 10:
        return 5
    if humidity > 85 or humidity < 20:
        return 4
    if humidity > 75 or humidity < 30:
        return 3
    if humidity > 65:
        return 2
    return 1


def pressure_score(pressure_hpa: float) -> int:
    if pressure_hpa < 970 or pressure_hpa > 1050:
        return 5
    if pressure_hpa < 980 or pressure_hpa > 1040:
        return 4
    if pressure_hpa < 990 or pressure_hpa > 1030:
        return 3
    if pressure_hpa < 1000 or pressure_hpa > 1020:
        return 2
    return 1


def visibility_score(visibility_m: float) -> int:
    if visibility_m < 1000:
        return 5
    if visibility_m < 3000:
        return 4
    if visibility_m < 5000:
        return 3
    if visibility_m < 8000:
        return 2
    return 1


# ── Reports ─────────────────────────────────────────────────────


def status_report(snapshot: ThreatSnapshot | None, overall: int) -> str:
    """Per-category status lines followed by the overall level."""
    if snapshot is None:
        return STATUS_UNAVAILABLE

    assessments = {
        ThreatCategory.ATMOSPHERIC: snapshot.atmospheric,
        ThreatCategory.SEISMIC: snapshot.seismic,
        ThreatCategory.ECONOMIC: snapshot.economic,
    }
    lines = [
        f"{category.value}: {assessment.status} (Level {assessment.level})"
        for category, assessment in assessments.items()
    ]
    return (
        "GLOBAL STATUS REPORT:\n"
        + "\n".join(lines)
        + f"\n\nOVERALL THREAT LEVEL: {overall}/10"
    )


def safety_brief(snapshot: ThreatSnapshot | None, overall: int) -> str:
    """Bulleted recommendations for every triggered condition."""
    if snapshot is None:
        return BRIEF_UNAVAILABLE

    recommendations: list[str] = []

    weather = snapshot.atmospheric.data
    if weather is not None:
        if weather.wind_speed > 25:
            recommendations.append(
                f"• WIND ADVISORY: {weather.wind_speed:.1f} mph winds detected. "
                "Avoid exposed areas."
            )
        if weather.visibility < 5000:
            recommendations.append(
                f"• VISIBILITY WARNING: Limited to {weather.visibility / 1000:.1f}km. "
                "Exercise caution when traveling."
            )

    if snapshot.seismic.level >= 2:
        recommendations.append(
            "• SEISMIC ACTIVITY: Recent earthquakes detected. Review emergency preparedness."
        )

    crypto = snapshot.economic.data
    if snapshot.economic.level >= 3 and crypto is not None:
        recommendations.append(
            f"• ECONOMIC VOLATILITY: BTC volatility at {crypto.volatility:.1f}%. "
            "Monitor financial exposure."
        )

    if not recommendations:
        recommendations.append(
            "• CURRENT CONDITIONS: All systems nominal. Maintain standard precautions."
        )

    return (
        "SAFETY BRIEF:\n"
        + "\n".join(recommendations)
        + f"\n\nRecommended Action Level: {vigilance_label(overall)} VIGILANCE"
    )


def _gauge_lines(weather: WeatherReading) -> list[str]:
    return [
        f"• TEMP: {weather.temperature:.1f}°F → "
        f"{micro_bar(temperature_score(weather.temperature))}",
        f"• WIND: {weather.wind_speed:.1f} mph @ {_plain(weather.wind_direction)}° → "
        f"{micro_bar(wind_score(weather.wind_speed))}",
        f"• HUMIDITY: {_plain(weather.humidity)}% → "
        f"{micro_bar(humidity_score(weather.humidity))}",
        f"• PRESSURE: {weather.pressure:.1f} hPa → "
        f"{micro_bar(pressure_score(weather.pressure))}",
        f"• VISIBILITY: {weather.visibility / 1000:.1f} km → "
        f"{micro_bar(visibility_score(weather.visibility))}",
    ]


def atmospheric_scan(snapshot: ThreatSnapshot | None, overall: int) -> str:
    """Boxed weather summary, metric gauges, and operational posture.

    *overall* is accepted for a uniform report signature; the posture block
    is driven by the atmospheric category level alone.
    """
    if snapshot is None or snapshot.atmospheric.data is None:
        return SENSORS_OFFLINE

    assessment = snapshot.atmospheric
    weather = assessment.data
    outdoor, nav, equipment = operational_status(assessment.level)

    lines = [
        "─── ATMOSPHERIC SCAN BEGIN ───",
        "",
        "┌───────────────────────────────┐",
        f"│   {weather_description(weather.weather_code):<29} │",
        f"│   Threat: {micro_bar(assessment.level)} {assessment.level}/5 "
        f"({assessment.status:<8}) │",
        "└───────────────────────────────┘",
        "",
        *_gauge_lines(weather),
        "",
        "└─ SYSTEM RECOMMENDATIONS ──┘",
        f"– Outdoor ops: {outdoor}",
        f"– Nav: {nav}",
        f"– Equipment: {equipment}",
        "",
        "─── ATMOSPHERIC SCAN END ───",
    ]
    return "\n".join(lines)
