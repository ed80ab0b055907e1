"""Domain types — raw feed readings, threat assessments, conversation records."""

from __future__ import annotations

import time
from enum import IntEnum, StrEnum

from pydantic import BaseModel, Field

# ── Raw Readings ───────────────────────────────────────────────


class WeatherReading(BaseModel):
    """Current surface conditions at a coordinate pair."""

    temperature: float = 0.0  # °F
    wind_speed: float = 0.0  # mph
    wind_direction: float = 0.0  # degrees
    humidity: float = 0.0  # %
    pressure: float = 0.0  # hPa
    visibility: float = 0.0  # metres
    weather_code: int = 0  # WMO code


class EarthquakeReading(BaseModel):
    """A single recent seismic event."""

    magnitude: float
    place: str = ""
    time: int = 0  # epoch ms
    depth: float = 0.0  # km


class CryptoReading(BaseModel):
    """Spot price and 24h movement for the tracked asset."""

    price: float
    change_24h: float = 0.0  # %
    volatility: float = 0.0  # |change_24h|


class GeolocationReading(BaseModel):
    """Approximate location of the caller, resolved from its public IP."""

    ip: str = ""
    status: str = "success"
    country: str = ""
    country_code: str = ""
    region: str = ""
    region_name: str = ""
    city: str = ""
    zip: str = ""
    lat: float | None = None
    lon: float | None = None
    timezone: str = ""
    isp: str = ""
    org: str = ""
    asn: str = ""


# ── Threat Assessments ─────────────────────────────────────────


class ThreatCategory(StrEnum):
    """Scored threat categories, in report order."""

    ATMOSPHERIC = "ATMOSPHERIC"
    SEISMIC = "SEISMIC"
    ECONOMIC = "ECONOMIC"


class AtmosphericAssessment(BaseModel):
    level: int = Field(ge=0, le=5)
    data: WeatherReading | None = None
    status: str


class SeismicAssessment(BaseModel):
    """Seismic category; ``data`` is None only when the feed failed."""

    level: int = Field(ge=0, le=5)
    data: list[EarthquakeReading] | None = None
    status: str


class EconomicAssessment(BaseModel):
    level: int = Field(ge=0, le=5)
    data: CryptoReading | None = None
    status: str


class GeolocationAssessment(BaseModel):
    data: GeolocationReading | None = None
    status: str


class ThreatSnapshot(BaseModel):
    """One aggregation cycle's view of the world.

    Always carries all four assessments; a failed source degrades its own
    entry, never the snapshot as a whole.
    """

    atmospheric: AtmosphericAssessment
    seismic: SeismicAssessment
    economic: EconomicAssessment
    geolocation: GeolocationAssessment

    @property
    def category_levels(self) -> dict[ThreatCategory, int]:
        return {
            ThreatCategory.ATMOSPHERIC: self.atmospheric.level,
            ThreatCategory.SEISMIC: self.seismic.level,
            ThreatCategory.ECONOMIC: self.economic.level,
        }


# ── Conversation ───────────────────────────────────────────────


class Sender(StrEnum):
    USER = "USER"
    SYSTEM = "SYSTEM"


class SessionState(StrEnum):
    BOOTING = "BOOTING"
    READY = "READY"


class ThreatDelta(IntEnum):
    """Threat increase attributed to a single user message."""

    NONE = 0
    MEDIUM = 1
    HIGH = 2
    EXTREME = 3  # top of the accepted range; the keyword scan never emits it


class ConversationMessage(BaseModel):
    """A single entry in the append-only conversation log."""

    id: int
    sender: Sender
    text: str
    timestamp: float = Field(default_factory=time.time)


class ChatResponse(BaseModel):
    """Reply text plus the threat increase the caller should apply."""

    text: str
    threat_delta: int = Field(default=0, ge=0, le=3)
