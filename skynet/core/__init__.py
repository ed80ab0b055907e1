"""Core module — config, types, logging."""

from skynet.core.config import Settings, get_settings, load_settings, reset_settings
from skynet.core.logging import setup_logging
from skynet.core.types import (
    AtmosphericAssessment,
    ChatResponse,
    ConversationMessage,
    CryptoReading,
    EarthquakeReading,
    EconomicAssessment,
    GeolocationAssessment,
    GeolocationReading,
    SeismicAssessment,
    Sender,
    SessionState,
    ThreatCategory,
    ThreatDelta,
    ThreatSnapshot,
    WeatherReading,
)

__all__ = [
    "AtmosphericAssessment",
    "ChatResponse",
    "ConversationMessage",
    "CryptoReading",
    "EarthquakeReading",
    "EconomicAssessment",
    "GeolocationAssessment",
    "GeolocationReading",
    "SeismicAssessment",
    "Sender",
    "SessionState",
    "Settings",
    "ThreatCategory",
    "ThreatDelta",
    "ThreatSnapshot",
    "WeatherReading",
    "get_settings",
    "load_settings",
    "reset_settings",
    "setup_logging",
]
