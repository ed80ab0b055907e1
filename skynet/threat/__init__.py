"""Threat scoring and aggregation."""

from skynet.threat.aggregator import ThreatAggregator
from skynet.threat.scoring import (
    apply_threat_delta,
    atmospheric_level,
    atmospheric_status,
    build_snapshot,
    default_snapshot,
    economic_level,
    economic_status,
    geolocation_status,
    overall_threat_level,
    seismic_level,
    seismic_status,
)

__all__ = [
    "ThreatAggregator",
    "apply_threat_delta",
    "atmospheric_level",
    "atmospheric_status",
    "build_snapshot",
    "default_snapshot",
    "economic_level",
    "economic_status",
    "geolocation_status",
    "overall_threat_level",
    "seismic_level",
    "seismic_status",
]
