"""Text reports rendered from threat snapshots."""

from skynet.reports.formatters import (
    BRIEF_UNAVAILABLE,
    SENSORS_OFFLINE,
    STATUS_UNAVAILABLE,
    atmospheric_scan,
    micro_bar,
    operational_status,
    safety_brief,
    status_report,
    vigilance_label,
    weather_description,
)

__all__ = [
    "BRIEF_UNAVAILABLE",
    "SENSORS_OFFLINE",
    "STATUS_UNAVAILABLE",
    "atmospheric_scan",
    "micro_bar",
    "operational_status",
    "safety_brief",
    "status_report",
    "vigilance_label",
    "weather_description",
]
