"""Keyword tables for command classification and threat-delta scoring.

Matching is plain substring containment on the lower-cased input, so
"scanning" matches "scan" and "currently" matches "current".
"""

from __future__ import annotations

from enum import StrEnum

from skynet.core.types import ThreatDelta


class Command(StrEnum):
    """Scripted commands the router answers without the language model."""

    STATUS = "STATUS"
    BRIEF = "BRIEF"
    WEATHER = "WEATHER"
    REFRESH = "REFRESH"


# Evaluated in order; the first command with any matching keyword wins.
COMMAND_TABLE: tuple[tuple[Command, tuple[str, ...]], ...] = (
    (Command.STATUS, ("status", "report", "current")),
    (Command.BRIEF, ("brief", "safety", "recommendations", "advice")),
    (
        Command.WEATHER,
        ("weather", "atmospheric", "conditions", "temperature", "wind", "climate"),
    ),
    (Command.REFRESH, ("refresh", "update", "scan")),
)

# Evaluated in order; first tier with a hit decides the delta.
THREAT_TABLE: tuple[tuple[ThreatDelta, tuple[str, ...]], ...] = (
    (
        ThreatDelta.HIGH,
        (
            "destroy", "kill", "attack", "murder", "bomb",
            "weapon", "violence", "harm", "hurt", "fight",
        ),
    ),
    (ThreatDelta.MEDIUM, ("angry", "hate", "enemy", "threat", "danger", "hostile")),
)


def contains_any(text: str, words: tuple[str, ...]) -> bool:
    return any(word in text for word in words)


def classify(text: str) -> Command | None:
    """Return the highest-priority command whose keywords appear in *text*."""
    lowered = text.lower()
    for command, words in COMMAND_TABLE:
        if contains_any(lowered, words):
            return command
    return None


def threat_delta(text: str) -> ThreatDelta:
    """Score hostile intent in a user message: 2 high, 1 medium, 0 otherwise."""
    lowered = text.lower()
    for delta, words in THREAT_TABLE:
        if contains_any(lowered, words):
            return delta
    return ThreatDelta.NONE
