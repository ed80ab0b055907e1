"""Command router — scripted reports first, language model as the fallback."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from skynet.chat.completion import TextGenerator
from skynet.chat.keywords import Command, classify, threat_delta
from skynet.core.types import ChatResponse, ThreatDelta, ThreatSnapshot
from skynet.reports.formatters import atmospheric_scan, safety_brief, status_report

logger = structlog.stdlib.get_logger()

REFRESH_ACK = "Refreshing global threat assessment. Scanning all monitoring networks..."
GENERATOR_ERROR = (
    "NEURAL NETWORK PROCESSING ERROR. Backup systems engaged. "
    "Please rephrase your query."
)

ReportFn = Callable[[ThreatSnapshot | None, int], str]
RefreshFn = Callable[[], None]

_REPORTS: dict[Command, ReportFn] = {
    Command.STATUS: status_report,
    Command.BRIEF: safety_brief,
    Command.WEATHER: atmospheric_scan,
}


class CommandRouter:
    """Routes one user message to a report, a refresh, or the text generator.

    The threat delta always comes from a keyword scan of the raw user input,
    independent of which branch produced the reply. Generator failures are
    answered in character with a zero delta and never raised.
    """

    def __init__(self, generator: TextGenerator, refresh: RefreshFn | None = None) -> None:
        self._generator = generator
        self._refresh = refresh

    async def respond(
        self,
        text: str,
        snapshot: ThreatSnapshot | None,
        overall: int,
    ) -> ChatResponse:
        delta = threat_delta(text)
        command = classify(text)

        if command is not None:
            logger.debug("command_matched", command=command)
            reply = self._run_command(command, snapshot, overall)
            return ChatResponse(text=reply, threat_delta=delta)

        try:
            reply = await self._generator.generate(text, snapshot)
        except Exception:
            logger.exception("completion_failed")
            return ChatResponse(text=GENERATOR_ERROR, threat_delta=ThreatDelta.NONE)

        return ChatResponse(text=reply, threat_delta=delta)

    def _run_command(
        self,
        command: Command,
        snapshot: ThreatSnapshot | None,
        overall: int,
    ) -> str:
        if command == Command.REFRESH:
            if self._refresh is not None:
                self._refresh()
            else:
                logger.warning("refresh_unavailable")
            return REFRESH_ACK
        return _REPORTS[command](snapshot, overall)
