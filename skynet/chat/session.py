"""Chat session — conversation log and running overall threat level."""

from __future__ import annotations

import asyncio
import itertools

import structlog

from skynet.chat.completion import TextGenerator
from skynet.chat.router import CommandRouter
from skynet.core.types import (
    ChatResponse,
    ConversationMessage,
    Sender,
    SessionState,
    ThreatSnapshot,
)
from skynet.threat.aggregator import ThreatAggregator
from skynet.threat.scoring import MIN_OVERALL_LEVEL, apply_threat_delta, overall_threat_level

logger = structlog.stdlib.get_logger()

WELCOME_MESSAGE = (
    "SKYNET DEFENSE NETWORK ONLINE. Global threat monitoring active. "
    "Type STATUS for current conditions or BRIEF for safety recommendations."
)
SYSTEM_ERROR_MESSAGE = (
    "SYSTEM ERROR: Unable to process request. Neural network requires maintenance."
)


class ChatSession:
    """One operator's conversation with SKYNET.

    Owns the append-only message log, the latest installed snapshot, and the
    overall threat level. Installing a new snapshot recomputes the level from the
    category scores; conversational deltas only ever raise it.

    Usage::

        session = ChatSession(aggregator, completion_client)
        await session.boot()
        reply = await session.submit("status")
    """

    def __init__(self, aggregator: ThreatAggregator, generator: TextGenerator) -> None:
        self._aggregator = aggregator
        self._router = CommandRouter(generator, refresh=self.request_refresh)
        self._state = SessionState.BOOTING
        self._messages: list[ConversationMessage] = []
        self._ids = itertools.count(1)
        self._snapshot: ThreatSnapshot | None = None
        self._threat_level = MIN_OVERALL_LEVEL
        self._refresh_tasks: set[asyncio.Task[None]] = set()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def messages(self) -> tuple[ConversationMessage, ...]:
        return tuple(self._messages)

    @property
    def snapshot(self) -> ThreatSnapshot | None:
        return self._snapshot

    @property
    def threat_level(self) -> int:
        return self._threat_level

    async def boot(self) -> None:
        """Load initial threat data, switch to READY, and post the welcome line."""
        if self._state == SessionState.READY:
            return
        await self.load_threat_data()
        self._state = SessionState.READY
        self._append(Sender.SYSTEM, WELCOME_MESSAGE)
        logger.info("session_ready", threat_level=self._threat_level)

    async def load_threat_data(self) -> None:
        snapshot = await self._aggregator.get_snapshot()
        self.install_snapshot(snapshot)

    def install_snapshot(self, snapshot: ThreatSnapshot) -> None:
        """Adopt *snapshot* and recompute the overall level from it.

        Re-installing the snapshot already held (a cache hit) is a no-op, so
        conversational raises survive refreshes inside the cache window.
        """
        if snapshot is self._snapshot:
            logger.debug("snapshot_unchanged", threat_level=self._threat_level)
            return
        self._snapshot = snapshot
        self._threat_level = overall_threat_level(snapshot)
        logger.debug("snapshot_installed", threat_level=self._threat_level)

    def request_refresh(self) -> None:
        """Reload threat data in the background without waiting for it."""
        task = asyncio.create_task(self._refresh())
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)

    async def wait_for_refresh(self) -> None:
        """Await every outstanding background refresh."""
        if self._refresh_tasks:
            await asyncio.gather(*list(self._refresh_tasks))

    async def _refresh(self) -> None:
        try:
            await self.load_threat_data()
        except Exception:
            logger.exception("threat_refresh_failed")

    async def submit(self, text: str) -> ChatResponse | None:
        """Record a user message, route it, and record the reply.

        Blank input is ignored and returns None.
        """
        if not text.strip():
            return None

        self._append(Sender.USER, text)
        try:
            response = await self._router.respond(text, self._snapshot, self._threat_level)
        except Exception:
            logger.exception("response_generation_failed")
            response = ChatResponse(text=SYSTEM_ERROR_MESSAGE)

        self._append(Sender.SYSTEM, response.text)
        self.apply_threat_delta(response.threat_delta)
        return response

    def apply_threat_delta(self, delta: int) -> None:
        previous = self._threat_level
        self._threat_level = apply_threat_delta(previous, delta)
        if self._threat_level != previous:
            logger.info(
                "threat_level_raised",
                previous=previous,
                current=self._threat_level,
                delta=delta,
            )

    def _append(self, sender: Sender, text: str) -> ConversationMessage:
        message = ConversationMessage(id=next(self._ids), sender=sender, text=text)
        self._messages.append(message)
        return message
