"""Chat completion client — OpenAI-compatible endpoint over httpx."""

from __future__ import annotations

from types import TracebackType
from typing import Any, Protocol

import httpx
import structlog

from skynet.chat.exceptions import CompletionConnectionError, CompletionResponseError
from skynet.chat.prompts import build_system_prompt
from skynet.core.config import CompletionConfig, get_settings
from skynet.core.types import ThreatSnapshot

logger = structlog.stdlib.get_logger()

EMPTY_COMPLETION_TEXT = "Neural network processing error. Please retry command."


class TextGenerator(Protocol):
    """Anything that can answer a user message given the current snapshot."""

    async def generate(self, user_message: str, snapshot: ThreatSnapshot | None) -> str: ...


def _extract_content(body: dict[str, Any]) -> str:
    """Pull the first choice's message content out of a completion body.

    Expected structure::

        {"choices": [{"message": {"role": "assistant", "content": "..."}}]}

    A well-formed body with empty content yields the fixed fallback line.
    """
    choices = body.get("choices")
    if not isinstance(choices, list):
        raise CompletionResponseError("completion response missing 'choices'")
    if not choices:
        return EMPTY_COMPLETION_TEXT

    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not content:
        return EMPTY_COMPLETION_TEXT
    return str(content)


class CompletionClient:
    """Generates SKYNET replies via a ``/chat/completions`` endpoint.

    Usage::

        async with CompletionClient() as client:
            text = await client.generate("Who are you?", snapshot)
    """

    def __init__(self, config: CompletionConfig | None = None) -> None:
        self._config = config or get_settings().completion
        self._http: httpx.AsyncClient | None = None

    @property
    def connected(self) -> bool:
        return self._http is not None and not self._http.is_closed

    async def connect(self) -> None:
        if self.connected:
            return
        headers = {"Content-Type": "application/json"}
        api_key = self._config.api_key.get_secret_value()
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._http = httpx.AsyncClient(
            base_url=self._config.base_url,
            headers=headers,
            timeout=httpx.Timeout(self._config.timeout_secs),
        )

    async def close(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    def build_messages(
        self, user_message: str, snapshot: ThreatSnapshot | None,
    ) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": build_system_prompt(snapshot)},
            {"role": "user", "content": user_message},
        ]

    async def generate(self, user_message: str, snapshot: ThreatSnapshot | None) -> str:
        """Return the model's reply to *user_message*.

        Raises:
            CompletionConnectionError: Not connected, transport failure, or non-2xx.
            CompletionResponseError: Body is not JSON or has no ``choices``.
        """
        if self._http is None:
            raise CompletionConnectionError("HTTP client not connected")

        payload = {
            "model": self._config.model,
            "messages": self.build_messages(user_message, snapshot),
            "max_tokens": self._config.max_tokens,
            "temperature": self._config.temperature,
        }

        try:
            response = await self._http.post("/chat/completions", json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise CompletionConnectionError(
                f"completion API returned {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise CompletionConnectionError(f"completion request failed: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise CompletionResponseError("completion API returned invalid JSON") from exc
        if not isinstance(body, dict):
            raise CompletionResponseError("completion response is not an object")

        text = _extract_content(body)
        logger.debug("completion_received", model=self._config.model, chars=len(text))
        return text

    async def __aenter__(self) -> CompletionClient:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
