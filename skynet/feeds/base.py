"""Abstract base source — HTTP client lifecycle and JSON fetch helper."""

from __future__ import annotations

import abc
from types import TracebackType
from typing import Any, Generic, TypeVar

import httpx
import structlog

from skynet.feeds.exceptions import FeedConnectionError, FeedParseError

logger = structlog.stdlib.get_logger()

ReadingT = TypeVar("ReadingT")


class BaseSource(abc.ABC, Generic[ReadingT]):
    """Abstract base class for one-shot HTTP data sources.

    Subclasses implement ``fetch()`` and parse the provider's payload into a
    reading model; the base class owns the ``httpx.AsyncClient`` and maps
    transport and decoding failures onto the feed exception hierarchy.

    Usage::

        async with WeatherSource() as source:
            reading = await source.fetch(lat, lon)
    """

    #: Short identifier used in log events.
    name: str = "source"

    def __init__(self, timeout_secs: float = 10.0) -> None:
        self._timeout_secs = timeout_secs
        self._http: httpx.AsyncClient | None = None

    @property
    def connected(self) -> bool:
        """Whether the HTTP client is active."""
        return self._http is not None and not self._http.is_closed

    async def connect(self) -> None:
        """Create the httpx async client."""
        if self.connected:
            return
        self._http = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout_secs))

    async def close(self) -> None:
        """Close the httpx async client."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    @abc.abstractmethod
    async def fetch(self, *args: Any, **kwargs: Any) -> ReadingT:
        """Fetch and parse the current reading from the provider."""

    async def _get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """GET *url* and decode the JSON body.

        Raises:
            FeedConnectionError: Client not connected, transport failure, or
                a non-2xx response.
            FeedParseError: The body is not valid JSON.
        """
        if self._http is None:
            raise FeedConnectionError("HTTP client not connected")

        try:
            response = await self._http.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FeedConnectionError(
                f"{self.name} API returned {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise FeedConnectionError(f"{self.name} API request failed: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise FeedParseError(f"{self.name} API returned invalid JSON") from exc

        logger.debug("feed_response_received", source=self.name, url=url)
        return body

    async def __aenter__(self) -> BaseSource[ReadingT]:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
