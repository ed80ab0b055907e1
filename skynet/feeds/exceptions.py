"""Exception hierarchy for external data sources."""

from __future__ import annotations


class FeedError(Exception):
    """Base exception for all feed errors."""


class FeedConnectionError(FeedError):
    """Failed to reach a data source, or it answered with a non-2xx status."""


class FeedParseError(FeedError):
    """Failed to parse a response from a data source."""
