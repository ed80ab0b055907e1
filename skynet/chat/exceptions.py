"""Exception hierarchy for the text-generation collaborator."""

from __future__ import annotations


class CompletionError(Exception):
    """Base exception for chat completion failures."""


class CompletionConnectionError(CompletionError):
    """The completion endpoint was unreachable or returned a non-2xx status."""


class CompletionResponseError(CompletionError):
    """The completion endpoint returned a body we could not interpret."""
