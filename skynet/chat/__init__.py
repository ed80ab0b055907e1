"""Chat layer — command routing, completion client, and session state."""

from skynet.chat.completion import CompletionClient, TextGenerator
from skynet.chat.exceptions import (
    CompletionConnectionError,
    CompletionError,
    CompletionResponseError,
)
from skynet.chat.keywords import COMMAND_TABLE, Command, classify, threat_delta
from skynet.chat.router import CommandRouter
from skynet.chat.session import ChatSession

__all__ = [
    "COMMAND_TABLE",
    "ChatSession",
    "Command",
    "CommandRouter",
    "CompletionClient",
    "CompletionConnectionError",
    "CompletionError",
    "CompletionResponseError",
    "TextGenerator",
    "classify",
    "threat_delta",
]
