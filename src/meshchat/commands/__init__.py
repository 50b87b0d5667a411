"""
Commands subpackage: registry, parsing and dispatch, handlers, and autocomplete.
"""

from meshchat.commands.context import (
    Channel,
    ChatContext,
    ChatState,
    LocationChannel,
    PrivateChat,
    PublicFeed,
)
from meshchat.commands.handlers import CallerContext, CommandInvocation
from meshchat.commands.messages import ChatMessage, EmergencyPayload, system_notice
from meshchat.commands.processor import CommandProcessor
from meshchat.commands.registry import COMMANDS, CommandDefinition
from meshchat.commands.suggestions import SuggestionEngine

__all__ = [
    "COMMANDS",
    "CallerContext",
    "Channel",
    "ChatContext",
    "ChatMessage",
    "ChatState",
    "CommandDefinition",
    "CommandInvocation",
    "CommandProcessor",
    "EmergencyPayload",
    "LocationChannel",
    "PrivateChat",
    "PublicFeed",
    "SuggestionEngine",
    "system_notice",
]
