"""
Chat context state read by the command interpreter.

The UI layer owns and mutates this state; the interpreter only reads the
selected scope and writes the role flag and suggestion sets.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from meshchat.commands.registry import CommandDefinition


@dataclass(frozen=True)
class PublicFeed:
    """The shared mesh feed (no channel selected)."""


@dataclass(frozen=True)
class Channel:
    channel_id: str


@dataclass(frozen=True)
class PrivateChat:
    peer_id: str


@dataclass(frozen=True)
class LocationChannel:
    geohash: str


ChatContext = Union[PublicFeed, Channel, PrivateChat, LocationChannel]


@dataclass(frozen=True)
class SuggestionSet:
    """Autocomplete list shown to the user; replaced wholesale on each update."""

    items: Tuple[str, ...] = ()
    visible: bool = False


@dataclass(frozen=True)
class CommandSuggestionSet:
    items: Tuple[CommandDefinition, ...] = ()
    visible: bool = False


@dataclass
class ChatState:
    """
    Holds the currently selected chat scope and the user's own identity.

    Attributes:
        nickname: The user's chosen nickname, if any.
        context: The active scope; exactly one variant at a time.
        guardian_mode: Whether this node acts as a guardian.
        geohash_people: Display names of participants in the active location channel.
        command_suggestions: Current command autocomplete set.
        mention_suggestions: Current @mention autocomplete set.
    """

    nickname: Optional[str] = None
    context: ChatContext = field(default_factory=PublicFeed)
    guardian_mode: bool = False
    geohash_people: List[str] = field(default_factory=list)
    command_suggestions: CommandSuggestionSet = field(
        default_factory=CommandSuggestionSet
    )
    mention_suggestions: SuggestionSet = field(default_factory=SuggestionSet)

    def select(self, context: ChatContext) -> None:
        """Switch the active scope, replacing whatever was selected before."""
        self.context = context
