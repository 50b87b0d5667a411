"""
Command-prefix and @mention-prefix autocomplete.
"""

from typing import Callable, Iterable, List, Tuple, TypeVar

from meshchat.commands.collaborators import Directory
from meshchat.commands.context import ChatState, CommandSuggestionSet, SuggestionSet
from meshchat.commands.nicknames import display_name
from meshchat.commands.registry import COMMANDS, CommandDefinition

T = TypeVar("T")


def prefix_matches(
    prefix: str, items: Iterable[T], key: Callable[[T], str]
) -> List[T]:
    """Return the items whose key starts with ``prefix``, ignoring case."""
    needle = prefix.lower()
    return [item for item in items if key(item).lower().startswith(needle)]


class SuggestionEngine:
    """Keeps the command and mention suggestion sets on ``ChatState`` up to date."""

    def __init__(
        self,
        state: ChatState,
        directory: Directory,
        commands: Tuple[CommandDefinition, ...] = COMMANDS,
    ) -> None:
        self._state = state
        self._directory = directory
        self._commands = commands

    def command_matches(self, text: str) -> List[CommandDefinition]:
        if not text.startswith("/"):
            return []
        token = text.split(" ")[0]
        return prefix_matches(token, self._commands, lambda cmd: cmd.name)

    def mention_matches(self, text: str) -> List[str]:
        last_at = text.rfind("@")
        if last_at == -1:
            return []
        query = text[last_at + 1 :]
        nicknames = [
            display_name(self._directory, peer_id)
            for peer_id in self._directory.connected_peer_ids()
        ]
        return prefix_matches(query, nicknames, lambda name: name)

    def update_command_suggestions(self, text: str) -> CommandSuggestionSet:
        matches = tuple(self.command_matches(text))
        self._state.command_suggestions = CommandSuggestionSet(
            items=matches, visible=bool(matches)
        )
        return self._state.command_suggestions

    def update_mention_suggestions(self, text: str) -> SuggestionSet:
        matches = tuple(self.mention_matches(text))
        self._state.mention_suggestions = SuggestionSet(
            items=matches, visible=bool(matches)
        )
        return self._state.mention_suggestions

    def select_command_suggestion(self, command: CommandDefinition) -> str:
        """Hide the command panel and return the replacement input text."""
        self._state.command_suggestions = CommandSuggestionSet()
        return command.name

    def select_mention_suggestion(self, nickname: str, current_text: str) -> str:
        """Hide the mention panel and return ``current_text`` with the mention completed."""
        self._state.mention_suggestions = SuggestionSet()
        last_at = current_text.rfind("@")
        if last_at == -1:
            return nickname
        return f"{current_text[: last_at + 1]}{nickname} "
