import logging
from typing import Callable, Dict, Tuple

from meshchat.commands.collaborators import (
    ChannelManager,
    Directory,
    MessageStore,
    PrivateChatManager,
    Transport,
)
from meshchat.commands.context import (
    ChatContext,
    ChatState,
    CommandSuggestionSet,
    SuggestionSet,
)
from meshchat.commands.handlers import CallerContext, CommandHandlers, CommandInvocation
from meshchat.commands.registry import COMMANDS, CommandDefinition, alias_map
from meshchat.commands.suggestions import SuggestionEngine

logger = logging.getLogger(__name__)

Handler = Callable[[CallerContext, ChatContext, CommandInvocation], None]


class CommandProcessor:
    """Parses slash commands, dispatches them to handlers and drives autocomplete."""

    def __init__(
        self,
        state: ChatState,
        messages: MessageStore,
        channels: ChannelManager,
        private_chats: PrivateChatManager,
        directory: Directory,
        transport: Transport,
        commands: Tuple[CommandDefinition, ...] = COMMANDS,
    ) -> None:
        self.state = state
        self.commands = commands
        self.handlers = CommandHandlers(
            state, messages, channels, private_chats, directory, transport, commands
        )
        self.suggestions = SuggestionEngine(state, directory, commands)

        h = self.handlers
        self._dispatch: Dict[str, Handler] = {
            "/block": h.block,
            "/channels": h.list_channels,
            "/clear": h.clear,
            "/hug": h.hug,
            "/join": h.join,
            "/msg": h.msg,
            "/pass": h.password,
            "/slap": h.slap,
            "/unblock": h.unblock,
            "/w": h.who,
            "/role": h.role,
            "/sos": h.sos,
            "/wipe": h.wipe,
        }
        self._aliases = alias_map(commands)

    def process_command(self, text: str, caller: CallerContext) -> bool:
        """
        Run a slash command.

        Returns False when ``text`` is not a command (plain chat), True otherwise,
        whether or not the command's arguments were valid.
        """
        invocation = CommandInvocation.parse(text)
        if invocation is None:
            return False

        canonical = self._aliases.get(invocation.verb)
        handler = self._dispatch.get(canonical or "", self.handlers.unknown)
        logger.debug(f"Dispatching {invocation.verb} -> {canonical or 'unknown'}")
        handler(caller, self.state.context, invocation)
        return True

    def update_command_suggestions(self, text: str) -> CommandSuggestionSet:
        return self.suggestions.update_command_suggestions(text)

    def update_mention_suggestions(self, text: str) -> SuggestionSet:
        return self.suggestions.update_mention_suggestions(text)

    def select_command_suggestion(self, command: CommandDefinition) -> str:
        return self.suggestions.select_command_suggestion(command)

    def select_mention_suggestion(self, nickname: str, current_text: str) -> str:
        return self.suggestions.select_mention_suggestion(nickname, current_text)

    def send_message(self, text: str, caller: CallerContext) -> None:
        """Send plain (non-command) chat text to the active scope."""
        self.handlers.send_chat(caller, self.state.context, text)
