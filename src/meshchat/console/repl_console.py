import logging
from typing import Optional

from prompt_toolkit.filters import completion_is_selected, has_completions
from prompt_toolkit.formatted_text import FormattedText, to_formatted_text
from prompt_toolkit.history import FileHistory
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from prompt_toolkit.shortcuts import PromptSession
from rich.markup import escape
from rich.panel import Panel

from meshchat.commands.context import (
    Channel,
    ChatContext,
    LocationChannel,
    PrivateChat,
)
from meshchat.console.completion import ChatCompleter
from meshchat.console.rendering import console
from meshchat.session import ChatSession

logger = logging.getLogger(__name__)

EXIT_WORDS = ("/exit", "/quit")


def scope_label(session: ChatSession, context: ChatContext) -> str:
    """Short prompt label for the active chat scope."""
    if isinstance(context, Channel):
        return context.channel_id
    if isinstance(context, PrivateChat):
        nickname = session.config.peers.get(context.peer_id, context.peer_id)
        return f"@{nickname}"
    if isinstance(context, LocationChannel):
        return f"~{context.geohash}"
    return "mesh"


class ReplConsole:
    """Console that runs interactive REPL mode."""

    session: ChatSession
    prompt_session: Optional[PromptSession[str]]

    def __init__(self, session: ChatSession) -> None:
        self.session = session
        self.prompt_session = None
        self._completer = ChatCompleter(session.processor)

    def prompt_fragments(self) -> FormattedText:
        """Return the prompt: active scope + prompt symbol."""
        label = scope_label(self.session, self.session.state.context)
        return to_formatted_text(f"\n{label} › ")

    def _get_key_bindings(self) -> KeyBindings:
        """Return the custom KeyBindings (e.g. Tab behaviour)."""
        kb = KeyBindings()

        @kb.add("enter", filter=has_completions)
        def insert_or_accept(event: KeyPressEvent) -> None:
            buffer = event.current_buffer
            state = buffer.complete_state

            if not completion_is_selected():  # user never arrowed/tabbed
                state.complete_index = state.complete_index or 0  # type: ignore
            buffer.apply_completion(state.current_completion)  # type: ignore
            buffer.cancel_completion()

        @kb.add("tab", filter=has_completions)
        def accept_or_cycle(event: KeyPressEvent) -> None:
            buffer = event.current_buffer
            state = buffer.complete_state

            # If there is only one completion, treat Tab like "auto-complete"
            if len(state.completions) == 1:  # type: ignore
                state.complete_index = 0  # type: ignore
                buffer.apply_completion(state.current_completion)  # type: ignore
                buffer.cancel_completion()
            else:
                buffer.complete_next()

        return kb

    async def run(self) -> None:
        """Interactive REPL loop for the console interface."""
        config = self.session.config
        role = "guardian" if self.session.state.guardian_mode else "civilian"
        console.print(
            Panel(
                f"[bold cyan]╭─ MESHCHAT ─╮[/bold cyan]\n\n"
                f"[dim]Nickname:[/dim] [dim cyan]{escape(config.nickname or 'anonymous')}[/dim cyan]\n"
                f"[dim]Peer ID:[/dim] [dim cyan]{escape(config.peer_id)}[/dim cyan]\n"
                f"[dim]Role:[/dim] [dim cyan]{role}[/dim cyan]\n"
                f"[dim]Known peers:[/dim] [dim cyan]{len(config.peers)}[/dim cyan]",
                expand=False,
            )
        )

        # Store prompt history under the data directory
        config.data_dir.mkdir(parents=True, exist_ok=True)
        history_path = config.data_dir / "prompt_history"

        self.prompt_session = PromptSession(
            message=self.prompt_fragments,
            history=FileHistory(str(history_path)),
            completer=self._completer.completer,
            auto_suggest=self._completer.auto_suggest,
            style=self._completer.style,
            complete_while_typing=True,
            key_bindings=self._get_key_bindings(),
        )
        if hasattr(self.prompt_session, "default_buffer"):
            buffer = self.prompt_session.default_buffer
            buffer.on_completions_changed += self._completer.on_completions_changed

        try:
            while True:
                user_input = await self.prompt_session.prompt_async()
                if not user_input.strip():
                    continue

                if user_input.strip().lower() in EXIT_WORDS:
                    break

                logger.debug(f"Submitting input in scope {self.session.state.context}")
                self.session.submit(user_input)

        except (KeyboardInterrupt, EOFError):
            pass
