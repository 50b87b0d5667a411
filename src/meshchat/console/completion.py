from typing import Generator, Optional

from prompt_toolkit.auto_suggest import AutoSuggest, Suggestion
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.styles import Style

from meshchat.commands.processor import CommandProcessor


class ChatCompleter:
    """Bridges the suggestion engine to prompt_toolkit completion and auto-suggest."""

    style: Style = Style.from_dict(
        {
            "completion-menu": "noinherit",
            "completion-menu.completion": "noinherit",
            "completion-menu.scrollbar": "noinherit",
            "completion-menu.completion.current": "noinherit bold",
            "scrollbar": "noinherit",
            "scrollbar.background": "noinherit",
            "scrollbar.button": "noinherit",
            "bottom-toolbar": "noreverse",
        }
    )

    def __init__(self, processor: CommandProcessor) -> None:
        self._processor = processor

    @property
    def completer(self) -> Completer:
        processor = self._processor

        class _ChatCompleter(Completer):
            def get_completions(
                self, document: Document, complete_event: CompleteEvent
            ) -> Generator[Completion, None, None]:
                text = document.text_before_cursor
                # Commands complete only while the verb is still being typed
                if (
                    document.cursor_position_row == 0
                    and text.startswith("/")
                    and " " not in text
                ):
                    commands = processor.update_command_suggestions(text)
                    for cmd in commands.items:
                        yield Completion(
                            cmd.name,
                            start_position=-len(text),
                            display=f"{cmd.name} {cmd.argument_hint or ''}".rstrip(),
                            display_meta=cmd.description,
                        )
                    return

                mentions = processor.update_mention_suggestions(text)
                if not mentions.visible:
                    return
                query_len = len(text) - text.rfind("@")
                for nickname in mentions.items:
                    yield Completion(
                        f"@{nickname} ", start_position=-query_len, display=nickname
                    )

        return _ChatCompleter()

    @property
    def auto_suggest(self) -> AutoSuggest:
        processor = self._processor

        class _CommandAutoSuggest(AutoSuggest):
            def get_suggestion(
                self, buffer: Buffer, document: Document
            ) -> Optional[Suggestion]:
                text = document.text
                if not text.startswith("/") or len(text) <= 1 or " " in text:
                    return None
                for cmd in processor.suggestions.command_matches(text):
                    if cmd.name.lower() != text.lower():
                        return Suggestion(cmd.name[len(text) :])
                return None

        return _CommandAutoSuggest()

    @staticmethod
    def on_completions_changed(buf: Buffer) -> None:
        state = buf.complete_state
        if state and state.complete_index is None:
            state.complete_index = 0
