from typing import Protocol

from rich.markup import escape

from meshchat.console.rendering import console
from meshchat.console.repl_console import ReplConsole
from meshchat.session import ChatSession

__all__ = ["ConsoleInterface", "HeadlessConsole", "ReplConsole"]


class ConsoleInterface(Protocol):
    """Common interface for console interactions."""

    session: ChatSession

    async def run(self) -> None:
        pass


class HeadlessConsole(ConsoleInterface):
    """Console that runs a fixed list of input lines and exits."""

    def __init__(self, session: ChatSession, lines: list[str]) -> None:
        self.session = session
        self.lines = lines

    async def run(self) -> None:
        """
        Submit each line in order, echoing it first.
        """
        if not self.lines:
            raise ValueError("At least one input line is required for headless mode")

        for line in self.lines:
            console.print(f"[bold cyan]›[/bold cyan] {escape(line)}")
            self.session.submit(line)
