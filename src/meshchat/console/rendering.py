from rich.console import Console
from rich.markup import escape

from meshchat.commands.messages import ChatMessage

console = Console()


def render_message(msg: ChatMessage) -> None:
    """Render a single chat line or system notice via Rich."""
    stamp = msg.timestamp.strftime("%H:%M")
    content = escape(msg.content)
    if msg.is_system:
        console.print(f"[dim]{stamp}[/dim] [yellow]* {content}[/yellow]")
    else:
        where = f"[dim]{escape(msg.channel)}[/dim] " if msg.channel else ""
        console.print(
            f"[dim]{stamp}[/dim] {where}[bold cyan]<{escape(msg.sender)}>[/bold cyan] {content}"
        )


def print_styled(message: str, style: str = "") -> None:
    """Print text with an optional Rich style."""
    text = escape(message)
    console.print(f"[{style}]{text}[/{style}]" if style else text)
