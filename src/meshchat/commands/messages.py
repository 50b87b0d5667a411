"""
Message records produced by command handlers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

SYSTEM_SENDER = "system"


@dataclass(frozen=True)
class ChatMessage:
    """A chat line or locally generated system notice."""

    sender: str
    content: str
    timestamp: datetime = field(default_factory=datetime.now)
    is_relay: bool = False
    sender_peer_id: Optional[str] = None
    channel: Optional[str] = None

    @property
    def is_system(self) -> bool:
        return self.sender == SYSTEM_SENDER


def system_notice(content: str) -> ChatMessage:
    """Build a non-relayed system notice."""
    return ChatMessage(sender=SYSTEM_SENDER, content=content)


@dataclass(frozen=True)
class EmergencyPayload:
    """
    Structured SOS broadcast.

    Attributes:
        sender: Nickname of the node raising the alert.
        message: Human-readable emergency text.
        location: Location description (placeholder until a fix is available).
        battery_percent: Battery level, or -1 when the host cannot report it.
    """

    sender: str
    message: str
    location: str
    battery_percent: int = -1

    @property
    def battery_label(self) -> str:
        return f"{self.battery_percent}%" if self.battery_percent > 0 else "Unknown"

    def to_text(self) -> str:
        """Render the payload as the text block carried on the wire."""
        return "\n".join(
            [
                "🚨 **SOS ALERT** 🚨",
                f"User: @{self.sender}",
                f"Msg: **{self.message}**",
                f"📍 Loc: {self.location}",
                f"🔋 Batt: {self.battery_label}",
            ]
        )
