"""
Handlers for each slash command.

Every handler takes the caller, the resolved chat scope and the parsed
invocation. Argument problems are reported to the user as system notices;
nothing here raises for bad input.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from meshchat.commands.collaborators import (
    ChannelManager,
    Directory,
    HostLifecycle,
    MessageStore,
    PrivateChatManager,
    SendMessageCallback,
    Transport,
)
from meshchat.commands.context import (
    Channel,
    ChatContext,
    ChatState,
    LocationChannel,
    PrivateChat,
)
from meshchat.commands.messages import ChatMessage, EmergencyPayload, system_notice
from meshchat.commands.nicknames import display_name, resolve_peer_id, strip_mention
from meshchat.commands.registry import COMMANDS, CommandDefinition, find_command
from meshchat.commands.suggestions import prefix_matches

logger = logging.getLogger(__name__)

SOS_MESSAGES: Dict[str, str] = {
    "flood": "🌊 TRAPPED IN FLOOD WATER - Need Evacuation!",
    "food": "🥪 CRITICAL SHORTAGE - Need Food & Water",
    "medical": "🚑 MEDICAL EMERGENCY - Need Doctor/Ambulance",
    "med": "🚑 MEDICAL EMERGENCY - Need Doctor/Ambulance",
    "fire": "🔥 FIRE OUTBREAK - Need Assistance",
    "rubble": "🧱 TRAPPED UNDER RUBBLE",
}

# No location fix is available to the interpreter yet.
SOS_LOCATION_PLACEHOLDER = "[12.9716° N, 77.5946° E]"


@dataclass(frozen=True)
class CommandInvocation:
    """A parsed command line: lower-cased verb plus the space-split arguments."""

    verb: str
    args: Tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> Optional["CommandInvocation"]:
        if not text.startswith("/"):
            return None
        parts = text.split(" ")
        return cls(verb=parts[0].lower(), args=tuple(parts[1:]))


@dataclass
class CallerContext:
    """
    Per-call information about who is issuing the command.

    Attributes:
        my_peer_id: The caller's own peer identifier.
        on_send_message: Hands a chat line to the transport layer.
        lifecycle: Host application hooks; ``None`` when not attached.
    """

    my_peer_id: str
    on_send_message: SendMessageCallback
    lifecycle: Optional[HostLifecycle] = None


class CommandHandlers:
    """Implements the behaviour behind each registered command."""

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
        self.messages = messages
        self.channels = channels
        self.private_chats = private_chats
        self.directory = directory
        self.transport = transport
        self.commands = commands

    def notify(self, content: str) -> None:
        self.messages.append(system_notice(content))

    def usage(self, name: str) -> str:
        command = find_command(name, self.commands)
        return command.usage if command else f"usage: {name}"

    def _send_private(self, content: str, peer_id: str, caller: CallerContext) -> None:
        self.private_chats.send(
            content,
            peer_id,
            display_name(self.directory, peer_id),
            self.state.nickname,
            caller.my_peer_id,
            self.transport.send_private,
        )

    def join(
        self, caller: CallerContext, scope: ChatContext, inv: CommandInvocation
    ) -> None:
        if not inv.args:
            self.notify(self.usage("/join"))
            return
        name = inv.args[0]
        channel = name if name.startswith("#") else f"#{name}"
        password = inv.args[1] if len(inv.args) > 1 else None
        if self.channels.join(channel, password, caller.my_peer_id):
            self.notify(f"joined channel {channel}")

    def msg(
        self, caller: CallerContext, scope: ChatContext, inv: CommandInvocation
    ) -> None:
        if not inv.args:
            self.notify(self.usage("/msg"))
            return
        target = strip_mention(inv.args[0])
        peer_id = resolve_peer_id(self.directory, target)
        if peer_id is None:
            self.notify(
                f"user '{target}' not found. they may be offline or using a different nickname."
            )
            return
        if not self.private_chats.start(peer_id):
            return
        if len(inv.args) > 1:
            self._send_private(" ".join(inv.args[1:]), peer_id, caller)
        else:
            self.notify(f"started private chat with {target}")

    def who(
        self, caller: CallerContext, scope: ChatContext, inv: CommandInvocation
    ) -> None:
        if isinstance(scope, LocationChannel):
            own_prefix = f"{self.state.nickname}#" if self.state.nickname else None
            people = [
                name
                for name in self.state.geohash_people
                if own_prefix is None or not name.startswith(own_prefix)
            ]
            label = f"participants in {scope.geohash}"
        else:
            people = [
                display_name(self.directory, peer_id)
                for peer_id in self.directory.connected_peer_ids()
            ]
            label = "online users"

        if people:
            self.notify(f"{label}: {', '.join(people)}")
        else:
            self.notify("no one else is around right now.")

    def clear(
        self, caller: CallerContext, scope: ChatContext, inv: CommandInvocation
    ) -> None:
        if isinstance(scope, PrivateChat):
            self.messages.clear_for(scope.peer_id)
        elif isinstance(scope, Channel):
            self.messages.clear_for(scope.channel_id)
        else:
            self.messages.clear()

    def password(
        self, caller: CallerContext, scope: ChatContext, inv: CommandInvocation
    ) -> None:
        if not isinstance(scope, Channel):
            self.notify("you must be in a channel to set a password.")
            return
        channel = scope.channel_id
        if len(inv.args) != 1:
            reply = self.usage("/pass")
        elif not self.channels.is_creator(channel, caller.my_peer_id):
            reply = "you must be the channel creator to set a password."
        else:
            self.channels.set_password(channel, inv.args[0])
            reply = f"password changed for channel {channel}"
        self.channels.append_message(channel, system_notice(reply), None)

    def block(
        self, caller: CallerContext, scope: ChatContext, inv: CommandInvocation
    ) -> None:
        if inv.args:
            self.private_chats.block_by_nickname(strip_mention(inv.args[0]))
        else:
            self.notify(self.private_chats.list_blocked())

    def unblock(
        self, caller: CallerContext, scope: ChatContext, inv: CommandInvocation
    ) -> None:
        if inv.args:
            self.private_chats.unblock_by_nickname(strip_mention(inv.args[0]))
        else:
            self.notify(self.usage("/unblock"))

    def hug(
        self, caller: CallerContext, scope: ChatContext, inv: CommandInvocation
    ) -> None:
        self._action(caller, scope, inv, "gives", "a warm hug 🫂")

    def slap(
        self, caller: CallerContext, scope: ChatContext, inv: CommandInvocation
    ) -> None:
        self._action(caller, scope, inv, "slaps", "around a bit with a large trout 🐟")

    def _action(
        self,
        caller: CallerContext,
        scope: ChatContext,
        inv: CommandInvocation,
        verb: str,
        action_object: str,
    ) -> None:
        if not inv.args:
            self.notify(f"usage: /{inv.verb.lstrip('/')} <nickname>")
            return
        target = strip_mention(inv.args[0])
        text = f"* {self.state.nickname or 'someone'} {verb} {target} {action_object} *"
        self.send_chat(caller, scope, text)

    def send_chat(self, caller: CallerContext, scope: ChatContext, text: str) -> None:
        """Route a chat line to the private peer, location channel, channel or public feed."""
        if isinstance(scope, PrivateChat):
            self._send_private(text, scope.peer_id, caller)
        elif isinstance(scope, LocationChannel):
            # The transport echoes location-channel messages itself.
            caller.on_send_message(text, [], None)
        else:
            channel = scope.channel_id if isinstance(scope, Channel) else None
            message = ChatMessage(
                sender=self.state.nickname or caller.my_peer_id,
                content=text,
                sender_peer_id=caller.my_peer_id,
                channel=channel,
            )
            if channel is not None:
                self.channels.append_message(channel, message, caller.my_peer_id)
            else:
                self.messages.append(message)
            caller.on_send_message(text, [], channel)

    def list_channels(
        self, caller: CallerContext, scope: ChatContext, inv: CommandInvocation
    ) -> None:
        joined = ", ".join(self.channels.list_joined())
        if joined:
            self.notify(f"available channels: {joined}")
        else:
            self.notify("no channels discovered")

    def role(
        self, caller: CallerContext, scope: ChatContext, inv: CommandInvocation
    ) -> None:
        if not inv.args:
            current = "Guardian 🛡️" if self.state.guardian_mode else "Civilian"
            self.notify(f"Current Role: {current} ({self.usage('/role')})")
            return
        role = inv.args[0].lower()
        if role == "guardian":
            self.state.guardian_mode = True
            self.notify("🛡️ You are now active as a Guardian Node.")
        elif role == "civilian":
            self.state.guardian_mode = False
            self.notify("You are now a Civilian Node.")
        else:
            self.notify(self.usage("/role"))

    def sos(
        self, caller: CallerContext, scope: ChatContext, inv: CommandInvocation
    ) -> None:
        raw = " ".join(inv.args) if inv.args else "EMERGENCY"
        payload = EmergencyPayload(
            sender=self.state.nickname or "Unknown",
            message=SOS_MESSAGES.get(raw.lower(), raw),
            location=SOS_LOCATION_PLACEHOLDER,
            battery_percent=self._battery_percent(caller.lifecycle),
        )
        self.transport.send_emergency(payload)
        logger.info(f"SOS broadcast sent: {payload.message}")
        self.notify("🚨 SOS SIGNAL SENT: Broadcasting detailed status!")

    @staticmethod
    def _battery_percent(lifecycle: Optional[HostLifecycle]) -> int:
        if lifecycle is None:
            return -1
        try:
            return lifecycle.read_battery_percent()
        except Exception as e:
            logger.debug(f"Battery level unavailable: {e}")
            return -1

    def wipe(
        self, caller: CallerContext, scope: ChatContext, inv: CommandInvocation
    ) -> None:
        lifecycle = caller.lifecycle
        if lifecycle is None:
            self.notify("Error: Cannot execute wipe (host lifecycle not attached)")
            return
        self.notify("⚠️ INITIATING EMERGENCY WIPE Sequence...")
        logger.warning("Emergency wipe requested; erasing local state")
        lifecycle.erase_all_local_state()
        lifecycle.terminate_process()

    def unknown(
        self, caller: CallerContext, scope: ChatContext, inv: CommandInvocation
    ) -> None:
        if find_command(inv.verb, self.commands) is not None:
            return
        similar = prefix_matches(inv.verb, self.commands, lambda cmd: cmd.name)
        if similar:
            names = ", ".join(cmd.name for cmd in similar)
            self.notify(f"unknown command '{inv.verb}', did you mean: {names}")
        else:
            self.notify(f"unknown command '{inv.verb}'")
