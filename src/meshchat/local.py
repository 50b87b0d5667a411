"""
In-process collaborators for running the command interpreter locally.

These stand in for the mesh transport and storage layers when the client
runs as a terminal program: messages are kept in memory, the peer directory
is fixed at startup and outgoing traffic is handed to a printer callback.
"""

import logging
import os
import shutil
import uuid
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Set

from meshchat.commands.collaborators import MessageStore, PrivateSentCallback
from meshchat.commands.context import Channel, ChatState, PrivateChat
from meshchat.commands.messages import ChatMessage, EmergencyPayload, system_notice
from meshchat.commands.nicknames import resolve_peer_id

logger = logging.getLogger(__name__)

MessageListener = Callable[[ChatMessage], None]

BATTERY_GLOB = "BAT*/capacity"
POWER_SUPPLY_DIR = Path("/sys/class/power_supply")


class InMemoryMessageStore:
    """Public feed plus per-scope (channel or private peer) message lists."""

    def __init__(self, listener: Optional[MessageListener] = None) -> None:
        self.feed: List[ChatMessage] = []
        self.scoped: Dict[str, List[ChatMessage]] = defaultdict(list)
        self._listener = listener

    def append(self, message: ChatMessage) -> None:
        self.feed.append(message)
        if self._listener:
            self._listener(message)

    def append_to(self, scope_id: str, message: ChatMessage) -> None:
        self.scoped[scope_id].append(message)
        if self._listener:
            self._listener(message)

    def clear(self) -> None:
        self.feed.clear()

    def clear_for(self, scope_id: str) -> None:
        self.scoped.pop(scope_id, None)


@dataclass
class _ChannelInfo:
    creator: str
    password: Optional[str] = None


class InMemoryChannelManager:
    """Tracks joined channels, their creators and passwords."""

    def __init__(self, store: InMemoryMessageStore, state: ChatState) -> None:
        self._store = store
        self._state = state
        self._channels: Dict[str, _ChannelInfo] = {}

    def join(self, channel: str, password: Optional[str], caller_id: str) -> bool:
        info = self._channels.get(channel)
        if info is None:
            self._channels[channel] = _ChannelInfo(creator=caller_id, password=password)
            logger.info(f"Created channel {channel}")
            self._state.select(Channel(channel))
            return True
        if info.password is not None and info.password != password:
            self._store.append(system_notice(f"wrong password for channel {channel}"))
            return False
        self._state.select(Channel(channel))
        return True

    def is_creator(self, channel: str, caller_id: str) -> bool:
        info = self._channels.get(channel)
        return info is not None and info.creator == caller_id

    def set_password(self, channel: str, password: str) -> None:
        self._channels[channel].password = password

    def list_joined(self) -> Sequence[str]:
        return sorted(self._channels)

    def append_message(
        self, channel: str, message: ChatMessage, sender_id: Optional[str]
    ) -> None:
        self._store.append_to(channel, message)


class StaticDirectory:
    """Peer directory fixed at startup; every known peer counts as connected."""

    def __init__(self, peers: Mapping[str, str]) -> None:
        self._peers = dict(peers)

    def nickname_of(self, peer_id: str) -> Optional[str]:
        return self._peers.get(peer_id)

    def peer_nicknames(self) -> Mapping[str, str]:
        return dict(self._peers)

    def connected_peer_ids(self) -> Sequence[str]:
        return list(self._peers)


class InMemoryPrivateChatManager:
    """Private chat sessions and the block list."""

    def __init__(
        self, store: MessageStore, directory: StaticDirectory, state: ChatState
    ) -> None:
        self._store = store
        self._state = state
        self._directory = directory
        self.sessions: Set[str] = set()
        self.blocked: Set[str] = set()

    def start(self, peer_id: str) -> bool:
        if peer_id in self.blocked:
            self._store.append(
                system_notice("cannot start chat with a blocked peer. /unblock them first.")
            )
            return False
        self.sessions.add(peer_id)
        self._state.select(PrivateChat(peer_id))
        return True

    def send(
        self,
        content: str,
        peer_id: str,
        recipient_nickname: str,
        my_nickname: Optional[str],
        my_peer_id: str,
        on_sent: PrivateSentCallback,
    ) -> None:
        message_id = str(uuid.uuid4())
        self.sessions.add(peer_id)
        on_sent(content, peer_id, recipient_nickname, message_id)

    def block_by_nickname(self, name: str) -> None:
        peer_id = resolve_peer_id(self._directory, name)
        if peer_id is None:
            self._store.append(system_notice(f"user '{name}' not found"))
            return
        self.blocked.add(peer_id)
        self.sessions.discard(peer_id)
        self._store.append(
            system_notice(f"blocked {name}. you will no longer receive messages from them.")
        )

    def unblock_by_nickname(self, name: str) -> None:
        peer_id = resolve_peer_id(self._directory, name)
        if peer_id is None or peer_id not in self.blocked:
            self._store.append(system_notice(f"user '{name}' is not blocked"))
            return
        self.blocked.remove(peer_id)
        self._store.append(system_notice(f"unblocked {name}"))

    def list_blocked(self) -> str:
        if not self.blocked:
            return "no blocked peers."
        names = sorted(self._directory.nickname_of(p) or p for p in self.blocked)
        return f"blocked peers: {', '.join(names)}"


class LoopbackTransport:
    """Transport that hands every outgoing frame to ``printer`` instead of the mesh."""

    def __init__(self, printer: Callable[[str, str], None]) -> None:
        self._printer = printer

    def send(self, content: str, mentions: List[str], channel: Optional[str]) -> None:
        logger.info(f"send channel={channel} mentions={mentions}")
        target = channel or "mesh"
        self._printer(f"→ [{target}] {content}", "green")

    def send_emergency(self, payload: EmergencyPayload) -> None:
        logger.warning(f"Emergency broadcast from {payload.sender}")
        self._printer(payload.to_text(), "bold red")

    def send_private(
        self, content: str, peer_id: str, recipient_nickname: str, message_id: str
    ) -> None:
        logger.info(f"send_private peer={peer_id} id={message_id}")
        self._printer(f"→ [@{recipient_nickname}] {content}", "magenta")


class ProcessLifecycle:
    """Host hooks for the terminal client: data directory erase, exit, battery level."""

    def __init__(self, data_dir: Path, power_supply_dir: Path = POWER_SUPPLY_DIR) -> None:
        self._data_dir = data_dir
        self._power_supply_dir = power_supply_dir

    def erase_all_local_state(self) -> None:
        logger.warning(f"Erasing {self._data_dir}")
        shutil.rmtree(self._data_dir, ignore_errors=True)

    def terminate_process(self) -> None:
        for handler in logging.getLogger("meshchat").handlers:
            handler.flush()
        os._exit(0)

    def read_battery_percent(self) -> int:
        for capacity in sorted(self._power_supply_dir.glob(BATTERY_GLOB)):
            return int(capacity.read_text().strip())
        return -1
