"""
Interfaces of the subsystems the command interpreter delegates to.
"""

from typing import Callable, List, Mapping, Optional, Protocol, Sequence

from meshchat.commands.messages import ChatMessage, EmergencyPayload

# (content, peer_id, recipient_nickname, message_id)
PrivateSentCallback = Callable[[str, str, str, str], None]

# (content, mentions, channel)
SendMessageCallback = Callable[[str, List[str], Optional[str]], None]


class MessageStore(Protocol):
    def append(self, message: ChatMessage) -> None: ...

    def clear(self) -> None: ...

    def clear_for(self, scope_id: str) -> None: ...


class ChannelManager(Protocol):
    def join(self, channel: str, password: Optional[str], caller_id: str) -> bool: ...

    def is_creator(self, channel: str, caller_id: str) -> bool: ...

    def set_password(self, channel: str, password: str) -> None: ...

    def list_joined(self) -> Sequence[str]: ...

    def append_message(
        self, channel: str, message: ChatMessage, sender_id: Optional[str]
    ) -> None: ...


class PrivateChatManager(Protocol):
    def start(self, peer_id: str) -> bool: ...

    def send(
        self,
        content: str,
        peer_id: str,
        recipient_nickname: str,
        my_nickname: Optional[str],
        my_peer_id: str,
        on_sent: PrivateSentCallback,
    ) -> None: ...

    def block_by_nickname(self, name: str) -> None: ...

    def unblock_by_nickname(self, name: str) -> None: ...

    def list_blocked(self) -> str: ...


class Directory(Protocol):
    def nickname_of(self, peer_id: str) -> Optional[str]: ...

    def peer_nicknames(self) -> Mapping[str, str]: ...

    def connected_peer_ids(self) -> Sequence[str]: ...


class Transport(Protocol):
    def send(self, content: str, mentions: List[str], channel: Optional[str]) -> None: ...

    def send_emergency(self, payload: EmergencyPayload) -> None: ...

    def send_private(
        self, content: str, peer_id: str, recipient_nickname: str, message_id: str
    ) -> None: ...


class HostLifecycle(Protocol):
    def erase_all_local_state(self) -> None: ...

    def terminate_process(self) -> None: ...

    def read_battery_percent(self) -> int: ...
