"""
Wires the command interpreter to the in-process collaborators.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from meshchat.commands.context import ChatState, LocationChannel
from meshchat.commands.handlers import CallerContext
from meshchat.commands.processor import CommandProcessor
from meshchat.local import (
    InMemoryChannelManager,
    InMemoryMessageStore,
    InMemoryPrivateChatManager,
    LoopbackTransport,
    MessageListener,
    ProcessLifecycle,
    StaticDirectory,
)
from meshchat.runtime_config import NodeRole, RuntimeConfig


def geohash_roster(
    my_peer_id: str, nickname: Optional[str], peers: Dict[str, str]
) -> List[str]:
    """
    Participant display names for a location channel, as ``nickname#abcd``.

    The suffix is the last four characters of the peer ID. The local user is
    listed too when a nickname is set.
    """
    members = dict(peers)
    if nickname:
        members[my_peer_id] = nickname
    return [f"{nick}#{peer_id[-4:]}" for peer_id, nick in members.items()]


@dataclass
class ChatSession:
    """Everything one local chat client needs to interpret and send input."""

    config: RuntimeConfig
    state: ChatState
    messages: InMemoryMessageStore
    processor: CommandProcessor
    caller: CallerContext

    @classmethod
    def create(
        cls,
        config: RuntimeConfig,
        printer: Callable[[str, str], None],
        listener: MessageListener,
    ) -> "ChatSession":
        state = ChatState(
            nickname=config.nickname,
            guardian_mode=config.role == NodeRole.guardian,
        )
        if config.geohash:
            state.select(LocationChannel(config.geohash))
            state.geohash_people = geohash_roster(
                config.peer_id, config.nickname, config.peers
            )
        messages = InMemoryMessageStore(listener)
        directory = StaticDirectory(config.peers)
        transport = LoopbackTransport(printer)
        processor = CommandProcessor(
            state=state,
            messages=messages,
            channels=InMemoryChannelManager(messages, state),
            private_chats=InMemoryPrivateChatManager(messages, directory, state),
            directory=directory,
            transport=transport,
        )
        caller = CallerContext(
            my_peer_id=config.peer_id,
            on_send_message=transport.send,
            lifecycle=ProcessLifecycle(config.data_dir),
        )
        return cls(config, state, messages, processor, caller)

    def submit(self, text: str) -> None:
        """Interpret one line of input as a command, or send it as chat."""
        if not self.processor.process_command(text, self.caller):
            self.processor.send_message(text, self.caller)
