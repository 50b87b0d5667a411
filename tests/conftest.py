from typing import List
from unittest.mock import Mock

import pytest

from meshchat.commands.collaborators import (
    ChannelManager,
    HostLifecycle,
    MessageStore,
    PrivateChatManager,
    Transport,
)
from meshchat.commands.context import ChatState
from meshchat.commands.handlers import CallerContext
from meshchat.commands.processor import CommandProcessor
from meshchat.local import StaticDirectory

MY_PEER_ID = "ME01"


def notices(store: Mock) -> List[str]:
    """Contents of every message appended to a mocked store."""
    return [c.args[0].content for c in store.append.call_args_list]


@pytest.fixture
def state() -> ChatState:
    return ChatState(nickname="me")


@pytest.fixture
def directory() -> StaticDirectory:
    return StaticDirectory({"P1": "alice", "P2": "bob", "P3": "alina"})


@pytest.fixture
def messages() -> Mock:
    return Mock(spec=MessageStore)


@pytest.fixture
def channels() -> Mock:
    mock = Mock(spec=ChannelManager)
    mock.join.return_value = True
    mock.is_creator.return_value = True
    mock.list_joined.return_value = []
    return mock


@pytest.fixture
def private_chats() -> Mock:
    mock = Mock(spec=PrivateChatManager)
    mock.start.return_value = True
    mock.list_blocked.return_value = "no blocked peers."
    return mock


@pytest.fixture
def transport() -> Mock:
    return Mock(spec=Transport)


@pytest.fixture
def lifecycle() -> Mock:
    mock = Mock(spec=HostLifecycle)
    mock.read_battery_percent.return_value = 80
    return mock


@pytest.fixture
def caller(lifecycle: Mock) -> CallerContext:
    return CallerContext(
        my_peer_id=MY_PEER_ID, on_send_message=Mock(), lifecycle=lifecycle
    )


@pytest.fixture
def processor(
    state: ChatState,
    messages: Mock,
    channels: Mock,
    private_chats: Mock,
    directory: StaticDirectory,
    transport: Mock,
) -> CommandProcessor:
    return CommandProcessor(
        state=state,
        messages=messages,
        channels=channels,
        private_chats=private_chats,
        directory=directory,
        transport=transport,
    )
