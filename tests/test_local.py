from pathlib import Path
from unittest.mock import Mock

import pytest

import meshchat.local as local_module
from meshchat.commands.context import Channel, ChatState, PrivateChat, PublicFeed
from meshchat.commands.messages import EmergencyPayload, system_notice
from meshchat.local import (
    InMemoryChannelManager,
    InMemoryMessageStore,
    InMemoryPrivateChatManager,
    LoopbackTransport,
    ProcessLifecycle,
    StaticDirectory,
)


@pytest.fixture
def store() -> InMemoryMessageStore:
    return InMemoryMessageStore()


@pytest.fixture
def local_directory() -> StaticDirectory:
    return StaticDirectory({"P1": "alice", "P2": "bob"})


def test_store_notifies_listener_and_clears() -> None:
    listener = Mock()
    store = InMemoryMessageStore(listener)
    notice = system_notice("hi")
    store.append(notice)
    store.append_to("#ops", notice)
    assert listener.call_count == 2

    store.clear_for("#ops")
    assert "#ops" not in store.scoped
    store.clear()
    assert store.feed == []


def test_channel_creator_and_password(store: InMemoryMessageStore) -> None:
    state = ChatState()
    channels = InMemoryChannelManager(store, state)

    assert channels.join("#ops", None, "ME") is True
    assert state.context == Channel("#ops")
    assert channels.is_creator("#ops", "ME")
    assert not channels.is_creator("#ops", "OTHER")

    channels.set_password("#ops", "pw")
    state.select(PublicFeed())
    assert channels.join("#ops", "wrong", "OTHER") is False
    assert state.context == PublicFeed()
    assert channels.join("#ops", "pw", "OTHER") is True
    assert channels.list_joined() == ["#ops"]


def test_private_chat_block_and_unblock(
    store: InMemoryMessageStore, local_directory: StaticDirectory
) -> None:
    state = ChatState()
    chats = InMemoryPrivateChatManager(store, local_directory, state)

    chats.block_by_nickname("bob")
    assert chats.list_blocked() == "blocked peers: bob"
    assert chats.start("P2") is False

    chats.unblock_by_nickname("bob")
    assert chats.list_blocked() == "no blocked peers."
    assert chats.start("P2") is True
    assert state.context == PrivateChat("P2")


def test_private_chat_block_unknown_nickname(
    store: InMemoryMessageStore, local_directory: StaticDirectory
) -> None:
    chats = InMemoryPrivateChatManager(store, local_directory, ChatState())
    chats.block_by_nickname("ghost")
    assert store.feed[-1].content == "user 'ghost' not found"
    assert chats.blocked == set()


def test_private_send_hands_off_with_message_id(
    store: InMemoryMessageStore, local_directory: StaticDirectory
) -> None:
    chats = InMemoryPrivateChatManager(store, local_directory, ChatState())
    on_sent = Mock()
    chats.send("hi", "P1", "alice", "me", "ME", on_sent)
    content, peer_id, nickname, message_id = on_sent.call_args.args
    assert (content, peer_id, nickname) == ("hi", "P1", "alice")
    assert message_id


def test_loopback_transport_prints_frames() -> None:
    printer = Mock()
    transport = LoopbackTransport(printer)
    transport.send("hello", [], "#ops")
    transport.send_private("psst", "P1", "alice", "m1")
    transport.send_emergency(EmergencyPayload("me", "help", "here"))
    lines = [c.args[0] for c in printer.call_args_list]
    assert lines[0] == "→ [#ops] hello"
    assert lines[1] == "→ [@alice] psst"
    assert lines[2].startswith("🚨 **SOS ALERT** 🚨")


def test_lifecycle_reads_battery_capacity(tmp_path: Path) -> None:
    battery = tmp_path / "BAT0"
    battery.mkdir()
    (battery / "capacity").write_text("57\n")
    lifecycle = ProcessLifecycle(tmp_path / "data", power_supply_dir=tmp_path)
    assert lifecycle.read_battery_percent() == 57


def test_lifecycle_without_battery(tmp_path: Path) -> None:
    lifecycle = ProcessLifecycle(tmp_path / "data", power_supply_dir=tmp_path)
    assert lifecycle.read_battery_percent() == -1


def test_lifecycle_erases_data_dir(tmp_path: Path) -> None:
    data_dir = tmp_path / "data"
    (data_dir / "nested").mkdir(parents=True)
    (data_dir / "nested" / "history").write_text("x")
    ProcessLifecycle(data_dir, power_supply_dir=tmp_path).erase_all_local_state()
    assert not data_dir.exists()


def test_lifecycle_terminate_exits(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    exit_mock = Mock()
    monkeypatch.setattr(local_module.os, "_exit", exit_mock)
    ProcessLifecycle(tmp_path).terminate_process()
    exit_mock.assert_called_once_with(0)
