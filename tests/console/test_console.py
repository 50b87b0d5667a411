from pathlib import Path
from typing import Any

import pytest
from rich.console import Console

import meshchat.console.console as console_module
import meshchat.console.rendering as rendering
import meshchat.console.repl_console as repl_module
from meshchat.commands.messages import ChatMessage, system_notice
from meshchat.console.rendering import print_styled, render_message
from meshchat.runtime_config import RuntimeConfig
from meshchat.session import ChatSession


class DummyPromptSession:
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self.inputs = ["", "/j ops", "hello [ops]", "/QUIT", "never reached"]

    async def prompt_async(self) -> str:
        return self.inputs.pop(0)


@pytest.fixture(autouse=True)
def recorder(monkeypatch: pytest.MonkeyPatch) -> Console:
    recorder = Console(record=True, width=100)
    monkeypatch.setattr(rendering, "console", recorder)
    monkeypatch.setattr(console_module, "console", recorder)
    monkeypatch.setattr(repl_module, "console", recorder)
    monkeypatch.setattr(repl_module, "PromptSession", DummyPromptSession)
    return recorder


@pytest.fixture
def session(tmp_path: Path) -> ChatSession:
    config = RuntimeConfig(
        peer_id="ME01",
        nickname="me",
        peers={"P1": "alice"},
        data_dir=tmp_path / "data",
    )
    return ChatSession.create(config, print_styled, render_message)


def test_render_system_notice_and_chat_line(recorder: Console) -> None:
    render_message(system_notice("joined channel #ops"))
    render_message(ChatMessage(sender="alice", content="[b]hi[/b]", channel="#ops"))
    output = recorder.export_text()
    assert "* joined channel #ops" in output
    assert "#ops <alice> [b]hi[/b]" in output


@pytest.mark.asyncio
async def test_headless_console_runs_each_line(
    recorder: Console, session: ChatSession
) -> None:
    console = console_module.HeadlessConsole(session, ["/msg alice hi", "/w"])
    await console.run()

    output = recorder.export_text()
    assert "› /msg alice hi" in output
    assert "→ [@alice] hi" in output
    assert "online users: alice" in output


@pytest.mark.asyncio
async def test_headless_console_requires_lines(session: ChatSession) -> None:
    with pytest.raises(ValueError):
        await console_module.HeadlessConsole(session, []).run()


@pytest.mark.asyncio
async def test_repl_console_prints_header_and_exits_on_quit(
    recorder: Console, session: ChatSession
) -> None:
    console = console_module.ReplConsole(session)
    await console.run()

    output = recorder.export_text()
    assert "MESHCHAT" in output
    assert "ME01" in output
    assert "joined channel #ops" in output
    assert "→ [#ops] hello [ops]" in output
    assert session.config.data_dir.is_dir()


def test_prompt_shows_active_scope(session: ChatSession) -> None:
    console = console_module.ReplConsole(session)
    assert "mesh ›" in "".join(text for _, text in console.prompt_fragments())
    session.submit("/msg alice")
    assert "@alice ›" in "".join(text for _, text in console.prompt_fragments())
