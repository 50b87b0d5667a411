import asyncio
import logging
import secrets
from pathlib import Path
from typing import Callable, List, Optional

import typer
from typing_extensions import Annotated

from meshchat.console.console import ConsoleInterface, HeadlessConsole, ReplConsole
from meshchat.console.rendering import print_styled, render_message
from meshchat.logger import setup_logging
from meshchat.runtime_config import (
    NICKNAME_ENV,
    PEER_ID_ENV,
    NodeRole,
    RuntimeConfig,
    get_data_dir,
    load_envs,
    parse_peers,
)
from meshchat.session import ChatSession

# Global factory function - set by create_app()
_console_factory: Optional[Callable[[RuntimeConfig, List[str]], ConsoleInterface]] = (
    None
)


def default_console_factory(
    config: RuntimeConfig, commands: List[str]
) -> ConsoleInterface:
    """Default factory for creating Console instances."""
    session = ChatSession.create(config, print_styled, render_message)
    if commands:
        return HeadlessConsole(session, commands)
    else:
        return ReplConsole(session)


def main(
    nickname: Annotated[
        Optional[str],
        typer.Option("--nickname", "-n", envvar=NICKNAME_ENV, help="Your nickname"),
    ] = None,
    peer_id: Annotated[
        Optional[str],
        typer.Option(envvar=PEER_ID_ENV, help="Your peer ID (random if omitted)"),
    ] = None,
    peer: Annotated[
        Optional[List[str]],
        typer.Option(
            "--peer",
            help="Known peer as <peer_id>=<nickname>; repeat for several peers",
        ),
    ] = None,
    role: Annotated[
        NodeRole, typer.Option("--role", help="Node role: civilian or guardian")
    ] = NodeRole.civilian,
    data_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--data-dir",
            help="Directory for history, logs and local state (wiped by /wipe)",
        ),
    ] = None,
    geohash: Annotated[
        Optional[str],
        typer.Option("--geohash", help="Open this location channel instead of the mesh feed"),
    ] = None,
    command: Annotated[
        Optional[List[str]],
        typer.Option(
            "--command",
            "-c",
            help="Run the given input line(s) and exit instead of starting the REPL",
        ),
    ] = None,
) -> None:
    """MESHCHAT - peer-to-peer chat client"""
    logger = logging.getLogger(__name__)
    try:
        peers = parse_peers(peer)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    cfg = RuntimeConfig(
        peer_id=peer_id or secrets.token_hex(8),
        nickname=nickname,
        role=role,
        peers=peers,
        data_dir=data_dir or get_data_dir(),
        geohash=geohash,
    )
    # Logs live under the data directory so /wipe removes them too
    setup_logging(cfg.data_dir)
    logger.info(f"Starting meshchat as {cfg.nickname or 'anonymous'} ({cfg.peer_id})")

    try:
        factory = _console_factory or default_console_factory
        console = factory(cfg, command or [])
        asyncio.run(console.run())
    except KeyboardInterrupt:
        print("\nExiting...")


def create_app(
    console_factory: Optional[
        Callable[[RuntimeConfig, List[str]], ConsoleInterface]
    ] = None,
) -> typer.Typer:
    """
    Create and configure the Typer application.

    Args:
        console_factory: Factory function to create Console instances

    Returns:
        Typer application
    """
    # Load identity and logging settings from .env if not already set in the environment
    load_envs()

    global _console_factory
    _console_factory = console_factory

    app = typer.Typer(rich_markup_mode=None)
    app.command()(main)

    return app


def run() -> None:
    create_app()()


if __name__ == "__main__":
    run()
