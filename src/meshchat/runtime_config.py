"""
Runtime configuration for the meshchat client.

This module provides:
- load_envs(): load MESHCHAT_NICKNAME, MESHCHAT_PEER_ID and MESHCHAT_LOG_LEVEL from a .env file
  if they are not already present in the environment.
- RuntimeConfig: a dataclass holding runtime settings (identity, known peers, role, data directory,
  startup location channel).
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

# Environment variable names
NICKNAME_ENV: str = "MESHCHAT_NICKNAME"
PEER_ID_ENV: str = "MESHCHAT_PEER_ID"
LOG_LEVEL_ENV: str = "MESHCHAT_LOG_LEVEL"


def load_envs(env_file: Optional[str] = None) -> None:
    """
    Load MESHCHAT_NICKNAME, MESHCHAT_PEER_ID and MESHCHAT_LOG_LEVEL from a .env file
    into the process environment if they are not already set.
    """
    env_values = dotenv_values(env_file) if env_file else dotenv_values()
    for key in (NICKNAME_ENV, PEER_ID_ENV, LOG_LEVEL_ENV):
        if not os.environ.get(key):
            val = env_values.get(key)
            if val:
                os.environ[key] = str(val)


class NodeRole(str, Enum):
    """Role this node plays on the mesh."""

    civilian = "civilian"
    guardian = "guardian"


def get_data_dir() -> Path:
    """
    Return the meshchat data directory under XDG_DATA_HOME or fallback to ~/.local/share.
    """
    data_home = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return data_home / "meshchat"


def parse_peers(entries: Optional[list[str]]) -> Dict[str, str]:
    """Parse ``peer_id=nickname`` entries into a mapping."""
    peers: Dict[str, str] = {}
    for entry in entries or []:
        peer_id, sep, nickname = entry.partition("=")
        if not sep or not peer_id or not nickname:
            raise ValueError(f"Invalid peer entry '{entry}', expected <peer_id>=<nickname>")
        peers[peer_id] = nickname
    return peers


@dataclass(frozen=True)
class RuntimeConfig:
    """
    Holds runtime configuration for the meshchat client.

    Attributes:
        peer_id: This node's peer identifier.
        nickname: The user's nickname (if set).
        role: Initial node role.
        peers: Known peers as peer_id -> nickname; all are treated as connected.
        data_dir: Where history, logs and local state live.
        geohash: Location channel to open at startup, if any.
    """

    peer_id: str
    nickname: Optional[str] = None
    role: NodeRole = NodeRole.civilian
    peers: Dict[str, str] = field(default_factory=dict)
    data_dir: Path = field(default_factory=get_data_dir)
    geohash: Optional[str] = None
