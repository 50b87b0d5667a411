from typing import Optional

from meshchat.commands.collaborators import Directory


def resolve_peer_id(directory: Directory, nickname: str) -> Optional[str]:
    """Return the first peer whose nickname equals ``nickname`` exactly."""
    for peer_id, name in directory.peer_nicknames().items():
        if name == nickname:
            return peer_id
    return None


def display_name(directory: Directory, peer_id: str) -> str:
    """Return the peer's nickname, or the raw peer id when it is unknown."""
    name = directory.nickname_of(peer_id)
    return name if name is not None else peer_id


def strip_mention(name: str) -> str:
    return name[1:] if name.startswith("@") else name
