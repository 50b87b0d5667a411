"""
Static table of recognized slash commands.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class CommandDefinition:
    """Definition of a slash command: name, aliases, argument hint and description."""

    name: str
    description: str
    argument_hint: Optional[str] = None
    aliases: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def usage(self) -> str:
        if self.argument_hint:
            return f"usage: {self.name} {self.argument_hint}"
        return f"usage: {self.name}"


COMMANDS: Tuple[CommandDefinition, ...] = (
    CommandDefinition("/block", "block or list blocked peers", "[nickname]"),
    CommandDefinition("/channels", "show all discovered channels"),
    CommandDefinition("/clear", "clear chat messages"),
    CommandDefinition("/hug", "send someone a warm hug", "<nickname>"),
    CommandDefinition(
        "/join", "join or create a channel", "<channel> [password]", ("/j",)
    ),
    CommandDefinition(
        "/msg", "send private message", "<nickname> [message]", ("/m",)
    ),
    CommandDefinition("/pass", "set the current channel's password", "<password>"),
    CommandDefinition("/slap", "slap someone with a trout", "<nickname>"),
    CommandDefinition("/unblock", "unblock a peer", "<nickname>"),
    CommandDefinition("/w", "see who's online"),
    CommandDefinition(
        "/role", "set your node role", "<guardian|civilian>", ("/r",)
    ),
    CommandDefinition(
        "/sos", "send EMERGENCY priority signal", "<flood|food|medical|fire|rubble>"
    ),
    CommandDefinition("/wipe", "IMMEDIATELY WIPE ALL DATA"),
)


def alias_map(
    commands: Tuple[CommandDefinition, ...] = COMMANDS,
) -> Dict[str, str]:
    """Map every lower-cased name and alias to its canonical command name."""
    mapping: Dict[str, str] = {}
    for cmd in commands:
        for key in (cmd.name, *cmd.aliases):
            key = key.lower()
            if key in mapping:
                raise ValueError(f"Duplicate command name or alias: {key}")
            mapping[key] = cmd.name
    return mapping


def find_command(
    verb: str, commands: Tuple[CommandDefinition, ...] = COMMANDS
) -> Optional[CommandDefinition]:
    """Look up a command by primary name first, then by alias (case-insensitive)."""
    verb = verb.lower()
    for cmd in commands:
        if cmd.name.lower() == verb:
            return cmd
    for cmd in commands:
        if verb in (alias.lower() for alias in cmd.aliases):
            return cmd
    return None
