"""
Console subpackage: holds the REPL loop, rendering and prompt completion.
"""

from meshchat.console.console import ConsoleInterface, HeadlessConsole, ReplConsole

__all__ = ["ConsoleInterface", "HeadlessConsole", "ReplConsole"]
