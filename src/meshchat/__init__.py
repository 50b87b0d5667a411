"""
meshchat: slash-command interpreter for a peer-to-peer mesh chat client.
"""

from meshchat.commands import CommandProcessor, SuggestionEngine

__all__ = ["CommandProcessor", "SuggestionEngine"]
