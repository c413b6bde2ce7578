"""
Slash commands for Scriptura.

- /verse search, /verse daily
- /preferences set, /preferences view, /preferences reset
- /ping
"""

from discord import app_commands

from .ping import ping
from .preferences import PreferencesCommands
from .verse import VerseCommands


def register_commands(tree: app_commands.CommandTree, bot) -> None:
    """Attach every command group to the tree. Call once per tree."""
    tree.add_command(VerseCommands(bot))
    tree.add_command(PreferencesCommands(bot))
    tree.add_command(ping)


__all__ = ["register_commands", "VerseCommands", "PreferencesCommands", "ping"]
