# scriptura/commands/preferences.py
"""
/preferences set, view and reset.

All replies are ephemeral; preferences are private to the user.
"""

import asyncio
import logging
import sqlite3
from typing import Optional

import discord
from discord import app_commands

from scriptura.services.presenter import build_preferences_summary
from scriptura.services.references import is_valid_translation, resolve_translation
from scriptura.utils.errors import ScripturaError

from .common import (
    ALLOWED_CONTEXTS,
    ALLOWED_INSTALLS,
    TOGGLE_OPTION_CHOICES,
    TRANSLATION_OPTION_CHOICES,
)

logger = logging.getLogger(__name__)

NOTHING_TO_UPDATE = "Choose at least one preference to update."
INVALID_TRANSLATION = "Unsupported translation selected. Please choose a valid option."
SAVE_FAILED = "There was an error saving your preferences. Please try again later."
LOAD_FAILED = "There was an error loading your preferences. Please try again later."
RESET_FAILED = "There was an error resetting your preferences. Please try again later."

STORE_ERRORS = (sqlite3.Error, ScripturaError)


def _choice_value(choice: Optional[app_commands.Choice[str]]) -> Optional[str]:
    return choice.value if choice else None


class PreferencesCommands(app_commands.Group):
    """Manage your Bible bot preferences."""

    def __init__(self, bot):
        super().__init__(
            name="preferences",
            description="Manage your Bible bot preferences",
            allowed_contexts=ALLOWED_CONTEXTS,
            allowed_installs=ALLOWED_INSTALLS,
        )
        self.bot = bot

    @app_commands.command(name="set", description="Update your preferred translation and verse display")
    @app_commands.describe(
        translation="Preferred Bible translation",
        footnotes="Show footnotes",
        headings="Show section headings",
        verse_numbers="Show verse numbers",
        line_by_line="Show one verse per line",
    )
    @app_commands.choices(
        translation=TRANSLATION_OPTION_CHOICES,
        headings=TOGGLE_OPTION_CHOICES,
        line_by_line=TOGGLE_OPTION_CHOICES,
    )
    async def set(
        self,
        interaction: discord.Interaction,
        translation: Optional[app_commands.Choice[str]] = None,
        footnotes: Optional[bool] = None,
        headings: Optional[app_commands.Choice[str]] = None,
        verse_numbers: Optional[bool] = None,
        line_by_line: Optional[app_commands.Choice[str]] = None,
    ):
        requested = _choice_value(translation)
        updates = {
            "footnotes": footnotes,
            "headings": _choice_value(headings),
            "verse_numbers": verse_numbers,
            "line_by_line": _choice_value(line_by_line),
        }
        updates = {key: value for key, value in updates.items() if value is not None}

        if requested is None and not updates:
            await interaction.response.send_message(NOTHING_TO_UPDATE, ephemeral=True)
            return

        if requested is not None and not is_valid_translation(requested):
            await interaction.response.send_message(INVALID_TRANSLATION, ephemeral=True)
            return

        user_id = str(interaction.user.id)
        store = self.bot.store

        try:
            if requested is not None:
                await asyncio.to_thread(store.set_preferred_translation, user_id, requested)
            if updates:
                display = await asyncio.to_thread(store.set_display_preferences, user_id, updates)
            else:
                display = await asyncio.to_thread(store.get_display_preferences, user_id)
            preferred = await asyncio.to_thread(store.get_preferred_translation, user_id)
        except STORE_ERRORS:
            logger.exception(f"Failed to save preferences for user {user_id}")
            await interaction.response.send_message(SAVE_FAILED, ephemeral=True)
            return

        summary = build_preferences_summary(
            "Your preferences have been updated:",
            resolve_translation(None, preferred),
            display,
        )
        await interaction.response.send_message(summary, ephemeral=True)

    @app_commands.command(name="view", description="View your current preferences")
    async def view(self, interaction: discord.Interaction):
        user_id = str(interaction.user.id)
        store = self.bot.store

        try:
            preferred = await asyncio.to_thread(store.get_preferred_translation, user_id)
            display = await asyncio.to_thread(store.get_display_preferences, user_id)
        except STORE_ERRORS:
            logger.exception(f"Failed to load preferences for user {user_id}")
            await interaction.response.send_message(LOAD_FAILED, ephemeral=True)
            return

        summary = build_preferences_summary(
            "Your current preferences:",
            resolve_translation(None, preferred),
            display,
        )
        await interaction.response.send_message(summary, ephemeral=True)

    @app_commands.command(name="reset", description="Reset verse display preferences to defaults")
    async def reset(self, interaction: discord.Interaction):
        user_id = str(interaction.user.id)
        store = self.bot.store

        try:
            display = await asyncio.to_thread(store.reset_display_preferences, user_id)
            preferred = await asyncio.to_thread(store.get_preferred_translation, user_id)
        except STORE_ERRORS:
            logger.exception(f"Failed to reset preferences for user {user_id}")
            await interaction.response.send_message(RESET_FAILED, ephemeral=True)
            return

        summary = build_preferences_summary(
            "Your preferences have been reset:",
            resolve_translation(None, preferred),
            display,
        )
        await interaction.response.send_message(summary, ephemeral=True)
