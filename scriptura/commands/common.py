# scriptura/commands/common.py
"""
Helpers shared by the slash commands: embeds, choices, error replies.
"""

import logging

import discord
from discord import app_commands

from scriptura.services.presenter import (
    PassageRecord,
    SearchPageRecord,
    build_error_message,
)
from scriptura.services.references import TRANSLATION_CHOICES

logger = logging.getLogger(__name__)

TITLE_LIMIT = 256

TRANSLATION_OPTION_CHOICES = [
    app_commands.Choice(name=label, value=code) for label, code in TRANSLATION_CHOICES
]

TOGGLE_OPTION_CHOICES = [
    app_commands.Choice(name="Auto", value="auto"),
    app_commands.Choice(name="On", value="on"),
    app_commands.Choice(name="Off", value="off"),
]

# Usable from servers, DMs and group DMs, for both guild and user installs
ALLOWED_CONTEXTS = app_commands.AppCommandContext(guild=True, dm_channel=True, private_channel=True)
ALLOWED_INSTALLS = app_commands.AppInstallationType(guild=True, user=True)


def passage_embed(record: PassageRecord) -> discord.Embed:
    embed = discord.Embed(
        title=record.title[:TITLE_LIMIT],
        description=record.description,
        url=record.url,
        color=record.color,
        timestamp=discord.utils.utcnow(),
    )
    embed.set_footer(text=record.footer)
    return embed


def search_embed(record: SearchPageRecord) -> discord.Embed:
    embed = discord.Embed(
        title=record.title[:TITLE_LIMIT],
        description=record.description,
        color=record.color,
    )
    for name, value in record.fields:
        embed.add_field(name=name[:TITLE_LIMIT], value=value, inline=False)
    embed.set_footer(text=record.footer)
    return embed


async def send_error(interaction: discord.Interaction, content: str, **details):
    """
    Reply with a notice only the requester can see.

    If the response was already deferred publicly, the placeholder is
    removed so the notice does not show up in the channel.
    """
    message = build_error_message(content, **details)

    if not interaction.response.is_done():
        await interaction.response.send_message(message, ephemeral=True)
        return

    try:
        await interaction.delete_original_response()
    except discord.HTTPException as e:
        logger.debug(f"Could not delete deferred response: {e}")
    await interaction.followup.send(message, ephemeral=True)
