# scriptura/bot.py
"""
Discord client and process entry point.

The bot owns the long-lived services (backend clients, resolver,
preference store, daily verse table) and hands itself to the command
groups so they can reach them.
"""

import asyncio
import datetime
import logging

import discord
from discord import app_commands
from discord.ext import tasks

from scriptura.commands import register_commands
from scriptura.core import config
from scriptura.services.preferences_service import PreferenceStore
from scriptura.services.presenter import GENERIC_ERROR, daily_status_text
from scriptura.services.references import (
    ApiBibleClient,
    DailyVerseTable,
    EsvClient,
    QueryResolver,
    daily_reference,
)
from scriptura.utils.errors import ConfigurationError

logger = logging.getLogger(__name__)

UTC_MIDNIGHT = datetime.time(hour=0, minute=0, tzinfo=datetime.timezone.utc)


class ScripturaBot(discord.Client):
    def __init__(
        self,
        resolver: QueryResolver,
        store: PreferenceStore,
        daily_verses: DailyVerseTable,
        pagination_timeout: float = config.PAGINATION_TIMEOUT_SECONDS,
    ):
        super().__init__(intents=discord.Intents.default())
        self.tree = app_commands.CommandTree(self)
        self.tree.on_error = self.on_app_command_error
        self.resolver = resolver
        self.store = store
        self.daily_verses = daily_verses
        self.pagination_timeout = pagination_timeout

    async def setup_hook(self):
        await asyncio.to_thread(self.store.init)
        register_commands(self.tree, self)
        self.refresh_daily_status.start()

    async def on_ready(self):
        logger.info(f"Ready! Logged in as {self.user} ({len(self.guilds)} guilds)")
        await self.update_presence()

    async def update_presence(self):
        reference = daily_reference(self.daily_verses)
        await self.change_presence(
            activity=discord.Activity(type=discord.ActivityType.watching, name=daily_status_text(reference))
        )
        logger.info(f"Presence set to daily verse {reference}")

    @tasks.loop(time=UTC_MIDNIGHT)
    async def refresh_daily_status(self):
        await self.update_presence()

    @refresh_daily_status.before_loop
    async def _wait_until_ready(self):
        await self.wait_until_ready()

    async def on_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        command = interaction.command.qualified_name if interaction.command else "unknown"
        logger.error(f"Error executing /{command}", exc_info=error)

        try:
            if interaction.response.is_done():
                await interaction.followup.send(GENERIC_ERROR, ephemeral=True)
            else:
                await interaction.response.send_message(GENERIC_ERROR, ephemeral=True)
        except discord.HTTPException as e:
            logger.warning(f"Could not report command error to user: {e}")

    async def close(self):
        self.refresh_daily_status.cancel()
        try:
            await super().close()
        finally:
            self.store.close()
            logger.info("Preference store closed")


def build_services():
    """
    Construct the resolver, store and daily table from config.

    Raises:
        ConfigurationError: ESV_API_KEY is missing
    """
    esv = EsvClient(config.ESV_API_KEY, base_url=config.ESV_BASE_URL, timeout=config.REQUEST_TIMEOUT_SECONDS)
    api_bible = ApiBibleClient(
        config.API_BIBLE_KEY,
        base_url=config.API_BIBLE_BASE_URL,
        timeout=config.REQUEST_TIMEOUT_SECONDS,
    )
    if not api_bible.is_configured:
        logger.warning("API_BIBLE_KEY is not set; non-ESV translations will fail")

    resolver = QueryResolver(esv, api_bible)
    store = PreferenceStore(config.PREFERENCES_DB)
    daily_verses = DailyVerseTable.load(config.DAILY_VERSES_FILE)
    return resolver, store, daily_verses


def main():
    config.configure_logging()

    if not config.DISCORD_TOKEN:
        raise ConfigurationError("DISCORD_TOKEN is not defined in the environment variables.")

    resolver, store, daily_verses = build_services()

    if config.STATUS_PORT:
        from scriptura.server import create_app, run_in_background

        app = create_app(resolver, store, daily_verses)
        run_in_background(app, config.STATUS_HOST, config.STATUS_PORT)

    bot = ScripturaBot(resolver, store, daily_verses)
    bot.run(config.DISCORD_TOKEN, log_handler=None)


if __name__ == "__main__":
    main()
