# scriptura/deploy_commands.py
"""
Register slash commands with Discord.

With DISCORD_GUILD_ID set, commands are synced to that guild only and
show up immediately; otherwise they are synced globally.

Usage:
    scriptura-deploy
    python -m scriptura.deploy_commands
"""

import asyncio
import logging

import discord

from scriptura.bot import ScripturaBot
from scriptura.commands import register_commands
from scriptura.core import config
from scriptura.utils.errors import ConfigurationError

logger = logging.getLogger(__name__)


class _DeployBot(ScripturaBot):
    """Registers and syncs the tree, then leaves without connecting the gateway."""

    async def setup_hook(self):
        register_commands(self.tree, self)

    async def close(self):
        await discord.Client.close(self)


async def deploy() -> int:
    if not config.DISCORD_TOKEN:
        raise ConfigurationError("DISCORD_TOKEN is not defined in the environment variables.")

    # Command registration never touches the backends or the store
    bot = _DeployBot(resolver=None, store=None, daily_verses=None)

    async with bot:
        await bot.login(config.DISCORD_TOKEN)

        if config.DISCORD_GUILD_ID:
            guild = discord.Object(id=int(config.DISCORD_GUILD_ID))
            bot.tree.copy_global_to(guild=guild)
            logger.info(f"Started refreshing application commands for guild {config.DISCORD_GUILD_ID}.")
            synced = await bot.tree.sync(guild=guild)
        else:
            logger.info("Started refreshing global application commands.")
            synced = await bot.tree.sync()

    application_id = config.DISCORD_CLIENT_ID or bot.application_id
    logger.info(f"Successfully reloaded {len(synced)} application commands for application {application_id}.")
    return len(synced)


def main():
    config.configure_logging()
    asyncio.run(deploy())


if __name__ == "__main__":
    main()
