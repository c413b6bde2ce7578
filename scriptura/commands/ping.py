import discord
from discord import app_commands


def latency_message(latency: float) -> str:
    return f"Pong!\n-# {round(latency * 1000)}ms"


@app_commands.command(name="ping", description="Check the bot's latency")
@app_commands.allowed_contexts(guilds=True, dms=True, private_channels=True)
@app_commands.allowed_installs(guilds=True, users=True)
async def ping(interaction: discord.Interaction):
    await interaction.response.send_message(latency_message(interaction.client.latency))
