import logging
from typing import Literal, Optional
import discord
from discord.ext import commands
from discord import app_commands, Interaction
from utils.embeds import success_embed

ACTIVITY_TYPES = {
    "playing": discord.ActivityType.playing,
    "watching": discord.ActivityType.watching,
    "listening": discord.ActivityType.listening,
    "competing": discord.ActivityType.competing,
}


def is_admin(config: dict, user_id: int) -> bool:
    return user_id in (config.get("permissions") or {}).get("admin_ids", [])


def build_activity(kind: str, text: str) -> discord.BaseActivity:
    if kind == "custom":
        return discord.CustomActivity(name=text[:128])
    return discord.Activity(type=ACTIVITY_TYPES[kind], name=text[:128])


class General(commands.Cog):
    """Cog for ping, say and presence."""
    def __init__(self, bot):
        self.bot = bot

    @app_commands.command(name="ping", description="Check that the bot is alive")
    async def ping_command(self, interaction: Interaction) -> None:
        latency_ms = round(self.bot.latency * 1000)
        await interaction.response.send_message(f"Pong! Gateway latency is {latency_ms}ms.", ephemeral=True)

    @app_commands.command(name="say", description="Admin: Make the bot say something")
    @app_commands.describe(message="What to say", channel="Where to say it (default: this channel)")
    @app_commands.guild_only()
    async def say_command(
        self, interaction: Interaction, message: str, channel: Optional[discord.TextChannel] = None
    ) -> None:
        if not is_admin(self.bot.config, interaction.user.id):
            await interaction.response.send_message("You don't have permission to use this command.", ephemeral=True)
            return
        target = channel or interaction.channel
        await target.send(message, allowed_mentions=discord.AllowedMentions.none())
        logging.info(f"Said {message[:50]!r} in channel {target.id} (by user {interaction.user.id})")
        await interaction.response.send_message(f"Sent to {target.mention}.", ephemeral=True)

    @app_commands.command(name="presence", description="Admin: Change the bot's status")
    @app_commands.describe(kind="Type of activity", text="Activity text")
    async def presence_command(
        self,
        interaction: Interaction,
        kind: Literal["playing", "watching", "listening", "competing", "custom"],
        text: str,
    ) -> None:
        if not is_admin(self.bot.config, interaction.user.id):
            await interaction.response.send_message("You don't have permission to use this command.", ephemeral=True)
            return
        await self.bot.change_presence(activity=build_activity(kind, text))
        logging.info(f"Presence changed to {kind} {text!r} (by user {interaction.user.id})")
        await interaction.response.send_message(
            embed=success_embed("Presence updated", f"Now **{kind}** {text}"), ephemeral=True
        )


async def setup(bot):
    await bot.add_cog(General(bot))
