import logging
import discord
from discord.ext import commands
from discord import app_commands, Interaction
from handlers.fren import fren_request_view, fren_role


class Fren(commands.Cog):
    """Cog for fren registration. Answers to requests arrive as button interactions."""
    fren = app_commands.Group(name="fren", description="Fren registration", guild_only=True)

    def __init__(self, bot):
        self.bot = bot

    @fren.command(name="add", description="Vouch for a member to become a fren")
    @app_commands.describe(user="The member to vouch for")
    async def fren_add(self, interaction: Interaction, user: discord.Member) -> None:
        role = fren_role(interaction.guild, self.bot.config)
        if role is None:
            await interaction.response.send_message("This server has no fren role.", ephemeral=True)
            return
        if role not in interaction.user.roles:
            await interaction.response.send_message("Only frens can vouch for new frens.", ephemeral=True)
            return
        if user.bot:
            await interaction.response.send_message("Bots can't be frens.", ephemeral=True)
            return
        if role in user.roles:
            await interaction.response.send_message(f"{user.display_name} is already a fren.", ephemeral=True)
            return

        await interaction.response.send_message(
            f"{user.mention}, {interaction.user.mention} wants to vouch for you as a fren!",
            view=fren_request_view(interaction.user.id, user.id),
            allowed_mentions=discord.AllowedMentions(users=[user]),
        )
        logging.info(f"Fren request from {interaction.user.id} to {user.id} in guild {interaction.guild.id}")


async def setup(bot):
    await bot.add_cog(Fren(bot))
