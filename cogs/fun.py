import io
import discord
from discord.ext import commands
from discord import app_commands, Interaction
from utils import bottom
from utils.uwurandom import DEFAULT_LENGTH, MAX_LENGTH, MIN_LENGTH, uwurandom

MAX_DISCORD_MESSAGE_LENGTH = 2000


async def send_text(interaction: Interaction, text: str, filename: str) -> None:
    """Replies with text, falling back to a file attachment when it is too long for a message."""
    if len(text) <= MAX_DISCORD_MESSAGE_LENGTH:
        await interaction.response.send_message(text, allowed_mentions=discord.AllowedMentions.none())
    else:
        file = discord.File(io.BytesIO(text.encode("utf-8")), filename=filename)
        await interaction.response.send_message(file=file)


class Fun(commands.Cog):
    """Cog for bottom and uwurandom."""
    def __init__(self, bot):
        self.bot = bot

    @app_commands.command(name="bottom", description="Encode or decode bottom")
    @app_commands.describe(mode="Encode text into bottom, or decode bottom into text", text="Input text")
    @app_commands.choices(mode=[
        app_commands.Choice(name="encode", value="encode"),
        app_commands.Choice(name="decode", value="decode"),
    ])
    async def bottom_command(self, interaction: Interaction, mode: app_commands.Choice[str], text: str) -> None:
        if mode.value == "encode":
            await send_text(interaction, bottom.encode(text), "bottom.txt")
            return
        try:
            decoded = bottom.decode(text)
        except ValueError as e:
            await interaction.response.send_message(f"That isn't valid bottom: {e}", ephemeral=True)
            return
        await send_text(interaction, decoded or "*(empty)*", "decoded.txt")

    @app_commands.command(name="uwurandom", description="Generate some uwu")
    @app_commands.describe(length="Number of characters (default: 200)")
    async def uwurandom_command(
        self, interaction: Interaction, length: app_commands.Range[int, MIN_LENGTH, MAX_LENGTH] = DEFAULT_LENGTH
    ) -> None:
        await interaction.response.send_message(uwurandom(length), allowed_mentions=discord.AllowedMentions.none())


async def setup(bot):
    await bot.add_cog(Fun(bot))
