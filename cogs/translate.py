import logging
import discord
from discord.ext import commands
from discord import app_commands, Interaction
from utils.llm import complete, current_model

DEFAULT_TARGET_LANGUAGE = "English"
EMBED_COLOR_TRANSLATION = discord.Color.dark_green()


def translation_prompt(language: str) -> list[dict]:
    return [{
        "role": "system",
        "content": (
            f"Translate the user's message into {language}. "
            "Reply with only the translation, keeping formatting, names and emoji as they are."
        ),
    }]


class Translate(commands.Cog):
    """Cog for the Translate message context menu."""
    def __init__(self, bot):
        self.bot = bot
        # Context menus can't be declared with a decorator inside a cog
        self.ctx_menu = app_commands.ContextMenu(name="Translate", callback=self.translate_message)
        self.bot.tree.add_command(self.ctx_menu)

    async def cog_unload(self) -> None:
        self.bot.tree.remove_command(self.ctx_menu.name, type=self.ctx_menu.type)

    async def translate_message(self, interaction: Interaction, message: discord.Message) -> None:
        if not message.content:
            await interaction.response.send_message("There's no text to translate.", ephemeral=True)
            return
        if current_model(self.bot.config) is None:
            await interaction.response.send_message("Translation is not configured.", ephemeral=True)
            return

        await interaction.response.defer(ephemeral=True, thinking=True)
        language = (self.bot.config.get("translate") or {}).get("target_language", DEFAULT_TARGET_LANGUAGE)
        messages = translation_prompt(language) + [{"role": "user", "content": message.content}]
        translation = await complete(self.bot.config, messages)
        logging.info(f"Translated message {message.id} to {language} (by user {interaction.user.id})")

        embed = discord.Embed(description=translation[:4096], color=EMBED_COLOR_TRANSLATION)
        embed.set_author(name=message.author.display_name, icon_url=message.author.display_avatar.url)
        embed.set_footer(text=f"Translated to {language}")
        await interaction.followup.send(embed=embed, ephemeral=True)


async def setup(bot):
    await bot.add_cog(Translate(bot))
