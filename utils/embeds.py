import discord

EMBED_COLOR_SUCCESS = discord.Color(0x51CF66)


def success_embed(title: str, description: str) -> discord.Embed:
    return discord.Embed(title=title, description=description, color=EMBED_COLOR_SUCCESS)


async def guild_emoji(guild: discord.Guild, name: str) -> str:
    """Returns the guild's custom emoji called `name` in message form, or `[name]` if it has none."""
    emojis = await guild.fetch_emojis()
    found = discord.utils.get(emojis, name=name)
    return str(found) if found else f"[{name}]"
