import logging
import discord

EMBED_COLOR_DM = discord.Color.blurple()


def build_dm_embed(message: discord.Message) -> discord.Embed:
    embed = discord.Embed(
        description=message.content[:4096] or "*(no text)*",
        color=EMBED_COLOR_DM,
        timestamp=message.created_at,
    )
    embed.set_author(name=f"{message.author} ({message.author.id})", icon_url=message.author.display_avatar.url)
    if message.attachments:
        urls = "\n".join(att.url for att in message.attachments)
        embed.add_field(name="Attachments", value=urls[:1024], inline=False)
    return embed


async def log_dm(bot, message: discord.Message) -> None:
    """Mirrors a direct message to the DM log channel."""
    logging.info(f"DM from {message.author} ({message.author.id}): {message.content}")
    channel_id = bot.config.get("dm_log_channel_id")
    if channel_id is None:
        return
    channel = bot.get_channel(channel_id) or await bot.fetch_channel(channel_id)
    await channel.send(embed=build_dm_embed(message))
