"""Catstare board: messages that collect enough catstare reactions get reposted to the board channel.

Board entries carry the source message id in their embed footer, so the board
itself is the only state; entries are found again by scanning recent board
history.
"""
import asyncio
import logging
import weakref
from typing import Optional
import discord
from utils.embeds import guild_emoji
from utils.router import ReactionEvent

DEFAULT_EMOJI = "catstare"
DEFAULT_THRESHOLD = 3
DEFAULT_CHANNEL_NAME = "catstareboard"
BOARD_SCAN_LIMIT = 100
EMBED_COLOR_BOARD = discord.Color.gold()

# One lock per source message while a board update is in flight
_board_locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = weakref.WeakValueDictionary()


def board_lock(message_id: int) -> asyncio.Lock:
    """Serializes find-then-post/edit/delete for one source message."""
    lock = _board_locks.get(message_id)
    if lock is None:
        lock = _board_locks[message_id] = asyncio.Lock()
    return lock


def catstare_settings(config: dict) -> tuple[str, int, str]:
    settings = config.get("catstare") or {}
    return (
        settings.get("emoji", DEFAULT_EMOJI),
        settings.get("threshold", DEFAULT_THRESHOLD),
        settings.get("channel_name", DEFAULT_CHANNEL_NAME),
    )


def build_board_embed(message: discord.Message) -> discord.Embed:
    embed = discord.Embed(
        description=message.content[:4096] or None,
        color=EMBED_COLOR_BOARD,
        timestamp=message.created_at,
    )
    embed.set_author(name=message.author.display_name, icon_url=message.author.display_avatar.url)
    embed.add_field(name="Source", value=f"[Jump to message]({message.jump_url})", inline=False)
    image = next((att for att in message.attachments if att.content_type and att.content_type.startswith("image")), None)
    if image is not None:
        embed.set_image(url=image.url)
    embed.set_footer(text=str(message.id))
    return embed


async def find_board_entry(bot, board: discord.TextChannel, message_id: int) -> Optional[discord.Message]:
    async for entry in board.history(limit=BOARD_SCAN_LIMIT):
        if entry.author.id != bot.user.id or not entry.embeds:
            continue
        if entry.embeds[0].footer.text == str(message_id):
            return entry
    return None


def board_channel(message: discord.Message, channel_name: str) -> Optional[discord.TextChannel]:
    board = discord.utils.get(message.guild.text_channels, name=channel_name)
    if board is None:
        logging.warning(f"Guild {message.guild.id} has no #{channel_name} channel, skipping catstare.")
        return None
    if message.channel.id == board.id:
        return None
    return board


async def publish(bot, board: discord.TextChannel, entry: Optional[discord.Message], event: ReactionEvent) -> None:
    message = event.message
    emoji = await guild_emoji(message.guild, catstare_settings(bot.config)[0])
    content = f"{emoji} **{event.count}** | {message.channel.mention}"
    embed = build_board_embed(message)
    if entry is not None:
        await entry.edit(content=content, embed=embed)
    else:
        await board.send(content=content, embed=embed)
        logging.info(f"Message {message.id} reached the catstare board with {event.count} reactions.")


async def handle_catstare_add(bot, event: ReactionEvent) -> None:
    """Posts the message to the board once it reaches the threshold, or bumps its count."""
    _, threshold, channel_name = catstare_settings(bot.config)
    if event.count < threshold:
        return
    board = board_channel(event.message, channel_name)
    if board is None:
        return
    async with board_lock(event.message.id):
        entry = await find_board_entry(bot, board, event.message.id)
        await publish(bot, board, entry, event)


async def handle_catstare_remove(bot, event: ReactionEvent) -> None:
    """Lowers the count on the board entry, deleting it once below the threshold."""
    _, threshold, channel_name = catstare_settings(bot.config)
    board = board_channel(event.message, channel_name)
    if board is None:
        return
    async with board_lock(event.message.id):
        entry = await find_board_entry(bot, board, event.message.id)
        if entry is None:
            return
        if event.count >= threshold:
            await publish(bot, board, entry, event)
        else:
            await entry.delete()
            logging.info(f"Message {event.message.id} dropped off the catstare board.")
