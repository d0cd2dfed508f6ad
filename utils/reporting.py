import asyncio
import logging
import traceback
import discord

ERROR_RESPONSE = "Something went wrong while handling that. The error has been reported."
EMBED_COLOR_ERROR = discord.Color.red()


def describe_origin(origin) -> list[tuple[str, str]]:
    """Builds the metadata fields shown in an error report for whatever triggered the failure."""
    if isinstance(origin, discord.Interaction):
        fields = [("Kind", f"Interaction ({origin.type.name})")]
        if origin.command is not None:
            fields.append(("Command", origin.command.qualified_name))
        elif origin.data and origin.data.get("custom_id"):
            fields.append(("Custom ID", origin.data["custom_id"]))
        fields.append(("User", f"{origin.user} ({origin.user.id})"))
        if origin.channel is not None:
            fields.append(("Channel", f"{getattr(origin.channel, 'name', 'DM')} ({origin.channel.id})"))
        if origin.guild is not None:
            fields.append(("Guild", f"{origin.guild.name} ({origin.guild.id})"))
        return fields

    if isinstance(origin, discord.Message):
        fields = [
            ("Kind", "Message"),
            ("Author", f"{origin.author} ({origin.author.id})"),
            ("Message", origin.jump_url),
        ]
        if origin.guild is not None:
            fields.append(("Guild", f"{origin.guild.name} ({origin.guild.id})"))
        return fields

    message = getattr(origin, "message", None)
    if isinstance(message, discord.Message):
        return [
            ("Kind", type(origin).__name__),
            ("User ID", str(getattr(origin, "user_id", "unknown"))),
            ("Emoji", str(getattr(origin, "emoji", "unknown"))),
            ("Message", message.jump_url),
        ]

    return [("Kind", type(origin).__name__), ("Origin", repr(origin)[:1024])]


def build_error_embed(error: BaseException, origin) -> discord.Embed:
    trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    # Keep the tail of the traceback, it holds the raising frame
    trace = trace[-(4096 - 12):]
    embed = discord.Embed(
        title=f"{type(error).__name__}: {error}"[:256],
        description=f"```py\n{trace}\n```",
        color=EMBED_COLOR_ERROR,
    )
    for name, value in describe_origin(origin):
        embed.add_field(name=name, value=value[:1024] or "-", inline=False)
    return embed


async def respond_with_error(origin) -> None:
    """Tells the user their interaction failed. Plain messages and reactions get no reply."""
    if not isinstance(origin, discord.Interaction):
        return
    try:
        if origin.response.is_done():
            await origin.followup.send(ERROR_RESPONSE, ephemeral=True)
        else:
            await origin.response.send_message(ERROR_RESPONSE, ephemeral=True)
    except Exception:
        logging.exception("Failed to send an error response to the user.")


async def log_error_to_discord(bot, error: BaseException, origin) -> None:
    """Posts a diagnostic report to the configured log channel."""
    channel_id = bot.config.get("log_channel_id")
    if channel_id is None:
        return
    try:
        channel = bot.get_channel(channel_id) or await bot.fetch_channel(channel_id)
        await channel.send(embed=build_error_embed(error, origin))
    except Exception:
        logging.exception(f"Failed to post an error report to log channel {channel_id}.")


async def report_error(bot, error: BaseException, origin) -> None:
    """Best-effort error reporting. Never raises."""
    logging.error(f"Handler failed for {type(origin).__name__}: {error!r}", exc_info=error)
    await asyncio.gather(
        respond_with_error(origin),
        log_error_to_discord(bot, error, origin),
    )
