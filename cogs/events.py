import logging
from typing import Optional
import discord
from discord.ext import commands
from handlers.button import handle_button
from handlers.catstare import catstare_settings, handle_catstare_add, handle_catstare_remove
from handlers.chat import handle_chat
from handlers.dm_log import log_dm
from utils.router import EventRouter, ReactionEvent

DEFAULT_CHAT_CHANNEL = "chatbot"


def is_button(interaction: discord.Interaction) -> bool:
    return (
        interaction.type == discord.InteractionType.component
        and (interaction.data or {}).get("component_type") == discord.ComponentType.button.value
    )


def is_chat_message(channel_name: str):
    def predicate(message: discord.Message) -> bool:
        if message.channel.type != discord.ChannelType.text:
            return False
        if message.channel.name != channel_name:
            return False
        # Bots are ignored, webhooks are welcome
        return not message.author.bot or message.webhook_id is not None
    return predicate


def is_direct_message(message: discord.Message) -> bool:
    return message.channel.type == discord.ChannelType.private


def is_public(event: ReactionEvent) -> bool:
    """True when @everyone can view the channel the reacted message lives in."""
    guild = event.message.guild
    if guild is None:
        return False
    return event.message.channel.permissions_for(guild.default_role).view_channel


def is_emoji(name: str):
    def predicate(event: ReactionEvent) -> bool:
        return event.emoji.name == name
    return predicate


def _same_emoji(emoji, partial: discord.PartialEmoji) -> bool:
    if partial.id is not None:
        return getattr(emoji, "id", None) == partial.id
    return str(emoji) == partial.name


async def resolve_reaction(bot, payload: discord.RawReactionActionEvent) -> Optional[ReactionEvent]:
    """Fetches the full message and reaction behind a raw reaction payload."""
    if payload.guild_id is None:
        return None
    channel = bot.get_channel(payload.channel_id) or await bot.fetch_channel(payload.channel_id)
    message = await channel.fetch_message(payload.message_id)
    reaction = discord.utils.find(lambda r: _same_emoji(r.emoji, payload.emoji), message.reactions)
    return ReactionEvent(
        message=message,
        user_id=payload.user_id,
        emoji=payload.emoji,
        count=reaction.count if reaction is not None else 0,
        added=payload.event_type == "REACTION_ADD",
    )


def build_router(bot) -> EventRouter:
    """Binds every event route. The table is sealed before the bot logs in."""
    chat_channel = (bot.config.get("chat") or {}).get("channel_name", DEFAULT_CHAT_CHANNEL)
    is_catstare = is_emoji(catstare_settings(bot.config)[0])

    def is_public_catstare(event: ReactionEvent) -> bool:
        return is_public(event) and is_catstare(event)

    router = EventRouter(bot)
    router.register("button", is_button, handle_button)
    router.register("chat", is_chat_message(chat_channel), handle_chat)
    router.register("dm", is_direct_message, log_dm)

    for category, handler in (("reaction_add", handle_catstare_add), ("reaction_remove", handle_catstare_remove)):
        router.set_resolver(category, resolve_reaction)
        router.register(category, is_public_catstare, handler)

    router.seal()
    return router


class Events(commands.Cog):
    """Cog that forwards gateway events to the event router."""
    def __init__(self, bot):
        self.bot = bot
        self.router = build_router(bot)

    @commands.Cog.listener()
    async def on_interaction(self, interaction: discord.Interaction):
        await self.router.dispatch("button", interaction)

    # Two independent listeners: a message can be checked by both
    @commands.Cog.listener("on_message")
    async def chat_listener(self, message: discord.Message):
        await self.router.dispatch("chat", message)

    @commands.Cog.listener("on_message")
    async def dm_listener(self, message: discord.Message):
        await self.router.dispatch("dm", message)

    @commands.Cog.listener()
    async def on_raw_reaction_add(self, payload: discord.RawReactionActionEvent):
        await self.router.dispatch("reaction_add", payload)

    @commands.Cog.listener()
    async def on_raw_reaction_remove(self, payload: discord.RawReactionActionEvent):
        await self.router.dispatch("reaction_remove", payload)

    @commands.Cog.listener()
    async def on_ready(self):
        logging.info("Events Cog ready. Routes: %s", ", ".join(self.router.categories()))


async def setup(bot):
    await bot.add_cog(Events(bot))
