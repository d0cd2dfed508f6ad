import asyncio
import logging
import discord
from utils.http_client import httpx_client
from utils.llm import complete, current_model, system_prompt

MAX_DISCORD_MESSAGE_LENGTH = 2000
DEFAULT_HISTORY_SIZE = 10


def split_message(text: str, limit: int = MAX_DISCORD_MESSAGE_LENGTH) -> list[str]:
    """Splits text into Discord-sized chunks, preferring line breaks."""
    chunks = []
    while len(text) > limit:
        cut = text.rfind("\n", 0, limit)
        if cut <= 0:
            cut = limit
        chunks.append(text[:cut])
        text = text[cut:].lstrip("\n")
    if text:
        chunks.append(text)
    return chunks


async def message_text(msg: discord.Message) -> str:
    """Message content plus the contents of any text attachments."""
    text_attachments = [att for att in msg.attachments if att.content_type and att.content_type.startswith("text")]
    responses = await asyncio.gather(*[httpx_client.get(att.url) for att in text_attachments])
    return "\n".join(([msg.content] if msg.content else []) + [resp.text for resp in responses])


async def build_conversation(bot, message: discord.Message, history_size: int) -> list[dict]:
    history = [m async for m in message.channel.history(limit=history_size, before=message)]
    history.reverse()
    history.append(message)

    messages = []
    if prompt := system_prompt(bot.config):
        prompt += "\nEach user's message is prefixed with their display name."
        messages.append({"role": "system", "content": prompt})
    for msg in history:
        text = await message_text(msg)
        if not text:
            continue
        if msg.author == bot.user:
            messages.append({"role": "assistant", "content": text})
        else:
            messages.append({"role": "user", "content": f"{msg.author.display_name}: {text}"})
    return messages


async def handle_chat(bot, message: discord.Message) -> None:
    """Answers a message posted in the chatbot channel with the configured LLM."""
    if current_model(bot.config) is None:
        logging.warning("Chat message ignored: no LLM model is configured.")
        return

    history_size = (bot.config.get("chat") or {}).get("max_messages", DEFAULT_HISTORY_SIZE)
    logging.info(f"Chat message received (user ID: {message.author.id}, channel: {message.channel.id})")

    async with message.channel.typing():
        messages = await build_conversation(bot, message, history_size)
        reply = await complete(bot.config, messages)

    if not reply:
        await message.reply("I have nothing to say to that.", mention_author=False)
        return
    chunks = split_message(reply)
    await message.reply(chunks[0], mention_author=False, allowed_mentions=discord.AllowedMentions.none())
    for chunk in chunks[1:]:
        await message.channel.send(chunk, allowed_mentions=discord.AllowedMentions.none())
