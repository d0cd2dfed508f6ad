import logging
import discord
from handlers.fren import handle_fren_button

# Custom ids are "<namespace>:<payload>"
BUTTON_HANDLERS = {
    "fren": handle_fren_button,
}


async def handle_button(bot, interaction: discord.Interaction) -> None:
    custom_id = (interaction.data or {}).get("custom_id", "")
    namespace, _, payload = custom_id.partition(":")
    handler = BUTTON_HANDLERS.get(namespace)
    if handler is None:
        logging.debug(f"Ignoring button with unknown custom id {custom_id!r}")
        return
    await handler(bot, interaction, payload)
