import logging
from typing import NamedTuple, Optional
import discord

DEFAULT_ROLE_NAME = "fren"
ACTIONS = ("accept", "decline")


class FrenRequest(NamedTuple):
    action: str
    requester_id: int
    target_id: int


def fren_role(guild: discord.Guild, config: dict) -> Optional[discord.Role]:
    role_name = (config.get("fren") or {}).get("role_name", DEFAULT_ROLE_NAME)
    return discord.utils.get(guild.roles, name=role_name)


def fren_custom_id(action: str, requester_id: int, target_id: int) -> str:
    return f"fren:{action}:{requester_id}:{target_id}"


def parse_fren_request(payload: str) -> Optional[FrenRequest]:
    """Parses the part of a button custom id after "fren:"."""
    parts = payload.split(":")
    if len(parts) != 3 or parts[0] not in ACTIONS:
        return None
    try:
        return FrenRequest(parts[0], int(parts[1]), int(parts[2]))
    except ValueError:
        return None


def fren_request_view(requester_id: int, target_id: int) -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    view.add_item(discord.ui.Button(
        label="Accept",
        style=discord.ButtonStyle.success,
        custom_id=fren_custom_id("accept", requester_id, target_id),
    ))
    view.add_item(discord.ui.Button(
        label="Decline",
        style=discord.ButtonStyle.secondary,
        custom_id=fren_custom_id("decline", requester_id, target_id),
    ))
    # Clicks are routed by the Events cog, the view only carries the components
    view.stop()
    return view


async def handle_fren_button(bot, interaction: discord.Interaction, payload: str) -> None:
    request = parse_fren_request(payload)
    if request is None:
        logging.warning(f"Ignoring malformed fren button: {payload!r}")
        return
    if interaction.user.id != request.target_id:
        await interaction.response.send_message("This fren request isn't for you.", ephemeral=True)
        return

    if request.action == "decline":
        await interaction.response.edit_message(
            content=f"<@{request.target_id}> declined <@{request.requester_id}>'s fren request.",
            view=None,
        )
        return

    role = fren_role(interaction.guild, bot.config)
    if role is None:
        raise RuntimeError(f"Guild {interaction.guild.id} has no fren role")
    await interaction.user.add_roles(role, reason=f"Fren request from {request.requester_id}")
    await interaction.response.edit_message(
        content=f"<@{request.target_id}> is now a fren, vouched for by <@{request.requester_id}>!",
        view=None,
    )
    logging.info(f"User {request.target_id} became a fren (vouched by {request.requester_id})")
