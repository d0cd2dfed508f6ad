# bot.py: Main entry point for the catstare Discord bot
import asyncio
import enum
import logging
import sys
import discord
from discord.ext import commands
from utils.config import ConfigError, get_config, validate_config
from utils.health import HealthServer
from utils.http_client import httpx_client
from utils.router import ReportingTree

# --- LOGGING SETUP ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s: %(message)s",
)

# --- CONSTANTS ---
EXTENSIONS = (
    "cogs.events",
    "cogs.general",
    "cogs.fun",
    "cogs.fren",
    "cogs.translate",
    "cogs.sweeper",
)

INVITE_PERMISSIONS = discord.Permissions(
    add_reactions=True,
    view_channel=True,
    ban_members=True,
    kick_members=True,
    create_public_threads=True,
    create_private_threads=True,
    embed_links=True,
    manage_channels=True,
    manage_roles=True,
    moderate_members=True,
    mention_everyone=True,
    mute_members=True,
    send_messages=True,
    send_messages_in_threads=True,
    read_message_history=True,
)


class Stage(enum.Enum):
    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    CLIENT_BUILT = "client built"
    LISTENERS_REGISTERED = "listeners registered"
    AUTHENTICATED = "authenticated"
    SERVING = "serving"
    ABORTED = "aborted"


def build_intents() -> discord.Intents:
    intents = discord.Intents.none()
    intents.guilds = True
    intents.guild_messages = True
    intents.dm_messages = True
    intents.message_content = True  # Required to read message content
    intents.members = True
    intents.presences = True
    intents.guild_reactions = True
    intents.moderation = True
    intents.emojis_and_stickers = True
    return intents


# --- BOT ---
class CatstareBot(commands.Bot):
    """Bot carrying its validated configuration, so handlers read it from the bot they are given."""
    def __init__(self, config: dict):
        activity = None
        if status_message := config.get("status_message"):
            activity = discord.CustomActivity(name=status_message[:128])
        super().__init__(
            intents=build_intents(),
            activity=activity,
            command_prefix=commands.when_mentioned,
            tree_cls=ReportingTree,
        )
        self.config = config

    async def on_ready(self):
        """Called when the bot is ready and connected to Discord."""
        logging.info(f"Bot is ready! Logged in as {self.user}")

        # Sync commands after the bot is ready
        try:
            test_guild_id = self.config.get("test_guild_id")
            if test_guild_id:
                guild_obj = discord.Object(id=test_guild_id)
                self.tree.copy_global_to(guild=guild_obj)
                await self.tree.sync(guild=guild_obj)
                logging.info(f"Synced commands to test guild: {test_guild_id}")
            else:
                # Global sync can take up to an hour to show up
                await self.tree.sync()
                logging.info("Synced commands globally.")
        except Exception as e:
            logging.error(f"Failed to sync commands: {e}")

        if self.config["environment"] != "development":
            logging.warning("Running in production mode!")


def create_bot(config: dict) -> CatstareBot:
    return CatstareBot(config)


def invite_url(bot: commands.Bot) -> str:
    return discord.utils.oauth_url(bot.application_id, permissions=INVITE_PERMISSIONS, scopes=("bot",))


# --- LOAD COGS ---
async def load_cogs(bot: commands.Bot) -> None:
    for extension in EXTENSIONS:
        await bot.load_extension(extension)


# --- STARTUP SEQUENCE ---
def _enter(stage: Stage) -> None:
    logging.debug(f"Startup stage: {stage.value}")


async def run(config_path: str = "config.yaml", bot_factory=create_bot, health_factory=HealthServer) -> int:
    """Configures, builds, registers, logs in and serves, in that order. Returns the process exit code."""
    _enter(Stage.UNCONFIGURED)
    try:
        config = get_config(config_path)
        validate_config(config)
    except ConfigError as e:
        _enter(Stage.ABORTED)
        logging.critical(f"Invalid configuration, refusing to start.\n{e}")
        return 1
    _enter(Stage.CONFIGURED)

    bot = bot_factory(config)
    _enter(Stage.CLIENT_BUILT)

    async with bot:
        await load_cogs(bot)
        _enter(Stage.LISTENERS_REGISTERED)

        try:
            await bot.login(config["bot_token"])
        except discord.LoginFailure:
            _enter(Stage.ABORTED)
            logging.critical("Failed to log in. Please check the bot token.")
            return 1
        except Exception:
            _enter(Stage.ABORTED)
            logging.critical("An unexpected error occurred while logging in.", exc_info=True)
            return 1
        _enter(Stage.AUTHENTICATED)
        logging.info(f"Invite URL: {invite_url(bot)}")

        health = health_factory(config["port"])
        try:
            await health.start()
        except RuntimeError:
            _enter(Stage.ABORTED)
            logging.critical("Failed to start the health check server.", exc_info=True)
            return 1
        _enter(Stage.SERVING)
        try:
            await bot.connect()
        finally:
            await health.stop()
    return 0


# --- MAIN EXECUTION ---
async def main() -> int:
    try:
        return await run()
    finally:
        await httpx_client.aclose()


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logging.info("Bot shutting down.")
