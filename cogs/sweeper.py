import logging
from datetime import datetime, timedelta
import discord
from discord.ext import commands, tasks

MESSAGE_SWEEP_INTERVAL = 3600  # seconds between sweeps
MESSAGE_LIFETIME = 1800  # seconds a cached message is kept after its last edit


def sweep_messages(cache, lifetime: int, now: datetime) -> int:
    """Evicts messages last touched more than `lifetime` seconds ago. Returns how many were evicted."""
    cutoff = now - timedelta(seconds=lifetime)
    fresh = [m for m in cache if (m.edited_at or m.created_at) >= cutoff]
    removed = len(cache) - len(fresh)
    if removed:
        cache.clear()
        cache.extend(fresh)
    return removed


class Sweeper(commands.Cog):
    """Cog that periodically trims the client's message cache."""
    def __init__(self, bot):
        self.bot = bot

    async def cog_load(self) -> None:
        self.sweep.start()

    async def cog_unload(self) -> None:
        self.sweep.cancel()

    @tasks.loop(seconds=MESSAGE_SWEEP_INTERVAL)
    async def sweep(self):
        # discord.py exposes the cache only as a read-only copy (bot.cached_messages), so trim its deque directly
        cache = self.bot._connection._messages
        if cache is None:
            return
        removed = sweep_messages(cache, MESSAGE_LIFETIME, discord.utils.utcnow())
        if removed:
            logging.info(f"Swept {removed} cached messages older than {MESSAGE_LIFETIME}s.")

    @sweep.before_loop
    async def before_sweep(self):
        await self.bot.wait_until_ready()


async def setup(bot):
    await bot.add_cog(Sweeper(bot))
