import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional
import discord
from discord import app_commands
from utils.reporting import report_error

Predicate = Callable[[Any], bool]
Handler = Callable[[Any, Any], Awaitable[None]]
Resolver = Callable[[Any, Any], Awaitable[Optional[Any]]]


class Status(enum.Enum):
    IGNORED = "ignored"
    HANDLED = "handled"
    FAILED = "failed"


@dataclass(frozen=True)
class DispatchOutcome:
    status: Status
    error: Optional[BaseException] = None


IGNORED = DispatchOutcome(Status.IGNORED)
HANDLED = DispatchOutcome(Status.HANDLED)


@dataclass(frozen=True)
class Route:
    """Pairs a pure predicate over an event with the handler that processes it."""
    predicate: Predicate
    handler: Handler


@dataclass(frozen=True)
class ReactionEvent:
    """A reaction add/remove with its message and reaction fetched in full."""
    message: discord.Message
    user_id: int
    emoji: discord.PartialEmoji
    count: int
    added: bool


@dataclass
class _Bucket:
    routes: list[Route] = field(default_factory=list)
    resolver: Optional[Resolver] = None


class EventRouter:
    """Fixed table of routes per event category, with one error boundary around every dispatch."""

    def __init__(self, bot):
        self.bot = bot
        self._buckets: dict[str, _Bucket] = {}
        self._sealed = False

    def register(self, category: str, predicate: Predicate, handler: Handler) -> None:
        if self._sealed:
            raise RuntimeError("Routes cannot be registered after the router is sealed.")
        self._buckets.setdefault(category, _Bucket()).routes.append(Route(predicate, handler))

    def set_resolver(self, category: str, resolver: Resolver) -> None:
        if self._sealed:
            raise RuntimeError("Resolvers cannot be set after the router is sealed.")
        self._buckets.setdefault(category, _Bucket()).resolver = resolver

    def seal(self) -> None:
        self._sealed = True

    def categories(self) -> tuple[str, ...]:
        return tuple(self._buckets)

    def routes(self, category: str) -> tuple[Route, ...]:
        bucket = self._buckets.get(category)
        return tuple(bucket.routes) if bucket else ()

    async def dispatch(self, category: str, event) -> DispatchOutcome:
        """Runs the first route whose predicate matches. Errors are reported once and never re-raised."""
        bucket = self._buckets.get(category)
        if bucket is None:
            return IGNORED
        try:
            if bucket.resolver is not None:
                event = await bucket.resolver(self.bot, event)
                if event is None:
                    return IGNORED
            for route in bucket.routes:
                if route.predicate(event):
                    await route.handler(self.bot, event)
                    return HANDLED
            return IGNORED
        except Exception as error:
            await report_error(self.bot, error, event)
            return DispatchOutcome(Status.FAILED, error)


class ReportingTree(app_commands.CommandTree):
    """Command tree whose failures go to the error reporter. Unknown commands are ignored."""

    async def on_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError) -> None:
        if isinstance(error, app_commands.CommandNotFound):
            logging.debug(f"Ignoring unknown command: {error.name}")
            return
        if isinstance(error, app_commands.CommandInvokeError):
            error = error.original
        await report_error(self.client, error, interaction)
