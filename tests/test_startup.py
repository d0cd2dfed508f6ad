"""Tests for the startup sequence in bot.py."""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

import bot as bot_module
from bot import EXTENSIONS, INVITE_PERMISSIONS, build_intents, invite_url, run

VALID_CONFIG = "bot_token: token\nenvironment: development\nport: 3001\n"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("DISCORD_TOKEN", "PORT", "BOT_ENV"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(VALID_CONFIG, encoding="utf-8")
    return str(path)


class Recorder:
    """Fake bot and health server that record the order of startup calls."""

    def __init__(self, login_error=None):
        self.calls = []
        self.config = None
        self.bot = MagicMock()
        self.bot.application_id = 1234
        self.bot.load_extension = AsyncMock(side_effect=lambda name: self.calls.append(f"load:{name}"))
        self.bot.login = AsyncMock(side_effect=self._login(login_error))
        self.bot.connect = AsyncMock(side_effect=lambda: self.calls.append("connect"))
        self.health = MagicMock()
        self.health.start = AsyncMock(side_effect=lambda: self.calls.append("health:start"))
        self.health.stop = AsyncMock(side_effect=lambda: self.calls.append("health:stop"))
        self.health_port = None

    def _login(self, error):
        def login(token):
            self.calls.append("login")
            if error is not None:
                raise error
        return login

    def bot_factory(self, config):
        self.config = config
        self.calls.append("build")
        return self.bot

    def health_factory(self, port):
        self.health_port = port
        return self.health


class TestRun:
    @pytest.mark.asyncio
    async def test_missing_config_aborts_before_network(self, tmp_path):
        recorder = Recorder()
        code = await run(str(tmp_path / "missing.yaml"), recorder.bot_factory, recorder.health_factory)
        assert code == 1
        assert recorder.calls == []
        recorder.bot.login.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_config_aborts(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("bot_token: token\nenvironment: staging\n", encoding="utf-8")
        recorder = Recorder()
        assert await run(str(path), recorder.bot_factory, recorder.health_factory) == 1
        assert recorder.calls == []

    @pytest.mark.asyncio
    async def test_login_failure_never_starts_health(self, config_path):
        recorder = Recorder(login_error=discord.LoginFailure("Improper token has been passed."))
        code = await run(config_path, recorder.bot_factory, recorder.health_factory)
        assert code == 1
        assert "health:start" not in recorder.calls
        assert recorder.calls[-1] == "login"
        recorder.bot.connect.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unexpected_login_error_aborts(self, config_path):
        recorder = Recorder(login_error=OSError("network unreachable"))
        assert await run(config_path, recorder.bot_factory, recorder.health_factory) == 1
        assert "health:start" not in recorder.calls

    @pytest.mark.asyncio
    async def test_startup_order(self, config_path):
        recorder = Recorder()
        code = await run(config_path, recorder.bot_factory, recorder.health_factory)
        assert code == 0
        assert recorder.calls == (
            ["build"]
            + [f"load:{name}" for name in EXTENSIONS]
            + ["login", "health:start", "connect", "health:stop"]
        )
        recorder.bot.login.assert_awaited_once_with("token")
        assert recorder.health_port == 3001
        assert recorder.config["environment"] == "development"

    @pytest.mark.asyncio
    async def test_health_bind_failure_aborts_before_connect(self, config_path):
        recorder = Recorder()
        recorder.health.start.side_effect = RuntimeError("Health check server failed to start")
        assert await run(config_path, recorder.bot_factory, recorder.health_factory) == 1
        recorder.bot.connect.assert_not_awaited()
        recorder.health.stop.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_health_stopped_when_connection_fails(self, config_path):
        recorder = Recorder()
        recorder.bot.connect.side_effect = discord.ConnectionClosed(MagicMock(close_code=4004), shard_id=None)
        with pytest.raises(discord.ConnectionClosed):
            await run(config_path, recorder.bot_factory, recorder.health_factory)
        recorder.health.stop.assert_awaited_once()


class TestBotSetup:
    def test_intents(self):
        intents = build_intents()
        assert intents.message_content
        assert intents.guild_reactions
        assert intents.dm_messages
        assert intents.members
        assert not intents.voice_states

    def test_invite_url(self):
        bot = MagicMock()
        bot.application_id = 1234
        url = invite_url(bot)
        assert "client_id=1234" in url
        assert f"permissions={INVITE_PERMISSIONS.value}" in url
        assert "scope=bot" in url

    def test_invite_permissions(self):
        assert INVITE_PERMISSIONS.manage_roles
        assert INVITE_PERMISSIONS.read_message_history
        assert not INVITE_PERMISSIONS.administrator


class TestMain:
    @pytest.mark.asyncio
    async def test_closes_http_client(self, monkeypatch):
        http_client = MagicMock()
        http_client.aclose = AsyncMock()
        monkeypatch.setattr(bot_module, "httpx_client", http_client)
        monkeypatch.setattr(bot_module, "run", AsyncMock(return_value=1))
        assert await bot_module.main() == 1
        http_client.aclose.assert_awaited_once()
