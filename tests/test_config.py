"""Tests for configuration loading and validation."""

import pytest

from utils.config import DEFAULT_PORT, ConfigError, get_config, validate_config


def _valid_config(**overrides) -> dict:
    config = {"bot_token": "token", "port": 3000, "environment": "development"}
    config.update(overrides)
    return config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("DISCORD_TOKEN", "PORT", "BOT_ENV"):
        monkeypatch.delenv(var, raising=False)


class TestGetConfig:
    def test_loads_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("bot_token: abc\nenvironment: production\nport: 8080\n", encoding="utf-8")
        config = get_config(str(path))
        assert config["bot_token"] == "abc"
        assert config["environment"] == "production"
        assert config["port"] == 8080

    def test_missing_file_uses_defaults(self, tmp_path):
        config = get_config(str(tmp_path / "missing.yaml"))
        assert config == {"port": DEFAULT_PORT}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert get_config(str(path)) == {"port": DEFAULT_PORT}

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("bot_token: from-file\nport: 1234\n", encoding="utf-8")
        monkeypatch.setenv("DISCORD_TOKEN", "from-env")
        monkeypatch.setenv("PORT", "4321")
        monkeypatch.setenv("BOT_ENV", "development")
        config = get_config(str(path))
        assert config["bot_token"] == "from-env"
        assert config["port"] == 4321
        assert config["environment"] == "development"

    def test_non_numeric_port_is_left_for_validation(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PORT", "eighty")
        config = get_config(str(tmp_path / "missing.yaml"))
        assert config["port"] == "eighty"


class TestValidateConfig:
    def test_valid(self):
        validate_config(_valid_config())

    def test_reports_every_problem(self):
        with pytest.raises(ConfigError) as excinfo:
            validate_config({"port": 0})
        fields = [field for field, _ in excinfo.value.problems]
        assert fields == ["bot_token", "port", "environment"]
        message = str(excinfo.value)
        assert message.startswith("3 validation errors!")
        assert "bot_token ::" in message

    def test_single_problem_message(self):
        with pytest.raises(ConfigError) as excinfo:
            validate_config(_valid_config(environment="staging"))
        assert str(excinfo.value).startswith("1 validation error!")

    def test_blank_token(self):
        with pytest.raises(ConfigError):
            validate_config(_valid_config(bot_token="   "))

    def test_port_must_be_int(self):
        with pytest.raises(ConfigError):
            validate_config(_valid_config(port="3000"))

    def test_optional_ids(self):
        validate_config(_valid_config(log_channel_id=123, dm_log_channel_id=None))
        with pytest.raises(ConfigError) as excinfo:
            validate_config(_valid_config(log_channel_id="123"))
        assert excinfo.value.problems[0][0] == "log_channel_id"

    def test_admin_ids(self):
        validate_config(_valid_config(permissions={"admin_ids": [1, 2]}))
        with pytest.raises(ConfigError):
            validate_config(_valid_config(permissions={"admin_ids": ["1"]}))

    def test_catstare_threshold(self):
        with pytest.raises(ConfigError):
            validate_config(_valid_config(catstare={"threshold": 0}))

    def test_models_need_known_provider(self):
        config = _valid_config(
            providers={"openai": {"base_url": "https://api.openai.com/v1"}},
            models={"openai/gpt-4o": None, "local/llama": None, "bare": None},
        )
        with pytest.raises(ConfigError) as excinfo:
            validate_config(config)
        fields = [field for field, _ in excinfo.value.problems]
        assert fields == ["models > local/llama", "models > bare"]
