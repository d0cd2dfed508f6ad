import logging
import os
import yaml

DEFAULT_PORT = 3000
ENVIRONMENTS = ("development", "production")

# Environment variables take precedence over values in the YAML file
ENV_OVERRIDES = {
    "bot_token": "DISCORD_TOKEN",
    "port": "PORT",
    "environment": "BOT_ENV",
}

OPTIONAL_ID_FIELDS = ("log_channel_id", "dm_log_channel_id", "test_guild_id")


class ConfigError(ValueError):
    """Raised when the configuration has one or more problems."""

    def __init__(self, problems: list[tuple[str, str]]):
        self.problems = problems
        super().__init__(format_problems(problems))


def format_problems(problems: list[tuple[str, str]]) -> str:
    plural = "s" if len(problems) > 1 else ""
    lines = [f"{len(problems)} validation error{plural}!"]
    lines += [f"  {field} :: {message}" for field, message in problems]
    return "\n".join(lines)


def get_config(filename: str = "config.yaml") -> dict:
    """Loads the configuration from a YAML file and applies environment overrides."""
    config = {}
    if os.path.exists(filename):
        with open(filename, encoding="utf-8") as file:
            config = yaml.safe_load(file) or {}
    else:
        logging.warning(f"Config file {filename} not found, using environment only.")

    for field, env_var in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value is None:
            continue
        if field == "port":
            try:
                value = int(value)
            except ValueError:
                pass  # left for validate_config to report
        config[field] = value

    config.setdefault("port", DEFAULT_PORT)
    return config


def _is_id(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_config(config: dict) -> None:
    """Validate configuration structure and required fields, reporting every problem at once."""
    problems = []

    token = config.get("bot_token")
    if not isinstance(token, str) or not token.strip():
        problems.append(("bot_token", "required, must be a non-empty string"))

    port = config.get("port", DEFAULT_PORT)
    if not isinstance(port, int) or isinstance(port, bool) or not 1 <= port <= 65535:
        problems.append(("port", f"must be an integer between 1 and 65535, got {port!r}"))

    environment = config.get("environment")
    if environment not in ENVIRONMENTS:
        problems.append(("environment", f"required, must be one of {', '.join(ENVIRONMENTS)}"))

    for field in OPTIONAL_ID_FIELDS:
        value = config.get(field)
        if value is not None and not _is_id(value):
            problems.append((field, "must be a positive integer id"))

    admin_ids = (config.get("permissions") or {}).get("admin_ids", [])
    if not isinstance(admin_ids, list) or not all(_is_id(i) for i in admin_ids):
        problems.append(("permissions > admin_ids", "must be a list of user ids"))

    threshold = (config.get("catstare") or {}).get("threshold", 1)
    if not isinstance(threshold, int) or isinstance(threshold, bool) or threshold < 1:
        problems.append(("catstare > threshold", "must be a positive integer"))

    models = config.get("models")
    if models is not None:
        providers = config.get("providers") or {}
        if not isinstance(models, dict):
            problems.append(("models", "must be a mapping of provider/model names"))
        else:
            for name in models:
                provider, _, model = str(name).partition("/")
                if not model:
                    problems.append((f"models > {name}", "must be written as provider/model"))
                elif provider not in providers:
                    problems.append((f"models > {name}", f"provider {provider!r} is not configured"))

    if problems:
        raise ConfigError(problems)
