import logging
from datetime import datetime
from typing import Optional
from openai import AsyncOpenAI
from utils.http_client import httpx_client


class LLMNotConfigured(RuntimeError):
    """Raised when a feature needs the LLM but no model is configured."""


def current_model(config: dict) -> Optional[str]:
    """Returns the active "provider/model" name, the first one configured."""
    models = config.get("models") or {}
    return next(iter(models), None)


def build_client(config: dict) -> tuple[AsyncOpenAI, str]:
    provider_slash_model = current_model(config)
    if provider_slash_model is None:
        raise LLMNotConfigured("No LLM model is configured.")
    provider, model = provider_slash_model.split("/", 1)
    provider_config = config["providers"][provider]
    client = AsyncOpenAI(
        base_url=provider_config["base_url"],
        api_key=provider_config.get("api_key", "sk-no-key-required"),
        http_client=httpx_client,
    )
    return client, model


def system_prompt(config: dict) -> Optional[str]:
    prompt = config.get("system_prompt")
    if not prompt:
        return None
    now = datetime.now().astimezone()
    return prompt.replace("{date}", now.strftime("%B %d, %Y")).replace("{time}", now.strftime("%I:%M %p %Z")).strip()


async def complete(config: dict, messages: list[dict]) -> str:
    """Sends a chat completion request and returns the reply text."""
    client, model = build_client(config)
    response = await client.chat.completions.create(
        model=model,
        messages=messages,
        stream=False,
        extra_body=config["models"].get(current_model(config)),
    )
    content = response.choices[0].message.content or ""
    logging.debug(f"LLM reply from {model}: {content[:50]}...")
    return content.strip()
