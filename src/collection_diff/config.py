"""Configuration for the collection diff bot.

Loads configuration from environment variables (and a ``.env`` file when
present) into a single immutable value that is passed explicitly to the fetch
client and the front ends.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api-router.nexusmods.com/graphql"
DEFAULT_APP_NAME = "CollectionDiffBot"
DEFAULT_APP_VERSION = "1.0.0"
DEFAULT_TRIGGER = "!diff"
DEFAULT_CHUNK_LIMIT = 1900
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class BotConfig:
    """Process configuration: API credentials, app identity and chat tokens."""

    # Nexus Mods API
    nexus_api_key: Optional[str] = None
    api_url: str = DEFAULT_API_URL
    app_name: str = DEFAULT_APP_NAME
    app_version: str = DEFAULT_APP_VERSION
    request_timeout: float = DEFAULT_TIMEOUT

    # Chat transports
    discord_bot_token: Optional[str] = None
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None

    # Command handling
    command_trigger: str = DEFAULT_TRIGGER
    chunk_limit: int = DEFAULT_CHUNK_LIMIT


def mask(value: Optional[str]) -> str:
    if not value:
        return ""
    if len(value) <= 6:
        return "•" * len(value)
    return value[:3] + "•" * max(4, len(value) - 7) + value[-4:]


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid {name} value: {raw!r}, using default {default}")
        return default
    if value <= 0:
        logger.warning(f"{name} must be positive, got {value}, using default {default}")
        return default
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Invalid {name} value: {raw!r}, using default {default}")
        return default
    if value <= 0:
        logger.warning(f"{name} must be positive, got {value}, using default {default}")
        return default
    return value


def load_config(env_file: Optional[str] = ".env") -> BotConfig:
    """Load configuration from environment variables.

    Loads ``env_file`` first if it exists; variables already set in the
    environment take precedence. Logs warnings for missing credentials but
    does not fail.

    Returns:
        BotConfig instance populated from environment variables
    """
    if env_file:
        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(dotenv_path=env_path, override=False)
            logger.info(f"Loaded configuration from {env_path}")
        else:
            logger.debug(f"{env_path} not found, using system environment variables")

    config = BotConfig(
        nexus_api_key=os.environ.get("NEXUS_API_KEY") or None,
        api_url=os.environ.get("NEXUS_API_URL") or DEFAULT_API_URL,
        app_name=os.environ.get("APP_NAME") or DEFAULT_APP_NAME,
        app_version=os.environ.get("APP_VERSION") or DEFAULT_APP_VERSION,
        request_timeout=_env_float("NEXUS_REQUEST_TIMEOUT", DEFAULT_TIMEOUT),
        discord_bot_token=os.environ.get("DISCORD_BOT_TOKEN") or None,
        telegram_bot_token=os.environ.get("TELEGRAM_BOT_TOKEN") or None,
        telegram_chat_id=os.environ.get("TELEGRAM_CHAT_ID") or None,
        command_trigger=os.environ.get("DIFF_COMMAND_TRIGGER") or DEFAULT_TRIGGER,
        chunk_limit=_env_int("DIFF_CHUNK_LIMIT", DEFAULT_CHUNK_LIMIT),
    )

    if not config.nexus_api_key:
        logger.warning("NEXUS_API_KEY not set - revision fetches will be rejected")
    if not config.discord_bot_token:
        logger.debug("DISCORD_BOT_TOKEN not set - Discord bot not configured")
    if not (config.telegram_bot_token and config.telegram_chat_id):
        logger.debug("TELEGRAM_BOT_TOKEN/TELEGRAM_CHAT_ID not set - Telegram delivery not configured")

    return config


def validate_config(config: BotConfig) -> dict[str, bool]:
    """Report which integrations are configured.

    Returns:
        Dictionary mapping integration names to configuration status:
        - 'nexus': True if the Nexus Mods API key is set
        - 'discord': True if the Discord bot token is set
        - 'telegram': True if both Telegram token and chat id are set
    """
    status = {
        "nexus": bool(config.nexus_api_key),
        "discord": bool(config.discord_bot_token),
        "telegram": bool(config.telegram_bot_token and config.telegram_chat_id),
    }

    logger.info(f"Integration configuration status: {status}")
    return status


__all__ = ["BotConfig", "load_config", "validate_config", "mask"]
