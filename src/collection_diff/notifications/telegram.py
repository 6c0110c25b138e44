# src/collection_diff/notifications/telegram.py
"""
Telegram reply channel for diff reports.

Configuration (see collection_diff.config):
- TELEGRAM_BOT_TOKEN: Bot token from @BotFather
- TELEGRAM_CHAT_ID: Chat ID to send messages to

Unlike a fire-and-forget alert, a failed send raises DeliveryError so the
chunked reporter stops and reports how far it got.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import requests

from ..config import BotConfig
from ..exceptions import DeliveryError

logger = logging.getLogger(__name__)

API_BASE = "https://api.telegram.org"
# Telegram's own hard limit is 4096 characters per message.
TELEGRAM_MAX_MESSAGE = 4096


def is_configured(config: BotConfig) -> bool:
    """
    Check if Telegram is configured with bot token and chat ID.

    Returns:
        True if both telegram_bot_token and telegram_chat_id are set, False otherwise.
    """
    return bool(config.telegram_bot_token and config.telegram_chat_id)


class TelegramChannel:
    """Sends messages to one Telegram chat via the Bot API ``sendMessage`` call."""

    def __init__(
        self,
        token: str,
        chat_id: str,
        *,
        parse_mode: Optional[str] = None,
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ):
        self.token = token
        self.chat_id = chat_id
        self.parse_mode = parse_mode
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: BotConfig, **kwargs) -> "TelegramChannel":
        if not is_configured(config):
            raise ValueError(
                "Telegram not configured (missing TELEGRAM_BOT_TOKEN or TELEGRAM_CHAT_ID)"
            )
        return cls(config.telegram_bot_token, config.telegram_chat_id, **kwargs)

    def send_message(self, text: str) -> None:
        """
        Send one message to the configured chat.

        Raises:
            DeliveryError: On a non-200 response or a transport failure
        """
        url = f"{API_BASE}/bot{self.token}/sendMessage"
        payload = {"chat_id": self.chat_id, "text": text}
        if self.parse_mode:
            payload["parse_mode"] = self.parse_mode

        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to send Telegram message: {e}")
            raise DeliveryError(f"Failed to send Telegram message: {e}") from e

        if response.status_code != 200:
            logger.error(f"Telegram API error: {response.status_code} - {response.text}")
            raise DeliveryError(f"Telegram API error: {response.status_code}")

        logger.debug(f"Telegram message sent successfully: {text[:50]}...")

    async def send(self, text: str) -> None:
        await asyncio.to_thread(self.send_message, text)

    def close(self) -> None:
        self.session.close()
