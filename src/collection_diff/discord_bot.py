"""
Discord front end.

Listens for ``!diff <slug> <revisionA> <revisionB>`` in any channel the bot can
read, and answers in that channel. Library: discord.py (async). Needs the
message content privileged intent enabled for the bot application.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

import discord

from .command import CommandResult, handle_text, respond
from .config import BotConfig
from .connectivity import RevisionSource, get_source
from .exceptions import DeliveryError

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Something went wrong while building the diff, please retry."


class DiscordChannel:
    """Reply channel posting plain messages to a Discord channel."""

    def __init__(self, target: discord.abc.Messageable):
        self.target = target

    async def send(self, text: str) -> None:
        await self.target.send(text)


class DiscordReply:
    """Reply channel answering a specific message."""

    def __init__(self, message: discord.Message):
        self.message = message

    async def send(self, text: str) -> None:
        await self.message.reply(text)


def is_diff_command(content: str, trigger: str) -> bool:
    tokens = content.split()
    return bool(tokens) and tokens[0] == trigger


async def process_message(
    message: discord.Message,
    config: BotConfig,
    source_factory: Callable[[BotConfig], RevisionSource] = get_source,
) -> Optional[CommandResult]:
    """
    Handle one incoming message.

    Returns:
        The command result, or None if the message was not a diff command
    """
    if message.author.bot:
        return None
    content = message.content or ""
    if not is_diff_command(content, config.command_trigger):
        return None

    logger.info(f"Diff command from {message.author}: {content!r}")
    with source_factory(config) as source:
        result = await handle_text(content, source, config.command_trigger)

    try:
        await respond(
            result,
            reply=DiscordReply(message),
            channel=DiscordChannel(message.channel),
            limit=config.chunk_limit,
        )
    except DeliveryError as e:
        logger.error(
            f"Reply delivery failed after {e.delivered}/{e.total} messages: {e}"
        )
    return result


class DiffBot(discord.Client):
    """Discord client wired to the diff command handler."""

    def __init__(
        self,
        config: BotConfig,
        *,
        source_factory: Callable[[BotConfig], RevisionSource] = get_source,
        **kwargs,
    ):
        intents = discord.Intents.default()
        intents.message_content = True
        super().__init__(intents=intents, **kwargs)
        self.config = config
        self.source_factory = source_factory

    async def on_ready(self) -> None:
        logger.info(f"Logged in as {self.user}")

    async def on_message(self, message: discord.Message) -> None:
        try:
            await process_message(message, self.config, self.source_factory)
        except Exception:
            logger.exception(f"Unhandled error while processing {message.content!r}")
            try:
                await message.reply(GENERIC_FAILURE_MESSAGE)
            except discord.HTTPException as e:
                logger.error(f"Could not send failure reply: {e}")


def run_bot(config: BotConfig) -> None:
    """Run the bot until interrupted. Logging is left to collection_diff.logging_config."""
    if not config.discord_bot_token:
        raise ValueError("DISCORD_BOT_TOKEN is not set")
    bot = DiffBot(config)
    bot.run(config.discord_bot_token, log_handler=None)


__all__ = [
    "DiffBot",
    "DiscordChannel",
    "DiscordReply",
    "is_diff_command",
    "process_message",
    "run_bot",
]
