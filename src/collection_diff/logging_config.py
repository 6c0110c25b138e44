"""
Logging setup shared by the CLI and the Discord bot.

One console handler (stderr, so CLI reports on stdout stay clean) plus an
optional file handler. In bot mode the root logger is configured so that
discord.py's records land in the same handlers; its chatty gateway loggers
are held at WARNING unless --debug is given.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional


DEFAULT_FORMAT = "%(asctime)s [%(levelname)-8s] [%(name)s] %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Detailed format for debugging (includes filename, line number)
DEBUG_FORMAT = (
    "%(asctime)s [%(levelname)-8s] [%(name)s] [%(filename)s:%(lineno)d] %(message)s"
)

# discord.py loggers that log every heartbeat / HTTP call at INFO or DEBUG
DISCORD_LOGGERS = ("discord", "discord.gateway", "discord.http", "discord.client")


def quiet_discord_loggers(level: int = logging.WARNING) -> None:
    for name in DISCORD_LOGGERS:
        logging.getLogger(name).setLevel(level)


def setup_logging(
    *,
    name: str = "collection_diff",
    level: str = "INFO",
    log_file: Optional[str] = None,
    quiet: bool = False,
    debug: bool = False,
    bot_mode: bool = False,
) -> logging.Logger:
    """
    Configure console (and optional file) logging.

    Args:
        name: Logger to configure; ignored in bot mode, where the root logger is used
        level: Console log level string (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path; always receives DEBUG and up
        quiet: If True, only show warnings and errors on console
        debug: If True, use the file/line format and leave discord.py loggers verbose
        bot_mode: Configure the root logger and quiet discord.py

    Returns:
        The configured logger
    """
    logger = logging.getLogger("" if bot_mode else name)
    logger.setLevel(logging.DEBUG)  # Capture everything, filter at handler level
    logger.handlers.clear()

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    log_format = DEBUG_FORMAT if debug else DEFAULT_FORMAT

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING if quiet else numeric_level)
    console_handler.setFormatter(logging.Formatter(log_format, datefmt=DEFAULT_DATE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(DEBUG_FORMAT, datefmt=DEFAULT_DATE_FORMAT))
        logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")

    if bot_mode and not debug:
        quiet_discord_loggers()

    return logger


def add_logging_args(parser) -> None:
    """Add --log-level, --log-file, --quiet and --debug to an ArgumentParser."""
    log_group = parser.add_argument_group("logging")

    log_group.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set log level (default: INFO)",
    )
    log_group.add_argument(
        "--log-file",
        default=None,
        help="Optional log file path (logs to console by default)",
    )
    log_group.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress console output except warnings and errors",
    )
    log_group.add_argument(
        "--debug",
        action="store_true",
        help="File/line log format; keeps discord.py logging verbose in bot mode",
    )
