# src/collection_diff/cli.py
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Optional

from .command import CommandResult, build_command, handle_command, user_message
from .config import BotConfig, load_config, mask, validate_config
from .connectivity import get_source
from .delivery import send_long_message
from .exceptions import DeliveryError, UsageError
from .logging_config import add_logging_args, setup_logging

EXIT_OK = 0
EXIT_REMOTE = 1
EXIT_USAGE = 2
EXIT_DELIVERY = 3


class StdoutChannel:
    """Reply channel writing chunks back-to-back on stdout."""

    async def send(self, text: str) -> None:
        sys.stdout.write(text)
        sys.stdout.flush()


# ----------------------------
# Commands
# ----------------------------
def _exit_code(result: CommandResult) -> int:
    if isinstance(result.error, UsageError):
        return EXIT_USAGE
    if isinstance(result.error, DeliveryError):
        return EXIT_DELIVERY
    return EXIT_OK if result.ok else EXIT_REMOTE


async def _run_diff(args: argparse.Namespace, config: BotConfig) -> int:
    try:
        command = build_command(args.slug, args.old_revision, args.new_revision)
    except UsageError as e:
        print(user_message(e), file=sys.stderr)
        return EXIT_USAGE

    with get_source(config) as source:
        result = await handle_command(command, source)

    if not result.ok:
        print(user_message(result.error), file=sys.stderr)
        return _exit_code(result)

    limit = args.chunk_limit or config.chunk_limit

    if args.telegram:
        from .notifications.telegram import TELEGRAM_MAX_MESSAGE, TelegramChannel

        try:
            channel = TelegramChannel.from_config(config)
        except ValueError as e:
            print(f"[collection-diff] {e}", file=sys.stderr)
            return EXIT_USAGE
        try:
            sent = await send_long_message(channel, result.report, min(limit, TELEGRAM_MAX_MESSAGE))
        except DeliveryError as e:
            print(user_message(e), file=sys.stderr)
            return EXIT_DELIVERY
        finally:
            channel.close()
        print(f"Sent {sent} message(s) to Telegram chat {config.telegram_chat_id}.")
        return EXIT_OK

    if args.format == "json":
        out = {
            "slug": command.slug,
            "old_revision": command.old_revision,
            "new_revision": command.new_revision,
            **result.diff.to_dict(),
        }
        print(json.dumps(out, indent=2, ensure_ascii=False))
        return EXIT_OK

    try:
        await send_long_message(StdoutChannel(), result.report + "\n", limit)
    except DeliveryError as e:
        print(user_message(e), file=sys.stderr)
        return EXIT_DELIVERY
    return EXIT_OK


def cmd_diff(args: argparse.Namespace) -> int:
    """Diff two revisions and print (or post) the report."""
    config = load_config(args.env_file)
    return asyncio.run(_run_diff(args, config))


def cmd_bot(args: argparse.Namespace) -> int:
    """Run the Discord bot in the foreground."""
    from .discord_bot import run_bot

    config = load_config(args.env_file)
    try:
        run_bot(config)
    except ValueError as e:
        print(f"[collection-diff bot] {e}", file=sys.stderr)
        return EXIT_USAGE
    return EXIT_OK


def cmd_config(args: argparse.Namespace) -> int:
    """Show which integrations are configured, secrets masked."""
    config = load_config(args.env_file)
    status = validate_config(config)

    print("Configuration")
    print(f"  api_url:         {config.api_url}")
    print(f"  app:             {config.app_name} {config.app_version}")
    print(f"  nexus_api_key:   {mask(config.nexus_api_key) or '(not set)'}")
    print(f"  discord token:   {mask(config.discord_bot_token) or '(not set)'}")
    print(f"  telegram token:  {mask(config.telegram_bot_token) or '(not set)'}")
    print(f"  telegram chat:   {config.telegram_chat_id or '(not set)'}")
    print(f"  trigger:         {config.command_trigger}")
    print(f"  chunk limit:     {config.chunk_limit}")
    print()
    for name, ok in status.items():
        print(f"  {name:<10} {'OK' if ok else 'missing'}")
    return EXIT_OK


# ----------------------------
# Parser
# ----------------------------
def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="collection-diff",
        description="Changelog between two revisions of a Nexus Mods collection",
    )
    ap.add_argument(
        "--env-file", default=".env", help="dotenv file to load (default: .env)"
    )
    add_logging_args(ap)
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_diff = sub.add_parser("diff", help="Diff two revisions of a collection")
    p_diff.add_argument("slug", help="Collection slug (e.g. rcuccp)")
    # Kept as strings so bad revisions surface as the same usage error the bot gives
    p_diff.add_argument("old_revision", help="Older revision number")
    p_diff.add_argument("new_revision", help="Newer revision number")
    p_diff.add_argument(
        "--format", choices=["text", "json"], default="text", help="Output format"
    )
    p_diff.add_argument(
        "--telegram",
        action="store_true",
        help="Post the report to the configured Telegram chat instead of stdout",
    )
    p_diff.add_argument(
        "--chunk-limit", type=int, default=None, help="Max characters per message"
    )
    p_diff.set_defaults(func=cmd_diff)

    p_bot = sub.add_parser("bot", help="Run the Discord bot")
    p_bot.set_defaults(func=cmd_bot)

    p_config = sub.add_parser("config", help="Show configuration status")
    p_config.set_defaults(func=cmd_config)

    return ap


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint."""
    ap = build_parser()
    args = ap.parse_args(argv)
    if getattr(args, "chunk_limit", None) is not None and args.chunk_limit <= 0:
        ap.error("--chunk-limit must be positive")

    setup_logging(
        level=args.log_level,
        log_file=args.log_file,
        quiet=args.quiet,
        debug=args.debug,
        bot_mode=args.cmd == "bot",
    )
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
