"""
Diff command parsing and handling.

The handler never raises for expected failures: it returns a CommandResult
holding either the report or the error, and the front end turns the error
into user-facing text with ``user_message``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from .connectivity.base import RevisionSource
from .delivery import ReplyChannel, send_long_message
from .diff import compute_diff
from .exceptions import CollectionDiffError, DeliveryError, RemoteError, UsageError
from .models import DiffResult
from .report import format_report

logger = logging.getLogger(__name__)

DEFAULT_TRIGGER = "diff"
REMOTE_FAILURE_MESSAGE = (
    "Could not fetch those revisions. Check the collection slug and revision numbers, then retry."
)
DELIVERY_FAILURE_MESSAGE = "The report could not be delivered in full ({delivered} of {total} parts sent)."


def usage_text(trigger: str = DEFAULT_TRIGGER) -> str:
    return f"Usage: `{trigger} <collection-slug> <revisionA> <revisionB>`"


@dataclass(frozen=True)
class DiffCommand:
    slug: str
    old_revision: int
    new_revision: int


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of one diff command.

    Attributes:
        command: The parsed command (None if parsing failed)
        diff: Classified differences on success
        report: Rendered report text on success
        error: The failure on error
    """

    command: Optional[DiffCommand] = None
    diff: Optional[DiffResult] = None
    report: Optional[str] = None
    error: Optional[CollectionDiffError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _parse_revision(raw: str, trigger: str) -> int:
    try:
        return int(raw, 10)
    except ValueError:
        raise UsageError(
            f"Revision numbers must be integers, got {raw!r}.", usage_text(trigger)
        ) from None


def build_command(
    slug: str, old_revision: str, new_revision: str, *, trigger: str = DEFAULT_TRIGGER
) -> DiffCommand:
    """Validate pre-split arguments into a DiffCommand.

    Raises:
        UsageError: If the slug is blank or a revision is not an integer
    """
    if not slug or not slug.strip():
        raise UsageError("A collection slug is required.", usage_text(trigger))
    return DiffCommand(
        slug=slug.strip(),
        old_revision=_parse_revision(old_revision, trigger),
        new_revision=_parse_revision(new_revision, trigger),
    )


def parse_command(text: str, trigger: str = DEFAULT_TRIGGER) -> DiffCommand:
    """
    Parse ``<trigger> <slug> <revisionA> <revisionB>``.

    Raises:
        UsageError: Wrong trigger, wrong argument count, or non-integer revision
    """
    tokens = text.split()
    if not tokens or tokens[0] != trigger:
        raise UsageError(f"Not a {trigger} command.", usage_text(trigger))
    args = tokens[1:]
    if len(args) != 3:
        raise UsageError(
            f"Expected 3 arguments, got {len(args)}.", usage_text(trigger)
        )
    return build_command(*args, trigger=trigger)


async def fetch_both(source: RevisionSource, command: DiffCommand):
    """
    Fetch both revisions concurrently; fails if either fetch fails.

    Both fetches run to completion before any error is raised, so the source
    is never closed under a fetch still in flight.
    """
    results = await asyncio.gather(
        asyncio.to_thread(source.fetch_revision, command.slug, command.old_revision),
        asyncio.to_thread(source.fetch_revision, command.slug, command.new_revision),
        return_exceptions=True,
    )
    for outcome in results:
        if isinstance(outcome, BaseException):
            raise outcome
    return results


async def handle_command(command: DiffCommand, source: RevisionSource) -> CommandResult:
    try:
        old, new = await fetch_both(source, command)
    except RemoteError as e:
        logger.error(
            f"Fetch failed for {command.slug} "
            f"{command.old_revision}..{command.new_revision}: {e} payload={e.payload!r}"
        )
        return CommandResult(command=command, error=e)

    diff = compute_diff(old, new)
    logger.info(
        f"Diff {command.slug} {command.old_revision}..{command.new_revision}: "
        f"{len(diff.added)} added, {len(diff.removed)} removed, {len(diff.updated)} updated"
    )
    report = format_report(command.slug, command.old_revision, command.new_revision, diff)
    return CommandResult(command=command, diff=diff, report=report)


async def handle_text(
    text: str, source: RevisionSource, trigger: str = DEFAULT_TRIGGER
) -> CommandResult:
    """Parse and handle a free-text command. Usage errors skip the fetch."""
    try:
        command = parse_command(text, trigger)
    except UsageError as e:
        logger.debug(f"Rejected command {text!r}: {e}")
        return CommandResult(error=e)
    return await handle_command(command, source)


def user_message(error: CollectionDiffError) -> str:
    if isinstance(error, UsageError):
        return f"{error} {error.usage}".strip()
    if isinstance(error, RemoteError):
        return REMOTE_FAILURE_MESSAGE
    if isinstance(error, DeliveryError):
        return DELIVERY_FAILURE_MESSAGE.format(delivered=error.delivered, total=error.total)
    return "Something went wrong, please retry."


async def respond(
    result: CommandResult,
    reply: ReplyChannel,
    channel: ReplyChannel,
    limit: int,
) -> int:
    """
    Deliver a result: the report goes to ``channel`` in chunks, an error goes
    to ``reply`` as one message.

    Returns:
        Number of messages sent

    Raises:
        DeliveryError: If a send fails
    """
    if result.ok:
        return await send_long_message(channel, result.report or "", limit)
    return await send_long_message(reply, user_message(result.error), limit)


__all__ = [
    "DiffCommand",
    "CommandResult",
    "build_command",
    "parse_command",
    "fetch_both",
    "handle_command",
    "handle_text",
    "user_message",
    "usage_text",
    "respond",
]
