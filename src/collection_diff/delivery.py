"""
Chunked delivery of long reports to a reply channel.

A reply channel is anything with an awaitable ``send(text)``. Chunks are sent
one at a time, each send awaited before the next, so the transport sees them in
order.
"""

from __future__ import annotations

import logging
from typing import List, Protocol, Sequence

from .exceptions import DeliveryError

logger = logging.getLogger(__name__)

# Discord rejects messages over 2000 characters; keep headroom for formatting.
DEFAULT_CHUNK_LIMIT = 1900


class ReplyChannel(Protocol):
    async def send(self, text: str) -> object: ...


def chunk_text(text: str, limit: int = DEFAULT_CHUNK_LIMIT) -> List[str]:
    """
    Split text into contiguous segments of at most ``limit`` characters.

    Python strings index by code point, so a multibyte character is never cut.
    Empty text yields no chunks.

    Raises:
        ValueError: If limit is not positive
    """
    if limit <= 0:
        raise ValueError(f"chunk limit must be positive, got {limit}")
    return [text[i : i + limit] for i in range(0, len(text), limit)]


async def deliver_chunks(channel: ReplyChannel, chunks: Sequence[str]) -> int:
    """
    Send chunks in order, stopping at the first failure.

    Returns:
        Number of chunks delivered

    Raises:
        DeliveryError: On the first failed send; carries how many chunks went out
    """
    total = len(chunks)
    for i, chunk in enumerate(chunks):
        try:
            await channel.send(chunk)
        except DeliveryError as e:
            logger.error(f"Delivery failed at chunk {i + 1}/{total}: {e}")
            raise DeliveryError(str(e), delivered=i, total=total) from e
        except Exception as e:
            logger.error(f"Delivery failed at chunk {i + 1}/{total}: {e}")
            raise DeliveryError(
                f"Failed to send chunk {i + 1} of {total}: {e}",
                delivered=i,
                total=total,
            ) from e
        logger.debug(f"Sent chunk {i + 1}/{total} ({len(chunk)} chars)")
    return total


async def send_long_message(
    channel: ReplyChannel, text: str, limit: int = DEFAULT_CHUNK_LIMIT
) -> int:
    """Chunk ``text`` and deliver it to ``channel``. Returns the chunk count."""
    return await deliver_chunks(channel, chunk_text(text, limit))


__all__ = [
    "DEFAULT_CHUNK_LIMIT",
    "ReplyChannel",
    "chunk_text",
    "deliver_chunks",
    "send_long_message",
]
