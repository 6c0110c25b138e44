# src/collection_diff/__init__.py
from __future__ import annotations

# -------- Data model --------
from .models import DiffResult, Entity, EntityUpdate, Snapshot

# -------- Core --------
from .diff import compute_diff
from .normalize import normalize_record, normalize_records
from .report import format_report
from .delivery import chunk_text, deliver_chunks, send_long_message

# -------- Commands --------
from .command import (
    CommandResult,
    DiffCommand,
    handle_command,
    handle_text,
    parse_command,
)

# -------- Errors --------
from .exceptions import (
    CollectionDiffError,
    DeliveryError,
    RemoteError,
    UsageError,
)

__all__ = [
    "Entity", "EntityUpdate", "DiffResult", "Snapshot",
    "compute_diff", "normalize_record", "normalize_records", "format_report",
    "chunk_text", "deliver_chunks", "send_long_message",
    "DiffCommand", "CommandResult", "parse_command", "handle_command", "handle_text",
    "CollectionDiffError", "UsageError", "RemoteError", "DeliveryError",
]
__version__ = "1.0.0"
