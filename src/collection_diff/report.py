from __future__ import annotations

from typing import List

from .models import DiffResult, Entity, EntityUpdate

BULLET = "•"
ARROW = "→"
NO_DIFFERENCES = "no differences."


def _entity_line(e: Entity) -> str:
    return f"{BULLET} {e.name} (v{e.version})"


def _update_line(u: EntityUpdate) -> str:
    return f"{BULLET} {u.before.name}: v{u.before.version} {ARROW} v{u.after.version}"


def format_header(slug: str, old_revision: int, new_revision: int) -> str:
    return f"diff **{slug}** between revision **{old_revision}** and **{new_revision}**"


def format_report(
    slug: str, old_revision: int, new_revision: int, diff: DiffResult
) -> str:
    """
    Render a diff as chat-ready markdown.

    Sections appear in a fixed order (new, removed, updated) and empty ones
    are skipped. An empty diff renders the header plus ``no differences.``.
    """
    parts: List[str] = [format_header(slug, old_revision, new_revision)]

    if diff.added:
        parts.append("\n**new:**\n" + "\n".join(_entity_line(e) for e in diff.added))
    if diff.removed:
        parts.append(
            "\n**removed:**\n" + "\n".join(_entity_line(e) for e in diff.removed)
        )
    if diff.updated:
        parts.append(
            "\n**updated:**\n" + "\n".join(_update_line(u) for u in diff.updated)
        )
    if diff.is_empty:
        parts.append(NO_DIFFERENCES)

    return "\n".join(parts)


__all__ = ["format_header", "format_report", "NO_DIFFERENCES"]
