from __future__ import annotations

from typing import Dict, Iterable, List

from .models import DiffResult, Entity, EntityUpdate


def _by_id(entities: Iterable[Entity]) -> Dict[str, Entity]:
    # Later duplicates overwrite earlier ones but keep the first position.
    return {str(e.id): e for e in entities}


def compute_diff(old: Iterable[Entity], new: Iterable[Entity]) -> DiffResult:
    """
    Classify entities of two snapshots into added, removed and updated.

    ``added`` and ``updated`` follow the order of ``new``; ``removed`` follows
    the order of ``old``. Versions are compared for exact equality only.
    """
    old_map = _by_id(old)
    new_map = _by_id(new)

    added: List[Entity] = []
    updated: List[EntityUpdate] = []
    removed: List[Entity] = []

    for key, entity in new_map.items():
        before = old_map.get(key)
        if before is None:
            added.append(entity)
        elif before.version != entity.version:
            updated.append(EntityUpdate(before=before, after=entity))

    for key, entity in old_map.items():
        if key not in new_map:
            removed.append(entity)

    return DiffResult(added=tuple(added), removed=tuple(removed), updated=tuple(updated))


__all__ = ["compute_diff"]
