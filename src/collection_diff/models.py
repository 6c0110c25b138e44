"""Value records shared by the diff engine, the report and the fetch client."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Tuple


@dataclass(frozen=True)
class Entity:
    """
    One item (a mod) within a collection revision.

    Attributes:
        id: Identifier, compared as text
        name: Display name
        version: Opaque version token, compared only for equality
    """

    id: str
    name: str
    version: str


# A collection at one revision, in API order.
Snapshot = Tuple[Entity, ...]


@dataclass(frozen=True)
class EntityUpdate:
    """An entity present in both revisions with a different version."""

    before: Entity
    after: Entity


@dataclass(frozen=True)
class DiffResult:
    """Classified differences between two snapshots."""

    added: Tuple[Entity, ...] = ()
    removed: Tuple[Entity, ...] = ()
    updated: Tuple[EntityUpdate, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.updated)

    def to_dict(self) -> dict[str, Any]:
        return {
            "added": [asdict(e) for e in self.added],
            "removed": [asdict(e) for e in self.removed],
            "updated": [
                {"before": asdict(u.before), "after": asdict(u.after)}
                for u in self.updated
            ],
        }


__all__ = ["Entity", "Snapshot", "EntityUpdate", "DiffResult"]
