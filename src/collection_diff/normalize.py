from __future__ import annotations

from typing import Any, Iterable, List, Optional

from .models import Entity, Snapshot

UNKNOWN_VERSION = "unknown"


def _as_dict(x: Any) -> dict:
    return x if isinstance(x, dict) else {}


def _norm_id(x: Any) -> Optional[str]:
    """Normalize an API identifier to text.

    Ids arrive as ints or strings; booleans, blanks and other types are treated
    as missing.
    """
    if x is None or isinstance(x, bool):
        return None
    if isinstance(x, int):
        return str(x)
    if isinstance(x, str):
        s = x.strip()
        return s or None
    return None


def _norm_text(x: Any) -> Optional[str]:
    if x is None:
        return None
    s = str(x).strip()
    return s or None


def normalize_record(record: Any) -> Optional[Entity]:
    """
    Turn one raw ``modFiles`` record into an Entity, or None if it cannot be keyed.

    The parent mod's id/name win when present; otherwise the file's own
    id/name are used. A missing version becomes ``"unknown"``.
    """
    rec = _as_dict(record)
    file_ = _as_dict(rec.get("file"))
    mod = _as_dict(file_.get("mod"))

    entity_id = (
        _norm_id(mod.get("modId"))
        or _norm_id(file_.get("fileId"))
        or _norm_id(rec.get("fileId"))
    )
    if entity_id is None:
        return None

    name = _norm_text(mod.get("name")) or _norm_text(file_.get("name")) or entity_id
    version = _norm_text(file_.get("version")) or UNKNOWN_VERSION
    return Entity(id=entity_id, name=name, version=version)


def normalize_records(records: Iterable[Any]) -> Snapshot:
    out: List[Entity] = []
    for rec in records:
        entity = normalize_record(rec)
        if entity is not None:
            out.append(entity)
    return tuple(out)


__all__ = ["UNKNOWN_VERSION", "normalize_record", "normalize_records"]
