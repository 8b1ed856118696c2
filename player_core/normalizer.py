"""Map heterogeneous aggregator records onto :class:`Song`.

Meting-compatible APIs disagree on field names (``name``/``title``,
``artist``/``author``, ``pic``/``cover``) and frequently omit ids.
Normalisation never fails: missing fields degrade to placeholders.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping

from player_core.models import Song

UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_ARTIST = "Unknown Artist"


def _first(record: Mapping[str, Any], *keys: str) -> Any:
    """Return the first truthy value among *keys*, else ``None``."""
    for key in keys:
        value = record.get(key)
        if value:
            return value
    return None


def _coerce_id(value: Any, position: int) -> int:
    if value and not isinstance(value, bool):
        try:
            return int(value)
        except (TypeError, ValueError):
            pass
    return position + 1


def normalize(record: Any, position: int) -> Song:
    """Build a :class:`Song` from one raw record at *position* in the response."""
    if not isinstance(record, Mapping):
        record = {}

    return Song(
        id=_coerce_id(record.get("id"), position),
        name=str(_first(record, "name", "title") or UNKNOWN_TITLE),
        artist=str(_first(record, "artist", "author") or UNKNOWN_ARTIST),
        url=str(_first(record, "url") or ""),
        pic_url=str(_first(record, "pic", "cover") or ""),
    )


def normalize_all(records: Iterable[Any]) -> List[Song]:
    return [normalize(record, i) for i, record in enumerate(records)]
