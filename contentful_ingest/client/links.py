"""Resolution of link objects against the records included in a page."""

from itertools import chain
from typing import Any, Optional

from ..constants import CONSTANTS

LinkKey = tuple[str, str]


def build_index(items: list[dict[str, Any]], includes: dict[str, Any]) -> dict[LinkKey, dict]:
    """Index a page's items and included records by (type, id)."""
    index: dict[LinkKey, dict] = {}
    records = chain(items, includes.get("Entry") or [], includes.get("Asset") or [])
    for record in records:
        key = _record_key(record)
        if key is not None:
            index.setdefault(key, record)
    return index


def resolve_entry(
    record: dict[str, Any],
    index: dict[LinkKey, dict],
    max_depth: int = CONSTANTS.MAX_INCLUDE_LEVEL,
) -> dict[str, Any]:
    """Return a copy of ``record`` with links in its fields replaced.

    Links that point at a record already on the current resolution path are
    left untouched, as are links to records the page did not include.
    """
    key = _record_key(record)
    trail = frozenset([key]) if key else frozenset()
    return _resolve_record(record, index, trail, max_depth)


def _resolve_record(record, index, trail, depth):
    resolved = dict(record)
    fields = record.get("fields")
    if isinstance(fields, dict):
        resolved["fields"] = {
            name: _resolve_value(value, index, trail, depth) for name, value in fields.items()
        }
    return resolved


def _resolve_value(value, index, trail, depth):
    if isinstance(value, list):
        return [_resolve_value(item, index, trail, depth) for item in value]
    if not isinstance(value, dict):
        return value

    key = _link_key(value)
    if key is None:
        return {name: _resolve_value(item, index, trail, depth) for name, item in value.items()}

    target = index.get(key)
    if target is None or key in trail or depth <= 0:
        return value
    return _resolve_record(target, index, trail | {key}, depth - 1)


def _record_key(record: Any) -> Optional[LinkKey]:
    sys = record.get("sys") if isinstance(record, dict) else None
    if not isinstance(sys, dict) or "id" not in sys:
        return None
    return sys.get("type", "Entry"), sys["id"]


def _link_key(value: dict[str, Any]) -> Optional[LinkKey]:
    sys = value.get("sys")
    if not isinstance(sys, dict) or sys.get("type") != "Link":
        return None
    if "linkType" not in sys or "id" not in sys:
        return None
    return sys["linkType"], sys["id"]
