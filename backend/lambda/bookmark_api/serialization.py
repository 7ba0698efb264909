"""serialization.py — BSON document rendering and timestamp helpers.

Part of bookmark_api.
"""
from __future__ import annotations

import datetime as dt
from typing import Any, Dict

from bson import ObjectId

__all__ = [
    "_isoformat_z",
    "_json_default",
    "_now_utc",
    "_serialize_document",
]


def _now_utc() -> dt.datetime:
    # Mongo stores millisecond precision; truncate so the echoed value matches a read.
    now = dt.datetime.now(dt.timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def _isoformat_z(value: dt.datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    value = value.astimezone(dt.timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def _serialize_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Render a stored bookmark for the API: `_id` becomes string `id`."""
    out: Dict[str, Any] = {}
    if "_id" in doc:
        out["id"] = str(doc["_id"])
    for key, value in doc.items():
        if key == "_id":
            continue
        if isinstance(value, ObjectId):
            value = str(value)
        elif isinstance(value, dt.datetime):
            value = _isoformat_z(value)
        out[key] = value
    return out


def _json_default(obj: Any) -> Any:
    if isinstance(obj, ObjectId):
        return str(obj)
    if isinstance(obj, dt.datetime):
        return _isoformat_z(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
