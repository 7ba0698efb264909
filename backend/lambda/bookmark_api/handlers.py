"""handlers.py — Route handlers: health, list bookmarks, create bookmark.

Part of bookmark_api.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING

from auth import get_principal
from config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, SERVICE_NAME, logger
from http_utils import _error, _json_body, _query_params, _response
from persistence import _get_collection
from serialization import _now_utc, _serialize_document

__all__ = [
    "_build_list_filter",
    "_handle_create_bookmark",
    "_handle_health",
    "_handle_list_bookmarks",
    "_pagination",
]

_URL_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
# _id breaks ties between bookmarks stamped in the same millisecond.
_LIST_SORT = [("updatedAt", DESCENDING), ("_id", DESCENDING)]


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


def _handle_health(event: Dict[str, Any], params: Dict[str, str]) -> Dict[str, Any]:
    return _response(200, {"ok": True, "service": SERVICE_NAME})


# ---------------------------------------------------------------------------
# List
# ---------------------------------------------------------------------------


def _parse_int(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def _pagination(qs: Dict[str, str]) -> tuple[int, int, int]:
    """Return (page, limit, skip); page >= 1 and 1 <= limit <= MAX_PAGE_SIZE."""
    page = max(1, _parse_int(qs.get("page"), 1))
    limit = min(MAX_PAGE_SIZE, max(1, _parse_int(qs.get("limit"), DEFAULT_PAGE_SIZE)))
    return page, limit, (page - 1) * limit


def _build_list_filter(qs: Dict[str, str], user_id: str) -> Dict[str, Any]:
    query: Dict[str, Any] = {}
    # Only the literal "all" lifts the owner filter; any other value means "me".
    if qs.get("owner", "me") != "all":
        query["ownerId"] = user_id

    q = (qs.get("q") or "").strip()
    if q:
        pattern = {"$regex": re.escape(q), "$options": "i"}
        query["$or"] = [{"url": pattern}, {"title": pattern}]

    tag = qs.get("tag")
    if tag:
        query["tags"] = tag
    return query


def _handle_list_bookmarks(event: Dict[str, Any], params: Dict[str, str]) -> Dict[str, Any]:
    principal = get_principal(event)
    qs = _query_params(event)
    page, limit, skip = _pagination(qs)
    query = _build_list_filter(qs, principal.user_id)

    collection = _get_collection()
    total = collection.count_documents(query)
    items: List[Dict[str, Any]] = []
    # A window past the last match is empty; skip values beyond int64 cannot be encoded.
    if skip < total:
        cursor = collection.find(query).sort(_LIST_SORT).skip(skip).limit(limit)
        items = [_serialize_document(doc) for doc in cursor]

    logger.info(
        "[INFO] list bookmarks user=%s owner=%s page=%d limit=%d returned=%d total=%d",
        principal.user_id, qs.get("owner", "me"), page, limit, len(items), total,
    )
    return _response(200, {"items": items, "page": page, "total": total})


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


def _clean_tags(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    return [tag for tag in raw if isinstance(tag, str)]


def _clean_title(raw: Any) -> Optional[str]:
    if not isinstance(raw, str):
        return None
    return raw.strip() or None


def _handle_create_bookmark(event: Dict[str, Any], params: Dict[str, str]) -> Dict[str, Any]:
    principal = get_principal(event)

    try:
        body = _json_body(event)
    except ValueError as exc:
        return _error(400, str(exc))

    url = body.get("url")
    if not isinstance(url, str) or not url.strip():
        return _error(400, "Field 'url' is required.")
    url = url.strip()
    if not _URL_SCHEME_RE.match(url):
        return _error(400, "Field 'url' must start with http:// or https://.")

    now = _now_utc()
    doc: Dict[str, Any] = {
        # Owner always comes from the verified claims, never from the body.
        "ownerId": principal.user_id,
        "url": url,
        "title": _clean_title(body.get("title")),
        "tags": _clean_tags(body.get("tags")),
        "isPublic": bool(body.get("isPublic")),
        "createdAt": now,
        "updatedAt": now,
    }

    result = _get_collection().insert_one(doc)
    doc["_id"] = result.inserted_id
    logger.info("[INFO] created bookmark id=%s user=%s", result.inserted_id, principal.user_id)
    return _response(201, _serialize_document(doc))
