"""http_utils.py — HTTP response building, body parsing, path/method extraction.

Part of bookmark_api.
"""
from __future__ import annotations

import base64
import json
from typing import Any, Dict, Tuple

from config import CORS_ORIGIN
from serialization import _json_default

__all__ = [
    "_cors_headers",
    "_error",
    "_json_body",
    "_path_method",
    "_query_params",
    "_response",
]

# ---------------------------------------------------------------------------
# HTTP helpers
# ---------------------------------------------------------------------------


def _cors_headers() -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": CORS_ORIGIN,
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Authorization, Content-Type, X-User-Id",
    }


def _response(status_code: int, payload: Any) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {**_cors_headers(), "Content-Type": "application/json"},
        "body": json.dumps(payload, default=_json_default),
    }


def _error(status_code: int, message: str, **extra: Any) -> Dict[str, Any]:
    code = str(extra.pop("code", "") or "").strip().upper()
    if not code:
        if status_code == 400:
            code = "INVALID_INPUT"
        elif status_code == 401:
            code = "UNAUTHENTICATED"
        elif status_code == 404:
            code = "NOT_FOUND"
        else:
            code = "INTERNAL_ERROR"
    body: Dict[str, Any] = {
        "success": False,
        "error": message,
        "code": code,
    }
    body.update(extra)
    return _response(status_code, body)


def _json_body(event: Dict[str, Any]) -> Dict[str, Any]:
    raw = event.get("body")
    if raw in (None, ""):
        raise ValueError("Request body must be JSON")

    if event.get("isBase64Encoded"):
        raw = base64.b64decode(raw).decode("utf-8")

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON body: {exc}") from exc

    if not isinstance(parsed, dict):
        raise ValueError("JSON body must be an object")
    return parsed


def _query_params(event: Dict[str, Any]) -> Dict[str, str]:
    qs = event.get("queryStringParameters") or {}
    return {str(k): str(v) for k, v in qs.items() if v is not None}


def _path_method(event: Dict[str, Any]) -> Tuple[str, str]:
    http = (event.get("requestContext") or {}).get("http") or {}
    method = (http.get("method") or event.get("httpMethod") or "").upper()
    path = event.get("rawPath") or event.get("path") or "/"
    return method, path
