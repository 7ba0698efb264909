"""bookmark_api/lambda_function.py

Lambda API for the bookmark vault.
Saves and lists URL bookmarks stored in MongoDB, scoped to the caller.

Routes (via API Gateway HTTP API proxy):
    GET     /health                 — liveness; never touches the database
    GET     /bookmarks?<params>     — list bookmarks (owner, q, tag, page, limit)
    POST    /bookmarks              — create bookmark
    OPTIONS /*                      — CORS preflight

Routing policy:
    ROUTES is scanned in order and the first entry whose method matches and
    whose pattern fully matches the path handles the request. Named groups
    in the pattern are passed to the handler as params.

Auth:
    API Gateway's Cognito JWT authorizer verifies the id token and attaches
    its claims to requestContext.authorizer.jwt.claims. Handlers read the
    principal from there; a missing `sub` claim is answered with 401.

Environment variables:
    SERVICE_NAME           default: bookmark-vault
    MONGODB_SECRET_ID      default: bookmark-vault/mongodb
    MONGODB_DB             default: bookmark_vault
    BOOKMARKS_COLLECTION   default: bookmarks
    MONGODB_URI            optional; bypasses Secrets Manager (local runs)
    SECRETS_REGION         default: $AWS_REGION or us-east-1
    CORS_ORIGIN            default: *
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from auth import Unauthenticated
from config import logger
from handlers import _handle_create_bookmark, _handle_health, _handle_list_bookmarks
from http_utils import _cors_headers, _error, _path_method

Handler = Callable[[Dict[str, Any], Dict[str, str]], Dict[str, Any]]


# ---------------------------------------------------------------------------
# Route table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Route:
    method: str
    pattern: re.Pattern
    handler: Handler

    def match(self, method: str, path: str) -> Optional[Dict[str, str]]:
        if method != self.method:
            return None
        m = self.pattern.fullmatch(path)
        if m is None:
            return None
        return {k: v for k, v in m.groupdict().items() if v is not None}


def _route(method: str, pattern: str, handler: Handler) -> Route:
    return Route(method.upper(), re.compile(pattern + r"/?"), handler)


ROUTES: Tuple[Route, ...] = (
    _route("GET", r"/health", _handle_health),
    _route("GET", r"/bookmarks", _handle_list_bookmarks),
    _route("POST", r"/bookmarks", _handle_create_bookmark),
)


def match_route(
    method: str, path: str, routes: Tuple[Route, ...] = ROUTES
) -> Optional[Tuple[Route, Dict[str, str]]]:
    """Return the first (route, params) matching method and path, or None."""
    for route in routes:
        params = route.match(method, path)
        if params is not None:
            return route, params
    return None


# ---------------------------------------------------------------------------
# Handler
# ---------------------------------------------------------------------------


def lambda_handler(event: Dict[str, Any], _context: Any) -> Dict[str, Any]:
    method, path = _path_method(event)

    if method == "OPTIONS":
        return {"statusCode": 204, "headers": _cors_headers(), "body": ""}

    logger.info("[INFO] route method=%s path=%s", method, path)

    matched = match_route(method, path)
    if matched is None:
        return _error(404, "Not found")
    route, params = matched

    try:
        return route.handler(event, params)
    except Unauthenticated as exc:
        logger.warning("[WARNING] unauthenticated request method=%s path=%s: %s", method, path, exc)
        return _error(401, "Unauthorized", detail=str(exc))
    except Exception as exc:
        logger.exception("[ERROR] unhandled error method=%s path=%s", method, path)
        return _error(500, "Internal error", detail=str(exc))
