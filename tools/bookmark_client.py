#!/usr/bin/env python3
"""
Command-line client for the bookmark vault API.

Mirrors the web app's fetch wrapper: sends the Cognito id token as a bearer
token when one is available. Without a token it falls back to an
`x-user-id` header, which only a development stack without the JWT
authorizer will honour. Drop the fallback once every stage has the
authorizer attached.

Usage:
    python tools/bookmark_client.py health
    python tools/bookmark_client.py list [--owner all] [--q text] [--tag t] [--page N] [--limit N]
    python tools/bookmark_client.py create URL [--title T] [--tag t ...] [--public]

Environment:
    BOOKMARK_API_BASE  (required, e.g. https://abc123.execute-api.us-east-1.amazonaws.com)
    BOOKMARK_ID_TOKEN  (Cognito id token; preferred)
    BOOKMARK_USER_ID   (development-only fallback identity)
"""

import argparse
import json
import os
import sys
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Dict, Optional

API_BASE = os.environ.get("BOOKMARK_API_BASE", "")
ID_TOKEN = os.environ.get("BOOKMARK_ID_TOKEN", "")
USER_ID = os.environ.get("BOOKMARK_USER_ID", "")


class BookmarkApiError(Exception):
    """Non-2xx response; the message is the response body text."""

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status


def api(
    path: str,
    method: str = "GET",
    json_body: Optional[Dict[str, Any]] = None,
    token: Optional[str] = None,
    user_id: Optional[str] = None,
    query: Optional[Dict[str, Any]] = None,
    base: Optional[str] = None,
) -> Any:
    """Call the API and return the decoded JSON body (None for 204)."""
    root = (base if base is not None else API_BASE).rstrip("/")
    route = path if path.startswith("/") else f"/{path}"
    url = f"{root}{route}"
    if query:
        encoded_qs = urllib.parse.urlencode({k: v for k, v in query.items() if v is not None})
        if encoded_qs:
            url = f"{url}?{encoded_qs}"

    headers: Dict[str, str] = {"Accept": "application/json"}
    data = None
    if json_body is not None:
        headers["Content-Type"] = "application/json"
        data = json.dumps(json_body).encode("utf-8")
    if token:
        headers["Authorization"] = f"Bearer {token}"
    elif user_id:
        headers["x-user-id"] = user_id

    req = urllib.request.Request(url=url, method=method.upper(), headers=headers, data=data)
    try:
        with urllib.request.urlopen(req, timeout=20) as resp:
            if resp.status == 204:
                return None
            text = resp.read().decode("utf-8")
            return json.loads(text) if text else None
    except urllib.error.HTTPError as exc:
        raw = exc.read().decode("utf-8", errors="replace") if hasattr(exc, "read") else ""
        raise BookmarkApiError(exc.code, raw or exc.reason or f"HTTP {exc.code}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Bookmark vault API client")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("health", help="GET /health")

    list_p = sub.add_parser("list", help="GET /bookmarks")
    list_p.add_argument("--owner", choices=["me", "all"], default=None)
    list_p.add_argument("--q", default=None, help="substring match on url or title")
    list_p.add_argument("--tag", default=None)
    list_p.add_argument("--page", type=int, default=None)
    list_p.add_argument("--limit", type=int, default=None)

    create_p = sub.add_parser("create", help="POST /bookmarks")
    create_p.add_argument("url")
    create_p.add_argument("--title", default=None)
    create_p.add_argument("--tag", dest="tags", action="append", default=[])
    create_p.add_argument("--public", action="store_true")
    return parser


def run(args: argparse.Namespace) -> Any:
    auth = {"token": ID_TOKEN or None, "user_id": USER_ID or None}
    if args.command == "health":
        return api("/health")
    if args.command == "list":
        query = {
            "owner": args.owner,
            "q": args.q,
            "tag": args.tag,
            "page": args.page,
            "limit": args.limit,
        }
        return api("/bookmarks", query=query, **auth)
    payload: Dict[str, Any] = {"url": args.url, "tags": args.tags, "isPublic": args.public}
    if args.title is not None:
        payload["title"] = args.title
    return api("/bookmarks", method="POST", json_body=payload, **auth)


def main() -> int:
    args = build_parser().parse_args()
    if not API_BASE:
        print("ERROR: BOOKMARK_API_BASE not set")
        return 1
    try:
        result = run(args)
    except BookmarkApiError as exc:
        print(f"ERROR: HTTP {exc.status}: {exc}")
        return 1
    except urllib.error.URLError as exc:
        print(f"ERROR: API unreachable: {exc}")
        return 1
    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
