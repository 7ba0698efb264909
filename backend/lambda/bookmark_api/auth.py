"""auth.py — Principal extraction from API Gateway JWT authorizer claims.

API Gateway's Cognito JWT authorizer verifies the id token (signature,
audience, expiry) before the Lambda runs and forwards the claim set under
requestContext.authorizer. This module only reads those claims; it never
verifies tokens and never trusts identity carried in headers or the body.

Part of bookmark_api.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

__all__ = [
    "GROUPS_CLAIM",
    "Principal",
    "Unauthenticated",
    "get_claims",
    "get_email",
    "get_groups",
    "get_principal",
    "get_user_id",
]

GROUPS_CLAIM = "cognito:groups"


class Unauthenticated(Exception):
    """Raised when the request carries no subject claim."""


@dataclass(frozen=True)
class Principal:
    user_id: str
    email: Optional[str] = None
    groups: List[str] = field(default_factory=list)


def get_claims(event: Dict[str, Any]) -> Dict[str, Any]:
    """Return the verified claim set, or {} when the authorizer attached none."""
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    jwt_ctx = authorizer.get("jwt") or {}
    claims = jwt_ctx.get("claims")
    if claims is None:
        # REST API / Lambda authorizer shape
        claims = authorizer.get("claims")
    return claims if isinstance(claims, dict) else {}


def get_user_id(event: Dict[str, Any]) -> str:
    sub = get_claims(event).get("sub")
    if not isinstance(sub, str) or not sub.strip():
        raise Unauthenticated("Missing subject claim")
    return sub.strip()


def get_email(event: Dict[str, Any]) -> Optional[str]:
    email = get_claims(event).get("email")
    if isinstance(email, str) and email.strip():
        return email.strip()
    return None


def _split_groups(raw: str) -> List[str]:
    # API Gateway stringifies list claims as "[admin editors]".
    text = raw.strip()
    if text.startswith("[") and text.endswith("]"):
        text = text[1:-1]
    parts = text.replace(",", " ").split()
    return [part for part in parts if part]


def get_groups(event: Dict[str, Any]) -> List[str]:
    raw = get_claims(event).get(GROUPS_CLAIM)
    if raw is None:
        return []
    if isinstance(raw, str):
        return _split_groups(raw)
    if isinstance(raw, (list, tuple)):
        return [str(item) for item in raw if isinstance(item, str) and item]
    return []


def get_principal(event: Dict[str, Any]) -> Principal:
    """Validate the claim set once and return a typed principal."""
    return Principal(
        user_id=get_user_id(event),
        email=get_email(event),
        groups=get_groups(event),
    )
