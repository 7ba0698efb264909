"""aws_clients.py — Singleton AWS service clients.

Part of bookmark_api.
"""
from __future__ import annotations

from typing import Optional

import boto3
from botocore.config import Config

from config import SECRETS_REGION

__all__ = [
    "_get_secretsmanager",
    "_secretsmanager",
]

# ---------------------------------------------------------------------------
# AWS client singletons
# ---------------------------------------------------------------------------

_secretsmanager = None


def _get_secretsmanager(region: Optional[str] = None):
    """Get (or create) the Secrets Manager client singleton."""
    global _secretsmanager
    if _secretsmanager is None:
        _secretsmanager = boto3.client(
            "secretsmanager",
            region_name=region or SECRETS_REGION,
            config=Config(retries={"max_attempts": 3, "mode": "standard"}),
        )
    return _secretsmanager
