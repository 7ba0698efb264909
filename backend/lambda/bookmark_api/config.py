"""config.py — Central configuration — environment variables, constants, logging.

Part of bookmark_api.
"""
from __future__ import annotations

import logging
import os

__all__ = [
    "BOOKMARKS_COLLECTION",
    "CORS_ORIGIN",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "MONGODB_DB",
    "MONGODB_POOL_SIZE",
    "MONGODB_SECRET_ID",
    "MONGODB_SERVER_SELECTION_TIMEOUT_MS",
    "MONGODB_URI",
    "SECRETS_REGION",
    "SECRET_URI_KEYS",
    "SERVICE_NAME",
    "logger",
]

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

SERVICE_NAME = os.environ.get("SERVICE_NAME", "bookmark-vault")
BOOKMARKS_COLLECTION = os.environ.get("BOOKMARKS_COLLECTION", "bookmarks")
MONGODB_DB = os.environ.get("MONGODB_DB", "bookmark_vault")
MONGODB_SECRET_ID = os.environ.get("MONGODB_SECRET_ID", "bookmark-vault/mongodb")
# Local development only; skips Secrets Manager when set.
MONGODB_URI = os.environ.get("MONGODB_URI", "")
MONGODB_POOL_SIZE = 5
MONGODB_SERVER_SELECTION_TIMEOUT_MS = int(
    os.environ.get("MONGODB_SERVER_SELECTION_TIMEOUT_MS", "5000")
)
SECRETS_REGION = os.environ.get(
    "SECRETS_REGION", os.environ.get("AWS_REGION", "us-east-1")
)
CORS_ORIGIN = os.environ.get("CORS_ORIGIN", "*")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Accepted field names when the secret is a JSON object.
SECRET_URI_KEYS = ("uri", "mongoUri", "MONGODB_URI", "connectionString")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logger = logging.getLogger()
logger.setLevel(logging.INFO)
