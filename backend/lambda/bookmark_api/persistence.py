"""persistence.py — MongoDB connection provider for the bookmarks collection.

Resolves the connection URI (Secrets Manager, or MONGODB_URI for local runs),
opens one pooled MongoClient per process and ensures the collection indexes.
All of it happens at most once per warm container. If any step fails the
provider drops what it built so the next invocation starts over.

Part of bookmark_api.
"""
from __future__ import annotations

import json
import threading
from typing import Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection

from aws_clients import _get_secretsmanager
from config import (
    BOOKMARKS_COLLECTION,
    MONGODB_DB,
    MONGODB_POOL_SIZE,
    MONGODB_SECRET_ID,
    MONGODB_SERVER_SELECTION_TIMEOUT_MS,
    MONGODB_URI,
    SECRET_URI_KEYS,
    logger,
)

__all__ = [
    "BOOKMARK_INDEXES",
    "ConfigurationError",
    "ConnectionProvider",
    "_get_collection",
    "_parse_secret",
    "_provider",
]

BOOKMARK_INDEXES = (
    [("ownerId", ASCENDING), ("updatedAt", DESCENDING)],
    [("tags", ASCENDING)],
)


class ConfigurationError(RuntimeError):
    """Raised when the database secret cannot be turned into a connection URI."""


def _parse_secret(secret_string: str) -> str:
    """Return the connection URI from a secret value.

    Accepts a JSON object carrying one of SECRET_URI_KEYS, or the raw URI.
    """
    raw = (secret_string or "").strip()
    if not raw:
        raise ConfigurationError("Database secret is empty")
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return raw

    if isinstance(parsed, str) and parsed.strip():
        return parsed.strip()
    if isinstance(parsed, dict):
        for key in SECRET_URI_KEYS:
            value = parsed.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
        raise ConfigurationError(
            "Database secret has no connection URI field (expected one of: "
            + ", ".join(SECRET_URI_KEYS)
            + ")"
        )
    raise ConfigurationError("Database secret must be a JSON object or a URI string")


class ConnectionProvider:
    """Lazily built, process-wide handle on the bookmarks collection."""

    def __init__(
        self,
        secret_id: str = MONGODB_SECRET_ID,
        db_name: str = MONGODB_DB,
        collection_name: str = BOOKMARKS_COLLECTION,
        uri_override: str = MONGODB_URI,
    ) -> None:
        self.secret_id = secret_id
        self.db_name = db_name
        self.collection_name = collection_name
        self.uri_override = uri_override
        self._lock = threading.Lock()
        self._uri: Optional[str] = None
        self._client: Optional[MongoClient] = None
        self._indexes_ready = False

    @property
    def indexes_ready(self) -> bool:
        return self._indexes_ready

    def _resolve_uri(self) -> str:
        if self._uri is None:
            if self.uri_override:
                logger.info("[INFO] using MONGODB_URI from environment")
                self._uri = self.uri_override
            else:
                logger.info("[INFO] fetching database secret secret_id=%s", self.secret_id)
                resp = _get_secretsmanager().get_secret_value(SecretId=self.secret_id)
                self._uri = _parse_secret(resp.get("SecretString") or "")
        return self._uri

    def _connect(self) -> MongoClient:
        if self._client is None:
            client = MongoClient(
                self._resolve_uri(),
                maxPoolSize=MONGODB_POOL_SIZE,
                serverSelectionTimeoutMS=MONGODB_SERVER_SELECTION_TIMEOUT_MS,
                tz_aware=True,
            )
            try:
                client.admin.command("ping")
            except Exception:
                client.close()
                raise
            self._client = client
            logger.info(
                "[INFO] MongoDB connected db=%s pool_size=%d",
                self.db_name, MONGODB_POOL_SIZE,
            )
        return self._client

    def _ensure_indexes(self, collection: Collection) -> None:
        if self._indexes_ready:
            return
        for keys in BOOKMARK_INDEXES:
            collection.create_index(keys)
        self._indexes_ready = True
        logger.info("[INFO] indexes ensured collection=%s", self.collection_name)

    def get_collection(self) -> Collection:
        """Return the bookmarks collection, initializing on first use."""
        if self._client is not None and self._indexes_ready:
            return self._client[self.db_name][self.collection_name]

        with self._lock:
            try:
                client = self._connect()
                collection = client[self.db_name][self.collection_name]
                self._ensure_indexes(collection)
                return collection
            except Exception:
                logger.exception("[ERROR] database initialization failed; will retry on next call")
                self._reset_locked()
                raise

    def _reset_locked(self) -> None:
        client = self._client
        self._uri = None
        self._client = None
        self._indexes_ready = False
        if client is not None:
            client.close()

    def reset(self) -> None:
        """Drop all cached state (secret, client, index flag)."""
        with self._lock:
            self._reset_locked()


# ---------------------------------------------------------------------------
# Process-wide provider
# ---------------------------------------------------------------------------

_provider = ConnectionProvider()


def _get_collection() -> Collection:
    return _provider.get_collection()
