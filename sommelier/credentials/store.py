from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Protocol

from ..errors import CredentialValidationError
from .config import DEFAULT_CREDENTIAL_CONFIG, CredentialConfig

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def close(self) -> None: ...


class InMemoryKeyValueStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def close(self) -> None:
        pass


class SQLiteKeyValueStore:
    """
    File-backed key-value store.

    Holds one persistent connection; writes are committed immediately.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False, timeout=10)
        self._conn.execute(
            "CREATE TABLE IF NOT EXISTS kv_store (key TEXT PRIMARY KEY, value TEXT NOT NULL)"
        )
        self._conn.commit()

    def get(self, key: str) -> str | None:
        row = self._conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        self._conn.execute(
            "INSERT INTO kv_store (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            (key, value),
        )
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()


class CredentialStore:
    """Caches the API key held under a fixed name in a key-value store."""

    def __init__(self, kv: KeyValueStore, key_name: str = DEFAULT_CREDENTIAL_CONFIG.key_name) -> None:
        self._kv = kv
        self._key_name = key_name
        # FastAPI runs sync handlers on a thread pool; guard the cached value.
        self._lock = threading.Lock()
        self._cached: str | None = None
        self._reload()

    def _reload(self) -> None:
        value = self._kv.get(self._key_name)
        with self._lock:
            self._cached = value or None

    def load(self) -> str | None:
        with self._lock:
            return self._cached

    def has_credential(self) -> bool:
        return self.load() is not None

    def save(self, key: str) -> None:
        """Persist ``key`` and refresh the cache. Empty keys are rejected."""
        cleaned = (key or "").strip()
        if not cleaned:
            raise CredentialValidationError("API key cannot be empty.")
        self._kv.set(self._key_name, cleaned)
        self._reload()
        logger.info("API key saved to %s", self._key_name)

    def close(self) -> None:
        self._kv.close()


def open_credential_store(config: CredentialConfig = DEFAULT_CREDENTIAL_CONFIG) -> CredentialStore:
    return CredentialStore(SQLiteKeyValueStore(config.db_path), key_name=config.key_name)
