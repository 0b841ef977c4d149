from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from sommelier.credentials.config import CredentialConfig
from sommelier.credentials.store import (
    CredentialStore,
    InMemoryKeyValueStore,
    SQLiteKeyValueStore,
    open_credential_store,
)
from sommelier.errors import CredentialValidationError


def test_no_credential_initially():
    store = CredentialStore(InMemoryKeyValueStore())
    assert store.has_credential() is False
    assert store.load() is None


def test_existing_key_loaded_at_startup():
    store = CredentialStore(InMemoryKeyValueStore({"sommelier.api_key": "gsk-existing"}))
    assert store.load() == "gsk-existing"


def test_save_empty_key_rejected():
    kv = InMemoryKeyValueStore()
    store = CredentialStore(kv)

    with pytest.raises(CredentialValidationError):
        store.save("")
    with pytest.raises(CredentialValidationError):
        store.save("   ")

    assert store.has_credential() is False
    assert kv.get("sommelier.api_key") is None


def test_save_then_has_credential():
    store = CredentialStore(InMemoryKeyValueStore())
    store.save("abc123")
    assert store.has_credential() is True
    assert store.load() == "abc123"


def test_save_trims_and_overwrites():
    store = CredentialStore(InMemoryKeyValueStore({"sommelier.api_key": "old"}))
    store.save("  new-key \n")
    assert store.load() == "new-key"


def test_rejected_save_keeps_previous_key():
    store = CredentialStore(InMemoryKeyValueStore({"sommelier.api_key": "old"}))
    with pytest.raises(CredentialValidationError):
        store.save(" ")
    assert store.load() == "old"


def test_sqlite_store_persists_across_instances(tmp_path: Path):
    cfg = CredentialConfig(db_path=tmp_path / "kv" / "store.db")
    open_credential_store(cfg).save("persisted-key")

    reopened = open_credential_store(cfg)
    assert reopened.load() == "persisted-key"


def test_sqlite_store_upserts(tmp_path: Path):
    kv = SQLiteKeyValueStore(tmp_path / "kv.db")
    kv.set("k", "one")
    kv.set("k", "two")
    assert kv.get("k") == "two"
    assert kv.get("missing") is None
    kv.close()


def test_close_releases_sqlite_connection(tmp_path: Path):
    kv = SQLiteKeyValueStore(tmp_path / "kv.db")
    store = CredentialStore(kv)
    store.save("abc123")

    store.close()

    with pytest.raises(sqlite3.ProgrammingError):
        kv.get("sommelier.api_key")
