"""Tests for settings and database factories."""

import pytest

from partyplan.config import Settings, parse_payers
from partyplan.database.factories import create_database
from partyplan.database.local_cache import LocalCacheDatabase
from partyplan.database.sqlalchemy_db import SQLAlchemyDatabase
from partyplan.domain.errors import ValidationError


def test_defaults_from_empty_environment():
    settings = Settings.from_env({})

    assert settings.storage == "sqlite"
    assert settings.db_path is None
    assert settings.cache_path is None
    assert settings.payers == ("Eli", "Pan")


def test_values_from_environment():
    settings = Settings.from_env(
        {
            "PARTYPLAN_STORAGE": "Local",
            "PARTYPLAN_CACHE_PATH": "/tmp/cache.json",
            "PARTYPLAN_DB_PATH": "/tmp/party.db",
            "PARTYPLAN_PAYERS": "Ana, Bob",
        }
    )

    assert settings.storage == "local"
    assert settings.cache_path == "/tmp/cache.json"
    assert settings.db_path == "/tmp/party.db"
    assert settings.payers == ("Ana", "Bob")


def test_unknown_storage_backend():
    with pytest.raises(ValidationError, match="Unknown storage backend 'redis'"):
        Settings.from_env({"PARTYPLAN_STORAGE": "redis"})


@pytest.mark.parametrize("value", ["Ana", "Ana,Bob,Eve", "Ana,", "Ana,Ana"])
def test_parse_payers_needs_two_distinct_names(value):
    with pytest.raises(ValidationError):
        parse_payers(value)


def test_create_database_sqlite(tmp_path):
    db = create_database(Settings(db_path=str(tmp_path / "party.db")))
    assert isinstance(db, SQLAlchemyDatabase)
    assert db.database_url.endswith("party.db")


def test_create_database_local(tmp_path):
    db = create_database(Settings(storage="local", cache_path=str(tmp_path / "cache.json")))
    assert isinstance(db, LocalCacheDatabase)


def test_create_database_reads_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("PARTYPLAN_STORAGE", "local")
    monkeypatch.setenv("PARTYPLAN_CACHE_PATH", str(tmp_path / "env.json"))

    db = create_database()

    assert isinstance(db, LocalCacheDatabase)
    assert db.cache_path == tmp_path / "env.json"
