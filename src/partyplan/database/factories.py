"""Database factory functions for creating database instances."""

import logging
import os
from typing import Optional

from partyplan.config import Settings, default_data_dir
from partyplan.database.base import Database
from partyplan.database.local_cache import LocalCacheDatabase
from partyplan.database.sqlalchemy_db import SQLAlchemyDatabase

logger = logging.getLogger(__name__)


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks PARTYPLAN_DB_PATH
            environment variable, then defaults to ~/.partyplan/partyplan.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("PARTYPLAN_DB_PATH")

    if database_path is None:
        database_path = str(default_data_dir() / "partyplan.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)


def create_local_cache_database(cache_path: Optional[str] = None) -> LocalCacheDatabase:
    """Create a local JSON cache database instance.

    Args:
        cache_path: Path to cache file. If None, checks PARTYPLAN_CACHE_PATH
            environment variable, then defaults to ~/.partyplan/cache.json

    Returns:
        LocalCacheDatabase instance
    """
    if cache_path is None:
        cache_path = os.environ.get("PARTYPLAN_CACHE_PATH")

    if cache_path is None:
        cache_path = str(default_data_dir() / "cache.json")

    return LocalCacheDatabase(cache_path)


def create_database(settings: Optional[Settings] = None) -> Database:
    """Create the record store selected by the settings."""
    if settings is None:
        settings = Settings.from_env()

    logger.debug("Using %s storage backend", settings.storage)
    if settings.storage == "local":
        return create_local_cache_database(cache_path=settings.cache_path)
    return create_sqlite_database(database_path=settings.db_path)
