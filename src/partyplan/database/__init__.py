"""Database layer for partyplan application."""

from partyplan.database.base import Database
from partyplan.database.factories import (
    create_database,
    create_local_cache_database,
    create_sqlite_database,
)

__all__ = [
    "Database",
    "create_database",
    "create_local_cache_database",
    "create_sqlite_database",
]
