"""Runtime settings loaded from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from partyplan.domain.entities import DEFAULT_PAYERS
from partyplan.domain.errors import ValidationError

STORAGE_BACKENDS = ("sqlite", "local")


def default_data_dir() -> Path:
    """Return ~/.partyplan, creating it if needed."""
    data_dir = Path.home() / ".partyplan"
    data_dir.mkdir(exist_ok=True)
    return data_dir


def parse_payers(value: str) -> tuple[str, str]:
    """Parse a comma separated pair of payer names.

    Raises:
        ValidationError: Unless exactly two distinct, non-empty names are given
    """
    names = [name.strip() for name in value.split(",")]
    if len(names) != 2 or not all(names) or names[0] == names[1]:
        raise ValidationError(
            f"PARTYPLAN_PAYERS must name exactly two distinct payers, got '{value}'"
        )
    return names[0], names[1]


@dataclass(frozen=True)
class Settings:
    """partyplan settings.

    Attributes:
        storage: Record store backend, 'sqlite' or 'local'
        db_path: SQLite database file; None means the default location
        cache_path: Local JSON cache file; None means the default location
        payers: The two people sharing expenses
    """

    storage: str = "sqlite"
    db_path: Optional[str] = None
    cache_path: Optional[str] = None
    payers: tuple[str, str] = DEFAULT_PAYERS

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from PARTYPLAN_* environment variables."""
        if environ is None:
            environ = os.environ

        storage = environ.get("PARTYPLAN_STORAGE", "sqlite").strip().lower()
        if storage not in STORAGE_BACKENDS:
            raise ValidationError(
                f"Unknown storage backend '{storage}'. "
                f"Must be one of: {', '.join(STORAGE_BACKENDS)}"
            )

        payers = DEFAULT_PAYERS
        if environ.get("PARTYPLAN_PAYERS"):
            payers = parse_payers(environ["PARTYPLAN_PAYERS"])

        return cls(
            storage=storage,
            db_path=environ.get("PARTYPLAN_DB_PATH") or None,
            cache_path=environ.get("PARTYPLAN_CACHE_PATH") or None,
            payers=payers,
        )
