"""Local JSON cache implementation of the Database interface.

Used as the degraded local-only mode when no relational store is available.
The whole cache lives in a single JSON document::

    {"guests": [...], "expenses": [...], "next_guest_id": 1, "next_expense_id": 1}

Guest entries written by older versions are migrated when loaded: a single
``attendees`` count becomes ``adults`` with no children, and entries with no
counts at all become one adult.
"""

import json
import logging
import os
from datetime import date, datetime, UTC
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Optional, Sequence

from partyplan.database.base import Database
from partyplan.domain.entities import Expense, Guest, GuestDraft, GuestStatus
from partyplan.domain.errors import (
    NotFoundError,
    StorageError,
    expense_not_found,
    guest_not_found,
)

logger = logging.getLogger(__name__)


def migrate_guest_record(raw: dict[str, Any]) -> dict[str, Any]:
    """Bring a stored guest entry to the current shape.

    Args:
        raw: Guest entry as read from the cache file

    Returns:
        Guest entry with ``adults`` and ``children`` fields
    """
    record = dict(raw)
    if record.get("adults") is None:
        if record.get("attendees") is not None:
            record["adults"] = int(record["attendees"])
        else:
            record["adults"] = 1
    if record.get("children") is None:
        record["children"] = 0
    record.pop("attendees", None)
    record["adults"] = int(record["adults"])
    record["children"] = int(record["children"])
    record.setdefault("status", GuestStatus.PENDING.value)
    return record


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value)


def _record_id(record: Any) -> Optional[int]:
    try:
        return int(record["id"])
    except (KeyError, TypeError, ValueError):
        return None


def _max_id(records: Sequence[Any]) -> int:
    ids = [record_id for record_id in map(_record_id, records) if record_id is not None]
    return max(ids, default=0)


def _guest_from_record(record: dict[str, Any]) -> Guest:
    return Guest(
        id=int(record["id"]),
        name=record["name"],
        status=record["status"],
        adults=int(record["adults"]),
        children=int(record["children"]),
        created_at=_parse_timestamp(record.get("created_at")),
        updated_at=_parse_timestamp(record.get("updated_at")),
    )


def _read_guest(record: Any) -> Optional[Guest]:
    try:
        return _guest_from_record(record)
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Skipping malformed cached guest %r: %s", _record_id(record), e)
        return None


def _expense_from_record(record: dict[str, Any]) -> Expense:
    return Expense(
        id=int(record["id"]),
        concept=record["concept"],
        amount=Decimal(str(record["amount"])),
        payment_date=date.fromisoformat(record["payment_date"]),
        paid_by=record["paid_by"],
        is_reimbursed=bool(record.get("is_reimbursed", False)),
        created_at=_parse_timestamp(record.get("created_at")),
        updated_at=_parse_timestamp(record.get("updated_at")),
    )


class LocalCacheDatabase(Database):
    """JSON file implementation of Database interface."""

    def __init__(self, cache_path: str):
        """Initialize local cache database.

        Args:
            cache_path: Path to the JSON cache file. Created on first write.
        """
        self.cache_path = Path(cache_path)
        self._data: Optional[dict[str, Any]] = None

    def _now(self) -> str:
        return datetime.now(UTC).isoformat()

    def _load(self) -> dict[str, Any]:
        """Load the cache document, migrating older guest shapes."""
        if self._data is not None:
            return self._data

        data: dict[str, Any] = {"guests": [], "expenses": []}
        if self.cache_path.exists():
            try:
                with open(self.cache_path, "r", encoding="utf-8") as f:
                    stored = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise StorageError(f"Could not read cache {self.cache_path}: {e}") from e
            # Very old caches stored the bare guest list
            if isinstance(stored, list):
                stored = {"guests": stored}
            data.update(stored)

        guests = []
        for raw in data.get("guests", []):
            try:
                guests.append(migrate_guest_record(raw))
            except (TypeError, ValueError) as e:
                logger.warning("Keeping unmigrated cached guest %r: %s", raw, e)
                guests.append(raw)
        data["guests"] = guests

        data.setdefault("next_guest_id", _max_id(data["guests"]) + 1)
        data.setdefault("next_expense_id", _max_id(data["expenses"]) + 1)
        self._data = data
        return data

    def _save(self) -> None:
        """Write the cache document atomically."""
        data = self._load()
        tmp_path = self.cache_path.with_suffix(self.cache_path.suffix + ".tmp")
        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.cache_path)
        except OSError as e:
            # Drop the in-memory copy so the next read reflects the file
            self._data = None
            logger.warning("Failed to write cache %s: %s", self.cache_path, e)
            raise StorageError(f"Could not write cache {self.cache_path}: {e}") from e

    def _next_id(self, key: str) -> int:
        data = self._load()
        next_id = data[key]
        data[key] = next_id + 1
        return next_id

    def connect(self) -> None:
        """Connect to the database."""
        self._load()

    def disconnect(self) -> None:
        """Disconnect from the database."""
        self._data = None

    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        if not self.cache_path.exists():
            self._save()

    # Guest operations
    def _find_guest(self, guest_id: int) -> Optional[dict[str, Any]]:
        for record in self._load()["guests"]:
            if _record_id(record) == guest_id:
                return record
        return None

    def _require_guest(self, guest_id: int) -> dict[str, Any]:
        record = self._find_guest(guest_id)
        if record is None:
            raise NotFoundError(guest_not_found(guest_id))
        return record

    def _new_guest_record(self, name: str, status: str, adults: int, children: int) -> dict[str, Any]:
        now = self._now()
        return {
            "id": self._next_id("next_guest_id"),
            "name": name,
            "status": status,
            "adults": adults,
            "children": children,
            "created_at": now,
            "updated_at": now,
        }

    def create_guest(self, name: str, status: str, adults: int, children: int) -> int:
        """Create a guest. Returns guest ID."""
        record = self._new_guest_record(name, status, adults, children)
        self._load()["guests"].append(record)
        self._save()
        return record["id"]

    def get_guest(self, guest_id: int) -> Optional[Guest]:
        """Get guest by ID."""
        record = self._find_guest(guest_id)
        if record is None:
            return None
        return _read_guest(record)

    def list_guests(self) -> list[Guest]:
        """List all guests in insertion order, skipping malformed entries."""
        guests = [_read_guest(record) for record in self._load()["guests"]]
        return sorted((g for g in guests if g is not None), key=lambda g: g.id)

    def update_guest_status(self, guest_id: int, status: str) -> None:
        """Update guest status."""
        record = self._require_guest(guest_id)
        record["status"] = status
        record["updated_at"] = self._now()
        self._save()

    def delete_guest(self, guest_id: int) -> None:
        """Delete a guest."""
        record = self._require_guest(guest_id)
        self._load()["guests"].remove(record)
        self._save()

    def replace_guests(self, guests: Sequence[GuestDraft]) -> list[int]:
        """Replace the whole guest collection."""
        records = [
            self._new_guest_record(draft.name, draft.status, draft.adults, draft.children)
            for draft in guests
        ]
        self._load()["guests"] = records
        self._save()
        return [record["id"] for record in records]

    # Expense operations
    def _require_expense(self, expense_id: int) -> dict[str, Any]:
        for record in self._load()["expenses"]:
            if _record_id(record) == expense_id:
                return record
        raise NotFoundError(expense_not_found(expense_id))

    def create_expense(
        self,
        concept: str,
        amount: Decimal,
        payment_date: date,
        paid_by: str,
        is_reimbursed: bool = False,
    ) -> int:
        """Create an expense. Returns expense ID."""
        now = self._now()
        record = {
            "id": self._next_id("next_expense_id"),
            "concept": concept,
            "amount": str(amount),
            "payment_date": payment_date.isoformat(),
            "paid_by": paid_by,
            "is_reimbursed": is_reimbursed,
            "created_at": now,
            "updated_at": now,
        }
        self._load()["expenses"].append(record)
        self._save()
        return record["id"]

    def get_expense(self, expense_id: int) -> Optional[Expense]:
        """Get expense by ID."""
        try:
            record = self._require_expense(expense_id)
        except NotFoundError:
            return None
        return _expense_from_record(record)

    def list_expenses(self) -> list[Expense]:
        """List all expenses, most recent payment date first."""
        expenses = []
        for record in self._load()["expenses"]:
            try:
                expenses.append(_expense_from_record(record))
            except (KeyError, TypeError, ValueError, InvalidOperation) as e:
                logger.warning("Skipping malformed cached expense %r: %s", _record_id(record), e)
        return sorted(expenses, key=lambda e: (e.payment_date, e.id), reverse=True)

    def update_expense(
        self,
        expense_id: int,
        concept: str,
        amount: Decimal,
        payment_date: date,
        paid_by: str,
        is_reimbursed: bool,
    ) -> None:
        """Overwrite every editable field of an expense."""
        record = self._require_expense(expense_id)
        record.update(
            concept=concept,
            amount=str(amount),
            payment_date=payment_date.isoformat(),
            paid_by=paid_by,
            is_reimbursed=is_reimbursed,
            updated_at=self._now(),
        )
        self._save()

    def set_expense_reimbursed(self, expense_id: int, is_reimbursed: bool) -> None:
        """Update the reimbursement flag of an expense."""
        record = self._require_expense(expense_id)
        record["is_reimbursed"] = is_reimbursed
        record["updated_at"] = self._now()
        self._save()

    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense."""
        record = self._require_expense(expense_id)
        self._load()["expenses"].remove(record)
        self._save()
