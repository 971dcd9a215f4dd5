"""Guest list CSV import.

Import is all-or-nothing. Rows are validated one by one so that every
problem can be reported with its row number, but a single bad row blocks the
whole file. A clean file replaces the entire guest list, and only after the
caller confirms.
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from partyplan.database.base import Database
from partyplan.domain.csv_export import GUEST_CSV_HEADER
from partyplan.domain.entities import GuestDraft
from partyplan.domain.errors import (
    CSVHeaderError,
    ImportRejectedError,
    ValidationError,
    import_rejected,
)
from partyplan.domain.guest import GuestService
from partyplan.domain.validation import validate_guest

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[list[GuestDraft]], bool]


class ImportState(str, Enum):
    """Stages of a guest import."""

    IDLE = "idle"
    PARSING = "parsing"
    ROW_VALIDATING = "row_validating"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    REJECTED_HEADER = "rejected_header"
    REJECTED_ROWS = "rejected_rows"
    EMPTY = "empty"
    CANCELLED = "cancelled"
    COMMITTED = "committed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset(
    {
        ImportState.REJECTED_HEADER,
        ImportState.REJECTED_ROWS,
        ImportState.EMPTY,
        ImportState.CANCELLED,
        ImportState.COMMITTED,
    }
)


@dataclass(frozen=True)
class ImportResult:
    """Outcome of a guest import.

    Attributes:
        state: Terminal import state
        count: Number of guests stored (zero unless committed)
        errors: Error messages, one per offending row where applicable
        message: Human readable summary
    """

    state: ImportState
    count: int = 0
    errors: list[str] = field(default_factory=list)
    message: str = ""

    @property
    def committed(self) -> bool:
        return self.state == ImportState.COMMITTED


def _parse_count(value: str, column: str, row_num: int) -> tuple[Optional[int], Optional[str]]:
    text = value.strip()
    try:
        return int(text), None
    except ValueError:
        return None, f"Row {row_num}: {column} must be a whole number, got '{text}'"


def check_header(header: Optional[list[str]]) -> None:
    """Check that a CSV header matches the guest columns exactly, in order.

    Raises:
        CSVHeaderError: If the header is missing or differs
    """
    expected = list(GUEST_CSV_HEADER)
    if not header:
        raise CSVHeaderError(f"CSV file is empty. Expected header: {','.join(expected)}")

    found = [name.strip() for name in header]
    if found == expected:
        return

    missing = [name for name in expected if name not in found]
    unexpected = [name for name in found if name not in expected]
    details = []
    if missing:
        details.append(f"missing columns: {', '.join(missing)}")
    if unexpected:
        details.append(f"unexpected columns: {', '.join(unexpected)}")
    if not details:
        details.append("columns are out of order")
    raise CSVHeaderError(
        f"CSV header must be exactly '{','.join(expected)}' "
        f"({'; '.join(details)})"
    )


def read_guest_rows(text: str) -> list[tuple[int, list[str]]]:
    """Split guest CSV text into numbered data rows after checking the header.

    Args:
        text: CSV text with the guest header

    Returns:
        List of (row number, fields) pairs; blank lines are dropped

    Raises:
        CSVHeaderError: If the header does not match
    """
    text = text.removeprefix("\ufeff")

    reader = csv.reader(io.StringIO(text))
    check_header(next(reader, None))

    rows = []
    for row_num, row in enumerate(reader, start=2):  # Start at 2 (header is row 1)
        if not row or all(not cell.strip() for cell in row):
            continue
        rows.append((row_num, row))
    return rows


def validate_guest_rows(rows: list[tuple[int, list[str]]]) -> list[GuestDraft]:
    """Coerce and validate numbered guest rows.

    Raises:
        ImportRejectedError: If any row is invalid; carries every row error
    """
    drafts = []
    errors = []
    for row_num, row in rows:
        if len(row) != len(GUEST_CSV_HEADER):
            errors.append(
                f"Row {row_num}: Expected {len(GUEST_CSV_HEADER)} fields, found {len(row)}"
            )
            continue

        name, status, adults_str, children_str = row
        adults, adults_error = _parse_count(adults_str, "Adultos", row_num)
        children, children_error = _parse_count(children_str, "Niños", row_num)
        count_errors = [e for e in (adults_error, children_error) if e]
        if count_errors:
            errors.extend(count_errors)
            continue

        draft = GuestDraft(
            name=name.strip(),
            adults=adults,
            children=children,
            status=status.strip().lower(),
        )
        row_errors = validate_guest(draft)
        if row_errors:
            errors.extend(error.at_row(row_num) for error in row_errors)
            continue

        drafts.append(draft)

    if errors:
        raise ImportRejectedError(import_rejected(len(errors), len(drafts)), errors)

    return drafts


def parse_guests_csv(text: str) -> list[GuestDraft]:
    """Parse and validate guest CSV text.

    Args:
        text: CSV text with the guest header

    Returns:
        Validated guest drafts, in file order (may be empty)

    Raises:
        CSVHeaderError: If the header does not match
        ImportRejectedError: If any row is invalid
    """
    return validate_guest_rows(read_guest_rows(text))


class GuestImportService:
    """Service for replacing the guest list from a CSV file."""

    def __init__(self, db: Database):
        """Initialize guest import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.guest_service = GuestService(db)
        self.state = ImportState.IDLE

    def import_csv(self, text: str, confirm: ConfirmCallback) -> ImportResult:
        """Import guests from CSV text, replacing the current list.

        Args:
            text: CSV text
            confirm: Called with the validated guests; must return True to
                replace the stored list

        Returns:
            ImportResult in a terminal state. Only COMMITTED changes the store.
        """
        self.state = ImportState.PARSING
        try:
            rows = read_guest_rows(text)
        except CSVHeaderError as e:
            return self._finish(ImportState.REJECTED_HEADER, errors=e.errors, message=str(e))

        self.state = ImportState.ROW_VALIDATING
        try:
            drafts = validate_guest_rows(rows)
        except ImportRejectedError as e:
            return self._finish(ImportState.REJECTED_ROWS, errors=e.errors, message=str(e))

        if not drafts:
            return self._finish(ImportState.EMPTY, message="Nothing to import")

        self.state = ImportState.AWAITING_CONFIRMATION
        if not confirm(drafts):
            return self._finish(ImportState.CANCELLED, message="Import cancelled")

        count = self.guest_service.replace_guests(drafts)
        return self._finish(
            ImportState.COMMITTED,
            count=count,
            message=f"Imported {count} guest{'s' if count != 1 else ''}",
        )

    def import_file(self, csv_file_path: str, confirm: ConfirmCallback) -> ImportResult:
        """Import guests from a CSV file.

        Raises:
            FileNotFoundError: If the CSV file doesn't exist
            ValidationError: If the file is not valid UTF-8 text
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        try:
            with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
                text = f.read()
        except UnicodeDecodeError as e:
            raise ValidationError(f"CSV file is not valid UTF-8: {e}") from e

        return self.import_csv(text, confirm)

    def _finish(
        self,
        state: ImportState,
        count: int = 0,
        errors: Optional[list[str]] = None,
        message: str = "",
    ) -> ImportResult:
        self.state = state
        if state == ImportState.COMMITTED:
            logger.info(message)
        else:
            logger.info("Guest import ended in state %s: %s", state.value, message)
        return ImportResult(state=state, count=count, errors=list(errors or []), message=message)
