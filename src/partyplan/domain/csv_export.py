"""Guest list CSV export."""

import csv
import io
import logging
from pathlib import Path
from typing import Iterable

from partyplan.database.base import Database
from partyplan.domain.entities import Guest
from partyplan.domain.errors import ValidationError

logger = logging.getLogger(__name__)

GUEST_CSV_HEADER: tuple[str, ...] = ("Nombre", "Estado", "Adultos", "Niños")


def export_guests_csv(guests: Iterable[Guest]) -> str:
    """Render guests as CSV text.

    Fields are written in header order. Values containing a comma, quote or
    newline are quoted, with embedded quotes doubled.

    Args:
        guests: Guests to export

    Returns:
        CSV text, header row first

    Raises:
        ValidationError: If there are no guests to export
    """
    guests = list(guests)
    if not guests:
        raise ValidationError("No guests to export")

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(GUEST_CSV_HEADER)
    for guest in guests:
        writer.writerow([guest.name, guest.status, guest.adults, guest.children])
    return buffer.getvalue()


class GuestExportService:
    """Service for exporting the stored guest list."""

    def __init__(self, db: Database):
        """Initialize guest export service.

        Args:
            db: Database instance
        """
        self.db = db

    def export_csv(self) -> str:
        """Return the stored guest list as CSV text."""
        return export_guests_csv(self.db.list_guests())

    def export_to_file(self, csv_file_path: str) -> int:
        """Write the stored guest list to a CSV file.

        Args:
            csv_file_path: Destination path

        Returns:
            Number of guests written

        Raises:
            ValidationError: If there are no guests; no file is created
        """
        guests = self.db.list_guests()
        text = export_guests_csv(guests)
        with open(Path(csv_file_path), "w", encoding="utf-8", newline="") as f:
            f.write(text)
        logger.info("Exported %d guests to %s", len(guests), csv_file_path)
        return len(guests)
