"""Guest domain service."""

import logging
from typing import Optional, Sequence

from partyplan.database.base import Database
from partyplan.domain.entities import Guest, GuestDraft, GuestStats, GuestStatus
from partyplan.domain.errors import (
    NotFoundError,
    StorageError,
    ValidationError,
    guest_not_found,
    invalid_status,
)
from partyplan.domain.stats import compute_guest_stats
from partyplan.domain.validation import require_valid_guest, validate_guest

logger = logging.getLogger(__name__)


class GuestService:
    """Service for managing the guest list."""

    def __init__(self, db: Database):
        """Initialize guest service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_guests(self, status: Optional[str] = None) -> list[Guest]:
        """List guests.

        Args:
            status: Optional status to filter by

        Returns:
            List of guest entities
        """
        guests = self.db.list_guests()
        if status is not None:
            guests = [g for g in guests if g.status == status]
        return guests

    def get_guest(self, guest_id: int) -> Optional[Guest]:
        """Get guest by ID.

        Args:
            guest_id: Guest ID

        Returns:
            Guest entity or None if not found
        """
        return self.db.get_guest(guest_id)

    def add_guest(self, name: str, adults: int = 1, children: int = 0) -> Guest:
        """Add a guest. New guests always start as pending.

        Args:
            name: Guest name (surrounding whitespace is dropped)
            adults: Number of adults
            children: Number of children

        Returns:
            The stored guest

        Raises:
            ValidationError: If the guest breaks a validation rule
        """
        draft = GuestDraft(
            name=(name or "").strip(),
            adults=adults,
            children=children,
            status=GuestStatus.PENDING.value,
        )
        require_valid_guest(draft)

        guest_id = self.db.create_guest(
            name=draft.name,
            status=draft.status,
            adults=draft.adults,
            children=draft.children,
        )
        logger.info("Added guest %s (%s)", guest_id, draft.name)
        return self._reload(guest_id)

    def update_status(self, guest_id: int, status: str) -> Guest:
        """Change a guest's RSVP status.

        Args:
            guest_id: Guest ID
            status: New status

        Returns:
            The updated guest

        Raises:
            ValidationError: If the status is not a known value
            NotFoundError: If the guest does not exist
        """
        status = (status or "").strip().lower()
        if status not in GuestStatus.values():
            raise ValidationError(invalid_status(status, GuestStatus.values()))

        if self.db.get_guest(guest_id) is None:
            raise NotFoundError(guest_not_found(guest_id))

        self.db.update_guest_status(guest_id, status)
        logger.info("Guest %s is now %s", guest_id, status)
        return self._reload(guest_id)

    def remove_guest(self, guest_id: int) -> None:
        """Remove a guest.

        Raises:
            NotFoundError: If the guest does not exist
        """
        if self.db.get_guest(guest_id) is None:
            raise NotFoundError(guest_not_found(guest_id))

        self.db.delete_guest(guest_id)
        logger.info("Removed guest %s", guest_id)

    def replace_guests(self, drafts: Sequence[GuestDraft]) -> int:
        """Replace the whole guest list.

        Args:
            drafts: The new guest list

        Returns:
            Number of guests stored

        Raises:
            ValidationError: If the list is empty or any draft is invalid
        """
        if not drafts:
            raise ValidationError("No valid guest data provided for import")

        errors = []
        for index, draft in enumerate(drafts, start=1):
            errors.extend(f"Guest {index}: {e}" for e in validate_guest(draft))
        if errors:
            raise ValidationError("; ".join(errors), errors)

        ids = self.db.replace_guests(drafts)
        logger.info("Replaced guest list with %d guests", len(ids))
        return len(ids)

    def get_stats(self) -> GuestStats:
        """Compute statistics over the current guest list."""
        return compute_guest_stats(self.db.list_guests())

    def _reload(self, guest_id: int) -> Guest:
        guest = self.db.get_guest(guest_id)
        if guest is None:
            raise StorageError(f"Guest {guest_id} was stored but could not be read back")
        return guest
