"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from partyplan.domain.entities import Guest, Expense, GuestDraft


class Database(ABC):
    """Abstract record store for guests and expenses."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Guest operations
    @abstractmethod
    def create_guest(self, name: str, status: str, adults: int, children: int) -> int:
        """Create a guest. Returns guest ID."""
        pass

    @abstractmethod
    def get_guest(self, guest_id: int) -> Optional[Guest]:
        """Get guest by ID."""
        pass

    @abstractmethod
    def list_guests(self) -> list[Guest]:
        """List all guests in insertion order."""
        pass

    @abstractmethod
    def update_guest_status(self, guest_id: int, status: str) -> None:
        """Update guest status.

        Raises:
            NotFoundError: If the guest does not exist
        """
        pass

    @abstractmethod
    def delete_guest(self, guest_id: int) -> None:
        """Delete a guest.

        Raises:
            NotFoundError: If the guest does not exist
        """
        pass

    @abstractmethod
    def replace_guests(self, guests: Sequence[GuestDraft]) -> list[int]:
        """Replace the whole guest collection in one transaction.

        New guests always receive IDs that were never used before.

        Returns:
            IDs of the inserted guests, in input order
        """
        pass

    # Expense operations
    @abstractmethod
    def create_expense(
        self,
        concept: str,
        amount: Decimal,
        payment_date: date,
        paid_by: str,
        is_reimbursed: bool = False,
    ) -> int:
        """Create an expense. Returns expense ID."""
        pass

    @abstractmethod
    def get_expense(self, expense_id: int) -> Optional[Expense]:
        """Get expense by ID."""
        pass

    @abstractmethod
    def list_expenses(self) -> list[Expense]:
        """List all expenses, most recent payment date first."""
        pass

    @abstractmethod
    def update_expense(
        self,
        expense_id: int,
        concept: str,
        amount: Decimal,
        payment_date: date,
        paid_by: str,
        is_reimbursed: bool,
    ) -> None:
        """Overwrite every editable field of an expense.

        Raises:
            NotFoundError: If the expense does not exist
        """
        pass

    @abstractmethod
    def set_expense_reimbursed(self, expense_id: int, is_reimbursed: bool) -> None:
        """Update the reimbursement flag of an expense.

        Raises:
            NotFoundError: If the expense does not exist
        """
        pass

    @abstractmethod
    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense.

        Raises:
            NotFoundError: If the expense does not exist
        """
        pass
