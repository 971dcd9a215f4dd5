"""Expense domain service."""

import logging
from typing import Optional, Sequence

from partyplan.database.base import Database
from partyplan.domain.entities import DEFAULT_PAYERS, Expense, ExpenseDraft, ExpenseStats
from partyplan.domain.errors import NotFoundError, StorageError, expense_not_found
from partyplan.domain.stats import compute_expense_stats
from partyplan.domain.validation import require_valid_expense

logger = logging.getLogger(__name__)


class ExpenseService:
    """Service for managing the shared expense ledger."""

    def __init__(self, db: Database, payers: Sequence[str] = DEFAULT_PAYERS):
        """Initialize expense service.

        Args:
            db: Database instance
            payers: The two people sharing expenses
        """
        self.db = db
        self.payers = tuple(payers)

    def list_expenses(self) -> list[Expense]:
        """List all expenses, most recent payment first."""
        return self.db.list_expenses()

    def get_expense(self, expense_id: int) -> Optional[Expense]:
        """Get expense by ID.

        Args:
            expense_id: Expense ID

        Returns:
            Expense entity or None if not found
        """
        return self.db.get_expense(expense_id)

    def add_expense(self, draft: ExpenseDraft) -> Expense:
        """Record a new expense.

        Args:
            draft: Candidate expense

        Returns:
            The stored expense

        Raises:
            ValidationError: If the expense breaks a validation rule
        """
        draft = self._normalize(draft)
        require_valid_expense(draft, self.payers)

        expense_id = self.db.create_expense(
            concept=draft.concept,
            amount=draft.amount,
            payment_date=draft.payment_date,
            paid_by=draft.paid_by,
            is_reimbursed=draft.is_reimbursed,
        )
        logger.info("Added expense %s (%s, %s)", expense_id, draft.concept, draft.amount)
        return self._reload(expense_id)

    def update_expense(self, expense_id: int, draft: ExpenseDraft) -> Expense:
        """Replace every editable field of an expense.

        Raises:
            ValidationError: If the edited expense breaks a validation rule
            NotFoundError: If the expense does not exist
        """
        draft = self._normalize(draft)
        require_valid_expense(draft, self.payers)
        self._require(expense_id)

        self.db.update_expense(
            expense_id,
            concept=draft.concept,
            amount=draft.amount,
            payment_date=draft.payment_date,
            paid_by=draft.paid_by,
            is_reimbursed=draft.is_reimbursed,
        )
        logger.info("Updated expense %s", expense_id)
        return self._reload(expense_id)

    def set_reimbursed(self, expense_id: int, is_reimbursed: bool) -> Expense:
        """Mark an expense as reimbursed or pending.

        Raises:
            NotFoundError: If the expense does not exist
        """
        self._require(expense_id)
        self.db.set_expense_reimbursed(expense_id, bool(is_reimbursed))
        logger.info("Expense %s reimbursed=%s", expense_id, bool(is_reimbursed))
        return self._reload(expense_id)

    def toggle_reimbursed(self, expense_id: int) -> Expense:
        """Flip the reimbursement flag of an expense."""
        expense = self._require(expense_id)
        return self.set_reimbursed(expense_id, not expense.is_reimbursed)

    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense.

        Raises:
            NotFoundError: If the expense does not exist
        """
        self._require(expense_id)
        self.db.delete_expense(expense_id)
        logger.info("Deleted expense %s", expense_id)

    def get_stats(self) -> ExpenseStats:
        """Compute statistics over the current ledger."""
        return compute_expense_stats(self.db.list_expenses(), self.payers)

    def _normalize(self, draft: ExpenseDraft) -> ExpenseDraft:
        return ExpenseDraft(
            concept=(draft.concept or "").strip(),
            amount=draft.amount,
            payment_date=draft.payment_date,
            paid_by=(draft.paid_by or "").strip(),
            is_reimbursed=bool(draft.is_reimbursed),
        )

    def _require(self, expense_id: int) -> Expense:
        expense = self.db.get_expense(expense_id)
        if expense is None:
            raise NotFoundError(expense_not_found(expense_id))
        return expense

    def _reload(self, expense_id: int) -> Expense:
        expense = self.db.get_expense(expense_id)
        if expense is None:
            raise StorageError(
                f"Expense {expense_id} was stored but could not be read back"
            )
        return expense
