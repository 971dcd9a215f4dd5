"""In-memory working copies of the guest list and the expense ledger.

A session holds the collection the user is looking at. Status changes,
reimbursement changes and removals are applied to the local copy first and
then sent to the store; if the store call fails, the whole pre-change
snapshot is put back. Adds and full edits wait for the store's canonical
record before touching local state.
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Generic, Optional, Sequence, TypeVar

from partyplan.domain.entities import Expense, ExpenseDraft, ExpenseStats, Guest, GuestStats
from partyplan.domain.errors import DomainError, NotFoundError, expense_not_found, guest_not_found
from partyplan.domain.expense import ExpenseService
from partyplan.domain.guest import GuestService
from partyplan.domain.stats import compute_expense_stats, compute_guest_stats

logger = logging.getLogger(__name__)

T = TypeVar("T", Guest, Expense)


@dataclass(frozen=True)
class Mutation(Generic[T]):
    """A local change: the collection before and after it was applied."""

    previous: tuple[T, ...]
    applied: tuple[T, ...]


class RecordSession(Generic[T]):
    """Optimistically updated copy of a record collection."""

    def __init__(self, fetch: Callable[[], Sequence[T]]):
        self._fetch = fetch
        self.records: tuple[T, ...] = ()
        self.generation = 0

    def refresh(self) -> tuple[T, ...]:
        """Reload the collection from the store.

        A fetch that finishes after a local mutation was applied is stale
        and is dropped; the mutation's result wins.
        """
        started = self.generation
        fetched = tuple(self._fetch())
        if self.generation != started:
            logger.debug("Dropping stale refresh (generation %d != %d)", started, self.generation)
            return self.records
        self.records = fetched
        return self.records

    def find(self, record_id: int) -> Optional[T]:
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    def _apply(self, applied: Sequence[T]) -> Mutation[T]:
        mutation = Mutation(previous=self.records, applied=tuple(applied))
        self.records = mutation.applied
        self.generation += 1
        return mutation

    def _rollback(self, mutation: Mutation[T], error: Exception) -> None:
        logger.warning("Reverting local change: %s", error)
        self.records = mutation.previous
        self.generation += 1

    def _replace(self, record: T) -> tuple[T, ...]:
        return tuple(record if r.id == record.id else r for r in self.records)

    def _optimistic(self, applied: Sequence[T], call: Callable[[], Optional[T]]) -> Mutation[T]:
        """Apply ``applied`` locally, then run ``call`` against the store.

        If ``call`` returns a record, it replaces the local copy so the store's
        version is what the user sees.
        """
        mutation = self._apply(applied)
        try:
            canonical = call()
        except DomainError as e:
            self._rollback(mutation, e)
            raise
        if canonical is not None:
            self.records = self._replace(canonical)
        return mutation


class GuestListSession(RecordSession[Guest]):
    """Working copy of the guest list."""

    def __init__(self, service: GuestService):
        super().__init__(service.list_guests)
        self.service = service

    @property
    def guests(self) -> tuple[Guest, ...]:
        return self.records

    def add_guest(self, name: str, adults: int = 1, children: int = 0) -> Guest:
        """Add a guest once the store has accepted it."""
        guest = self.service.add_guest(name, adults, children)
        self._apply(self.records + (guest,))
        return guest

    def update_status(self, guest_id: int, status: str) -> Mutation[Guest]:
        """Change a guest's status locally, then in the store."""
        guest = self.find(guest_id)
        if guest is None:
            raise NotFoundError(guest_not_found(guest_id))
        local = replace(guest, status=(status or "").strip().lower())
        return self._optimistic(
            self._replace(local),
            lambda: self.service.update_status(guest_id, status),
        )

    def remove_guest(self, guest_id: int) -> Mutation[Guest]:
        """Remove a guest locally, then in the store."""
        if self.find(guest_id) is None:
            raise NotFoundError(guest_not_found(guest_id))
        remaining = tuple(g for g in self.records if g.id != guest_id)
        return self._optimistic(remaining, lambda: self.service.remove_guest(guest_id))

    def stats(self) -> GuestStats:
        return compute_guest_stats(self.records)


class ExpenseLedgerSession(RecordSession[Expense]):
    """Working copy of the expense ledger."""

    def __init__(self, service: ExpenseService):
        super().__init__(service.list_expenses)
        self.service = service

    @property
    def expenses(self) -> tuple[Expense, ...]:
        return self.records

    def add_expense(self, draft: ExpenseDraft) -> Expense:
        """Add an expense once the store has accepted it."""
        expense = self.service.add_expense(draft)
        self._apply((expense,) + self.records)
        return expense

    def update_expense(self, expense_id: int, draft: ExpenseDraft) -> Expense:
        """Edit an expense once the store has accepted the edit."""
        expense = self.service.update_expense(expense_id, draft)
        self._apply(self._replace(expense))
        return expense

    def set_reimbursed(self, expense_id: int, is_reimbursed: bool) -> Mutation[Expense]:
        """Change the reimbursement flag locally, then in the store."""
        expense = self.find(expense_id)
        if expense is None:
            raise NotFoundError(expense_not_found(expense_id))
        local = replace(expense, is_reimbursed=bool(is_reimbursed))
        return self._optimistic(
            self._replace(local),
            lambda: self.service.set_reimbursed(expense_id, is_reimbursed),
        )

    def delete_expense(self, expense_id: int) -> Mutation[Expense]:
        """Delete an expense locally, then in the store."""
        if self.find(expense_id) is None:
            raise NotFoundError(expense_not_found(expense_id))
        remaining = tuple(e for e in self.records if e.id != expense_id)
        return self._optimistic(remaining, lambda: self.service.delete_expense(expense_id))

    def stats(self) -> ExpenseStats:
        return compute_expense_stats(self.records, self.service.payers)
