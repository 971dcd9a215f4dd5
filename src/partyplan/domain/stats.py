"""Statistics derived from the in-memory guest and expense collections.

Every figure is a fresh reduction over the collection passed in. Nothing is
cached between calls, and malformed persisted records (an unknown status or
payer) simply contribute nothing instead of failing the whole computation.
"""

from decimal import Decimal
from typing import Iterable, Sequence

from partyplan.domain.entities import (
    DEFAULT_PAYERS,
    Expense,
    ExpenseStats,
    Guest,
    GuestStats,
    GuestStatus,
)

ZERO = Decimal("0")


def compute_guest_stats(guests: Iterable[Guest]) -> GuestStats:
    """Compute headcount statistics.

    Confirmed adults and children are summed independently. ``pending_count``
    counts guest entries, not people. Declined guests are excluded from every
    figure except ``declined_count``.
    """
    confirmed_adults = 0
    confirmed_children = 0
    pending_count = 0
    pending_adults = 0
    pending_children = 0
    declined_count = 0

    for guest in guests:
        if guest.status == GuestStatus.CONFIRMED:
            confirmed_adults += guest.adults
            confirmed_children += guest.children
        elif guest.status == GuestStatus.PENDING:
            pending_count += 1
            pending_adults += guest.adults
            pending_children += guest.children
        elif guest.status == GuestStatus.DECLINED:
            declined_count += 1

    return GuestStats(
        confirmed_adults=confirmed_adults,
        confirmed_children=confirmed_children,
        pending_count=pending_count,
        pending_adults=pending_adults,
        pending_children=pending_children,
        declined_count=declined_count,
    )


def compute_expense_stats(
    expenses: Iterable[Expense], payers: Sequence[str] = DEFAULT_PAYERS
) -> ExpenseStats:
    """Compute ledger statistics and the even-split settlement.

    Args:
        expenses: Expense collection
        payers: The two configured payers

    Returns:
        ExpenseStats. Amounts paid by someone outside ``payers`` count towards
        ``total`` and ``unassigned_total`` but not towards ``by_payer``.
    """
    first, second = payers
    by_payer = {first: ZERO, second: ZERO}
    total = ZERO
    reimbursed_total = ZERO
    unassigned_total = ZERO

    for expense in expenses:
        amount = Decimal(expense.amount)
        total += amount
        if expense.is_reimbursed:
            reimbursed_total += amount
        if expense.paid_by in by_payer:
            by_payer[expense.paid_by] += amount
        else:
            unassigned_total += amount

    difference = abs(by_payer[first] - by_payer[second])
    payer_owing = None
    payer_owed = None
    if by_payer[first] > by_payer[second]:
        payer_owed, payer_owing = first, second
    elif by_payer[second] > by_payer[first]:
        payer_owed, payer_owing = second, first

    return ExpenseStats(
        total=total,
        by_payer=by_payer,
        reimbursed_total=reimbursed_total,
        pending_total=total - reimbursed_total,
        difference=difference,
        amount_owed=difference / 2,
        payer_owing=payer_owing,
        payer_owed=payer_owed,
        unassigned_total=unassigned_total,
    )
