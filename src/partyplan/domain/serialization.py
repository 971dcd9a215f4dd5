"""JSON shapes for guests, expenses and statistics.

Storage uses snake_case; the JSON boundary uses camelCase and wraps payloads
in ``{"success": ..., ...}`` envelopes.
"""

from datetime import datetime
from typing import Any, Iterable, Optional

from partyplan.domain.entities import Expense, ExpenseStats, Guest, GuestStats


def _timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def guest_to_dict(guest: Guest) -> dict[str, Any]:
    return {
        "id": guest.id,
        "name": guest.name,
        "status": guest.status,
        "adults": guest.adults,
        "children": guest.children,
    }


def expense_to_dict(expense: Expense) -> dict[str, Any]:
    return {
        "id": expense.id,
        "concept": expense.concept,
        "amount": float(expense.amount),
        "paymentDate": expense.payment_date.isoformat(),
        "isReimbursed": expense.is_reimbursed,
        "paidBy": expense.paid_by,
        "createdAt": _timestamp(expense.created_at),
        "updatedAt": _timestamp(expense.updated_at),
    }


def guest_stats_to_dict(stats: GuestStats) -> dict[str, Any]:
    return {
        "confirmedAdults": stats.confirmed_adults,
        "confirmedChildren": stats.confirmed_children,
        "confirmedTotal": stats.confirmed_total,
        "pendingCount": stats.pending_count,
        "pendingAdults": stats.pending_adults,
        "pendingChildren": stats.pending_children,
        "declinedCount": stats.declined_count,
    }


def expense_stats_to_dict(stats: ExpenseStats) -> dict[str, Any]:
    return {
        "total": float(stats.total),
        "byPayer": {payer: float(amount) for payer, amount in stats.by_payer.items()},
        "reimbursedTotal": float(stats.reimbursed_total),
        "pendingTotal": float(stats.pending_total),
        "difference": float(stats.difference),
        "payerOwing": stats.payer_owing,
        "payerOwed": stats.payer_owed,
        "amountOwed": float(stats.amount_owed),
        "unassignedTotal": float(stats.unassigned_total),
    }


def success(**payload: Any) -> dict[str, Any]:
    """Wrap a payload in a success envelope."""
    return {"success": True, **payload}


def failure(error: str) -> dict[str, Any]:
    """Wrap an error message in a failure envelope."""
    return {"success": False, "error": error}


def guests_envelope(guests: Iterable[Guest]) -> dict[str, Any]:
    return success(guests=[guest_to_dict(g) for g in guests])


def expenses_envelope(expenses: Iterable[Expense]) -> dict[str, Any]:
    return success(data=[expense_to_dict(e) for e in expenses])
