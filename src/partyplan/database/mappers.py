"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the relational schema can change
without touching the services or the statistics.
"""

from decimal import Decimal

from partyplan.domain import entities as domain
from partyplan.database.models import (
    Guest as ORMGuest,
    Expense as ORMExpense,
)


def guest_to_domain(orm_guest: ORMGuest) -> domain.Guest:
    """Convert SQLAlchemy Guest model to domain Guest entity."""
    return domain.Guest(
        id=orm_guest.id,
        name=orm_guest.name,
        status=orm_guest.status,
        adults=orm_guest.adults,
        children=orm_guest.children,
        created_at=orm_guest.created_at,
        updated_at=orm_guest.updated_at,
    )


def expense_to_domain(orm_expense: ORMExpense) -> domain.Expense:
    """Convert SQLAlchemy Expense model to domain Expense entity."""
    return domain.Expense(
        id=orm_expense.id,
        concept=orm_expense.concept,
        amount=Decimal(orm_expense.amount),
        payment_date=orm_expense.payment_date,
        paid_by=orm_expense.paid_by,
        is_reimbursed=bool(orm_expense.is_reimbursed),
        created_at=orm_expense.created_at,
        updated_at=orm_expense.updated_at,
    )
