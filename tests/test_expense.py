"""Tests for the expense service."""

from datetime import date
from decimal import Decimal

import pytest

from partyplan.domain.entities import ExpenseDraft
from partyplan.domain.errors import NotFoundError, ValidationError
from partyplan.domain.expense import ExpenseService


def draft(**overrides):
    values = dict(
        concept="Balloons",
        amount=Decimal("12.30"),
        payment_date=date(2024, 5, 20),
        paid_by="Eli",
    )
    values.update(overrides)
    return ExpenseDraft(**values)


def test_add_expense(expense_service):
    expense = expense_service.add_expense(draft(concept="  Balloons  "))

    assert expense.id is not None
    assert expense.concept == "Balloons"
    assert expense.amount == Decimal("12.30")
    assert expense.payment_date == date(2024, 5, 20)
    assert expense.paid_by == "Eli"
    assert expense.is_reimbursed is False


def test_add_expense_rejects_unknown_payer(expense_service):
    with pytest.raises(ValidationError, match="Invalid payer 'Bob'"):
        expense_service.add_expense(draft(paid_by="Bob"))
    assert expense_service.list_expenses() == []


def test_add_expense_rejects_non_positive_amount(expense_service):
    with pytest.raises(ValidationError, match="Amount must be a positive number"):
        expense_service.add_expense(draft(amount=Decimal("0")))


def test_add_expense_reports_every_problem(expense_service):
    with pytest.raises(ValidationError) as excinfo:
        expense_service.add_expense(draft(concept="", amount=Decimal("-3")))
    assert excinfo.value.errors == ["Concept is required", "Amount must be a positive number"]


def test_amount_round_trips_exactly(any_db):
    service = ExpenseService(any_db)

    expense_id = service.add_expense(draft(amount=Decimal("10.05"))).id

    assert service.get_expense(expense_id).amount == Decimal("10.05")


def test_sub_cent_amount_is_not_stored(any_db):
    service = ExpenseService(any_db)

    with pytest.raises(ValidationError, match="at most 2 decimal places"):
        service.add_expense(draft(amount=Decimal("0.004")))

    assert service.list_expenses() == []


def test_custom_payers(temp_db):
    service = ExpenseService(temp_db, payers=["Ana", "Bob"])

    expense = service.add_expense(draft(paid_by="Bob"))

    assert service.payers == ("Ana", "Bob")
    assert expense.paid_by == "Bob"


def test_list_expenses_most_recent_first(expense_service, sample_expenses):
    expenses = expense_service.list_expenses()
    assert [e.concept for e in expenses] == ["DJ", "Cake"]


def test_update_expense(expense_service, sample_expenses):
    cake = sample_expenses["Cake"]

    updated = expense_service.update_expense(
        cake.id,
        draft(concept="Big cake", amount=Decimal("120"), payment_date=date(2024, 6, 2), paid_by="Pan"),
    )

    assert updated.id == cake.id
    assert updated.concept == "Big cake"
    assert updated.amount == Decimal("120")
    assert updated.paid_by == "Pan"


def test_update_expense_invalid_leaves_record(expense_service, sample_expenses):
    cake = sample_expenses["Cake"]

    with pytest.raises(ValidationError):
        expense_service.update_expense(cake.id, draft(amount=Decimal("-1")))

    assert expense_service.get_expense(cake.id).amount == Decimal("100")


def test_update_unknown_expense(expense_service):
    with pytest.raises(NotFoundError, match="Expense 7 not found"):
        expense_service.update_expense(7, draft())


def test_set_reimbursed(expense_service, sample_expenses):
    cake = sample_expenses["Cake"]

    updated = expense_service.set_reimbursed(cake.id, True)

    assert updated.is_reimbursed is True
    assert expense_service.get_expense(cake.id).is_reimbursed is True


def test_toggle_reimbursed(expense_service, sample_expenses):
    dj = sample_expenses["DJ"]

    assert expense_service.toggle_reimbursed(dj.id).is_reimbursed is False
    assert expense_service.toggle_reimbursed(dj.id).is_reimbursed is True


def test_delete_expense(expense_service, sample_expenses):
    expense_service.delete_expense(sample_expenses["DJ"].id)

    assert [e.concept for e in expense_service.list_expenses()] == ["Cake"]


def test_delete_unknown_expense(expense_service):
    with pytest.raises(NotFoundError):
        expense_service.delete_expense(1)


def test_get_stats(expense_service, sample_expenses):
    stats = expense_service.get_stats()

    assert stats.total == Decimal("160")
    assert stats.reimbursed_total == Decimal("60")
    assert stats.pending_total == Decimal("100")
    assert stats.payer_owing == "Pan"
    assert stats.payer_owed == "Eli"
    assert stats.amount_owed == Decimal("20")
