"""Tests for optimistic guest list and expense ledger sessions."""

from datetime import date
from decimal import Decimal

import pytest

from partyplan.domain.entities import ExpenseDraft
from partyplan.domain.errors import NotFoundError, StorageError, ValidationError
from partyplan.domain.session import ExpenseLedgerSession, GuestListSession, RecordSession


def fail_with(error):
    def failing(*args, **kwargs):
        raise error

    return failing


class TestGuestListSession:
    def test_refresh_loads_guests(self, guest_service, sample_guests):
        session = GuestListSession(guest_service)

        guests = session.refresh()

        assert [g.name for g in guests] == ["Ana", "Luis", "Marta"]
        assert session.guests == guests

    def test_add_guest_appends_stored_record(self, guest_service):
        session = GuestListSession(guest_service)
        session.refresh()

        guest = session.add_guest("Eva", adults=2)

        assert session.guests == (guest,)
        assert guest.id is not None

    def test_add_guest_failure_leaves_list(self, guest_service, sample_guests):
        session = GuestListSession(guest_service)
        before = session.refresh()

        with pytest.raises(ValidationError):
            session.add_guest("", adults=1)

        assert session.guests == before

    def test_update_status_applies_and_persists(self, guest_service, sample_guests):
        session = GuestListSession(guest_service)
        session.refresh()
        luis = sample_guests["Luis"]

        mutation = session.update_status(luis.id, "confirmed")

        assert session.find(luis.id).status == "confirmed"
        assert guest_service.get_guest(luis.id).status == "confirmed"
        assert mutation.previous != mutation.applied

    def test_update_status_rolls_back_on_store_failure(self, guest_service, sample_guests, monkeypatch):
        session = GuestListSession(guest_service)
        before = session.refresh()
        monkeypatch.setattr(guest_service, "update_status", fail_with(StorageError("disk full")))

        with pytest.raises(StorageError):
            session.update_status(sample_guests["Luis"].id, "confirmed")

        assert session.guests == before
        assert session.stats() == guest_service.get_stats()

    def test_invalid_status_rolls_back(self, guest_service, sample_guests):
        session = GuestListSession(guest_service)
        before = session.refresh()

        with pytest.raises(ValidationError):
            session.update_status(sample_guests["Luis"].id, "maybe")

        assert session.guests == before

    def test_rollback_restores_whole_snapshot(self, guest_service, sample_guests, monkeypatch):
        session = GuestListSession(guest_service)
        session.refresh()
        session.update_status(sample_guests["Luis"].id, "declined")
        snapshot = session.guests
        monkeypatch.setattr(guest_service, "remove_guest", fail_with(StorageError("offline")))

        with pytest.raises(StorageError):
            session.remove_guest(sample_guests["Ana"].id)

        assert session.guests == snapshot

    def test_remove_guest(self, guest_service, sample_guests):
        session = GuestListSession(guest_service)
        session.refresh()

        session.remove_guest(sample_guests["Marta"].id)

        assert [g.name for g in session.guests] == ["Ana", "Luis"]
        assert guest_service.get_guest(sample_guests["Marta"].id) is None

    def test_unknown_guest(self, guest_service):
        session = GuestListSession(guest_service)
        session.refresh()

        with pytest.raises(NotFoundError):
            session.update_status(5, "confirmed")

    def test_stats_follow_local_copy(self, guest_service, sample_guests):
        session = GuestListSession(guest_service)
        session.refresh()

        session.update_status(sample_guests["Luis"].id, "confirmed")

        assert session.stats().confirmed_total == 4
        assert session.stats().pending_count == 0


class TestExpenseLedgerSession:
    def test_add_expense_prepends(self, expense_service, sample_expenses):
        session = ExpenseLedgerSession(expense_service)
        session.refresh()

        expense = session.add_expense(
            ExpenseDraft("Napkins", Decimal("3.50"), date(2024, 6, 5), "Pan")
        )

        assert session.expenses[0] == expense
        assert len(session.expenses) == 3

    def test_update_expense_replaces_local_copy(self, expense_service, sample_expenses):
        session = ExpenseLedgerSession(expense_service)
        session.refresh()
        cake = sample_expenses["Cake"]

        session.update_expense(
            cake.id, ExpenseDraft("Cake", Decimal("90"), cake.payment_date, "Eli")
        )

        assert session.find(cake.id).amount == Decimal("90")

    def test_set_reimbursed(self, expense_service, sample_expenses):
        session = ExpenseLedgerSession(expense_service)
        session.refresh()
        cake = sample_expenses["Cake"]

        session.set_reimbursed(cake.id, True)

        assert session.find(cake.id).is_reimbursed is True
        assert expense_service.get_expense(cake.id).is_reimbursed is True

    def test_set_reimbursed_rolls_back(self, expense_service, sample_expenses, monkeypatch):
        session = ExpenseLedgerSession(expense_service)
        before = session.refresh()
        monkeypatch.setattr(expense_service, "set_reimbursed", fail_with(StorageError("offline")))

        with pytest.raises(StorageError):
            session.set_reimbursed(sample_expenses["Cake"].id, True)

        assert session.expenses == before
        assert session.stats().reimbursed_total == Decimal("60")

    def test_delete_expense_rolls_back(self, expense_service, sample_expenses, monkeypatch):
        session = ExpenseLedgerSession(expense_service)
        before = session.refresh()
        monkeypatch.setattr(expense_service, "delete_expense", fail_with(StorageError("offline")))

        with pytest.raises(StorageError):
            session.delete_expense(sample_expenses["DJ"].id)

        assert session.expenses == before

    def test_delete_expense(self, expense_service, sample_expenses):
        session = ExpenseLedgerSession(expense_service)
        session.refresh()

        session.delete_expense(sample_expenses["DJ"].id)

        assert [e.concept for e in session.expenses] == ["Cake"]
        assert session.stats().total == Decimal("100")


class TestRecordSession:
    def test_stale_refresh_is_dropped(self):
        session = None

        def fetch():
            # A local change lands while the fetch is in flight
            session._apply(("local",))
            return ("stale",)

        session = RecordSession(fetch)

        assert session.refresh() == ("local",)
        assert session.records == ("local",)

    def test_refresh_bumps_nothing_when_idle(self):
        session = RecordSession(lambda: [])
        session.refresh()
        assert session.generation == 0
