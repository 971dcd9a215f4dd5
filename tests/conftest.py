"""Shared pytest fixtures for partyplan tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
from pathlib import Path
import pytest

from partyplan.database.factories import create_local_cache_database, create_sqlite_database
from partyplan.domain.entities import ExpenseDraft
from partyplan.domain.expense import ExpenseService
from partyplan.domain.guest import GuestService


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's PARTYPLAN_* settings out of the tests."""
    for name in (
        "PARTYPLAN_STORAGE",
        "PARTYPLAN_DB_PATH",
        "PARTYPLAN_CACHE_PATH",
        "PARTYPLAN_PAYERS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def local_cache_db(tmp_path):
    """Create a local JSON cache database in a temporary directory."""
    db = create_local_cache_database(cache_path=str(tmp_path / "cache.json"))
    db.connect()
    db.initialize_schema()
    yield db
    db.disconnect()


@pytest.fixture(params=["sqlite", "local"])
def any_db(request):
    """Run a test against both record store backends."""
    return request.getfixturevalue("temp_db" if request.param == "sqlite" else "local_cache_db")


@pytest.fixture
def guest_service(temp_db):
    """Create a GuestService with a temporary database."""
    return GuestService(temp_db)


@pytest.fixture
def expense_service(temp_db):
    """Create an ExpenseService with a temporary database."""
    return ExpenseService(temp_db)


@pytest.fixture
def sample_guests(guest_service):
    """Create a small guest list with every status."""
    ana = guest_service.add_guest("Ana", adults=2, children=1)
    luis = guest_service.add_guest("Luis", adults=1)
    marta = guest_service.add_guest("Marta", adults=2, children=2)
    guest_service.update_status(ana.id, "confirmed")
    guest_service.update_status(marta.id, "declined")
    return {
        "Ana": guest_service.get_guest(ana.id),
        "Luis": guest_service.get_guest(luis.id),
        "Marta": guest_service.get_guest(marta.id),
    }


@pytest.fixture
def sample_expenses(expense_service):
    """Record a few expenses paid by both people."""
    cake = expense_service.add_expense(
        ExpenseDraft("Cake", Decimal("100.00"), date(2024, 6, 1), "Eli")
    )
    dj = expense_service.add_expense(
        ExpenseDraft("DJ", Decimal("60.00"), date(2024, 6, 3), "Pan", is_reimbursed=True)
    )
    return {"Cake": cake, "DJ": dj}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
