"""Integration tests for end-to-end workflows."""

import json

import pytest
from partyplan.cli.main import cli


def test_guest_list_workflow(cli_runner, temp_db, tmp_path):
    """Test complete workflow: add → confirm → export → edit → import back → stats."""
    db_args = ["--db-path", temp_db.database_path]

    # Step 1: Add guests
    for args in (
        ["Ana Pérez", "--adults", "2", "--children", "1"],
        ["López, Familia", "--adults", "2", "--children", "3"],
        ["Luis"],
    ):
        result = cli_runner.invoke(cli, [*db_args, "guest", "add", *args])
        assert result.exit_code == 0

    # Step 2: Confirm one, decline another
    result = cli_runner.invoke(cli, [*db_args, "guest", "status", "1", "confirmed"])
    assert result.exit_code == 0
    result = cli_runner.invoke(cli, [*db_args, "guest", "status", "3", "declined"])
    assert result.exit_code == 0

    # Step 3: Export
    csv_path = tmp_path / "guests.csv"
    result = cli_runner.invoke(cli, [*db_args, "guest", "export", str(csv_path)])
    assert result.exit_code == 0
    exported = csv_path.read_text(encoding="utf-8")
    assert '"López, Familia",pending,2,3' in exported

    # Step 4: Edit the file outside the app and import it back
    csv_path.write_text(
        exported.replace('"López, Familia",pending,2,3', '"López, Familia",confirmed,2,3'),
        encoding="utf-8",
    )
    result = cli_runner.invoke(cli, [*db_args, "guest", "import", str(csv_path), "--yes"])
    assert result.exit_code == 0
    assert "Imported 3 guests" in result.output

    # Step 5: Stats reflect the imported list
    result = cli_runner.invoke(cli, [*db_args, "guest", "stats", "--json"])
    assert result.exit_code == 0
    stats = json.loads(result.output)["stats"]
    assert stats["confirmedAdults"] == 4
    assert stats["confirmedChildren"] == 4
    assert stats["confirmedTotal"] == 8
    assert stats["pendingCount"] == 0
    assert stats["declinedCount"] == 1

    # Imported guests were given new IDs
    result = cli_runner.invoke(cli, [*db_args, "guest", "list", "--json"])
    ids = [g["id"] for g in json.loads(result.output)["guests"]]
    assert ids == [4, 5, 6]


def test_expense_workflow(cli_runner, temp_db):
    """Test complete workflow: add expenses → settle → reimburse → delete."""
    db_args = ["--db-path", temp_db.database_path]

    for concept, amount, payer in (("Cake", "100", "Eli"), ("Drinks", "60", "Pan")):
        result = cli_runner.invoke(
            cli,
            [
                *db_args,
                "expense",
                "add",
                "--concept",
                concept,
                "--amount",
                amount,
                "--date",
                "2024-06-01",
                "--paid-by",
                payer,
            ],
        )
        assert result.exit_code == 0

    result = cli_runner.invoke(cli, [*db_args, "expense", "stats"])
    assert "Even split: Pan owes Eli $20.00" in result.output

    result = cli_runner.invoke(cli, [*db_args, "expense", "reimburse", "1"])
    assert result.exit_code == 0

    result = cli_runner.invoke(cli, [*db_args, "expense", "stats", "--json"])
    stats = json.loads(result.output)["stats"]
    assert stats["reimbursedTotal"] == 100.0
    assert stats["pendingTotal"] == 60.0
    assert stats["amountOwed"] == 20.0

    result = cli_runner.invoke(cli, [*db_args, "expense", "delete", "2"])
    assert result.exit_code == 0

    result = cli_runner.invoke(cli, [*db_args, "expense", "stats", "--json"])
    stats = json.loads(result.output)["stats"]
    assert stats["payerOwing"] == "Pan"
    assert stats["amountOwed"] == 50.0


def test_local_storage_backend(cli_runner, tmp_path):
    """The local JSON cache works as a drop-in record store."""
    cache_args = ["--storage", "local", "--cache-path", str(tmp_path / "cache.json")]

    result = cli_runner.invoke(cli, [*cache_args, "guest", "add", "Ana", "--adults", "2"])
    assert result.exit_code == 0
    result = cli_runner.invoke(cli, [*cache_args, "guest", "status", "1", "confirmed"])
    assert result.exit_code == 0

    result = cli_runner.invoke(cli, [*cache_args, "guest", "stats", "--json"])
    assert json.loads(result.output)["stats"]["confirmedTotal"] == 2
    assert (tmp_path / "cache.json").exists()


def test_corrupt_local_cache_reports_error(cli_runner, tmp_path):
    cache = tmp_path / "cache.json"
    cache.write_text("{broken", encoding="utf-8")

    result = cli_runner.invoke(
        cli, ["--storage", "local", "--cache-path", str(cache), "guest", "list"]
    )

    assert result.exit_code == 1
    assert "Could not read cache" in result.output


def test_invalid_payers_setting(cli_runner, temp_db, monkeypatch):
    monkeypatch.setenv("PARTYPLAN_PAYERS", "OnlyOne")

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "expense", "list"])

    assert result.exit_code == 1
    assert "PARTYPLAN_PAYERS must name exactly two distinct payers" in result.output


@pytest.mark.parametrize("group", ["guest", "expense"])
def test_group_help_does_not_touch_storage(cli_runner, group):
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert group in result.output
