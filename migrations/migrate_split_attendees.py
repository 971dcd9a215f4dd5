#!/usr/bin/env python3
"""Migration script to split the guests.attendees column into adults and children.

Older databases stored a single attendee count per guest. This migration adds:
- adults (INTEGER, default=1)
- children (INTEGER, default=0)

Existing guests keep their headcount: ``attendees`` is copied into ``adults``
and ``children`` starts at 0. Guests with no attendee count get one adult.
The old column is left in place and is ignored from then on.

Usage:
    python migrations/migrate_split_attendees.py [--db-path PATH]
"""

import sys
from pathlib import Path

# Add src to path so we can import partyplan modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import text, inspect
from partyplan.database.factories import create_sqlite_database


def column_exists(engine, table_name: str, column_name: str) -> bool:
    """Check if a column exists in a table.

    Args:
        engine: SQLAlchemy engine
        table_name: Name of the table
        column_name: Name of the column

    Returns:
        True if column exists, False otherwise
    """
    inspector = inspect(engine)
    columns = [col["name"] for col in inspector.get_columns(table_name)]
    return column_name in columns


def migrate_database(database_path: str | None = None) -> int:
    """Add adults/children columns and fill them from attendees.

    Args:
        database_path: Path to database file. If None, uses default location.

    Returns:
        Number of guests whose counts were migrated

    Raises:
        Exception: If migration fails
    """
    db = create_sqlite_database(database_path=database_path)
    db.connect()

    try:
        session = db.session_factory()
        try:
            engine = session.bind
            if engine is None:
                raise Exception("Could not get database engine from session")
        finally:
            session.close()

        inspector = inspect(engine)
        if "guests" not in inspector.get_table_names():
            raise Exception("Table 'guests' does not exist. Please initialize the database schema first.")

        if not column_exists(engine, "guests", "attendees"):
            print("Nothing to migrate: guests table has no attendees column")
            return 0

        print("Starting migration: splitting attendees into adults and children...")

        add_adults = not column_exists(engine, "guests", "adults")
        add_children = not column_exists(engine, "guests", "children")

        with engine.begin() as conn:
            if add_adults:
                conn.execute(text("ALTER TABLE guests ADD COLUMN adults INTEGER NOT NULL DEFAULT 1"))
                print("  Added column: adults")
            if add_children:
                conn.execute(text("ALTER TABLE guests ADD COLUMN children INTEGER NOT NULL DEFAULT 0"))
                print("  Added column: children")

            result = conn.execute(
                text(
                    "UPDATE guests SET adults = attendees, children = 0 "
                    "WHERE attendees IS NOT NULL AND attendees > 0"
                )
            )
            migrated = result.rowcount
            print(f"  Copied attendee counts for {migrated} guest(s)")

        print("Migration completed successfully!")
        return migrated

    except Exception as e:
        print(f"Migration failed: {e}")
        raise
    finally:
        db.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Migrate guests table from a single attendees count to adults and children"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides PARTYPLAN_DB_PATH environment variable)",
    )
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
