"""Main CLI entry point."""

import logging
from dataclasses import replace

import click
from partyplan.config import STORAGE_BACKENDS, Settings
from partyplan.database.factories import create_database
from partyplan.domain.errors import DomainError

# Import and register all commands at module level
from partyplan.cli.commands import guest, expense


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides PARTYPLAN_DB_PATH environment variable)",
    envvar="PARTYPLAN_DB_PATH",
)
@click.option(
    "--storage",
    type=click.Choice(STORAGE_BACKENDS, case_sensitive=False),
    help="Record store backend: 'sqlite' (default) or 'local' JSON cache",
    envvar="PARTYPLAN_STORAGE",
)
@click.option(
    "--cache-path",
    type=click.Path(),
    help="Path to local cache file (overrides PARTYPLAN_CACHE_PATH environment variable)",
    envvar="PARTYPLAN_CACHE_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, storage: str | None, cache_path: str | None, verbose: bool):
    """Partyplan - Guest list and shared expense tracking.

    Keep track of who is coming to the party and of who paid for what.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            settings = Settings.from_env()
        except DomainError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
        overrides = {}
        if storage:
            overrides["storage"] = storage.lower()
        if db_path:
            overrides["db_path"] = db_path
        if cache_path:
            overrides["cache_path"] = cache_path
        settings = replace(settings, **overrides)

        db = create_database(settings)
        try:
            db.connect()
            db.initialize_schema()
        except DomainError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
        ctx.call_on_close(db.disconnect)
        ctx.obj["db"] = db
        ctx.obj["settings"] = settings


# Register all commands
guest.register_commands(cli)
expense.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
