"""Guest list commands."""

import click
from partyplan.cli.error_handling import handle_domain_error
from partyplan.cli.formatting import echo_guest_stats, echo_guest_table, echo_json
from partyplan.domain.csv_export import GuestExportService
from partyplan.domain.csv_import import GuestImportService, ImportState
from partyplan.domain.entities import GuestStatus
from partyplan.domain.errors import DomainError
from partyplan.domain.guest import GuestService
from partyplan.domain.serialization import (
    guest_stats_to_dict,
    guest_to_dict,
    guests_envelope,
    success,
)
from partyplan.domain.session import GuestListSession

STATUS_CHOICE = click.Choice(GuestStatus.values(), case_sensitive=False)


@click.group()
def guest_group():
    """Manage the guest list."""
    pass


@guest_group.command("add")
@click.argument("name")
@click.option("--adults", type=int, default=1, show_default=True, help="Number of adults")
@click.option("--children", type=int, default=0, show_default=True, help="Number of children")
@click.option("--json", "as_json", is_flag=True, help="Print the stored guest as JSON")
@click.pass_context
def add_guest(ctx, name: str, adults: int, children: int, as_json: bool):
    """Add a guest. New guests start as pending.

    Examples:
        partyplan guest add "Ana Pérez"
        partyplan guest add "Familia López" --adults 2 --children 3
    """
    service = GuestService(ctx.obj["db"])

    try:
        guest = service.add_guest(name=name, adults=adults, children=children)
    except DomainError as e:
        handle_domain_error(ctx, e, as_json=as_json)
        return

    if as_json:
        echo_json(success(guest=guest_to_dict(guest)))
        return
    click.echo(f"Added guest '{guest.name}' (ID: {guest.id})")
    click.echo(f"  Adults: {guest.adults}  Children: {guest.children}")


@guest_group.command("list")
@click.option("--status", type=STATUS_CHOICE, help="Only show guests with this status")
@click.option("--json", "as_json", is_flag=True, help="Print guests as JSON")
@click.pass_context
def list_guests(ctx, status: str | None, as_json: bool):
    """List guests."""
    service = GuestService(ctx.obj["db"])
    guests = service.list_guests(status=status.lower() if status else None)

    if as_json:
        echo_json(guests_envelope(guests))
        return

    if not guests:
        click.echo("No guests found.")
        return
    echo_guest_table(guests)


@guest_group.command("status")
@click.argument("guest_id", type=int)
@click.argument("status", type=STATUS_CHOICE)
@click.pass_context
def update_status(ctx, guest_id: int, status: str):
    """Set a guest's RSVP status (pending, confirmed or declined)."""
    session = GuestListSession(GuestService(ctx.obj["db"]))
    session.refresh()

    try:
        session.update_status(guest_id, status)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    guest = session.find(guest_id)
    click.echo(f"Guest '{guest.name}' is now {guest.status}")


@guest_group.command("remove")
@click.argument("guest_id", type=int)
@click.pass_context
def remove_guest(ctx, guest_id: int):
    """Remove a guest."""
    session = GuestListSession(GuestService(ctx.obj["db"]))
    session.refresh()

    try:
        session.remove_guest(guest_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Removed guest {guest_id}")


@guest_group.command("stats")
@click.option("--json", "as_json", is_flag=True, help="Print statistics as JSON")
@click.pass_context
def guest_stats(ctx, as_json: bool):
    """Show confirmed and pending headcounts."""
    stats = GuestService(ctx.obj["db"]).get_stats()

    if as_json:
        echo_json(success(stats=guest_stats_to_dict(stats)))
        return
    echo_guest_stats(stats)


@guest_group.command("export")
@click.argument("csv_file", type=click.Path(dir_okay=False, writable=True))
@click.pass_context
def export_guests(ctx, csv_file: str):
    """Export the guest list to a CSV file."""
    service = GuestExportService(ctx.obj["db"])

    try:
        count = service.export_to_file(csv_file)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    except OSError as e:
        click.echo(f"Error: Could not write {csv_file}: {e}", err=True)
        ctx.exit(1)

    click.echo(f"Exported {count} guest{'s' if count != 1 else ''} to {csv_file}")


@guest_group.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", "-y", is_flag=True, help="Replace the guest list without asking")
@click.pass_context
def import_guests(ctx, csv_file: str, yes: bool):
    """Replace the guest list with the guests in a CSV file.

    The file must have the header 'Nombre,Estado,Adultos,Niños'. Nothing is
    imported unless every row is valid.
    """
    db = ctx.obj["db"]
    service = GuestImportService(db)
    current = len(GuestService(db).list_guests())

    def confirm(drafts):
        if yes:
            return True
        return click.confirm(
            f"Replace the current {current} guest(s) with {len(drafts)} imported guest(s)?",
            default=False,
        )

    try:
        result = service.import_file(csv_file, confirm)
    except (DomainError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)
        return

    if result.state in (ImportState.REJECTED_HEADER, ImportState.REJECTED_ROWS):
        click.echo(f"Error: {result.message}", err=True)
        if result.state == ImportState.REJECTED_ROWS:
            for error in result.errors:
                click.echo(f"  {error}", err=True)
        ctx.exit(1)

    click.echo(result.message)


def register_commands(cli):
    """Register guest commands with main CLI."""
    cli.add_command(guest_group, name="guest")
