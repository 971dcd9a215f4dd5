"""Text rendering helpers shared by CLI commands."""

import json
from decimal import Decimal
from typing import Any

import click

from partyplan.domain.entities import Expense, ExpenseStats, Guest, GuestStats

STATUS_LABELS = {
    "pending": "Pending",
    "confirmed": "Confirmed",
    "declined": "Declined",
}


def format_amount(amount: Decimal) -> str:
    return f"${amount:,.2f}"


def echo_json(payload: dict[str, Any]) -> None:
    click.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def echo_guest_table(guests: list[Guest]) -> None:
    click.echo(f"\nFound {len(guests)} guest(s):")
    click.echo("-" * 70)
    click.echo(f"{'ID':<6} {'Name':<30} {'Status':<12} {'Adults':>7} {'Children':>9}")
    click.echo("-" * 70)
    for guest in guests:
        status = STATUS_LABELS.get(guest.status, guest.status)
        click.echo(
            f"{guest.id:<6} {guest.name[:30]:<30} {status:<12} {guest.adults:>7} {guest.children:>9}"
        )


def echo_guest_stats(stats: GuestStats) -> None:
    click.echo("\nConfirmed guests:")
    click.echo(f"  Total:    {stats.confirmed_total}")
    click.echo(f"  Adults:   {stats.confirmed_adults}")
    click.echo(f"  Children: {stats.confirmed_children}")
    click.echo("\nPending answers:")
    click.echo(f"  Invitations: {stats.pending_count}")
    click.echo(f"  Adults:      {stats.pending_adults}")
    click.echo(f"  Children:    {stats.pending_children}")
    click.echo(f"\nDeclined invitations: {stats.declined_count}")


def echo_expense_table(expenses: list[Expense]) -> None:
    click.echo(f"\nFound {len(expenses)} expense(s):")
    click.echo("-" * 90)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Amount':>12}  {'Paid by':<10} {'Reimbursed':<11} {'Concept':<30}"
    )
    click.echo("-" * 90)
    for expense in expenses:
        reimbursed = "yes" if expense.is_reimbursed else "no"
        click.echo(
            f"{expense.id:<6} {str(expense.payment_date):<12} {format_amount(expense.amount):>12}  "
            f"{expense.paid_by:<10} {reimbursed:<11} {expense.concept[:30]:<30}"
        )


def echo_expense_stats(stats: ExpenseStats) -> None:
    click.echo(f"\nTotal spent:      {format_amount(stats.total)}")
    for payer, amount in stats.by_payer.items():
        click.echo(f"  Paid by {payer + ':':<9}{format_amount(amount)}")
    if stats.unassigned_total:
        click.echo(f"  Unassigned:     {format_amount(stats.unassigned_total)}")
    click.echo(f"Reimbursed:       {format_amount(stats.reimbursed_total)}")
    click.echo(f"Pending:          {format_amount(stats.pending_total)}")
    click.echo(f"Difference:       {format_amount(stats.difference)}")
    if stats.is_settled:
        click.echo("Even split: settled, nobody owes anything")
    else:
        click.echo(
            f"Even split: {stats.payer_owing} owes {stats.payer_owed} "
            f"{format_amount(stats.amount_owed)}"
        )
