"""Shared expense commands."""

import click
from partyplan.cli.error_handling import handle_domain_error
from partyplan.cli.formatting import (
    echo_expense_stats,
    echo_expense_table,
    echo_json,
    format_amount,
)
from partyplan.domain.entities import ExpenseDraft
from partyplan.domain.errors import DomainError, NotFoundError, expense_not_found
from partyplan.domain.expense import ExpenseService
from partyplan.domain.serialization import (
    expense_stats_to_dict,
    expense_to_dict,
    expenses_envelope,
    success,
)
from partyplan.domain.session import ExpenseLedgerSession
from partyplan.utils.amount_parser import parse_amount
from partyplan.utils.date_parser import parse_date
from partyplan.utils.payer_resolver import resolve_payer


def _service(ctx) -> ExpenseService:
    return ExpenseService(ctx.obj["db"], payers=ctx.obj["settings"].payers)


@click.group()
def expense_group():
    """Manage shared expenses."""
    pass


@expense_group.command("add")
@click.option("--concept", required=True, help="What the money was spent on")
@click.option("--amount", required=True, help="Amount paid (e.g., 123.45)")
@click.option(
    "--date",
    "payment_date",
    default="today",
    show_default=True,
    help="Payment date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--paid-by", required=True, help="Who paid")
@click.option("--reimbursed", is_flag=True, help="Mark the expense as already reimbursed")
@click.option("--json", "as_json", is_flag=True, help="Print the stored expense as JSON")
@click.pass_context
def add_expense(
    ctx,
    concept: str,
    amount: str,
    payment_date: str,
    paid_by: str,
    reimbursed: bool,
    as_json: bool,
):
    """Record an expense.

    Examples:
        partyplan expense add --concept "Cake" --amount 45.50 --paid-by Eli
        partyplan expense add --concept "DJ" --amount 300 --date 2024-06-01 --paid-by Pan --reimbursed
    """
    service = _service(ctx)

    try:
        draft = ExpenseDraft(
            concept=concept,
            amount=parse_amount(amount),
            payment_date=parse_date(payment_date),
            paid_by=resolve_payer(service.payers, paid_by),
            is_reimbursed=reimbursed,
        )
        expense = service.add_expense(draft)
    except ValueError as e:
        handle_domain_error(ctx, e, as_json=as_json)
        return

    if as_json:
        echo_json(success(data=expense_to_dict(expense)))
        return
    click.echo(f"Created expense {expense.id}")
    click.echo(f"  Concept: {expense.concept}")
    click.echo(f"  Amount: {format_amount(expense.amount)}")
    click.echo(f"  Date: {expense.payment_date}")
    click.echo(f"  Paid by: {expense.paid_by}")


@expense_group.command("list")
@click.option("--json", "as_json", is_flag=True, help="Print expenses as JSON")
@click.pass_context
def list_expenses(ctx, as_json: bool):
    """List expenses, most recent first."""
    expenses = _service(ctx).list_expenses()

    if as_json:
        echo_json(expenses_envelope(expenses))
        return

    if not expenses:
        click.echo("No expenses found.")
        return
    echo_expense_table(expenses)


@expense_group.command("update")
@click.argument("expense_id", type=int)
@click.option("--concept", help="What the money was spent on")
@click.option("--amount", help="Amount paid")
@click.option("--date", "payment_date", help="Payment date")
@click.option("--paid-by", help="Who paid")
@click.option(
    "--reimbursed/--not-reimbursed",
    default=None,
    help="Reimbursement state",
)
@click.pass_context
def update_expense(
    ctx,
    expense_id: int,
    concept: str | None,
    amount: str | None,
    payment_date: str | None,
    paid_by: str | None,
    reimbursed: bool | None,
):
    """Edit an expense.

    Updates only the fields that are provided.

    Examples:
        partyplan expense update 3 --amount 50
        partyplan expense update 3 --paid-by Pan --date 2024-06-02
    """
    service = _service(ctx)
    session = ExpenseLedgerSession(service)

    try:
        current = service.get_expense(expense_id)
        if current is None:
            raise NotFoundError(expense_not_found(expense_id))

        draft = ExpenseDraft(
            concept=concept if concept is not None else current.concept,
            amount=parse_amount(amount) if amount is not None else current.amount,
            payment_date=(
                parse_date(payment_date) if payment_date is not None else current.payment_date
            ),
            paid_by=(
                resolve_payer(service.payers, paid_by) if paid_by is not None else current.paid_by
            ),
            is_reimbursed=reimbursed if reimbursed is not None else current.is_reimbursed,
        )
        session.refresh()
        expense = session.update_expense(expense_id, draft)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated expense {expense.id}")
    click.echo(f"  Concept: {expense.concept}")
    click.echo(f"  Amount: {format_amount(expense.amount)}")
    click.echo(f"  Date: {expense.payment_date}")
    click.echo(f"  Paid by: {expense.paid_by}")
    click.echo(f"  Reimbursed: {'yes' if expense.is_reimbursed else 'no'}")


@expense_group.command("reimburse")
@click.argument("expense_id", type=int)
@click.option("--undo", is_flag=True, help="Mark the expense as not reimbursed")
@click.option("--toggle", is_flag=True, help="Flip the current reimbursement state")
@click.pass_context
def reimburse_expense(ctx, expense_id: int, undo: bool, toggle: bool):
    """Mark an expense as reimbursed."""
    if undo and toggle:
        click.echo("Error: --undo and --toggle cannot be combined.", err=True)
        ctx.exit(1)

    session = ExpenseLedgerSession(_service(ctx))
    session.refresh()

    try:
        expense = session.find(expense_id)
        if expense is None:
            raise NotFoundError(expense_not_found(expense_id))
        if toggle:
            flag = not expense.is_reimbursed
        else:
            flag = not undo
        session.set_reimbursed(expense_id, flag)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    expense = session.find(expense_id)
    state = "reimbursed" if expense.is_reimbursed else "pending reimbursement"
    click.echo(f"Expense {expense_id} ({expense.concept}) is now {state}")


@expense_group.command("delete")
@click.argument("expense_id", type=int)
@click.pass_context
def delete_expense(ctx, expense_id: int):
    """Delete an expense."""
    session = ExpenseLedgerSession(_service(ctx))
    session.refresh()

    try:
        session.delete_expense(expense_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted expense {expense_id}")


@expense_group.command("stats")
@click.option("--json", "as_json", is_flag=True, help="Print statistics as JSON")
@click.pass_context
def expense_stats(ctx, as_json: bool):
    """Show totals per payer and how to split them evenly."""
    stats = _service(ctx).get_stats()

    if as_json:
        echo_json(success(stats=expense_stats_to_dict(stats)))
        return
    echo_expense_stats(stats)


def register_commands(cli):
    """Register expense commands with main CLI."""
    cli.add_command(expense_group, name="expense")
