"""Transaction management commands."""

import click
from projectledger.domain.entities import TransactionCategory, TransactionType
from projectledger.domain.errors import DomainError
from projectledger.domain.transaction import TransactionService
from projectledger.utils.amount_parser import parse_amount
from projectledger.utils.date_parser import parse_date
from projectledger.cli.error_handling import handle_domain_error
from projectledger.cli.filters import build_transaction_filters, transaction_filter_options
from projectledger.cli.principal import require_principal

_TYPE_CHOICE = click.Choice([t.value for t in TransactionType])
_CATEGORY_CHOICE = click.Choice([c.value for c in TransactionCategory])


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


def _parse_options(ctx, date: str | None, amount: str | None):
    txn_date = None
    if date is not None:
        try:
            txn_date = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    txn_amount = None
    if amount is not None:
        try:
            txn_amount = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)
    return txn_date, txn_amount


@transaction_group.command("list")
@transaction_filter_options
@click.option("--verbose", "-v", is_flag=True, help="Show notes and approver")
@click.pass_context
def list_transactions(ctx, verbose: bool, **filter_options):
    """List the transactions you can see, newest first."""
    principal = require_principal(ctx)
    service = TransactionService(ctx.obj["db"])

    filters = build_transaction_filters(ctx, **filter_options)
    try:
        transactions = service.list_transactions(principal, filters)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    for txn in transactions:
        click.echo(
            f"{txn.id:4d} | {txn.date} | {txn.type:8s} | ${txn.amount:>12,.2f} | "
            f"{txn.category:11s} | P{txn.project_id} | {txn.status:9s} | {txn.description}"
        )
        if verbose:
            click.echo(f"       created by {txn.created_by}, approved by {txn.approved_by or '-'}")
            if txn.notes:
                click.echo(f"       notes: {txn.notes}")


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int):
    """Show a transaction."""
    principal = require_principal(ctx)
    service = TransactionService(ctx.obj["db"])

    try:
        txn = service.get_transaction(principal, transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nTransaction ID: {txn.id}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Type: {txn.type}")
    click.echo(f"  Amount: ${txn.amount:,.2f}")
    click.echo(f"  Category: {txn.category}")
    click.echo(f"  Description: {txn.description}")
    click.echo(f"  Project: {txn.project_id} (company {txn.company_id})")
    click.echo(f"  Status: {txn.status}")
    click.echo(f"  Created by: {txn.created_by}")
    click.echo(f"  Approved by: {txn.approved_by or '-'}")
    if txn.notes:
        click.echo(f"  Notes: {txn.notes}")


@transaction_group.command("add")
@click.option("--project", "project_id", type=int, required=True, help="Project ID")
@click.option("--type", "txn_type", type=_TYPE_CHOICE, required=True, help="Transaction type")
@click.option("--amount", required=True, help="Amount (e.g., 123.45 or $1,234.50)")
@click.option("--description", required=True, help="Description")
@click.option("--category", type=_CATEGORY_CHOICE, required=True, help="Category")
@click.option("--date", help="Date (YYYY-MM-DD or relative like 'today'; default today)")
@click.option("--notes", help="Notes")
@click.pass_context
def add_transaction(
    ctx,
    project_id: int,
    txn_type: str,
    amount: str,
    description: str,
    category: str,
    date: str | None,
    notes: str | None,
):
    """Record a transaction against a project.

    Transactions added by an admin are approved immediately; everyone
    else's wait for approval.

    Examples:
        projectledger --as-user 3 transaction add --project 1 --type expense \\
            --amount 120 --description "Laptop stand" --category equipment
    """
    principal = require_principal(ctx)
    service = TransactionService(ctx.obj["db"])
    txn_date, txn_amount = _parse_options(ctx, date, amount)

    try:
        txn = service.create_transaction(
            principal,
            type=txn_type,
            amount=txn_amount,
            description=description,
            category=category,
            project_id=project_id,
            date=txn_date,
            notes=notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created transaction {txn.id} ({txn.status})")


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--type", "txn_type", type=_TYPE_CHOICE, help="Transaction type")
@click.option("--amount", help="Amount")
@click.option("--description", help="Description")
@click.option("--category", type=_CATEGORY_CHOICE, help="Category")
@click.option("--date", help="Date")
@click.option("--notes", help="Notes")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    txn_type: str | None,
    amount: str | None,
    description: str | None,
    category: str | None,
    date: str | None,
    notes: str | None,
):
    """Update a transaction.

    Updates only the fields that are provided. Unless you are an admin the
    transaction goes back to pending for approval.
    """
    principal = require_principal(ctx)
    service = TransactionService(ctx.obj["db"])
    txn_date, txn_amount = _parse_options(ctx, date, amount)

    try:
        txn = service.update_transaction(
            principal,
            transaction_id,
            type=txn_type,
            amount=txn_amount,
            description=description,
            category=category,
            date=txn_date,
            notes=notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {txn.id} ({txn.status})")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool):
    """Delete a transaction."""
    principal = require_principal(ctx)
    service = TransactionService(ctx.obj["db"])

    if not yes and not click.confirm(
        f"Are you sure you want to delete transaction {transaction_id}?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(principal, transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


@transaction_group.command("approve")
@click.argument("transaction_id", type=int)
@click.pass_context
def approve_transaction(ctx, transaction_id: int):
    """Approve a pending transaction."""
    principal = require_principal(ctx)
    service = TransactionService(ctx.obj["db"])

    try:
        txn = service.approve_transaction(principal, transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Approved transaction {txn.id}")


@transaction_group.command("reject")
@click.argument("transaction_id", type=int)
@click.option("--reason", default="", help="Reason, appended to the transaction notes")
@click.pass_context
def reject_transaction(ctx, transaction_id: int, reason: str):
    """Reject a pending transaction."""
    principal = require_principal(ctx)
    service = TransactionService(ctx.obj["db"])

    try:
        txn = service.reject_transaction(principal, transaction_id, reason)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Rejected transaction {txn.id}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
