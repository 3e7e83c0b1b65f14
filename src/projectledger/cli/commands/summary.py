"""Summary commands."""

import json

import click
from projectledger.domain.errors import DomainError
from projectledger.domain.summary import SummaryService, summary_to_dict
from projectledger.cli.filters import (
    build_transaction_filters,
    date_filter_options,
    scope_filter_options,
)
from projectledger.cli.error_handling import handle_domain_error
from projectledger.cli.principal import require_principal


def _money(value) -> str:
    return f"${value:,.2f}"


@click.command("summary")
@scope_filter_options
@date_filter_options
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON")
@click.pass_context
def summary(ctx, as_json: bool, **filter_options):
    """Show income, expenses and balance of approved transactions.

    Only approved transactions are counted. The status counts cover every
    transaction you can see and ignore the filters.

    Examples:
        projectledger --as-user 1 summary
        projectledger --as-user 2 summary --company 1 --period this-year
    """
    principal = require_principal(ctx)
    service = SummaryService(ctx.obj["db"])

    filters = build_transaction_filters(ctx, **filter_options)
    try:
        result = service.build_summary(principal, filters)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        click.echo(json.dumps(summary_to_dict(result), indent=2, default=str))
        return

    click.echo("\nTotals")
    click.echo("-" * 40)
    click.echo(f"  Income:   {_money(result.totals.income):>20s}")
    click.echo(f"  Expenses: {_money(result.totals.expenses):>20s}")
    click.echo(f"  Balance:  {_money(result.totals.balance):>20s}")

    if result.by_type:
        click.echo("\nBy type")
        click.echo("-" * 40)
        for group in result.by_type:
            click.echo(f"  {group.key:12s} {_money(group.total):>16s} ({group.count})")

    if result.by_category:
        click.echo("\nBy category")
        click.echo("-" * 40)
        for group in result.by_category:
            click.echo(f"  {group.key:12s} {_money(group.total):>16s} ({group.count})")

    if result.monthly:
        click.echo("\nMonthly")
        click.echo("-" * 40)
        for month in result.monthly:
            click.echo(
                f"  {month.year}-{month.month:02d} {month.type:8s} {_money(month.total):>16s}"
            )

    if result.by_status:
        click.echo("\nBy status")
        click.echo("-" * 40)
        for count in result.by_status:
            click.echo(f"  {count.status:12s} {count.count:>6d}")


def register_commands(cli):
    """Register summary commands with main CLI."""
    cli.add_command(summary)
