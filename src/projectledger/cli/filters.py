"""CLI helpers for building list filters."""

from datetime import date
from decimal import Decimal

import click

from projectledger.domain.entities import (
    TransactionCategory,
    TransactionFilters,
    TransactionStatus,
    TransactionType,
)
from projectledger.utils.amount_parser import parse_amount
from projectledger.utils.date_parser import get_period_range, parse_date

PERIODS = ("this-month", "last-month", "this-year", "last-year")


def date_filter_options(f):
    """Attach --start-date, --end-date and --period to a command."""
    f = click.option(
        "--period",
        type=click.Choice(PERIODS),
        help="Named period; cannot be combined with --start-date or --end-date",
    )(f)
    f = click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")(f)
    f = click.option(
        "--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')"
    )(f)
    return f


def scope_filter_options(f):
    """Attach --company and --project to a command."""
    f = click.option("--project", "project_id", type=int, help="Only this project ID")(f)
    f = click.option("--company", "company_id", type=int, help="Only this company ID")(f)
    return f


def transaction_filter_options(f):
    """Attach the full set of transaction list filters to a command."""
    f = click.option("--max-amount", help="Maximum amount")(f)
    f = click.option("--min-amount", help="Minimum amount")(f)
    f = click.option(
        "--category", type=click.Choice([c.value for c in TransactionCategory]), help="Category"
    )(f)
    f = click.option(
        "--status", type=click.Choice([s.value for s in TransactionStatus]), help="Status"
    )(f)
    f = click.option(
        "--type", "txn_type", type=click.Choice([t.value for t in TransactionType]), help="Type"
    )(f)
    return scope_filter_options(date_filter_options(f))


def resolve_cli_date_range(
    ctx: click.Context,
    *,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
) -> tuple[date | None, date | None]:
    """Resolve a date range from a named period or explicit dates."""
    if period and (start_date or end_date):
        click.echo(
            "Error: --period cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period:
        return get_period_range(period)

    start = None
    end = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    return start, end


def _parse_amount_option(ctx: click.Context, value: str | None, label: str) -> Decimal | None:
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def build_transaction_filters(
    ctx: click.Context,
    *,
    company_id: int | None = None,
    project_id: int | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    period: str | None = None,
    txn_type: str | None = None,
    status: str | None = None,
    category: str | None = None,
    min_amount: str | None = None,
    max_amount: str | None = None,
) -> TransactionFilters:
    """Turn raw CLI option values into a TransactionFilters value."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    return TransactionFilters(
        project_id=project_id,
        company_id=company_id,
        type=TransactionType(txn_type) if txn_type else None,
        status=TransactionStatus(status) if status else None,
        category=TransactionCategory(category) if category else None,
        start_date=start,
        end_date=end,
        min_amount=_parse_amount_option(ctx, min_amount, "minimum amount"),
        max_amount=_parse_amount_option(ctx, max_amount, "maximum amount"),
    )
