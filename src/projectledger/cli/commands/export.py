"""Export command."""

import json
from pathlib import Path

import click
from projectledger.domain.errors import DomainError
from projectledger.domain.export import ExportFormat, ExportService
from projectledger.cli.error_handling import handle_domain_error
from projectledger.cli.filters import build_transaction_filters, transaction_filter_options
from projectledger.cli.principal import require_principal


@click.command("export")
@transaction_filter_options
@click.option(
    "--format",
    "fmt",
    type=click.Choice([f.value for f in ExportFormat]),
    default=ExportFormat.JSON.value,
    show_default=True,
    help="Output format",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to this file")
@click.pass_context
def export(ctx, fmt: str, output: str | None, **filter_options):
    """Export the transactions you can see as JSON or CSV.

    Examples:
        projectledger --as-user 1 export --format csv -o transactions.csv
        projectledger --as-user 2 export --project 3 --status approved
    """
    principal = require_principal(ctx)
    service = ExportService(ctx.obj["db"])

    filters = build_transaction_filters(ctx, **filter_options)
    try:
        payload = service.export_transactions(principal, filters, fmt)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if fmt == ExportFormat.JSON:
        text = json.dumps(payload, indent=2, default=str)
    else:
        text = payload

    if output:
        Path(output).write_text(text, encoding="utf-8")
        click.echo(f"Exported to {output}")
    else:
        click.echo(text, nl=fmt == ExportFormat.JSON)


def register_commands(cli):
    """Register export commands with main CLI."""
    cli.add_command(export)
