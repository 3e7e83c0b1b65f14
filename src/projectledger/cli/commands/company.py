"""Company management commands."""

import click
from projectledger.domain.company import CompanyService
from projectledger.domain.errors import DomainError
from projectledger.cli.error_handling import handle_domain_error
from projectledger.cli.principal import require_principal


@click.group()
def company_group():
    """Manage companies."""
    pass


def _format_managers(managers) -> str:
    return ", ".join(str(m) for m in sorted(managers)) or "-"


@company_group.command("list")
@click.pass_context
def list_companies(ctx):
    """List the companies you can see."""
    principal = require_principal(ctx)
    service = CompanyService(ctx.obj["db"])

    try:
        companies = service.list_companies(principal)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if not companies:
        click.echo("No companies found.")
        return

    click.echo("\nCompanies:")
    click.echo("-" * 70)
    for company in companies:
        click.echo(
            f"ID: {company.id:3d} | {company.name:24s} | "
            f"Owner: {company.created_by} | Managers: {_format_managers(company.managers)}"
        )


@company_group.command("show")
@click.argument("company_id", type=int)
@click.pass_context
def show_company(ctx, company_id: int):
    """Show a company and its projects."""
    principal = require_principal(ctx)
    service = CompanyService(ctx.obj["db"])

    try:
        company = service.get_company(principal, company_id)
        projects = service.list_company_projects(principal, company_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nCompany {company.id}: {company.name}")
    if company.description:
        click.echo(f"  Description: {company.description}")
    click.echo(f"  Created by: {company.created_by}")
    click.echo(f"  Managers: {_format_managers(company.managers)}")
    click.echo(f"  Projects: {len(projects)}")
    for project in projects:
        click.echo(f"    - {project.id}: {project.name} ({project.status})")


@company_group.command("create")
@click.argument("name")
@click.option("--description", default="", help="Company description")
@click.option("--manager", "managers", type=int, multiple=True, help="Manager user ID (repeatable)")
@click.pass_context
def create_company(ctx, name: str, description: str, managers: tuple[int, ...]):
    """Create a company owned by the acting user.

    Examples:
        projectledger --as-user 1 company create "Acme" --manager 2
    """
    principal = require_principal(ctx)
    service = CompanyService(ctx.obj["db"])

    try:
        company = service.create_company(
            principal, name=name, description=description, managers=managers
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created company '{company.name}' (ID: {company.id})")


@company_group.command("update")
@click.argument("company_id", type=int)
@click.option("--name", help="New name")
@click.option("--description", help="New description")
@click.option(
    "--manager", "managers", type=int, multiple=True, help="Replace managers (repeatable)"
)
@click.pass_context
def update_company(
    ctx, company_id: int, name: str | None, description: str | None, managers: tuple[int, ...]
):
    """Update a company.

    Only the options given are changed; empty values are ignored.
    """
    principal = require_principal(ctx)
    service = CompanyService(ctx.obj["db"])

    try:
        company = service.update_company(
            principal,
            company_id,
            name=name,
            description=description,
            managers=managers or None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated company {company.id}")


@company_group.command("delete")
@click.argument("company_id", type=int)
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def delete_company(ctx, company_id: int, yes: bool):
    """Delete a company. Its projects and transactions are kept."""
    principal = require_principal(ctx)
    service = CompanyService(ctx.obj["db"])

    if not yes and not click.confirm(f"Are you sure you want to delete company {company_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_company(principal, company_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted company {company_id}")


def register_commands(cli):
    """Register company commands with main CLI."""
    cli.add_command(company_group, name="company")
