"""Project management commands."""

import click
from projectledger.domain.entities import ProjectFilters, ProjectStatus
from projectledger.domain.errors import DomainError
from projectledger.domain.project import ProjectService
from projectledger.utils.amount_parser import parse_amount
from projectledger.utils.date_parser import parse_date
from projectledger.cli.error_handling import handle_domain_error
from projectledger.cli.principal import require_principal

_STATUS_CHOICE = click.Choice([s.value for s in ProjectStatus])


@click.group()
def project_group():
    """Manage projects."""
    pass


def _parse_date_option(ctx, value: str | None, label: str):
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def _parse_budget_option(ctx, value: str | None):
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid budget: {e}", err=True)
        ctx.exit(1)


@project_group.command("list")
@click.option("--company", "company_id", type=int, help="Only projects of this company")
@click.option("--status", type=_STATUS_CHOICE, help="Only projects with this status")
@click.pass_context
def list_projects(ctx, company_id: int | None, status: str | None):
    """List the projects you can see."""
    principal = require_principal(ctx)
    service = ProjectService(ctx.obj["db"])

    filters = ProjectFilters(
        company_id=company_id, status=ProjectStatus(status) if status else None
    )
    try:
        projects = service.list_projects(principal, filters)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if not projects:
        click.echo("No projects found.")
        return

    click.echo("\nProjects:")
    click.echo("-" * 80)
    for project in projects:
        click.echo(
            f"ID: {project.id:3d} | {project.name:24s} | Company: {project.company_id:3d} | "
            f"{project.status:12s} | Budget: ${project.budget:,.2f}"
        )


@project_group.command("show")
@click.argument("project_id", type=int)
@click.pass_context
def show_project(ctx, project_id: int):
    """Show a project."""
    principal = require_principal(ctx)
    service = ProjectService(ctx.obj["db"])

    try:
        project = service.get_project(principal, project_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nProject {project.id}: {project.name}")
    click.echo(f"  Description: {project.description}")
    click.echo(f"  Company: {project.company_id}")
    click.echo(f"  Status: {project.status}")
    click.echo(f"  Start: {project.start_date}")
    click.echo(f"  End: {project.end_date or '-'}")
    click.echo(f"  Budget: ${project.budget:,.2f}")
    click.echo(f"  Created by: {project.created_by}")
    click.echo(f"  Managers: {', '.join(str(m) for m in sorted(project.managers)) or '-'}")
    click.echo(f"  Team: {', '.join(str(m) for m in sorted(project.team)) or '-'}")


@project_group.command("create")
@click.argument("name")
@click.option("--company", "company_id", type=int, required=True, help="Owning company ID")
@click.option("--description", required=True, help="Project description")
@click.option("--start-date", required=True, help="Start date (YYYY-MM-DD or 'today')")
@click.option("--end-date", help="End date")
@click.option("--status", type=_STATUS_CHOICE, help="Initial status (default: planning)")
@click.option("--budget", help="Budget amount (e.g., 25000 or $25,000)")
@click.option("--manager", "managers", type=int, multiple=True, help="Manager user ID (repeatable)")
@click.option("--team", "team", type=int, multiple=True, help="Team member user ID (repeatable)")
@click.pass_context
def create_project(
    ctx,
    name: str,
    company_id: int,
    description: str,
    start_date: str,
    end_date: str | None,
    status: str | None,
    budget: str | None,
    managers: tuple[int, ...],
    team: tuple[int, ...],
):
    """Create a project under a company you manage.

    Examples:
        projectledger --as-user 2 project create "Website" --company 1 \\
            --description "Relaunch" --start-date today --budget 25000 --team 3
    """
    principal = require_principal(ctx)
    service = ProjectService(ctx.obj["db"])

    start = _parse_date_option(ctx, start_date, "start date")
    end = _parse_date_option(ctx, end_date, "end date")
    amount = _parse_budget_option(ctx, budget)

    try:
        project = service.create_project(
            principal,
            name=name,
            description=description,
            company_id=company_id,
            start_date=start,
            end_date=end,
            status=status,
            budget=amount,
            managers=managers,
            team=team,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created project '{project.name}' (ID: {project.id})")


@project_group.command("update")
@click.argument("project_id", type=int)
@click.option("--name", help="New name")
@click.option("--description", help="New description")
@click.option("--start-date", help="New start date")
@click.option("--end-date", help="New end date")
@click.option("--status", type=_STATUS_CHOICE, help="New status")
@click.option("--budget", help="New budget")
@click.option("--manager", "managers", type=int, multiple=True, help="Replace managers")
@click.option("--team", "team", type=int, multiple=True, help="Replace team members")
@click.pass_context
def update_project(
    ctx,
    project_id: int,
    name: str | None,
    description: str | None,
    start_date: str | None,
    end_date: str | None,
    status: str | None,
    budget: str | None,
    managers: tuple[int, ...],
    team: tuple[int, ...],
):
    """Update a project.

    Only the options given are changed; empty values and a zero budget are
    ignored.
    """
    principal = require_principal(ctx)
    service = ProjectService(ctx.obj["db"])

    try:
        project = service.update_project(
            principal,
            project_id,
            name=name,
            description=description,
            start_date=_parse_date_option(ctx, start_date, "start date"),
            end_date=_parse_date_option(ctx, end_date, "end date"),
            status=status,
            budget=_parse_budget_option(ctx, budget),
            managers=managers or None,
            team=team or None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated project {project.id}")


@project_group.command("delete")
@click.argument("project_id", type=int)
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def delete_project(ctx, project_id: int, yes: bool):
    """Delete a project. Its transactions are kept."""
    principal = require_principal(ctx)
    service = ProjectService(ctx.obj["db"])

    if not yes and not click.confirm(f"Are you sure you want to delete project {project_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_project(principal, project_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted project {project_id}")


def register_commands(cli):
    """Register project commands with main CLI."""
    cli.add_command(project_group, name="project")
