"""User management commands."""

import click
from projectledger.domain.entities import Role
from projectledger.domain.errors import DomainError
from projectledger.domain.user import UserService
from projectledger.cli.error_handling import handle_domain_error


@click.group()
def user_group():
    """Manage users."""
    pass


@user_group.command("create")
@click.argument("name")
@click.argument("email")
@click.option(
    "--role",
    type=click.Choice([r.value for r in Role]),
    default=Role.USER.value,
    show_default=True,
    help="Role tier of the new user",
)
@click.pass_context
def create_user(ctx, name: str, email: str, role: str):
    """Create a new user.

    Does not require --as-user, so the first admin can be seeded.

    Examples:
        projectledger user create "Ada Admin" ada@example.com --role admin
        projectledger user create "Uma User" uma@example.com
    """
    service = UserService(ctx.obj["db"])
    try:
        user = service.create_user(name=name, email=email, role=role)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created user {user.display_name} (ID: {user.id}, role: {user.role})")


@user_group.command("list")
@click.pass_context
def list_users(ctx):
    """List all users."""
    service = UserService(ctx.obj["db"])

    try:
        users = service.list_users()
    except DomainError as e:
        handle_domain_error(ctx, e)
    if not users:
        click.echo("No users found.")
        return

    click.echo("\nUsers:")
    click.echo("-" * 70)
    for user in users:
        click.echo(f"ID: {user.id:3d} | {user.name:20s} | {user.email:28s} | {user.role}")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
