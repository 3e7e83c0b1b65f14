"""CLI helper for resolving the acting principal."""

import click
from projectledger.domain.entities import Principal
from projectledger.domain.errors import DomainError
from projectledger.domain.user import UserService
from projectledger.cli.error_handling import handle_domain_error


def require_principal(ctx: click.Context) -> Principal:
    """Resolve --as-user to a principal, or exit with a CLI error.

    Every command except seeding users needs an acting user; this keeps the
    error message and exit code the same across commands.
    """
    identifier = ctx.obj.get("as_user")
    if not identifier:
        click.echo(
            "Error: No acting user. Pass --as-user or set PROJECTLEDGER_USER.",
            err=True,
        )
        ctx.exit(1)

    try:
        return UserService(ctx.obj["db"]).resolve_principal(identifier)
    except DomainError as e:
        handle_domain_error(ctx, e)
