"""Main CLI entry point."""

import click
from projectledger.database.factories import create_sqlite_database
from projectledger.logging_config import configure_logging

# Import and register all commands at module level
from projectledger.cli.commands import (
    user,
    company,
    project,
    transaction,
    summary,
    export,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides PROJECTLEDGER_DB_PATH environment variable)",
    envvar="PROJECTLEDGER_DB_PATH",
)
@click.option(
    "--as-user",
    "as_user",
    help="Acting user ID or email (overrides PROJECTLEDGER_USER environment variable)",
    envvar="PROJECTLEDGER_USER",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Log level for structured logs on stderr",
    envvar="PROJECTLEDGER_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, as_user: str | None, log_level: str):
    """Projectledger - role-scoped project finance ledger.

    Companies own projects and projects incur transactions. What you can
    see and change depends on the role of the acting user (--as-user).
    """
    ctx.ensure_object(dict)
    configure_logging(level=log_level)
    ctx.obj["as_user"] = as_user

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
user.register_commands(cli)
company.register_commands(cli)
project.register_commands(cli)
transaction.register_commands(cli)
summary.register_commands(cli)
export.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
