"""Shared pytest fixtures for projectledger tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest
from click.testing import CliRunner

from projectledger.database.factories import create_sqlite_database
from projectledger.domain.company import CompanyService
from projectledger.domain.entities import Role
from projectledger.domain.export import ExportService
from projectledger.domain.project import ProjectService
from projectledger.domain.summary import SummaryService
from projectledger.domain.transaction import TransactionService
from projectledger.domain.user import UserService
from projectledger.logging_config import LogContext, reset_logging


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture(autouse=True)
def clean_logging():
    """Leave no handlers or context behind between tests."""
    yield
    reset_logging()
    LogContext.clear()


@pytest.fixture
def cli_runner():
    """Create a Click CLI runner."""
    return CliRunner()


@pytest.fixture
def user_service(temp_db):
    """Create a UserService with a temporary database."""
    return UserService(temp_db)


@pytest.fixture
def company_service(temp_db):
    """Create a CompanyService with a temporary database."""
    return CompanyService(temp_db)


@pytest.fixture
def project_service(temp_db):
    """Create a ProjectService with a temporary database."""
    return ProjectService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def summary_service(temp_db):
    """Create a SummaryService with a temporary database."""
    return SummaryService(temp_db)


@pytest.fixture
def export_service(temp_db):
    """Create an ExportService with a temporary database."""
    return ExportService(temp_db)


@pytest.fixture
def users(user_service):
    """Create one admin, two managers and two regular users.

    Returns a dict of principals keyed by a short name.
    """
    created = {
        "admin": user_service.create_user("Ada Admin", "ada@example.com", Role.ADMIN),
        "manager": user_service.create_user("Max Manager", "max@example.com", Role.MANAGER),
        "other_manager": user_service.create_user("Mia Manager", "mia@example.com", Role.MANAGER),
        "user": user_service.create_user("Uma User", "uma@example.com", Role.USER),
        "other_user": user_service.create_user("Ugo User", "ugo@example.com", Role.USER),
    }
    return {key: user.as_principal() for key, user in created.items()}


@pytest.fixture
def company(company_service, users):
    """Company owned by the admin and managed by ``manager``."""
    return company_service.create_company(
        users["admin"],
        name="Acme",
        description="Widgets",
        managers=[users["manager"].id],
    )


@pytest.fixture
def projects(project_service, users, company):
    """Two projects under ``company``.

    ``managed`` is managed by ``manager`` and has ``user`` on its team.
    ``unmanaged`` belongs to ``other_manager`` only.
    """
    managed = project_service.create_project(
        users["admin"],
        name="Website",
        description="Relaunch",
        company_id=company.id,
        start_date=date(2024, 1, 1),
        budget=Decimal("10000"),
        managers=[users["manager"].id],
        team=[users["user"].id],
    )
    unmanaged = project_service.create_project(
        users["admin"],
        name="Warehouse",
        description="New racks",
        company_id=company.id,
        start_date=date(2024, 2, 1),
        managers=[users["other_manager"].id],
    )
    return {"managed": managed, "unmanaged": unmanaged}


@pytest.fixture
def add_transaction(transaction_service, projects):
    """Factory creating a transaction with sensible defaults."""

    def _add(principal, project="managed", **overrides):
        fields = {
            "type": "expense",
            "amount": Decimal("100.00"),
            "description": "Test transaction",
            "category": "equipment",
            "date": date(2024, 3, 15),
        }
        fields.update(overrides)
        return transaction_service.create_transaction(
            principal, project_id=projects[project].id, **fields
        )

    return _add
