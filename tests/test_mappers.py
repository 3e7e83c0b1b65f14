"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from projectledger.database.models import (
    Company as ORMCompany,
    CompanyManager,
    Project as ORMProject,
    ProjectManager,
    ProjectTeamMember,
    Transaction as ORMTransaction,
    User as ORMUser,
)
from projectledger.database.mappers import (
    company_to_domain,
    project_to_domain,
    to_money,
    transaction_to_domain,
    user_to_domain,
)
from projectledger.domain.entities import (
    ProjectStatus,
    Role,
    TransactionCategory,
    TransactionStatus,
    TransactionType,
)

NOW = datetime.now(UTC)


def test_to_money():
    assert to_money(None) == Decimal("0.00")
    assert to_money(12.5) == Decimal("12.50")
    assert to_money(Decimal("3.14159")) == Decimal("3.14")


def test_user_to_domain():
    user = user_to_domain(
        ORMUser(id=1, name="Ada", email="ada@example.com", role="manager", created_at=NOW)
    )
    assert user.role == Role.MANAGER
    assert user.as_principal().id == 1


def test_company_to_domain_collects_managers():
    orm_company = ORMCompany(
        id=1,
        name="Acme",
        description=None,
        created_by=1,
        created_at=NOW,
        updated_at=NOW,
        manager_links=[CompanyManager(user_id=2), CompanyManager(user_id=3)],
    )
    company = company_to_domain(orm_company)

    assert company.description == ""
    assert company.managers == frozenset({2, 3})


def test_project_to_domain():
    orm_project = ORMProject(
        id=4,
        name="Website",
        description="d",
        company_id=1,
        start_date=date(2024, 1, 1),
        end_date=None,
        status="on-hold",
        budget=Decimal("1000"),
        created_by=1,
        created_at=NOW,
        updated_at=NOW,
        manager_links=[ProjectManager(user_id=2)],
        team_links=[ProjectTeamMember(user_id=5), ProjectTeamMember(user_id=6)],
    )
    project = project_to_domain(orm_project)

    assert project.status == ProjectStatus.ON_HOLD
    assert project.budget == Decimal("1000.00")
    assert project.managers == frozenset({2})
    assert project.team == frozenset({5, 6})


def test_transaction_to_domain():
    orm_txn = ORMTransaction(
        id=9,
        type="payment",
        amount=Decimal("19.99"),
        description="Invoice",
        category="consulting",
        project_id=4,
        company_id=1,
        status="rejected",
        created_by=3,
        approved_by=2,
        date=date(2024, 3, 1),
        notes=None,
        version=3,
        created_at=NOW,
        updated_at=NOW,
    )
    txn = transaction_to_domain(orm_txn)

    assert txn.type == TransactionType.PAYMENT
    assert txn.category == TransactionCategory.CONSULTING
    assert txn.status == TransactionStatus.REJECTED
    assert txn.version == 3
