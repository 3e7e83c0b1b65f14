"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so enum coercion and membership
tables never leak past the database package.
"""

from decimal import Decimal

from projectledger.domain import entities as domain
from projectledger.database.models import (
    User as ORMUser,
    Company as ORMCompany,
    Project as ORMProject,
    Transaction as ORMTransaction,
)

CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
    """Normalize a stored numeric value to a two-place Decimal."""
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS)


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        name=orm_user.name,
        email=orm_user.email,
        role=domain.Role(orm_user.role),
        created_at=orm_user.created_at,
    )


def company_to_domain(orm_company: ORMCompany) -> domain.Company:
    """Convert SQLAlchemy Company model to domain Company entity."""
    return domain.Company(
        id=orm_company.id,
        name=orm_company.name,
        description=orm_company.description or "",
        created_by=orm_company.created_by,
        managers=frozenset(link.user_id for link in orm_company.manager_links),
        created_at=orm_company.created_at,
        updated_at=orm_company.updated_at,
    )


def project_to_domain(orm_project: ORMProject) -> domain.Project:
    """Convert SQLAlchemy Project model to domain Project entity."""
    return domain.Project(
        id=orm_project.id,
        name=orm_project.name,
        description=orm_project.description,
        company_id=orm_project.company_id,
        start_date=orm_project.start_date,
        end_date=orm_project.end_date,
        status=domain.ProjectStatus(orm_project.status),
        budget=to_money(orm_project.budget),
        created_by=orm_project.created_by,
        managers=frozenset(link.user_id for link in orm_project.manager_links),
        team=frozenset(link.user_id for link in orm_project.team_links),
        created_at=orm_project.created_at,
        updated_at=orm_project.updated_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        type=domain.TransactionType(orm_transaction.type),
        amount=to_money(orm_transaction.amount),
        description=orm_transaction.description,
        category=domain.TransactionCategory(orm_transaction.category),
        project_id=orm_transaction.project_id,
        company_id=orm_transaction.company_id,
        status=domain.TransactionStatus(orm_transaction.status),
        created_by=orm_transaction.created_by,
        approved_by=orm_transaction.approved_by,
        date=orm_transaction.date,
        notes=orm_transaction.notes,
        version=orm_transaction.version,
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
    )
