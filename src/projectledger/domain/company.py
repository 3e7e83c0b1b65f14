"""Company domain service."""

from typing import Iterable, Optional
from projectledger.database.base import Database
from projectledger.domain import errors
from projectledger.domain.entities import (
    Company as CompanyEntity,
    Principal,
    Project as ProjectEntity,
    ProjectFilters,
    ResourceKind,
)
from projectledger.domain.lifecycle import merge_truthy
from projectledger.domain.permissions import Action, enforce, require_role
from projectledger.domain.scope import ScopePredicate, ScopeResolver
from projectledger.domain.validation import require_users, require_value
from projectledger.logging_config import LogContext, get_logger

logger = get_logger("companies")

UPDATABLE_FIELDS = ("name", "description", "managers")


class CompanyService:
    """Service for managing companies under role scoping."""

    def __init__(self, db: Database):
        """Initialize company service.

        Args:
            db: Database instance
        """
        self.db = db
        self.scopes = ScopeResolver(db)

    def _load(self, company_id: int) -> CompanyEntity:
        company = self.db.get_company(company_id)
        if company is None:
            raise errors.NotFoundError(errors.not_found("company", company_id))
        return company

    def list_companies(self, principal: Principal) -> list[CompanyEntity]:
        """List the companies visible to ``principal``."""
        predicate = self.scopes.resolve(principal, ResourceKind.COMPANY)
        return self.db.find_companies(predicate)

    def get_company(self, principal: Principal, company_id: int) -> CompanyEntity:
        """Get a single company.

        Raises:
            NotFoundError: If the company doesn't exist
            ForbiddenError: If the principal may not read it
        """
        company = self._load(company_id)
        enforce(principal, Action.READ, company)
        return company

    def list_company_projects(self, principal: Principal, company_id: int) -> list[ProjectEntity]:
        """List every project of a company the principal may read.

        All of the company's projects are returned once the company itself is
        readable; project-level scoping does not apply here.
        """
        company = self.get_company(principal, company_id)
        return self.db.find_projects(
            ScopePredicate(kind=ResourceKind.PROJECT, match_all=True),
            ProjectFilters(company_id=company.id),
        )

    def create_company(
        self,
        principal: Principal,
        name: str,
        description: Optional[str] = None,
        managers: Optional[Iterable[int]] = None,
    ) -> CompanyEntity:
        """Create a company owned by ``principal``.

        Raises:
            ForbiddenError: If the principal's role may not create companies
            ValidationError: If the name is missing or a manager doesn't exist
        """
        require_role(principal, ResourceKind.COMPANY, Action.CREATE)
        name = require_value(name, "name").strip()
        manager_ids = require_users(self.db, managers)

        company = self.db.create_company(
            name=name,
            description=description or "",
            created_by=principal.id,
            managers=sorted(manager_ids),
        )
        with LogContext.bind(actor_id=principal.id, actor_role=principal.role):
            logger.info("company_created", extra={"company_id": company.id})
        return company

    def update_company(
        self,
        principal: Principal,
        company_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        managers: Optional[Iterable[int]] = None,
    ) -> CompanyEntity:
        """Update company fields. Falsy values leave the stored value unchanged.

        Raises:
            ForbiddenError: If the principal may not update the company
            NotFoundError: If the company doesn't exist
            ValidationError: If a manager doesn't exist
        """
        require_role(principal, ResourceKind.COMPANY, Action.UPDATE)
        company = self._load(company_id)
        enforce(principal, Action.UPDATE, company)

        manager_ids = require_users(self.db, managers) if managers else None
        updated = merge_truthy(
            company,
            {"name": name, "description": description, "managers": manager_ids},
            UPDATABLE_FIELDS,
        )
        saved = self.db.save_company(updated)
        with LogContext.bind(actor_id=principal.id, actor_role=principal.role):
            logger.info("company_updated", extra={"company_id": saved.id})
        return saved

    def delete_company(self, principal: Principal, company_id: int) -> None:
        """Delete a company. Its projects and transactions are not removed.

        Raises:
            ForbiddenError: If the principal's role may not delete companies
            NotFoundError: If the company doesn't exist
        """
        require_role(principal, ResourceKind.COMPANY, Action.DELETE)
        company = self._load(company_id)
        enforce(principal, Action.DELETE, company)
        self.db.delete_company(company.id)
        with LogContext.bind(actor_id=principal.id, actor_role=principal.role):
            logger.info("company_deleted", extra={"company_id": company.id})
