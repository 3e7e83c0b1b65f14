"""Project domain service."""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional
from projectledger.database.base import Database
from projectledger.domain import errors
from projectledger.domain.entities import (
    Principal,
    Project as ProjectEntity,
    ProjectFilters,
    ProjectStatus,
    ResourceKind,
)
from projectledger.domain.lifecycle import merge_truthy
from projectledger.domain.permissions import Action, enforce, require_role
from projectledger.domain.scope import ScopeResolver
from projectledger.domain.validation import (
    parse_amount_value,
    parse_choice,
    require_users,
    require_value,
)
from projectledger.logging_config import LogContext, get_logger

logger = get_logger("projects")

UPDATABLE_FIELDS = (
    "name",
    "description",
    "start_date",
    "end_date",
    "status",
    "budget",
    "managers",
    "team",
)


class ProjectService:
    """Service for managing projects under role scoping."""

    def __init__(self, db: Database):
        """Initialize project service.

        Args:
            db: Database instance
        """
        self.db = db
        self.scopes = ScopeResolver(db)

    def _load(self, project_id: int) -> ProjectEntity:
        project = self.db.get_project(project_id)
        if project is None:
            raise errors.NotFoundError(errors.not_found("project", project_id))
        return project

    def list_projects(
        self, principal: Principal, filters: Optional[ProjectFilters] = None
    ) -> list[ProjectEntity]:
        """List projects visible to ``principal``.

        Args:
            principal: Acting principal
            filters: Optional company/status filters

        Returns:
            Projects ordered by name
        """
        predicate = self.scopes.resolve(principal, ResourceKind.PROJECT)
        return self.db.find_projects(predicate, filters)

    def get_project(self, principal: Principal, project_id: int) -> ProjectEntity:
        """Get a single project. Team members may read it.

        Raises:
            NotFoundError: If the project doesn't exist
            ForbiddenError: If the principal may not read it
        """
        project = self._load(project_id)
        enforce(principal, Action.READ, project)
        return project

    def create_project(
        self,
        principal: Principal,
        name: str,
        description: str,
        company_id: int,
        start_date: date,
        end_date: Optional[date] = None,
        status: Optional[ProjectStatus | str] = None,
        budget: Optional[Decimal | str] = None,
        managers: Optional[Iterable[int]] = None,
        team: Optional[Iterable[int]] = None,
    ) -> ProjectEntity:
        """Create a project under an existing company.

        Args:
            principal: Acting principal, recorded as the creator
            name: Project name
            description: Project description
            company_id: Owning company ID
            start_date: Start date
            end_date: Optional end date
            status: Optional status (defaults to planning)
            budget: Optional budget (defaults to 0)
            managers: Optional manager user IDs
            team: Optional team member user IDs

        Returns:
            Created project entity

        Raises:
            ForbiddenError: If the principal's role may not create projects,
                or the principal does not manage the company
            NotFoundError: If the company doesn't exist
            ValidationError: If a required field is missing or invalid
        """
        require_role(principal, ResourceKind.PROJECT, Action.CREATE)
        company = self.db.get_company(company_id)
        if company is None:
            raise errors.NotFoundError(errors.not_found("company", company_id))
        enforce(principal, Action.CREATE_PROJECT, company)

        name = require_value(name, "name").strip()
        description = require_value(description, "description")
        start_date = require_value(start_date, "start_date")
        if end_date is not None and end_date < start_date:
            raise errors.ValidationError("end_date must not be before start_date")
        status = parse_choice(ProjectStatus, status, "status") if status else None
        budget = parse_amount_value(budget, "budget") if budget is not None else None
        manager_ids = require_users(self.db, managers)
        team_ids = require_users(self.db, team)

        project = self.db.create_project(
            name=name,
            description=description,
            company_id=company.id,
            start_date=start_date,
            created_by=principal.id,
            end_date=end_date,
            status=status.value if status else None,
            budget=budget,
            managers=sorted(manager_ids),
            team=sorted(team_ids),
        )
        with LogContext.bind(actor_id=principal.id, actor_role=principal.role):
            logger.info(
                "project_created",
                extra={"project_id": project.id, "company_id": project.company_id},
            )
        return project

    def update_project(
        self,
        principal: Principal,
        project_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[ProjectStatus | str] = None,
        budget: Optional[Decimal | str] = None,
        managers: Optional[Iterable[int]] = None,
        team: Optional[Iterable[int]] = None,
    ) -> ProjectEntity:
        """Update project fields. Falsy values leave the stored value unchanged.

        A budget of 0 therefore cannot be set through an update.

        Raises:
            ForbiddenError: If the principal may not update the project
            NotFoundError: If the project doesn't exist
            ValidationError: If a value is invalid
        """
        require_role(principal, ResourceKind.PROJECT, Action.UPDATE)
        project = self._load(project_id)
        enforce(principal, Action.UPDATE, project)

        changes = {
            "name": name,
            "description": description,
            "start_date": start_date,
            "end_date": end_date,
            "status": parse_choice(ProjectStatus, status, "status") if status else None,
            "budget": parse_amount_value(budget, "budget") if budget not in (None, "") else None,
            "managers": require_users(self.db, managers) if managers else None,
            "team": require_users(self.db, team) if team else None,
        }
        updated = merge_truthy(project, changes, UPDATABLE_FIELDS)
        if updated.end_date is not None and updated.end_date < updated.start_date:
            raise errors.ValidationError("end_date must not be before start_date")

        saved = self.db.save_project(updated)
        with LogContext.bind(actor_id=principal.id, actor_role=principal.role):
            logger.info("project_updated", extra={"project_id": saved.id})
        return saved

    def delete_project(self, principal: Principal, project_id: int) -> None:
        """Delete a project. Its transactions are not removed.

        Raises:
            ForbiddenError: If the principal's role may not delete projects
            NotFoundError: If the project doesn't exist
        """
        require_role(principal, ResourceKind.PROJECT, Action.DELETE)
        project = self._load(project_id)
        enforce(principal, Action.DELETE, project)
        self.db.delete_project(project.id)
        with LogContext.bind(actor_id=principal.id, actor_role=principal.role):
            logger.info("project_deleted", extra={"project_id": project.id})
