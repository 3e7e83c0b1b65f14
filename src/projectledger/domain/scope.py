"""Access scope resolution.

Computes, per request, the predicate that restricts which companies,
projects and transactions a principal may list. The predicate is a plain
value: the database layer turns it into a SQL ``WHERE`` clause and tests can
evaluate it in memory with :meth:`ScopePredicate.matches`.

The role tiers form a closed set of strategies (admin, manager, user).
Team membership never widens list scoping; it only matters for single
record reads in :mod:`projectledger.domain.permissions`.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional, TypeVar

from projectledger.domain.entities import Principal, ResourceKind, Role

if TYPE_CHECKING:
    from projectledger.database.base import Database

R = TypeVar("R")


@dataclass(frozen=True)
class ScopePredicate:
    """Disjunction of scope clauses for one resource kind.

    A record matches when ``match_all`` is set or when any populated clause
    holds. A predicate with no populated clause matches nothing.
    """

    kind: ResourceKind
    match_all: bool = False
    created_by: Optional[int] = None
    manager_id: Optional[int] = None
    project_ids: Optional[frozenset[int]] = None

    def matches(self, record) -> bool:
        if self.match_all:
            return True
        if self.created_by is not None and record.created_by == self.created_by:
            return True
        if self.manager_id is not None and self.manager_id in record.managers:
            return True
        if self.project_ids is not None and record.project_id in self.project_ids:
            return True
        return False

    def apply(self, records: Iterable[R]) -> list[R]:
        return [record for record in records if self.matches(record)]


class AccessScope(ABC):
    """Scope strategy for one role tier."""

    role: Role

    @abstractmethod
    def predicate(
        self,
        principal: Principal,
        kind: ResourceKind,
        managed_project_ids: Optional[frozenset[int]] = None,
    ) -> ScopePredicate:
        """Build the list predicate for ``kind``."""

    @abstractmethod
    def status_count_predicate(self, principal: Principal) -> ScopePredicate:
        """Predicate for the per-status transaction counts of a summary."""

    def needs_project_subquery(self, kind: ResourceKind) -> bool:
        return False


class AdminScope(AccessScope):
    role = Role.ADMIN

    def predicate(self, principal, kind, managed_project_ids=None):
        return ScopePredicate(kind=kind, match_all=True)

    def status_count_predicate(self, principal):
        return ScopePredicate(kind=ResourceKind.TRANSACTION, match_all=True)


class ManagerScope(AccessScope):
    role = Role.MANAGER

    def predicate(self, principal, kind, managed_project_ids=None):
        if kind == ResourceKind.TRANSACTION:
            if managed_project_ids is None:
                raise ValueError("managed project ids are required for a manager transaction scope")
            return ScopePredicate(
                kind=kind,
                created_by=principal.id,
                project_ids=frozenset(managed_project_ids),
            )
        return ScopePredicate(kind=kind, created_by=principal.id, manager_id=principal.id)

    def status_count_predicate(self, principal):
        # Status counts skip the managed-project restriction.
        return ScopePredicate(kind=ResourceKind.TRANSACTION, match_all=True)

    def needs_project_subquery(self, kind: ResourceKind) -> bool:
        return kind == ResourceKind.TRANSACTION


class UserScope(AccessScope):
    role = Role.USER

    def predicate(self, principal, kind, managed_project_ids=None):
        return ScopePredicate(kind=kind, created_by=principal.id)

    def status_count_predicate(self, principal):
        return ScopePredicate(kind=ResourceKind.TRANSACTION, created_by=principal.id)


_SCOPES: dict[Role, AccessScope] = {
    scope.role: scope for scope in (AdminScope(), ManagerScope(), UserScope())
}


def access_scope(role: Role) -> AccessScope:
    """Return the scope strategy for a role."""
    return _SCOPES[Role(role)]


def scope_for(
    principal: Principal,
    kind: ResourceKind,
    managed_project_ids: Optional[frozenset[int]] = None,
) -> ScopePredicate:
    """Build the list predicate for a principal without touching storage.

    Managers listing transactions must pass the ids of the projects they
    created or manage; :class:`ScopeResolver` does that lookup.
    """
    return access_scope(principal.role).predicate(principal, kind, managed_project_ids)


class ScopeResolver:
    """Resolves scope predicates, running the manager project sub-query."""

    def __init__(self, db: "Database"):
        """Initialize scope resolver.

        Args:
            db: Database instance
        """
        self.db = db

    def resolve(self, principal: Principal, kind: ResourceKind) -> ScopePredicate:
        """Resolve the list predicate for ``principal`` over ``kind``."""
        scope = access_scope(principal.role)
        managed_project_ids = None
        if scope.needs_project_subquery(kind):
            project_scope = scope.predicate(principal, ResourceKind.PROJECT)
            managed_project_ids = frozenset(self.db.find_project_ids(project_scope))
        return scope.predicate(principal, kind, managed_project_ids)

    def resolve_status_counts(self, principal: Principal) -> ScopePredicate:
        return access_scope(principal.role).status_count_predicate(principal)
