"""Permission gate for single-record access.

Two layers guard every operation:

1. :func:`require_role` is the coarse, role-only gate that runs before any
   record is loaded (create/update of companies and projects needs admin or
   manager; deletes need admin; approve/reject needs admin or manager).
2. :func:`check` re-examines a loaded record for the acting principal.

Callers load the record first and report a missing id as not found before
asking the gate, so an existing record the principal may not see is
reported as forbidden. Both layers must pass.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional, Union

from projectledger.domain import errors
from projectledger.domain.entities import (
    Company,
    Principal,
    Project,
    ResourceKind,
    Role,
    Transaction,
    TransactionStatus,
)

Resource = Union[Company, Project, Transaction]


class Action(StrEnum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    CREATE_PROJECT = "create_project"
    APPROVE = "approve"
    REJECT = "reject"


LOCKED_STATUSES = frozenset({TransactionStatus.APPROVED, TransactionStatus.REJECTED})

_STAFF = frozenset({Role.ADMIN, Role.MANAGER})
_ADMIN_ONLY = frozenset({Role.ADMIN})

ROLE_REQUIREMENTS: dict[tuple[ResourceKind, Action], frozenset[Role]] = {
    (ResourceKind.COMPANY, Action.CREATE): _STAFF,
    (ResourceKind.COMPANY, Action.UPDATE): _STAFF,
    (ResourceKind.COMPANY, Action.DELETE): _ADMIN_ONLY,
    (ResourceKind.PROJECT, Action.CREATE): _STAFF,
    (ResourceKind.PROJECT, Action.UPDATE): _STAFF,
    (ResourceKind.PROJECT, Action.DELETE): _ADMIN_ONLY,
    (ResourceKind.TRANSACTION, Action.DELETE): _ADMIN_ONLY,
    (ResourceKind.TRANSACTION, Action.APPROVE): _STAFF,
    (ResourceKind.TRANSACTION, Action.REJECT): _STAFF,
}


@dataclass(frozen=True)
class Decision:
    """Outcome of a permission check."""

    allowed: bool
    reason: Optional[str] = None
    error_type: type[errors.DomainError] = errors.ForbiddenError

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(
        cls, reason: str, error_type: type[errors.DomainError] = errors.ForbiddenError
    ) -> "Decision":
        return cls(allowed=False, reason=reason, error_type=error_type)

    def __bool__(self) -> bool:
        return self.allowed

    def raise_if_denied(self) -> None:
        if not self.allowed:
            raise self.error_type(self.reason)


def require_role(principal: Principal, kind: ResourceKind, action: Action) -> None:
    """Apply the coarse role-only gate.

    Raises:
        ForbiddenError: If the principal's role may not perform ``action``
    """
    allowed_roles = ROLE_REQUIREMENTS.get((kind, action))
    if allowed_roles is not None and principal.role not in allowed_roles:
        raise errors.ForbiddenError(errors.role_not_authorized(principal.role))


def _resource_kind(resource: Resource) -> ResourceKind:
    if isinstance(resource, Company):
        return ResourceKind.COMPANY
    if isinstance(resource, Project):
        return ResourceKind.PROJECT
    if isinstance(resource, Transaction):
        return ResourceKind.TRANSACTION
    raise TypeError(f"Unsupported resource type: {type(resource).__name__}")


def _is_member(principal: Principal, resource: Union[Company, Project]) -> bool:
    """Creator or listed manager; the creator is always an implicit manager."""
    return resource.created_by == principal.id or principal.id in resource.managers


def _verb(action: Action) -> str:
    return "access" if action == Action.READ else action.value


class PermissionGate(ABC):
    """Instance-level permission strategy for one role tier."""

    role: Role

    def check(self, principal: Principal, action: Action, resource: Resource) -> Decision:
        kind = _resource_kind(resource)
        if kind == ResourceKind.TRANSACTION:
            return self.check_transaction(principal, action, resource)
        if action == Action.CREATE_PROJECT:
            if kind != ResourceKind.COMPANY:
                raise ValueError("projects can only be created under a company")
            if self.can_manage(principal, resource):
                return Decision.allow()
            return Decision.deny(errors.CREATE_PROJECT_DENIED)
        if action == Action.READ:
            allowed = self.can_read(principal, resource)
        else:
            allowed = self.can_manage(principal, resource)
        if allowed:
            return Decision.allow()
        return Decision.deny(errors.not_authorized(_verb(action), kind.value))

    @abstractmethod
    def can_read(self, principal: Principal, resource: Union[Company, Project]) -> bool:
        """Whether a single company or project may be read."""

    @abstractmethod
    def can_manage(self, principal: Principal, resource: Union[Company, Project]) -> bool:
        """Whether a company or project may be updated, deleted or extended."""

    @abstractmethod
    def check_transaction(
        self, principal: Principal, action: Action, transaction: Transaction
    ) -> Decision:
        """Instance rules for a single transaction."""


class AdminGate(PermissionGate):
    role = Role.ADMIN

    def can_read(self, principal, resource):
        return True

    def can_manage(self, principal, resource):
        return True

    def check_transaction(self, principal, action, transaction):
        # Admins may still edit approved or rejected transactions.
        return Decision.allow()


class ManagerGate(PermissionGate):
    role = Role.MANAGER

    def can_read(self, principal, resource):
        if _is_member(principal, resource):
            return True
        return isinstance(resource, Project) and principal.id in resource.team

    def can_manage(self, principal, resource):
        return _is_member(principal, resource)

    def owns_transaction(self, principal: Principal, transaction: Transaction) -> bool:
        return True

    def check_transaction(self, principal, action, transaction):
        if not self.owns_transaction(principal, transaction):
            return Decision.deny(errors.not_authorized(_verb(action), ResourceKind.TRANSACTION))
        if action in (Action.UPDATE, Action.DELETE) and transaction.status in LOCKED_STATUSES:
            return Decision.deny(errors.LOCKED_TRANSACTION, errors.InvalidTransitionError)
        return Decision.allow()


class UserGate(ManagerGate):
    """Users share the company/project membership rules of managers but only
    reach transactions they created."""

    role = Role.USER

    def owns_transaction(self, principal, transaction):
        return transaction.created_by == principal.id


_GATES: dict[Role, PermissionGate] = {
    gate.role: gate for gate in (AdminGate(), ManagerGate(), UserGate())
}


def permission_gate(role: Role) -> PermissionGate:
    """Return the gate strategy for a role."""
    return _GATES[Role(role)]


def check(principal: Principal, action: Action, resource: Resource) -> Decision:
    """Check whether ``principal`` may perform ``action`` on ``resource``."""
    return permission_gate(principal.role).check(principal, action, resource)


def enforce(principal: Principal, action: Action, resource: Resource) -> None:
    """Like :func:`check` but raise the denial.

    Raises:
        ForbiddenError: If the principal is not authorized
        InvalidTransitionError: If a decided transaction is edited by a non-admin
    """
    check(principal, action, resource).raise_if_denied()
