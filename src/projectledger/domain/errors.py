"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling. ``status_code`` is the
    client-visible category a transport layer should map the error to.
    """

    status_code = 400

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(DomainError):
    """Invalid input or a referenced entity that does not exist."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""

    status_code = 404


class ForbiddenError(DomainError):
    """The principal exists but may not perform the action."""

    status_code = 403


class InvalidTransitionError(DomainError):
    """Lifecycle precondition violated for a transaction."""


class ConflictError(DomainError):
    """Concurrent modification detected on save."""

    status_code = 409


class InternalError(DomainError):
    """Persistence failure."""

    status_code = 500


def error_payload(error: DomainError) -> dict[str, str]:
    """Render an error as the ``{"message": ...}`` response object."""
    return {"message": error.message}


def not_found(kind: str, entity_id: int) -> str:
    """Return message for a missing entity."""
    return f"{kind.capitalize()} {entity_id} not found"


def not_authorized(verb: str, kind: str) -> str:
    """Return message for an instance-level permission denial."""
    return f"not authorized to {verb} this {kind}"


def role_not_authorized(role: str) -> str:
    """Return message for a coarse role-gate denial."""
    return f"role '{role}' is not authorized to perform this action"


def already_decided(status: str) -> str:
    """Return message when approving or rejecting a non-pending transaction."""
    return f"transaction is already {status}"


LOCKED_TRANSACTION = "cannot update transaction that has been approved or rejected"
CREATE_PROJECT_DENIED = "not authorized to create projects for this company"


def concurrent_modification(transaction_id: int) -> str:
    """Return message for a lost optimistic-concurrency race."""
    return f"transaction {transaction_id} was modified concurrently"
