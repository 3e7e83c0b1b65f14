"""Transaction lifecycle.

Status moves ``pending -> approved`` or ``pending -> rejected``. Every
function here is pure: it returns a new :class:`Transaction` and leaves the
input untouched, so a failed transition never changes state.

Partial updates use a replace-if-truthy merge across all entities: a
supplied truthy value replaces the stored one, while ``None``, ``""``,
``0`` or an empty collection keeps the stored value. A field therefore
cannot be cleared to a falsy value through an update.
"""

from dataclasses import replace
from datetime import date
from typing import Any, Iterable, Mapping, Optional, TypeVar

from projectledger.domain import errors
from projectledger.domain.entities import (
    Principal,
    Role,
    Transaction,
    TransactionCategory,
    TransactionStatus,
    TransactionType,
)
from projectledger.domain.validation import parse_amount_value, parse_choice

E = TypeVar("E")

EDITABLE_FIELDS = ("type", "amount", "description", "date", "category", "notes")
REJECTION_PREFIX = "Rejection reason: "


def merge_truthy(entity: E, changes: Mapping[str, Any], allowed: Iterable[str]) -> E:
    """Apply the replace-if-truthy merge to a frozen entity.

    Raises:
        ValidationError: If ``changes`` names a field outside ``allowed``
    """
    allowed = tuple(allowed)
    unknown = sorted(set(changes) - set(allowed))
    if unknown:
        raise errors.ValidationError(f"Cannot update field(s): {', '.join(unknown)}")
    updates = {name: value for name, value in changes.items() if value}
    if not updates:
        return entity
    return replace(entity, **updates)


def coerce_transaction_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize transaction field values, skipping falsy ones untouched."""
    coerced = dict(fields)
    if coerced.get("type"):
        coerced["type"] = parse_choice(TransactionType, coerced["type"], "type")
    if coerced.get("category"):
        coerced["category"] = parse_choice(TransactionCategory, coerced["category"], "category")
    if coerced.get("amount") not in (None, ""):
        coerced["amount"] = parse_amount_value(coerced["amount"])
    if coerced.get("date") and not isinstance(coerced["date"], date):
        raise errors.ValidationError(f"Invalid date '{coerced['date']}'")
    return coerced


def initial_state(principal: Principal) -> tuple[TransactionStatus, Optional[int]]:
    """Status and approver for a transaction created by ``principal``.

    Admin-created transactions start approved by their creator; everyone
    else starts pending with no approver.
    """
    if principal.role == Role.ADMIN:
        return TransactionStatus.APPROVED, principal.id
    return TransactionStatus.PENDING, None


def _require_pending(transaction: Transaction) -> None:
    if transaction.status != TransactionStatus.PENDING:
        raise errors.InvalidTransitionError(errors.already_decided(transaction.status))


def approve(transaction: Transaction, principal: Principal) -> Transaction:
    """Approve a pending transaction.

    Raises:
        InvalidTransitionError: If the transaction is not pending
    """
    _require_pending(transaction)
    return replace(transaction, status=TransactionStatus.APPROVED, approved_by=principal.id)


def append_rejection_reason(notes: Optional[str], reason: str) -> str:
    line = f"{REJECTION_PREFIX}{reason}"
    return f"{notes}\n{line}" if notes else line


def reject(transaction: Transaction, principal: Principal, reason: str) -> Transaction:
    """Reject a pending transaction, appending the reason to its notes.

    Raises:
        InvalidTransitionError: If the transaction is not pending
    """
    _require_pending(transaction)
    return replace(
        transaction,
        status=TransactionStatus.REJECTED,
        approved_by=principal.id,
        notes=append_rejection_reason(transaction.notes, reason),
    )


def edit(transaction: Transaction, principal: Principal, fields: Mapping[str, Any]) -> Transaction:
    """Apply a partial edit.

    A non-admin edit always sends the transaction back to ``pending`` and
    clears its approver, whatever the prior status. Admin edits keep the
    status as it was.

    Raises:
        ValidationError: If a field is not editable or a value is invalid
    """
    edited = merge_truthy(transaction, coerce_transaction_fields(fields), EDITABLE_FIELDS)
    if principal.role != Role.ADMIN:
        edited = replace(edited, status=TransactionStatus.PENDING, approved_by=None)
    return edited
