"""Input validation helpers shared by the domain services."""

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from projectledger.database.base import Database
from projectledger.domain.errors import ValidationError

CENTS = Decimal("0.01")


def require_value(value: Any, field_name: str) -> Any:
    """Return ``value`` or raise when it is missing or blank."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} is required")
    return value


def parse_choice(enum_type, value: Any, field_name: str):
    """Coerce a raw value into one of ``enum_type``'s members."""
    try:
        return enum_type(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_type)
        raise ValidationError(
            f"Invalid {field_name} '{value}' (expected one of: {choices})"
        ) from None


def parse_amount_value(value: Any, field_name: str = "amount") -> Decimal:
    """Coerce a money value to a two-place ``Decimal``.

    Negatives and sub-cent precision are rejected rather than rounded.
    """
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
        cents = amount.quantize(CENTS) if amount.is_finite() else None
    except (InvalidOperation, ValueError):
        cents = None
    if cents is None:
        raise ValidationError(f"Invalid {field_name} '{value}'")
    if amount < 0:
        raise ValidationError(f"{field_name} must not be negative")
    if cents != amount:
        raise ValidationError(f"{field_name} must have at most two decimal places")
    return cents


def require_users(db: Database, user_ids: Optional[Iterable[int]]) -> frozenset[int]:
    """Check that every referenced user exists.

    Raises:
        ValidationError: If any user ID is unknown
    """
    ids = frozenset(user_ids or ())
    missing = sorted(user_id for user_id in ids if db.get_user(user_id) is None)
    if missing:
        raise ValidationError(f"User(s) not found: {', '.join(str(m) for m in missing)}")
    return ids
