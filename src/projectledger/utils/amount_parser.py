"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

_CURRENCY_SYMBOLS = re.compile(r"[$€£¥]")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a money string into a non-negative Decimal.

    Accepts plain numbers and the usual decorations:
    - "1234.50"
    - "$1,234.50"
    - " € 99 "

    Negative values, written either with a minus sign or in accounting
    parentheses, are rejected since transaction amounts are never negative.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount rounded to cents

    Raises:
        ValueError: If the string is empty, unparseable or negative
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = amount_str.strip()
    if cleaned.startswith("(") and cleaned.endswith(")"):
        raise ValueError(f"Amount must not be negative: '{amount_str.strip()}'")

    cleaned = _CURRENCY_SYMBOLS.sub("", cleaned).replace(",", "").strip()

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str.strip()}'") from None

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str.strip()}'")
    if amount < 0:
        raise ValueError(f"Amount must not be negative: '{amount_str.strip()}'")
    return amount.quantize(Decimal("0.01"))
