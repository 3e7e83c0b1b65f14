"""Tests for amount parsing utility."""

import pytest
from decimal import Decimal

from projectledger.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("123.45", Decimal("123.45")),
        ("$1,234.50", Decimal("1234.50")),
        (" € 99 ", Decimal("99.00")),
        ("0", Decimal("0.00")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["-5", "-$5.00", "(12.00)"])
def test_parse_amount_rejects_negative(text):
    with pytest.raises(ValueError, match="must not be negative"):
        parse_amount(text)


@pytest.mark.parametrize("text", ["", "   ", "abc", "NaN"])
def test_parse_amount_invalid(text):
    with pytest.raises(ValueError):
        parse_amount(text)
