"""Input parsing helpers for the command line."""

from projectledger.utils.date_parser import parse_date, get_period_range
from projectledger.utils.amount_parser import parse_amount

__all__ = ["parse_date", "get_period_range", "parse_amount"]
