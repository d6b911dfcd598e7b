"""Utility functions for journalsynth."""

from journalsynth.utils.date_parser import parse_date, parse_period, get_period_range
from journalsynth.utils.amount_parser import parse_amount, parse_optional_amount
from journalsynth.utils.tax_id import normalize_tax_id

__all__ = [
    "parse_date",
    "parse_period",
    "get_period_range",
    "parse_amount",
    "parse_optional_amount",
    "normalize_tax_id",
]
