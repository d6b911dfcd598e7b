"""Date and accounting period parsing utilities."""

import re
from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

_PERIOD_PATTERNS = (
    re.compile(r"^(?P<year>\d{4})-(?P<month>\d{1,2})$"),
    re.compile(r"^(?P<year>\d{4})(?P<month>\d{2})$"),
    re.compile(r"^(?P<month>\d{1,2})[/-](?P<year>\d{4})$"),
)


def parse_date(date_str: str) -> date:
    """Parse a document date string into a date object.

    Register exports use day-first dates ("15/03/2024", "15-03-2024");
    ISO dates ("2024-03-15") are read year-first.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = (date_str or "").strip()
    if not date_str:
        raise ValueError("Empty date string")

    iso_like = re.match(r"^\d{4}-\d{1,2}-\d{1,2}", date_str) is not None
    try:
        dt = date_parser.parse(date_str, dayfirst=not iso_like)
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_period(period_str: str, today: date | None = None) -> str:
    """Normalize an accounting period to "YYYY-MM".

    Supports:
    - "2024-03", "2024-3", "202403", "03/2024", "3-2024"
    - Relative periods: "this month", "last month"

    Raises:
        ValueError: If the period cannot be parsed
    """
    if period_str is None or not str(period_str).strip():
        raise ValueError("Empty period")

    text = str(period_str).strip().lower()
    today = today or date.today()

    if text in ("this month", "this-month"):
        return f"{today.year:04d}-{today.month:02d}"
    if text in ("last month", "last-month"):
        previous = today - relativedelta(months=1)
        return f"{previous.year:04d}-{previous.month:02d}"

    for pattern in _PERIOD_PATTERNS:
        match = pattern.match(text)
        if match:
            year = int(match.group("year"))
            month = int(match.group("month"))
            if 1 <= month <= 12:
                return f"{year:04d}-{month:02d}"
            break

    raise ValueError(f"Could not parse period '{period_str}'. Expected YYYY-MM")


def get_period_range(period: str) -> tuple[date, date]:
    """Get first and last day of a "YYYY-MM" period.

    Raises:
        ValueError: If period string is not recognized
    """
    normalized = parse_period(period)
    year, month = (int(part) for part in normalized.split("-"))
    start_date = date(year, month, 1)
    end_date = start_date + relativedelta(months=1) - timedelta(days=1)
    return (start_date, end_date)
