"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str, decimal_separator: str = ".") -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)
    - "1.234.567" and "1.234,50" when decimal_separator is ","

    Args:
        amount_str: Amount string
        decimal_separator: "." (default) or ",". The other character is
            treated as a thousands separator and dropped.

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if decimal_separator not in (".", ","):
        raise ValueError(f"Unsupported decimal separator '{decimal_separator}'")

    if amount_str is None or not str(amount_str).strip():
        raise ValueError("Empty amount string")

    amount_str = str(amount_str).strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and spaces
    amount_str = re.sub(r"[$€£¥\s]", "", amount_str)

    if decimal_separator == ",":
        amount_str = amount_str.replace(".", "").replace(",", ".")
    else:
        amount_str = amount_str.replace(",", "")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def parse_optional_amount(amount_str: str | None, decimal_separator: str = ".") -> Decimal:
    """Parse an amount that may be blank; blank means zero."""
    if amount_str is None or not str(amount_str).strip():
        return Decimal("0")
    return parse_amount(amount_str, decimal_separator=decimal_separator)
