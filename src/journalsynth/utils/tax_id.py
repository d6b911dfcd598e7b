"""Entity tax identifier normalization."""

import re

_TAX_ID_PATTERN = re.compile(r"^(?P<body>\d{1,9})-?(?P<check>[0-9K])$")


def normalize_tax_id(tax_id: str) -> str:
    """Normalize an entity tax id to "BODY-CHECK" form.

    "11.111.111-1", " 11111111-1 " and "111111111" all become "11111111-1".
    Values that do not look like a body plus check digit are returned
    stripped and upper-cased, so foreign identifiers still compare equal
    to themselves.

    Args:
        tax_id: Raw tax id

    Returns:
        Normalized tax id ("" for blank input)
    """
    if tax_id is None:
        return ""
    cleaned = str(tax_id).strip().upper()
    cleaned = cleaned.replace("−", "-").replace("–", "-")
    cleaned = re.sub(r"[.\s]", "", cleaned)

    match = _TAX_ID_PATTERN.match(cleaned)
    if match is None:
        return cleaned
    return f"{match.group('body')}-{match.group('check')}"
