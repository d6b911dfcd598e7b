"""Flat export of synthesized journal lines."""

import csv
from pathlib import Path
from typing import Any, Sequence

from journalsynth.domain.entities import JournalEntry

EXPORT_COLUMNS = (
    "entry_date",
    "reference",
    "line_number",
    "account_code",
    "account_name",
    "description",
    "entity_tax_id",
    "entity_name",
    "cost_center",
    "document_reference",
    "document_type",
    "debit",
    "credit",
)


def export_rows(entries: Sequence[JournalEntry]) -> list[dict[str, Any]]:
    """One row per detail line, in entry then line order."""
    rows = []
    for entry in entries:
        for line_number, line in enumerate(entry.lines, start=1):
            rows.append(
                {
                    "entry_date": entry.entry_date.isoformat(),
                    "reference": entry.reference,
                    "line_number": line_number,
                    "account_code": line.account_code,
                    "account_name": line.account_name,
                    "description": line.description,
                    "entity_tax_id": line.entity_tax_id or "",
                    "entity_name": line.entity_name or "",
                    "cost_center": line.cost_center or "",
                    "document_reference": line.document_reference or "",
                    "document_type": line.document_type.value if line.document_type else "",
                    "debit": line.debit_amount,
                    "credit": line.credit_amount,
                }
            )
    return rows


def write_export_csv(entries: Sequence[JournalEntry], path: str | Path) -> int:
    """Write export rows to a CSV file.

    Returns:
        Number of rows written
    """
    rows = export_rows(entries)
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=EXPORT_COLUMNS)
        writer.writeheader()
        writer.writerows(rows)
    return len(rows)
