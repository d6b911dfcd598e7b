"""Register file import.

Reads purchase or sales register exports into ``Transaction`` records.
Both the plain column names used by this package and the headers of the
tax authority's register download are understood. Amounts that the
register splits out but that land on the operational account (exempt
amount, non-recoverable VAT, other taxes) are folded into the net amount.
"""

import csv
import logging
import unicodedata
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Optional

from journalsynth.domain.entities import Direction, Transaction
from journalsynth.domain.errors import ValidationError
from journalsynth.utils.amount_parser import parse_amount, parse_optional_amount
from journalsynth.utils.date_parser import parse_date

logger = logging.getLogger(__name__)

# Normalized header -> field. Headers are compared lower-cased, without
# accents and with single spaces.
COLUMN_ALIASES = {
    "entity_tax_id": "entity_tax_id",
    "rut": "entity_tax_id",
    "rut proveedor": "entity_tax_id",
    "rut cliente": "entity_tax_id",
    "entity_name": "entity_name",
    "razon social": "entity_name",
    "document_type": "document_type",
    "tipo doc": "document_type",
    "tipo documento": "document_type",
    "document_number": "document_number",
    "folio": "document_number",
    "exempt_amount": "exempt_amount",
    "monto exento": "exempt_amount",
    "net_amount": "net_amount",
    "monto neto": "net_amount",
    "tax_amount": "tax_amount",
    "monto iva": "tax_amount",
    "monto iva recuperable": "tax_amount",
    "non_recoverable_tax": "non_recoverable_tax",
    "monto iva no recuperable": "non_recoverable_tax",
    "other_tax": "other_tax",
    "valor otro impuesto": "other_tax",
    "total_amount": "total_amount",
    "monto total": "total_amount",
    "emission_date": "emission_date",
    "fecha docto": "emission_date",
    "reception_date": "reception_date",
    "fecha recepcion": "reception_date",
}

REQUIRED_FIELDS = ("entity_tax_id", "document_type", "document_number", "total_amount")
FOLDED_INTO_NET = ("exempt_amount", "non_recoverable_tax", "other_tax")


@dataclass(frozen=True)
class ImportResult:
    """Transactions read from a file plus per-row problems."""

    transactions: tuple[Transaction, ...]
    errors: tuple[str, ...] = ()
    direction: Optional[Direction] = None

    @property
    def total_amount(self) -> Decimal:
        return sum((txn.total_amount for txn in self.transactions), Decimal("0"))


def normalize_header(header: str) -> str:
    decomposed = unicodedata.normalize("NFKD", header or "")
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return " ".join(stripped.replace(".", " ").split()).lower()


def map_columns(fieldnames: list[str]) -> dict[str, str]:
    """Map file columns to transaction fields. First matching column wins."""
    columns: dict[str, str] = {}
    for name in fieldnames:
        field = COLUMN_ALIASES.get(normalize_header(name))
        if field is not None and field not in columns:
            columns[field] = name
    return columns


def _sniff_delimiter(sample: str) -> str:
    try:
        return csv.Sniffer().sniff(sample, delimiters=";,\t|").delimiter
    except csv.Error:
        return ";" if sample.count(";") > sample.count(",") else ","


def load_transactions(
    path: str | Path,
    direction: Direction | str = Direction.PURCHASE,
    decimal_separator: str = ".",
) -> ImportResult:
    """Read a register file.

    Args:
        path: Path to the delimited file
        direction: Register side the file belongs to
        decimal_separator: Decimal separator used by amount columns

    Returns:
        ImportResult with parsed transactions in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If the file has no header or lacks required columns
    """
    direction = Direction.parse(direction)
    csv_path = Path(path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Register file not found: {path}")

    transactions: list[Transaction] = []
    errors: list[str] = []

    with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
        sample = f.read(4096)
        f.seek(0)
        reader = csv.DictReader(f, delimiter=_sniff_delimiter(sample))

        if not reader.fieldnames:
            raise ValidationError("Register file has no columns")
        columns = map_columns(reader.fieldnames)
        missing = [field for field in REQUIRED_FIELDS if field not in columns]
        if missing:
            raise ValidationError(f"Register file missing required columns: {', '.join(missing)}")

        for row_num, row in enumerate(reader, start=2):
            values = {
                field: (row.get(column) or "").strip() for field, column in columns.items()
            }
            if not any(values.values()):
                continue
            try:
                transactions.append(_row_to_transaction(values, decimal_separator))
            except ValueError as e:
                errors.append(f"Row {row_num}: {e}")

    logger.info(
        "Loaded %d %s transactions from %s (%d row errors)",
        len(transactions),
        direction.value,
        csv_path.name,
        len(errors),
    )
    return ImportResult(transactions=tuple(transactions), errors=tuple(errors), direction=direction)


def _row_to_transaction(values: dict[str, str], decimal_separator: str) -> Transaction:
    for field in REQUIRED_FIELDS:
        if not values.get(field):
            raise ValueError(f"Missing {field}")

    net = parse_optional_amount(values.get("net_amount"), decimal_separator)
    for field in FOLDED_INTO_NET:
        net += parse_optional_amount(values.get(field), decimal_separator)
    tax = parse_optional_amount(values.get("tax_amount"), decimal_separator)
    total = parse_amount(values["total_amount"], decimal_separator)

    emission = values.get("emission_date")
    reception = values.get("reception_date")
    return Transaction(
        entity_tax_id=values["entity_tax_id"],
        entity_name=values.get("entity_name") or values["entity_tax_id"],
        document_type=values["document_type"],
        document_number=values["document_number"],
        net_amount=net,
        tax_amount=tax,
        total_amount=total,
        emission_date=parse_date(emission) if emission else None,
        reception_date=parse_date(reception) if reception else None,
    )
