"""Domain model entities for journalsynth.

These are pure data classes representing business concepts, independent of
database schema. Every run builds them fresh; nothing here is shared
mutable state.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Mapping, Optional

from journalsynth.utils.tax_id import normalize_tax_id

BALANCE_TOLERANCE = Decimal("0.01")
TOTAL_TOLERANCE = Decimal("1")


class Direction(str, Enum):
    """Side of the register a transaction comes from."""

    PURCHASE = "purchase"
    SALE = "sale"

    @classmethod
    def parse(cls, value: "str | Direction") -> "Direction":
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        aliases = {"purchases": cls.PURCHASE, "sales": cls.SALE}
        if text in aliases:
            return aliases[text]
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Unknown direction '{value}'. Expected purchase or sale")


class DocumentType(str, Enum):
    """Tax document types, keyed by the tax authority's document code."""

    INVOICE = "33"
    EXEMPT_INVOICE = "34"
    RECEIPT = "39"
    EXEMPT_RECEIPT = "41"
    PURCHASE_INVOICE = "46"
    DEBIT_NOTE = "56"
    CREDIT_NOTE = "61"

    @classmethod
    def parse(cls, value: "str | int | DocumentType") -> "DocumentType":
        """Parse a document code ("33") or name ("invoice", "CREDIT_NOTE")."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        try:
            return cls(text)
        except ValueError:
            pass
        name = text.upper().replace(" ", "_").replace("-", "_")
        if name in cls.__members__:
            return cls.__members__[name]
        raise ValueError(f"Unknown document type '{value}'")


@dataclass(frozen=True)
class AccountRef:
    """Ledger account identity: code plus display name."""

    code: str
    name: str


@dataclass(frozen=True)
class ChartAccount:
    """Chart-of-accounts record."""

    code: str
    name: str
    is_active: bool = True


@dataclass(frozen=True)
class Transaction:
    """Purchase or sale register record. Immutable input."""

    entity_tax_id: str
    entity_name: str
    document_type: DocumentType
    document_number: str
    net_amount: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    emission_date: Optional[date] = None
    reception_date: Optional[date] = None

    def __post_init__(self):
        object.__setattr__(self, "entity_tax_id", normalize_tax_id(self.entity_tax_id))
        object.__setattr__(self, "document_type", DocumentType.parse(self.document_type))
        for name in ("net_amount", "tax_amount", "total_amount"):
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                object.__setattr__(self, name, Decimal(str(value)))


@dataclass(frozen=True)
class EntityAccountMapping:
    """Entity registry record: which ledger account an entity posts to.

    ``document_type_accounts`` holds per-document-type overrides; a missing
    key means the document type has no override.
    """

    entity_tax_id: str
    entity_name: str
    account: Optional[AccountRef] = None
    document_type_accounts: Mapping[DocumentType, AccountRef] = field(default_factory=dict)
    cost_center: Optional[str] = None
    is_active: bool = True

    def __post_init__(self):
        object.__setattr__(self, "entity_tax_id", normalize_tax_id(self.entity_tax_id))

    def override_for(self, document_type: DocumentType) -> Optional[AccountRef]:
        return self.document_type_accounts.get(document_type)

    def referenced_accounts(self) -> list[AccountRef]:
        """Every account this mapping can post to, general account first."""
        accounts = [self.account] if self.account is not None else []
        for document_type in sorted(self.document_type_accounts, key=lambda d: d.value):
            accounts.append(self.document_type_accounts[document_type])
        return accounts


@dataclass(frozen=True)
class CentralDefaults:
    """Company-wide accounts used for tax, counterparty and fallback postings."""

    default_expense: AccountRef
    default_income: AccountRef
    input_tax: AccountRef
    output_tax: AccountRef
    payables: AccountRef
    receivables: AccountRef

    @classmethod
    def fallback(cls) -> "CentralDefaults":
        """Built-in defaults used when a company has no configuration."""
        return cls(
            default_expense=AccountRef("5.1.1.001", "Operating Expenses"),
            default_income=AccountRef("4.1.1.001", "Operating Income"),
            input_tax=AccountRef("1.1.4.001", "VAT Input Credit"),
            output_tax=AccountRef("2.1.4.001", "VAT Output Debit"),
            payables=AccountRef("2.1.1.001", "Domestic Suppliers"),
            receivables=AccountRef("1.1.3.001", "Domestic Customers"),
        )

    def operational_default(self, direction: Direction) -> AccountRef:
        return self.default_expense if direction == Direction.PURCHASE else self.default_income

    def tax_account(self, direction: Direction) -> AccountRef:
        return self.input_tax if direction == Direction.PURCHASE else self.output_tax

    def counterparty_account(self, direction: Direction) -> AccountRef:
        return self.payables if direction == Direction.PURCHASE else self.receivables


@dataclass(frozen=True)
class BatchLimits:
    """Per-deployment capacity limits of one journal entry."""

    max_transactions: int = 100
    max_lines: int = 50
    max_amount: Decimal = Decimal("100000000")


@dataclass(frozen=True)
class JournalDetailLine:
    """One debit or credit movement inside a journal entry."""

    account_code: str
    account_name: str
    description: str
    debit_amount: Decimal = Decimal("0")
    credit_amount: Decimal = Decimal("0")
    entity_tax_id: Optional[str] = None
    entity_name: Optional[str] = None
    document_reference: Optional[str] = None
    document_type: Optional[DocumentType] = None
    cost_center: Optional[str] = None


@dataclass(frozen=True)
class EntryMetadata:
    """Batch bookkeeping attached to a synthesized entry."""

    batch_number: int
    total_batches: int
    transaction_count: int
    period: str
    direction: Direction
    total_amount: Decimal
    part_number: int = 1
    total_parts: int = 1
    operational_accounts: int = 0


@dataclass(frozen=True)
class JournalEntry:
    """Balanced double-entry record synthesized from one batch."""

    entry_date: date
    description: str
    reference: str
    direction: Direction
    lines: tuple[JournalDetailLine, ...]
    metadata: EntryMetadata

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit_amount for line in self.lines), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit_amount for line in self.lines), Decimal("0"))


@dataclass(frozen=True)
class ValidationResult:
    """Coverage report for a transaction set."""

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    missing_entities: tuple[str, ...] = ()
    missing_accounts: tuple[str, ...] = ()


@dataclass(frozen=True)
class BalanceCheck:
    """Balance audit outcome for one synthesized entry."""

    position: int
    reference: str
    line_count: int
    total_debit: Decimal
    total_credit: Decimal
    line_errors: tuple[str, ...] = ()

    @property
    def difference(self) -> Decimal:
        return self.total_debit - self.total_credit

    @property
    def balanced(self) -> bool:
        return abs(self.difference) <= BALANCE_TOLERANCE and not self.line_errors


class RunState(str, Enum):
    """Stages of one integration run."""

    VALIDATING = "validating"
    BLOCKED = "blocked"
    PARTITIONING = "partitioning"
    SYNTHESIZING = "synthesizing"
    AUDITING = "auditing"
    PERSISTING = "persisting"
    DONE = "done"


@dataclass(frozen=True)
class IntegrationOptions:
    """Caller switches for a run."""

    force: bool = False
    save: bool = False
    detailed: bool = False
    keep_invalid: bool = False
    entry_date: Optional[date] = None


@dataclass(frozen=True)
class IntegrationRequest:
    """One integration request for a company period."""

    company_id: str
    period: str
    direction: Direction
    transactions: tuple[Transaction, ...]
    options: IntegrationOptions = field(default_factory=IntegrationOptions)


@dataclass(frozen=True)
class BatchResult:
    """Outcome of synthesizing and auditing one batch."""

    batch_number: int
    success: bool
    transaction_count: int
    total_amount: Decimal
    references: tuple[str, ...] = ()
    error: Optional[str] = None


@dataclass(frozen=True)
class PersistenceFailure:
    """An accepted entry that could not be stored."""

    reference: str
    error: str


@dataclass(frozen=True)
class IntegrationSummary:
    """Totals reported alongside a run result."""

    total_transactions: int
    total_batches: int
    successful_batches: int
    failed_batches: int
    entries_generated: int
    entries_persisted: int
    total_lines: int
    validation_warnings: int
    total_amount: Decimal


@dataclass(frozen=True)
class IntegrationResult:
    """Full response of an integration run."""

    state: RunState
    validation: ValidationResult
    summary: IntegrationSummary
    batches: tuple[BatchResult, ...] = ()
    entries: tuple[JournalEntry, ...] = ()
    balance_checks: tuple[BalanceCheck, ...] = ()
    persisted_entry_ids: tuple[str, ...] = ()
    persistence_failures: tuple[PersistenceFailure, ...] = ()

    @property
    def blocked(self) -> bool:
        return self.state == RunState.BLOCKED


@dataclass(frozen=True)
class StoredEntry:
    """Journal entry as read back from the store."""

    id: str
    company_id: str
    entry_date: date
    description: str
    reference: str
    direction: Direction
    batch_number: int
    total_batches: int
    transaction_count: int
    period: str
