"""Journal entry synthesis from transaction batches.

Posting rules:

- Purchase: debit the operational account(s) for the net amount and the
  input tax account for the tax; credit payables for the total.
- Sale: debit receivables for the total; credit the operational
  account(s) for the net amount and the output tax account for the tax.

Aggregated mode emits one line per operational account, one tax line and
one line per counterparty account. Detailed mode emits the lines of every
transaction on their own and re-splits a batch into parts when the actual
line count or amount would exceed the batch limits.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from journalsynth.domain.entities import (
    AccountRef,
    BatchLimits,
    Direction,
    EntryMetadata,
    JournalDetailLine,
    JournalEntry,
    Transaction,
)
from journalsynth.domain.resolver import EntityAccountResolver

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

_DIRECTION_LABELS = {
    Direction.PURCHASE: ("Purchases", "Suppliers"),
    Direction.SALE: ("Sales", "Customers"),
}


@dataclass
class _AccountGroup:
    account: AccountRef
    amount: Decimal = ZERO
    transaction_count: int = 0
    cost_centers: set = field(default_factory=set)

    def add(self, amount: Decimal, cost_center: Optional[str]) -> None:
        self.amount += amount
        self.transaction_count += 1
        self.cost_centers.add(cost_center)

    @property
    def cost_center(self) -> Optional[str]:
        # Only carried when every grouped transaction agrees.
        if len(self.cost_centers) == 1:
            return next(iter(self.cost_centers))
        return None


def entry_reference(direction: Direction, period: str, batch_number: int, part: int = 1, parts: int = 1) -> str:
    """Reference code unique within a run."""
    reference = f"RCV-{direction.value.upper()}-{period}-L{batch_number}"
    if parts > 1:
        reference += f"-P{part}"
    return reference


def entry_description(
    direction: Direction, period: str, batch_number: int, total_batches: int, part: int = 1, parts: int = 1
) -> str:
    """Human description embedding period and batch position."""
    register, _ = _DIRECTION_LABELS[direction]
    description = f"RCV {register} {period} - Batch {batch_number}/{total_batches}"
    if parts > 1:
        description += f" - Part {part}/{parts}"
    return description


def _debit(account: AccountRef, amount: Decimal, description: str, **extra) -> JournalDetailLine:
    return JournalDetailLine(
        account_code=account.code,
        account_name=account.name,
        description=description,
        debit_amount=amount,
        credit_amount=ZERO,
        **extra,
    )


def _credit(account: AccountRef, amount: Decimal, description: str, **extra) -> JournalDetailLine:
    return JournalDetailLine(
        account_code=account.code,
        account_name=account.name,
        description=description,
        debit_amount=ZERO,
        credit_amount=amount,
        **extra,
    )


class JournalSynthesizer:
    """Turn transaction batches into journal entries."""

    def __init__(
        self,
        resolver: EntityAccountResolver,
        period: str,
        entry_date: date,
        limits: Optional[BatchLimits] = None,
    ):
        """Initialize synthesizer.

        Args:
            resolver: Account resolver for the run's company and direction
            period: Source period ("YYYY-MM")
            entry_date: Date stamped on every entry
            limits: Batch limits used by detailed-mode re-splitting
        """
        self.resolver = resolver
        self.period = period
        self.entry_date = entry_date
        self.limits = limits or BatchLimits()

    @property
    def direction(self) -> Direction:
        return self.resolver.direction

    def synthesize(
        self,
        batch: Sequence[Transaction],
        batch_number: int,
        total_batches: int,
        detailed: bool = False,
    ) -> list[JournalEntry]:
        """Synthesize one batch; detailed mode may return several parts."""
        if detailed:
            return self.synthesize_detailed(batch, batch_number, total_batches)
        return [self.synthesize_aggregated(batch, batch_number, total_batches)]

    def synthesize_aggregated(
        self, batch: Sequence[Transaction], batch_number: int, total_batches: int
    ) -> JournalEntry:
        """Build one entry with lines grouped by account."""
        operational: dict[str, _AccountGroup] = {}
        counterparty: dict[str, _AccountGroup] = {}
        tax_total = ZERO

        for txn in batch:
            account = self.resolver.operational_account(txn)
            group = operational.setdefault(account.code, _AccountGroup(account))
            group.add(txn.net_amount, self.resolver.cost_center(txn))

            partner = self.resolver.counterparty_account()
            counterparty.setdefault(partner.code, _AccountGroup(partner)).add(txn.total_amount, None)

            tax_total += txn.tax_amount

        batch_ref = f"Batch {batch_number}/{total_batches}"
        _, partner_label = _DIRECTION_LABELS[self.direction]
        tax_account = self.resolver.tax_account()

        operational_lines = []
        for group in operational.values():
            if group.amount == ZERO:
                continue
            description = f"{group.account.name} {self.period} - {group.transaction_count} transactions"
            post = _debit if self.direction == Direction.PURCHASE else _credit
            operational_lines.append(
                post(
                    group.account,
                    group.amount,
                    description,
                    document_reference=batch_ref,
                    cost_center=group.cost_center,
                )
            )

        tax_lines = []
        if tax_total > ZERO:
            post = _debit if self.direction == Direction.PURCHASE else _credit
            tax_lines.append(
                post(tax_account, tax_total, f"{tax_account.name} {self.period}", document_reference=batch_ref)
            )

        counterparty_lines = []
        for group in counterparty.values():
            if group.amount == ZERO:
                continue
            description = f"{partner_label} {self.period} - {len(batch)} documents"
            post = _credit if self.direction == Direction.PURCHASE else _debit
            counterparty_lines.append(post(group.account, group.amount, description, document_reference=batch_ref))

        if self.direction == Direction.PURCHASE:
            lines = operational_lines + tax_lines + counterparty_lines
        else:
            lines = counterparty_lines + operational_lines + tax_lines

        total_amount = sum((txn.total_amount for txn in batch), ZERO)
        logger.debug(
            "Batch %d/%d: %d transactions -> %d lines (%d operational accounts)",
            batch_number,
            total_batches,
            len(batch),
            len(lines),
            len(operational),
        )

        return JournalEntry(
            entry_date=self.entry_date,
            description=entry_description(self.direction, self.period, batch_number, total_batches),
            reference=entry_reference(self.direction, self.period, batch_number),
            direction=self.direction,
            lines=tuple(lines),
            metadata=EntryMetadata(
                batch_number=batch_number,
                total_batches=total_batches,
                transaction_count=len(batch),
                period=self.period,
                direction=self.direction,
                total_amount=total_amount,
                operational_accounts=len(operational),
            ),
        )

    def transaction_lines(self, txn: Transaction) -> list[JournalDetailLine]:
        """Operational, tax and counterparty lines of a single transaction."""
        mapping = self.resolver.mapping_for(txn)
        entity_name = mapping.entity_name if mapping is not None and mapping.entity_name else txn.entity_name
        account = self.resolver.operational_account(txn)
        tax_account = self.resolver.tax_account()
        partner = self.resolver.counterparty_account()

        reference = {
            "entity_tax_id": txn.entity_tax_id,
            "entity_name": txn.entity_name,
            "document_reference": txn.document_number,
            "document_type": txn.document_type,
        }
        doc_label = f"{txn.entity_name} - Doc {txn.document_number}"

        operational_line = None
        if txn.net_amount > ZERO:
            description = f"{entity_name} - Doc {txn.document_number}"
            post = _debit if self.direction == Direction.PURCHASE else _credit
            operational_line = post(
                account, txn.net_amount, description, cost_center=self.resolver.cost_center(txn), **reference
            )

        tax_line = None
        if txn.tax_amount > ZERO:
            post = _debit if self.direction == Direction.PURCHASE else _credit
            tax_line = post(tax_account, txn.tax_amount, f"{tax_account.name} - {doc_label}", **reference)

        partner_line = None
        if txn.total_amount > ZERO:
            post = _credit if self.direction == Direction.PURCHASE else _debit
            partner_line = post(partner, txn.total_amount, doc_label, **reference)

        if self.direction == Direction.PURCHASE:
            ordered = [operational_line, tax_line, partner_line]
        else:
            ordered = [partner_line, operational_line, tax_line]
        return [line for line in ordered if line is not None]

    def synthesize_detailed(
        self, batch: Sequence[Transaction], batch_number: int, total_batches: int
    ) -> list[JournalEntry]:
        """Build per-transaction entries, splitting into parts at the limits."""
        parts: list[tuple[list[JournalDetailLine], list[Transaction]]] = []
        current_lines: list[JournalDetailLine] = []
        current_txns: list[Transaction] = []
        current_amount = ZERO

        for txn in batch:
            lines = self.transaction_lines(txn)
            would_exceed = (
                len(current_lines) + len(lines) > self.limits.max_lines
                or current_amount + txn.total_amount > self.limits.max_amount
            )
            if would_exceed and current_lines:
                parts.append((current_lines, current_txns))
                current_lines = []
                current_txns = []
                current_amount = ZERO

            current_lines.extend(lines)
            current_txns.append(txn)
            current_amount += txn.total_amount

        if current_txns:
            parts.append((current_lines, current_txns))

        total_parts = len(parts)
        if total_parts > 1:
            logger.debug("Batch %d/%d re-split into %d parts", batch_number, total_batches, total_parts)

        entries = []
        for part_number, (lines, txns) in enumerate(parts, start=1):
            operational_codes = {self.resolver.operational_account(txn).code for txn in txns}
            entries.append(
                JournalEntry(
                    entry_date=self.entry_date,
                    description=entry_description(
                        self.direction, self.period, batch_number, total_batches, part_number, total_parts
                    ),
                    reference=entry_reference(self.direction, self.period, batch_number, part_number, total_parts),
                    direction=self.direction,
                    lines=tuple(lines),
                    metadata=EntryMetadata(
                        batch_number=batch_number,
                        total_batches=total_batches,
                        transaction_count=len(txns),
                        period=self.period,
                        direction=self.direction,
                        total_amount=sum((txn.total_amount for txn in txns), ZERO),
                        part_number=part_number,
                        total_parts=total_parts,
                        operational_accounts=len(operational_codes),
                    ),
                )
            )
        return entries
