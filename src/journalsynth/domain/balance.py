"""Balance audit of synthesized journal entries."""

from decimal import Decimal
from typing import Sequence

from journalsynth.domain.entities import BalanceCheck, JournalEntry

ZERO = Decimal("0")


def _line_errors(entry: JournalEntry) -> list[str]:
    problems = []
    for index, line in enumerate(entry.lines, start=1):
        if line.debit_amount < ZERO or line.credit_amount < ZERO:
            problems.append(f"Line {index} ({line.account_code}) has a negative amount")
        elif (line.debit_amount == ZERO) == (line.credit_amount == ZERO):
            problems.append(f"Line {index} ({line.account_code}) must carry exactly one of debit or credit")
    return problems


def audit_entry(entry: JournalEntry, position: int = 1) -> BalanceCheck:
    """Sum debits and credits of an entry.

    The entry is balanced when the sums differ by at most 0.01 and every
    line carries exactly one non-negative, non-zero side.
    """
    return BalanceCheck(
        position=position,
        reference=entry.reference,
        line_count=len(entry.lines),
        total_debit=entry.total_debit,
        total_credit=entry.total_credit,
        line_errors=tuple(_line_errors(entry)),
    )


def audit_entries(entries: Sequence[JournalEntry]) -> list[BalanceCheck]:
    return [audit_entry(entry, position) for position, entry in enumerate(entries, start=1)]
