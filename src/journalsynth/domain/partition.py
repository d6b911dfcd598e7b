"""Batch partitioning of an ordered transaction list."""

import logging
from decimal import Decimal
from typing import Sequence

from journalsynth.domain import errors
from journalsynth.domain.entities import BatchLimits, Transaction
from journalsynth.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Projected detail lines per transaction. Aggregated entries need an
# operational and a counterparty line; detailed entries may add a tax line.
AGGREGATED_LINE_COST = 2
DETAILED_LINE_COST = 3


def check_limits(limits: BatchLimits) -> None:
    """Raise ConfigurationError unless every limit is positive."""
    if limits.max_transactions < 1:
        raise ConfigurationError("max_transactions must be at least 1")
    if limits.max_lines < 1:
        raise ConfigurationError("max_lines must be at least 1")
    if not Decimal(limits.max_amount).is_finite():
        raise ConfigurationError(f"max_amount must be a finite number, got {limits.max_amount}")
    if limits.max_amount <= 0:
        raise ConfigurationError("max_amount must be positive")


def partition_transactions(
    transactions: Sequence[Transaction],
    limits: BatchLimits,
    line_cost: int = AGGREGATED_LINE_COST,
) -> list[list[Transaction]]:
    """Split transactions into batches under count, line and amount limits.

    Single forward pass, first fit: a transaction that would push the open
    batch past any limit closes it and opens the next one. Batches keep
    input order, so concatenating them gives back the input.

    A transaction that exceeds a limit by itself still gets a batch of
    its own; it cannot be split.

    Args:
        transactions: Ordered transactions
        limits: Batch limits
        line_cost: Projected detail lines per transaction

    Returns:
        Ordered list of non-empty batches
    """
    check_limits(limits)

    batches: list[list[Transaction]] = []
    current: list[Transaction] = []
    current_lines = 0
    current_amount = Decimal("0")

    for txn in transactions:
        would_exceed = (
            len(current) + 1 > limits.max_transactions
            or current_lines + line_cost > limits.max_lines
            or current_amount + txn.total_amount > limits.max_amount
        )
        if would_exceed and current:
            batches.append(current)
            current = []
            current_lines = 0
            current_amount = Decimal("0")

        if not current:
            if txn.total_amount > limits.max_amount:
                logger.warning(errors.oversized_transaction(txn.document_number, "amount"))
            if line_cost > limits.max_lines:
                logger.warning(errors.oversized_transaction(txn.document_number, "line"))

        current.append(txn)
        current_lines += line_cost
        current_amount += txn.total_amount

    if current:
        batches.append(current)

    logger.debug("Partitioned %d transactions into %d batches", len(transactions), len(batches))
    return batches
