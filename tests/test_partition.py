"""Tests for batch partitioning."""

import logging
import pytest
from decimal import Decimal

from journalsynth.domain.entities import BatchLimits
from journalsynth.domain.errors import ConfigurationError
from journalsynth.domain.partition import (
    AGGREGATED_LINE_COST,
    DETAILED_LINE_COST,
    check_limits,
    partition_transactions,
)

LARGE_AMOUNT = Decimal("1000000000000")


@pytest.fixture
def many_transactions(make_transaction):
    def _many(count, net="1000", tax="190"):
        return [make_transaction(net=net, tax=tax, number=str(n)) for n in range(1, count + 1)]

    return _many


def test_splits_on_transaction_count(many_transactions):
    """150 transactions with a limit of 100 give batches of 100 and 50."""
    txns = many_transactions(150)
    limits = BatchLimits(max_transactions=100, max_lines=1000, max_amount=LARGE_AMOUNT)

    batches = partition_transactions(txns, limits)

    assert [len(batch) for batch in batches] == [100, 50]


def test_concatenation_reproduces_input(many_transactions):
    txns = many_transactions(37)
    limits = BatchLimits(max_transactions=10, max_lines=1000, max_amount=LARGE_AMOUNT)

    batches = partition_transactions(txns, limits)

    assert [txn for batch in batches for txn in batch] == txns
    assert all(batch for batch in batches)


def test_splits_on_projected_lines(many_transactions):
    txns = many_transactions(12)
    limits = BatchLimits(max_transactions=100, max_lines=10, max_amount=LARGE_AMOUNT)

    batches = partition_transactions(txns, limits, line_cost=AGGREGATED_LINE_COST)

    assert [len(batch) for batch in batches] == [5, 5, 2]


def test_detailed_line_cost(many_transactions):
    txns = many_transactions(7)
    limits = BatchLimits(max_transactions=100, max_lines=9, max_amount=LARGE_AMOUNT)

    batches = partition_transactions(txns, limits, line_cost=DETAILED_LINE_COST)

    assert [len(batch) for batch in batches] == [3, 3, 1]


def test_splits_on_amount(make_transaction):
    txns = [
        make_transaction(net="60", tax="0", number="1"),
        make_transaction(net="50", tax="0", number="2"),
        make_transaction(net="40", tax="0", number="3"),
    ]
    limits = BatchLimits(max_transactions=100, max_lines=100, max_amount=Decimal("100"))

    batches = partition_transactions(txns, limits)

    assert [[t.document_number for t in batch] for batch in batches] == [["1"], ["2", "3"]]
    for batch in batches:
        assert sum(t.total_amount for t in batch) <= limits.max_amount


def test_limits_hold_for_every_batch(make_transaction):
    txns = [make_transaction(net=str(n * 7 % 50 + 1), tax="0", number=str(n)) for n in range(200)]
    limits = BatchLimits(max_transactions=30, max_lines=40, max_amount=Decimal("400"))

    batches = partition_transactions(txns, limits)

    for batch in batches:
        assert len(batch) <= limits.max_transactions
        assert len(batch) * AGGREGATED_LINE_COST <= limits.max_lines
        assert sum(t.total_amount for t in batch) <= limits.max_amount


def test_oversized_transaction_gets_own_batch(make_transaction, caplog):
    txns = [
        make_transaction(net="30", tax="0", number="1"),
        make_transaction(net="500", tax="0", number="2"),
        make_transaction(net="20", tax="0", number="3"),
    ]
    limits = BatchLimits(max_transactions=100, max_lines=100, max_amount=Decimal("100"))

    with caplog.at_level(logging.WARNING, logger="journalsynth.domain.partition"):
        batches = partition_transactions(txns, limits)

    assert [[t.document_number for t in batch] for batch in batches] == [["1"], ["2"], ["3"]]
    assert "Document 2 alone exceeds the amount limit" in caplog.text


def test_empty_input():
    assert partition_transactions([], BatchLimits()) == []


@pytest.mark.parametrize(
    "limits",
    [
        BatchLimits(max_transactions=0),
        BatchLimits(max_lines=0),
        BatchLimits(max_amount=Decimal("0")),
    ],
)
def test_invalid_limits(limits):
    with pytest.raises(ConfigurationError):
        check_limits(limits)
    with pytest.raises(ConfigurationError):
        partition_transactions([], limits)
