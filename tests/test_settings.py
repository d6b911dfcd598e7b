"""Tests for batch limit settings."""

import pytest
from decimal import Decimal

from journalsynth.domain.entities import BatchLimits
from journalsynth.domain.errors import ConfigurationError
from journalsynth.settings import load_batch_limits


def test_defaults():
    assert load_batch_limits(environ={}) == BatchLimits(
        max_transactions=100, max_lines=50, max_amount=Decimal("100000000")
    )


def test_environment_values():
    environ = {
        "JOURNALSYNTH_MAX_TRANSACTIONS": "20",
        "JOURNALSYNTH_MAX_LINES": "30",
        "JOURNALSYNTH_MAX_AMOUNT": "5000000.50",
    }

    limits = load_batch_limits(environ=environ)

    assert limits == BatchLimits(max_transactions=20, max_lines=30, max_amount=Decimal("5000000.50"))


def test_explicit_values_win():
    environ = {"JOURNALSYNTH_MAX_TRANSACTIONS": "20", "JOURNALSYNTH_MAX_LINES": ""}

    limits = load_batch_limits(environ=environ, max_transactions=7)

    assert limits.max_transactions == 7
    assert limits.max_lines == 50


@pytest.mark.parametrize(
    "environ, message",
    [
        ({"JOURNALSYNTH_MAX_TRANSACTIONS": "many"}, "must be an integer"),
        ({"JOURNALSYNTH_MAX_AMOUNT": "lots"}, "must be a number"),
        ({"JOURNALSYNTH_MAX_LINES": "0"}, "max_lines"),
        ({"JOURNALSYNTH_MAX_AMOUNT": "NaN"}, "must be a finite number"),
        ({"JOURNALSYNTH_MAX_AMOUNT": "Infinity"}, "must be a finite number"),
    ],
)
def test_invalid_values(environ, message):
    with pytest.raises(ConfigurationError, match=message):
        load_batch_limits(environ=environ)


def test_explicit_amount_must_be_finite():
    with pytest.raises(ConfigurationError, match="max_amount must be a finite number"):
        load_batch_limits(environ={}, max_amount=Decimal("NaN"))
