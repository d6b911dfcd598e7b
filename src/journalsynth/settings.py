"""Per-deployment settings read from the environment."""

import os
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

from journalsynth.domain.entities import BatchLimits
from journalsynth.domain.errors import ConfigurationError
from journalsynth.domain.partition import check_limits

MAX_TRANSACTIONS_ENV = "JOURNALSYNTH_MAX_TRANSACTIONS"
MAX_LINES_ENV = "JOURNALSYNTH_MAX_LINES"
MAX_AMOUNT_ENV = "JOURNALSYNTH_MAX_AMOUNT"


def _read_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got '{raw}'")


def _read_decimal(environ: Mapping[str, str], name: str, default: Decimal) -> Decimal:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise ConfigurationError(f"{name} must be a number, got '{raw}'")
    if not value.is_finite():
        raise ConfigurationError(f"{name} must be a finite number, got '{raw}'")
    return value


def load_batch_limits(
    environ: Optional[Mapping[str, str]] = None,
    max_transactions: Optional[int] = None,
    max_lines: Optional[int] = None,
    max_amount: Optional[Decimal] = None,
) -> BatchLimits:
    """Build batch limits from explicit values, then environment, then defaults.

    Raises:
        ConfigurationError: If a value is malformed or not positive
    """
    environ = os.environ if environ is None else environ
    defaults = BatchLimits()
    limits = BatchLimits(
        max_transactions=(
            max_transactions
            if max_transactions is not None
            else _read_int(environ, MAX_TRANSACTIONS_ENV, defaults.max_transactions)
        ),
        max_lines=max_lines if max_lines is not None else _read_int(environ, MAX_LINES_ENV, defaults.max_lines),
        max_amount=(
            Decimal(max_amount)
            if max_amount is not None
            else _read_decimal(environ, MAX_AMOUNT_ENV, defaults.max_amount)
        ),
    )
    check_limits(limits)
    return limits
