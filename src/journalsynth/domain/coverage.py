"""Coverage validation of a transaction set against the entity registry."""

import logging
from typing import Iterable, Mapping

from journalsynth.domain import errors
from journalsynth.domain.entities import (
    ChartAccount,
    CentralDefaults,
    Direction,
    EntityAccountMapping,
    Transaction,
    ValidationResult,
)

logger = logging.getLogger(__name__)


def distinct_tax_ids(transactions: Iterable[Transaction]) -> list[str]:
    """Distinct entity tax ids in order of first appearance."""
    seen: dict[str, None] = {}
    for txn in transactions:
        seen.setdefault(txn.entity_tax_id, None)
    return list(seen)


def validate_coverage(
    transactions: list[Transaction],
    mappings: Mapping[str, EntityAccountMapping],
    active_accounts: Iterable[ChartAccount],
    defaults: CentralDefaults | None = None,
    direction: Direction = Direction.PURCHASE,
    force: bool = False,
) -> ValidationResult:
    """Audit a transaction set against mappings and the chart of accounts.

    For every distinct entity:
    - no mapping: recorded in ``missing_entities``
    - mapping without an account: recorded in ``missing_accounts``
    - mapping with only document-type overrides, and a transaction whose
      type has none: recorded in ``missing_accounts``
    - mapping whose account is not an active chart account: recorded in
      ``missing_accounts`` and as a hard error
    - inactive mapping: warning only

    Missing entities and accounts block the run unless ``force`` is set, in
    which case those entities fall back to the company default account and
    warnings say so. Hard errors block regardless of ``force``.

    When ``defaults`` is given, the central accounts the run will post to
    (tax, counterparty, and the operational default if any entity needs
    it) must also exist in the chart.

    Args:
        transactions: Transactions to integrate
        mappings: Entity mappings keyed by normalized tax id
        active_accounts: Active chart-of-accounts records
        defaults: Company central accounts
        direction: Register side being integrated
        force: Proceed with default accounts for uncovered entities

    Returns:
        ValidationResult
    """
    chart_codes = {account.code for account in active_accounts if account.is_active}

    hard_errors: list[str] = []
    warnings: list[str] = []
    missing_entities: list[str] = []
    missing_accounts: list[str] = []

    falls_back: list[str] = []

    for tax_id in distinct_tax_ids(transactions):
        mapping = mappings.get(tax_id)
        if mapping is None:
            missing_entities.append(tax_id)
            falls_back.append(tax_id)
            warnings.append(errors.entity_not_configured(tax_id))
            continue

        if mapping.account is None and not mapping.document_type_accounts:
            missing_accounts.append(tax_id)
            falls_back.append(tax_id)
            warnings.append(errors.entity_without_account(mapping.entity_name, tax_id))
        elif mapping.account is None:
            # Override-only mappings cover just their own document types
            uncovered_types = sorted(
                {
                    txn.document_type.value
                    for txn in transactions
                    if txn.entity_tax_id == tax_id and mapping.override_for(txn.document_type) is None
                }
            )
            if uncovered_types:
                missing_accounts.append(tax_id)
                falls_back.append(tax_id)
                warnings.append(
                    errors.document_types_without_account(mapping.entity_name, tax_id, uncovered_types)
                )
        if mapping.account is not None or mapping.document_type_accounts:
            if not mapping.is_active:
                warnings.append(errors.entity_inactive(mapping.entity_name, tax_id))

        owner = f"{mapping.entity_name} ({tax_id})"
        for account in mapping.referenced_accounts():
            if account.code not in chart_codes:
                hard_errors.append(errors.account_not_in_chart(account.code, owner))
                if tax_id not in missing_accounts:
                    missing_accounts.append(tax_id)

    if defaults is not None:
        central = [
            (defaults.tax_account(direction), "the tax account"),
            (defaults.counterparty_account(direction), "the counterparty account"),
        ]
        if falls_back:
            central.append((defaults.operational_default(direction), "the default account"))
        for account, owner in central:
            if account.code not in chart_codes:
                hard_errors.append(errors.account_not_in_chart(account.code, owner))

    if force and defaults is not None:
        fallback = defaults.operational_default(direction)
        for tax_id in falls_back:
            warnings.append(errors.entity_uses_default(tax_id, fallback.code))

    coverage_gap = bool(missing_entities or missing_accounts)
    is_valid = not hard_errors and (force or not coverage_gap)

    logger.debug(
        "Coverage: %d entities, %d unmapped, %d without account, %d errors",
        len(distinct_tax_ids(transactions)),
        len(missing_entities),
        len(missing_accounts),
        len(hard_errors),
    )

    return ValidationResult(
        is_valid=is_valid,
        errors=tuple(hard_errors),
        warnings=tuple(warnings),
        missing_entities=tuple(missing_entities),
        missing_accounts=tuple(missing_accounts),
    )
