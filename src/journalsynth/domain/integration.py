"""Register integration domain service.

Runs one integration request through
validating -> (blocked | partitioning) -> synthesizing -> auditing
-> (persisting) -> done, and assembles the summary.
"""

import logging
import time
from dataclasses import replace
from decimal import Decimal
from typing import Callable, Optional, Sequence

from journalsynth.database.base import Database
from journalsynth.domain import errors
from journalsynth.domain.balance import audit_entry
from journalsynth.domain.coverage import distinct_tax_ids, validate_coverage
from journalsynth.domain.entities import (
    BatchLimits,
    BatchResult,
    CentralDefaults,
    Direction,
    IntegrationOptions,
    IntegrationRequest,
    IntegrationResult,
    IntegrationSummary,
    JournalEntry,
    PersistenceFailure,
    RunState,
    TOTAL_TOLERANCE,
    Transaction,
    ValidationResult,
)
from journalsynth.domain.errors import ConflictError, NotFoundError, StoreError, ValidationError
from journalsynth.domain.partition import (
    AGGREGATED_LINE_COST,
    DETAILED_LINE_COST,
    check_limits,
    partition_transactions,
)
from journalsynth.domain.resolver import EntityAccountResolver, index_mappings
from journalsynth.domain.retry import RetryPolicy, call_with_retry
from journalsynth.domain.synthesis import JournalSynthesizer
from journalsynth.utils.date_parser import get_period_range, parse_period

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def validate_request(request: IntegrationRequest) -> IntegrationRequest:
    """Reject malformed requests before anything is read.

    Returns the request with its period normalized to "YYYY-MM".

    Raises:
        ValidationError: On a blank company, bad period, empty or malformed
            transaction list
    """
    if not request.company_id or not str(request.company_id).strip():
        raise ValidationError(errors.missing_request_field("company_id"))
    if not request.period:
        raise ValidationError(errors.missing_request_field("period"))
    try:
        period = parse_period(request.period)
    except ValueError as e:
        raise ValidationError(str(e))
    if not request.transactions:
        raise ValidationError(errors.missing_request_field("transactions"))

    problems = []
    for index, txn in enumerate(request.transactions, start=1):
        if not txn.entity_tax_id:
            problems.append(errors.invalid_transaction(index, "missing entity tax id"))
            continue
        if min(txn.net_amount, txn.tax_amount, txn.total_amount) < ZERO:
            problems.append(errors.invalid_transaction(index, "amounts must not be negative"))
            continue
        if abs(txn.total_amount - (txn.net_amount + txn.tax_amount)) > TOTAL_TOLERANCE:
            problems.append(
                errors.invalid_transaction(
                    index,
                    f"total {txn.total_amount} does not match net {txn.net_amount} + tax {txn.tax_amount}",
                )
            )
    if problems:
        raise ValidationError("; ".join(problems))

    return replace(request, period=period, direction=Direction.parse(request.direction))


def _summarize(
    transactions: Sequence[Transaction],
    validation: ValidationResult,
    batches: Sequence[BatchResult],
    entries: Sequence[JournalEntry],
    persisted: int,
) -> IntegrationSummary:
    return IntegrationSummary(
        total_transactions=len(transactions),
        total_batches=len(batches),
        successful_batches=sum(1 for b in batches if b.success),
        failed_batches=sum(1 for b in batches if not b.success),
        entries_generated=len(entries),
        entries_persisted=persisted,
        total_lines=sum(len(entry.lines) for entry in entries),
        validation_warnings=len(validation.warnings),
        total_amount=sum((txn.total_amount for txn in transactions), ZERO),
    )


class IntegrationService:
    """Service for turning register transactions into journal entries."""

    def __init__(
        self,
        db: Database,
        limits: Optional[BatchLimits] = None,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize integration service.

        Args:
            db: Database instance holding the registry and receiving entries
            limits: Batch limits (defaults to BatchLimits())
            retry_policy: Retry policy for store calls
            sleep: Delay function used between retries
        """
        self.db = db
        self.limits = limits or BatchLimits()
        self.retry_policy = retry_policy or RetryPolicy()
        self.sleep = sleep
        check_limits(self.limits)

    def _call(self, operation, description: str):
        return call_with_retry(operation, self.retry_policy, description, sleep=self.sleep)

    def integrate(
        self,
        company_id: str,
        period: str,
        direction: Direction | str,
        transactions: Sequence[Transaction],
        options: Optional[IntegrationOptions] = None,
    ) -> IntegrationResult:
        """Convenience wrapper building the request from plain arguments."""
        request = IntegrationRequest(
            company_id=company_id,
            period=period,
            direction=Direction.parse(direction),
            transactions=tuple(transactions),
            options=options or IntegrationOptions(),
        )
        return self.run(request)

    def load_context(self, company_id: str, transactions: Sequence[Transaction]):
        """Read mappings, active accounts and central defaults for a run.

        Returns:
            Tuple of (mappings by tax id, active accounts, defaults, warnings)

        Raises:
            StoreError: If a read still fails after retries
        """
        tax_ids = distinct_tax_ids(transactions)
        mappings = self._call(
            lambda: self.db.get_entity_mappings(company_id, tax_ids), "Reading entity mappings"
        )
        accounts = self._call(lambda: self.db.get_active_accounts(company_id), "Reading chart of accounts")
        defaults = self._call(lambda: self.db.get_central_defaults(company_id), "Reading central defaults")

        warnings = []
        if defaults is None:
            defaults = CentralDefaults.fallback()
            warnings.append(f"Company {company_id} has no central account configuration; using built-in defaults")
        return index_mappings(mappings), accounts, defaults, warnings

    def run(self, request: IntegrationRequest) -> IntegrationResult:
        """Run an integration request end to end.

        Raises:
            ValidationError: If the request is malformed
            StoreError: If the initial reads fail after retries
        """
        request = validate_request(request)
        options = request.options
        transactions = list(request.transactions)

        state = RunState.VALIDATING
        logger.info(
            "Integrating %d %s transactions for company %s period %s (%s)",
            len(transactions),
            request.direction.value,
            request.company_id,
            request.period,
            state.value,
        )

        mappings, accounts, defaults, config_warnings = self.load_context(request.company_id, transactions)
        validation = validate_coverage(
            transactions,
            mappings,
            accounts,
            defaults=defaults,
            direction=request.direction,
            force=options.force,
        )
        if config_warnings:
            validation = replace(validation, warnings=tuple(config_warnings) + validation.warnings)

        if not validation.is_valid:
            state = RunState.BLOCKED
            logger.info(
                "Run blocked: %d errors, %d unmapped entities, %d entities without account",
                len(validation.errors),
                len(validation.missing_entities),
                len(validation.missing_accounts),
            )
            return IntegrationResult(
                state=state,
                validation=validation,
                summary=_summarize(transactions, validation, [], [], 0),
            )

        if options.force and (validation.missing_entities or validation.missing_accounts):
            logger.warning(
                "Forced run: %d entities fall back to default accounts",
                len(validation.missing_entities) + len(validation.missing_accounts),
            )

        state = RunState.PARTITIONING
        line_cost = DETAILED_LINE_COST if options.detailed else AGGREGATED_LINE_COST
        batches = partition_transactions(transactions, self.limits, line_cost=line_cost)
        total_batches = len(batches)
        logger.info("Split %d transactions into %d batches", len(transactions), total_batches)

        state = RunState.SYNTHESIZING
        resolver = EntityAccountResolver(mappings, defaults, request.direction)
        entry_date = options.entry_date or get_period_range(request.period)[1]
        synthesizer = JournalSynthesizer(resolver, request.period, entry_date, self.limits)

        accepted: list[JournalEntry] = []
        output: list[JournalEntry] = []
        checks = []
        batch_results: list[BatchResult] = []
        position = 0

        for batch_number, batch in enumerate(batches, start=1):
            entries = synthesizer.synthesize(batch, batch_number, total_batches, detailed=options.detailed)

            state = RunState.AUDITING
            failures = []
            for entry in entries:
                position += 1
                check = audit_entry(entry, position)
                checks.append(check)
                if check.balanced:
                    accepted.append(entry)
                    output.append(entry)
                    continue
                failure = errors.unbalanced_entry(entry.reference, check.total_debit, check.total_credit)
                if check.line_errors:
                    failure += f" [{'; '.join(check.line_errors)}]"
                failures.append(failure)
                logger.warning(failure)
                if options.keep_invalid:
                    output.append(entry)

            batch_results.append(
                BatchResult(
                    batch_number=batch_number,
                    success=not failures,
                    transaction_count=len(batch),
                    total_amount=sum((txn.total_amount for txn in batch), ZERO),
                    references=tuple(entry.reference for entry in entries),
                    error="; ".join(failures) if failures else None,
                )
            )

        persisted_ids: list[str] = []
        persistence_failures: list[PersistenceFailure] = []
        if options.save and accepted:
            state = RunState.PERSISTING
            persisted_ids, persistence_failures = self.persist(request.company_id, accepted)

        state = RunState.DONE
        logger.info(
            "Run %s: %d entries accepted, %d persisted, %d batch failures",
            state.value,
            len(accepted),
            len(persisted_ids),
            sum(1 for b in batch_results if not b.success),
        )

        return IntegrationResult(
            state=state,
            validation=validation,
            summary=_summarize(transactions, validation, batch_results, output, len(persisted_ids)),
            batches=tuple(batch_results),
            entries=tuple(output),
            balance_checks=tuple(checks),
            persisted_entry_ids=tuple(persisted_ids),
            persistence_failures=tuple(persistence_failures),
        )

    def persist(
        self, company_id: str, entries: Sequence[JournalEntry]
    ) -> tuple[list[str], list[PersistenceFailure]]:
        """Write entries one at a time in batch order.

        A failed entry does not roll back earlier ones. When the lines of an
        entry cannot be written its header is removed again, so a rerun of
        the period can store it.

        Returns:
            Tuple of (stored entry IDs, failures by reference)
        """
        persisted: list[str] = []
        failures: list[PersistenceFailure] = []
        for entry in entries:
            entry_id = None
            try:
                entry_id = self._call(
                    lambda: self.db.persist_entry(company_id, entry), f"Storing entry {entry.reference}"
                )
                self._call(
                    lambda: self.db.persist_detail_lines(entry_id, entry.lines),
                    f"Storing lines of entry {entry.reference}",
                )
            except (StoreError, ConflictError, NotFoundError) as e:
                logger.error("Entry %s was not stored: %s", entry.reference, e)
                error = str(e)
                if entry_id is not None:
                    error = self._discard_header(entry_id, entry.reference, error)
                failures.append(PersistenceFailure(reference=entry.reference, error=error))
                continue
            persisted.append(entry_id)
        return persisted, failures

    def _discard_header(self, entry_id: str, reference: str, error: str) -> str:
        """Remove a header whose lines were not stored; returns the failure text."""
        try:
            self._call(lambda: self.db.delete_entry(entry_id), f"Removing entry {reference}")
        except (StoreError, NotFoundError) as e:
            logger.error("Header of entry %s (id %s) is left without lines: %s", reference, entry_id, e)
            return f"{error}; header {entry_id} could not be removed: {e}"
        return error
