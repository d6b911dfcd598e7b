"""Integration readiness report."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from journalsynth.database.base import Database
from journalsynth.domain.entities import BatchLimits


@dataclass(frozen=True)
class IntegrationStatus:
    """How prepared a company's registry is for an integration run."""

    company_id: str
    total_entities: int
    entities_with_account: int
    active_entities: int
    coverage_percentage: Decimal
    defaults_configured: bool
    has_default_accounts: bool
    has_tax_accounts: bool
    has_counterparty_accounts: bool
    limits: BatchLimits

    @property
    def ready_for_processing(self) -> bool:
        return self.defaults_configured and self.entities_with_account > 0


class IntegrationStatusService:
    """Service for reporting integration readiness."""

    def __init__(self, db: Database, limits: Optional[BatchLimits] = None):
        """Initialize status service.

        Args:
            db: Database instance
            limits: Effective batch limits to report
        """
        self.db = db
        self.limits = limits or BatchLimits()

    def get_status(self, company_id: str) -> IntegrationStatus:
        """Summarize the registry and configuration of a company.

        An entity counts as having an account when it has a general account
        or at least one document-type override.
        """
        mappings = self.db.list_entity_mappings(company_id)
        defaults = self.db.get_central_defaults(company_id)

        total = len(mappings)
        with_account = sum(1 for m in mappings if m.account is not None or m.document_type_accounts)
        active = sum(1 for m in mappings if m.is_active)
        coverage = (
            (Decimal(with_account) * 100 / Decimal(total)).quantize(Decimal("0.01"))
            if total
            else Decimal("0.00")
        )

        return IntegrationStatus(
            company_id=company_id,
            total_entities=total,
            entities_with_account=with_account,
            active_entities=active,
            coverage_percentage=coverage,
            defaults_configured=defaults is not None,
            has_default_accounts=defaults is not None
            and bool(defaults.default_expense.code and defaults.default_income.code),
            has_tax_accounts=defaults is not None and bool(defaults.input_tax.code and defaults.output_tax.code),
            has_counterparty_accounts=defaults is not None
            and bool(defaults.payables.code and defaults.receivables.code),
            limits=self.limits,
        )
