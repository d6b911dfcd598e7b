"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the store schema can change
without touching the domain services.
"""

from journalsynth.domain import entities as domain
from journalsynth.database.models import (
    ChartAccount as ORMChartAccount,
    EntityMapping as ORMEntityMapping,
    CentralConfig as ORMCentralConfig,
    JournalEntry as ORMJournalEntry,
    JournalEntryDetail as ORMJournalEntryDetail,
)


def chart_account_to_domain(orm_account: ORMChartAccount) -> domain.ChartAccount:
    """Convert SQLAlchemy ChartAccount model to domain ChartAccount entity."""
    return domain.ChartAccount(
        code=orm_account.code,
        name=orm_account.name,
        is_active=orm_account.is_active,
    )


def entity_mapping_to_domain(orm_mapping: ORMEntityMapping) -> domain.EntityAccountMapping:
    """Convert SQLAlchemy EntityMapping model to domain EntityAccountMapping entity."""
    account = None
    if orm_mapping.account_code:
        account = domain.AccountRef(
            code=orm_mapping.account_code,
            name=orm_mapping.account_name or orm_mapping.account_code,
        )
    overrides = {
        domain.DocumentType.parse(override.document_type): domain.AccountRef(
            code=override.account_code, name=override.account_name
        )
        for override in orm_mapping.document_type_accounts
    }
    return domain.EntityAccountMapping(
        entity_tax_id=orm_mapping.entity_tax_id,
        entity_name=orm_mapping.entity_name,
        account=account,
        document_type_accounts=overrides,
        cost_center=orm_mapping.cost_center,
        is_active=orm_mapping.is_active,
    )


def central_config_to_domain(orm_config: ORMCentralConfig) -> domain.CentralDefaults:
    """Convert SQLAlchemy CentralConfig model to domain CentralDefaults entity."""
    return domain.CentralDefaults(
        default_expense=domain.AccountRef(orm_config.default_expense_code, orm_config.default_expense_name),
        default_income=domain.AccountRef(orm_config.default_income_code, orm_config.default_income_name),
        input_tax=domain.AccountRef(orm_config.input_tax_code, orm_config.input_tax_name),
        output_tax=domain.AccountRef(orm_config.output_tax_code, orm_config.output_tax_name),
        payables=domain.AccountRef(orm_config.payables_code, orm_config.payables_name),
        receivables=domain.AccountRef(orm_config.receivables_code, orm_config.receivables_name),
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.StoredEntry:
    """Convert SQLAlchemy JournalEntry model to domain StoredEntry entity."""
    return domain.StoredEntry(
        id=str(orm_entry.id),
        company_id=orm_entry.company_id,
        entry_date=orm_entry.entry_date,
        description=orm_entry.description,
        reference=orm_entry.reference,
        direction=domain.Direction(orm_entry.direction),
        batch_number=orm_entry.batch_number,
        total_batches=orm_entry.total_batches,
        transaction_count=orm_entry.transaction_count,
        period=orm_entry.period,
    )


def detail_line_to_domain(orm_detail: ORMJournalEntryDetail) -> domain.JournalDetailLine:
    """Convert SQLAlchemy JournalEntryDetail model to domain JournalDetailLine entity."""
    return domain.JournalDetailLine(
        account_code=orm_detail.account_code,
        account_name=orm_detail.account_name,
        description=orm_detail.description,
        debit_amount=orm_detail.debit_amount,
        credit_amount=orm_detail.credit_amount,
        entity_tax_id=orm_detail.entity_tax_id,
        entity_name=orm_detail.entity_name,
        document_reference=orm_detail.document_reference,
        document_type=(
            domain.DocumentType.parse(orm_detail.document_type) if orm_detail.document_type else None
        ),
        cost_center=orm_detail.cost_center,
    )
