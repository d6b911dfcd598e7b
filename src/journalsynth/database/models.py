"""SQLAlchemy models for the journalsynth store."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class ChartAccount(Base):
    """Chart-of-accounts record."""

    __tablename__ = "chart_accounts"

    id = Column(Integer, primary_key=True)
    company_id = Column(String, nullable=False, index=True)
    code = Column(String, nullable=False)
    name = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("company_id", "code", name="uq_company_account_code"),)


class EntityMapping(Base):
    """Entity registry record mapping a tax id to a ledger account."""

    __tablename__ = "entity_mappings"

    id = Column(Integer, primary_key=True)
    company_id = Column(String, nullable=False, index=True)
    entity_tax_id = Column(String, nullable=False)
    entity_name = Column(String, nullable=False)
    account_code = Column(String, nullable=True)
    account_name = Column(String, nullable=True)
    cost_center = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("company_id", "entity_tax_id", name="uq_company_entity"),)

    # Relationships
    document_type_accounts = relationship(
        "DocumentTypeAccount", back_populates="mapping", cascade="all, delete-orphan"
    )


class DocumentTypeAccount(Base):
    """Per-document-type account override of an entity mapping."""

    __tablename__ = "document_type_accounts"

    id = Column(Integer, primary_key=True)
    mapping_id = Column(Integer, ForeignKey("entity_mappings.id"), nullable=False)
    document_type = Column(String, nullable=False)
    account_code = Column(String, nullable=False)
    account_name = Column(String, nullable=False)

    __table_args__ = (UniqueConstraint("mapping_id", "document_type", name="uq_mapping_document_type"),)

    # Relationships
    mapping = relationship("EntityMapping", back_populates="document_type_accounts")


class CentralConfig(Base):
    """Company central accounts for tax, counterparty and fallback postings."""

    __tablename__ = "central_configs"

    id = Column(Integer, primary_key=True)
    company_id = Column(String, unique=True, nullable=False)
    default_expense_code = Column(String, nullable=False)
    default_expense_name = Column(String, nullable=False)
    default_income_code = Column(String, nullable=False)
    default_income_name = Column(String, nullable=False)
    input_tax_code = Column(String, nullable=False)
    input_tax_name = Column(String, nullable=False)
    output_tax_code = Column(String, nullable=False)
    output_tax_name = Column(String, nullable=False)
    payables_code = Column(String, nullable=False)
    payables_name = Column(String, nullable=False)
    receivables_code = Column(String, nullable=False)
    receivables_name = Column(String, nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class JournalEntry(Base):
    """Stored journal entry header."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    company_id = Column(String, nullable=False, index=True)
    entry_date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    reference = Column(String, nullable=False)
    direction = Column(String, nullable=False)
    status = Column(String, default="draft", nullable=False)
    period = Column(String, nullable=False)
    batch_number = Column(Integer, nullable=False)
    total_batches = Column(Integer, nullable=False)
    part_number = Column(Integer, default=1, nullable=False)
    total_parts = Column(Integer, default=1, nullable=False)
    transaction_count = Column(Integer, nullable=False)
    total_amount = Column(Numeric(18, 2), nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # A re-run of the same period must not post twice
    __table_args__ = (UniqueConstraint("company_id", "reference", name="uq_company_reference"),)

    # Relationships
    details = relationship(
        "JournalEntryDetail",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="JournalEntryDetail.line_number",
    )


class JournalEntryDetail(Base):
    """Stored journal detail line."""

    __tablename__ = "journal_entry_details"

    id = Column(Integer, primary_key=True)
    entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False)
    line_number = Column(Integer, nullable=False)
    account_code = Column(String, nullable=False)
    account_name = Column(String, nullable=False)
    description = Column(String, nullable=False)
    debit_amount = Column(Numeric(18, 2), nullable=False)
    credit_amount = Column(Numeric(18, 2), nullable=False)
    entity_tax_id = Column(String, nullable=True)
    entity_name = Column(String, nullable=True)
    document_reference = Column(String, nullable=True)
    document_type = Column(String, nullable=True)
    cost_center = Column(String, nullable=True)

    # Relationships
    entry = relationship("JournalEntry", back_populates="details")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
