"""Abstract database interface.

Implementations are the collaborator store of an integration run: the
chart of accounts, the entity registry and central configuration are
read at the start of a run, and accepted entries are written at the end.
I/O failures must surface as ``StoreError``; a duplicate entry reference
as ``ConflictError``.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from journalsynth.domain.entities import (
    AccountRef,
    CentralDefaults,
    ChartAccount,
    DocumentType,
    EntityAccountMapping,
    JournalDetailLine,
    JournalEntry,
    StoredEntry,
)


class Database(ABC):
    """Abstract database interface for journalsynth."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Chart of accounts
    @abstractmethod
    def upsert_account(self, company_id: str, code: str, name: str, is_active: bool = True) -> None:
        """Create or update a chart-of-accounts record."""
        pass

    @abstractmethod
    def list_accounts(self, company_id: str) -> list[ChartAccount]:
        """List all chart accounts of a company, active or not."""
        pass

    @abstractmethod
    def get_active_accounts(self, company_id: str) -> list[ChartAccount]:
        """List active chart accounts of a company."""
        pass

    # Entity registry
    @abstractmethod
    def upsert_entity_mapping(
        self,
        company_id: str,
        entity_tax_id: str,
        entity_name: str,
        account: Optional[AccountRef] = None,
        cost_center: Optional[str] = None,
        is_active: bool = True,
    ) -> None:
        """Create or update an entity mapping."""
        pass

    @abstractmethod
    def set_document_type_account(
        self, company_id: str, entity_tax_id: str, document_type: DocumentType, account: AccountRef
    ) -> None:
        """Set a per-document-type override on an existing entity mapping."""
        pass

    @abstractmethod
    def get_entity_mappings(self, company_id: str, entity_tax_ids: Sequence[str]) -> list[EntityAccountMapping]:
        """Get mappings for the given normalized tax ids."""
        pass

    @abstractmethod
    def list_entity_mappings(self, company_id: str) -> list[EntityAccountMapping]:
        """List every mapping registered for a company."""
        pass

    # Central configuration
    @abstractmethod
    def set_central_defaults(self, company_id: str, defaults: CentralDefaults) -> None:
        """Store company central accounts."""
        pass

    @abstractmethod
    def get_central_defaults(self, company_id: str) -> Optional[CentralDefaults]:
        """Get company central accounts, or None if not configured."""
        pass

    # Journal entries
    @abstractmethod
    def persist_entry(self, company_id: str, entry: JournalEntry) -> str:
        """Store an entry header. Returns the durable entry ID."""
        pass

    @abstractmethod
    def persist_detail_lines(self, entry_id: str, lines: Sequence[JournalDetailLine]) -> None:
        """Store the detail lines of a stored entry."""
        pass

    @abstractmethod
    def delete_entry(self, entry_id: str) -> None:
        """Remove a stored entry and its detail lines."""
        pass

    @abstractmethod
    def list_entries(self, company_id: str, period: Optional[str] = None) -> list[StoredEntry]:
        """List stored entries, optionally for one period."""
        pass

    @abstractmethod
    def get_entry_lines(self, entry_id: str) -> list[JournalDetailLine]:
        """Get stored detail lines of an entry in line order."""
        pass
