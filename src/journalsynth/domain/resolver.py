"""Entity account resolution.

The operational side of an entry (expense for purchases, income for sales)
follows the entity: a per-document-type override first, then the entity's
general account, then the company default for the direction.

The counterparty side (payables / receivables) is never entity-specific.
Entities classify expense and income; they do not own a sub-ledger, so
every transaction of a direction posts to the same consolidated account.
"""

from typing import Mapping, Optional

from journalsynth.domain.entities import (
    AccountRef,
    CentralDefaults,
    Direction,
    EntityAccountMapping,
    Transaction,
)


class EntityAccountResolver:
    """Resolve target ledger accounts for register transactions."""

    def __init__(
        self,
        mappings: Optional[Mapping[str, EntityAccountMapping]],
        defaults: CentralDefaults,
        direction: Direction,
    ):
        """Initialize resolver.

        Args:
            mappings: Entity mappings keyed by normalized tax id, or None
                when the registry has nothing for this company
            defaults: Company central accounts
            direction: Register side being integrated
        """
        self.mappings = mappings or {}
        self.defaults = defaults
        self.direction = direction

    def mapping_for(self, transaction: Transaction) -> Optional[EntityAccountMapping]:
        return self.mappings.get(transaction.entity_tax_id)

    def operational_account(self, transaction: Transaction) -> AccountRef:
        """Account for the net amount of a transaction."""
        mapping = self.mapping_for(transaction)
        if mapping is not None:
            override = mapping.override_for(transaction.document_type)
            if override is not None:
                return override
            if mapping.account is not None:
                return mapping.account
        return self.defaults.operational_default(self.direction)

    def uses_default(self, transaction: Transaction) -> bool:
        """True when the operational account falls back to the company default."""
        mapping = self.mapping_for(transaction)
        if mapping is None:
            return True
        return mapping.override_for(transaction.document_type) is None and mapping.account is None

    def tax_account(self) -> AccountRef:
        return self.defaults.tax_account(self.direction)

    def counterparty_account(self) -> AccountRef:
        return self.defaults.counterparty_account(self.direction)

    def cost_center(self, transaction: Transaction) -> Optional[str]:
        mapping = self.mapping_for(transaction)
        return mapping.cost_center if mapping is not None else None


def index_mappings(mappings: list[EntityAccountMapping]) -> dict[str, EntityAccountMapping]:
    """Key mappings by normalized tax id; later records win."""
    return {mapping.entity_tax_id: mapping for mapping in mappings}
