"""Tests for entity account resolution."""

from journalsynth.domain.entities import Direction
from journalsynth.domain.resolver import EntityAccountResolver, index_mappings


def test_entity_account(mappings, defaults, make_transaction):
    resolver = EntityAccountResolver(mappings, defaults, Direction.PURCHASE)
    txn = make_transaction(tax_id="77654321-K")

    assert resolver.operational_account(txn).code == "5.1.1.001"
    assert not resolver.uses_default(txn)


def test_document_type_override_wins(mappings, defaults, make_transaction):
    resolver = EntityAccountResolver(mappings, defaults, Direction.PURCHASE)

    invoice = make_transaction(document_type="33")
    credit_note = make_transaction(document_type="61")

    assert resolver.operational_account(invoice).code == "5.1.2.010"
    assert resolver.operational_account(credit_note).code == "5.1.9.001"


def test_unmapped_entity_falls_back_to_direction_default(mappings, defaults, make_transaction):
    txn = make_transaction(tax_id="11111111-1")

    purchase = EntityAccountResolver(mappings, defaults, Direction.PURCHASE)
    sale = EntityAccountResolver(mappings, defaults, Direction.SALE)

    assert purchase.operational_account(txn).code == "5.1.1.001"
    assert sale.operational_account(txn).code == "4.1.1.001"
    assert purchase.uses_default(txn)


def test_missing_registry_treated_as_empty(defaults, make_transaction):
    resolver = EntityAccountResolver(None, defaults, Direction.PURCHASE)
    txn = make_transaction()

    assert resolver.mapping_for(txn) is None
    assert resolver.operational_account(txn).code == "5.1.1.001"
    assert resolver.cost_center(txn) is None


def test_counterparty_is_direction_global(mappings, defaults, make_transaction):
    purchase = EntityAccountResolver(mappings, defaults, Direction.PURCHASE)
    sale = EntityAccountResolver(mappings, defaults, Direction.SALE)

    assert purchase.counterparty_account().code == "2.1.1.001"
    assert purchase.tax_account().code == "1.1.4.001"
    assert sale.counterparty_account().code == "1.1.3.001"
    assert sale.tax_account().code == "2.1.4.001"


def test_cost_center(mappings, defaults, make_transaction):
    resolver = EntityAccountResolver(mappings, defaults, Direction.PURCHASE)

    assert resolver.cost_center(make_transaction()) == "ADM"
    assert resolver.cost_center(make_transaction(tax_id="77654321-K")) is None


def test_index_mappings(mappings):
    indexed = index_mappings(list(mappings.values()))
    assert set(indexed) == {"76123456-7", "77654321-K", "96555444-3"}
