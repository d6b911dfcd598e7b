"""Shared pytest fixtures for journalsynth tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
from pathlib import Path
import pytest

from journalsynth.database.factories import create_sqlite_database
from journalsynth.domain.entities import (
    AccountRef,
    CentralDefaults,
    ChartAccount,
    DocumentType,
    EntityAccountMapping,
    Transaction,
)
from journalsynth.domain.registry import RegistryService

COMPANY = "acme"

CHART = [
    ("1.1.3.001", "Domestic Customers"),
    ("1.1.4.001", "VAT Input Credit"),
    ("2.1.1.001", "Domestic Suppliers"),
    ("2.1.4.001", "VAT Output Debit"),
    ("4.1.1.001", "Operating Income"),
    ("4.1.2.001", "Service Income"),
    ("5.1.1.001", "Operating Expenses"),
    ("5.1.2.010", "Office Supplies"),
    ("5.1.9.001", "Purchase Returns"),
]


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def company_id():
    """Identifier of the test company."""
    return COMPANY


@pytest.fixture
def registry(temp_db):
    """Create a RegistryService for the test company."""
    return RegistryService(temp_db, COMPANY)


@pytest.fixture
def seeded_chart(registry):
    """Register the chart of accounts and central accounts of the test company."""
    for code, name in CHART:
        registry.add_account(code, name)
    registry.set_defaults(
        default_expense="5.1.1.001",
        default_income="4.1.1.001",
        input_tax="1.1.4.001",
        output_tax="2.1.4.001",
        payables="2.1.1.001",
        receivables="1.1.3.001",
    )
    return registry


@pytest.fixture
def sample_entities(seeded_chart):
    """Register a few suppliers and a customer."""
    seeded_chart.set_entity("76.123.456-7", "Acme Supplies", account_code="5.1.2.010", cost_center="ADM")
    seeded_chart.set_entity("77654321-K", "Beta Services", account_code="5.1.1.001")
    seeded_chart.set_entity("96555444-3", "Gamma Retail", account_code="4.1.2.001")
    seeded_chart.set_override("76123456-7", "61", "5.1.9.001")
    return seeded_chart


@pytest.fixture
def chart():
    """Active chart accounts matching the seeded chart."""
    return [ChartAccount(code, name) for code, name in CHART]


@pytest.fixture
def defaults():
    """Central accounts matching the seeded chart."""
    return CentralDefaults.fallback()


@pytest.fixture
def mappings():
    """Entity mappings keyed by tax id, matching sample_entities."""
    acme = EntityAccountMapping(
        entity_tax_id="76123456-7",
        entity_name="Acme Supplies",
        account=AccountRef("5.1.2.010", "Office Supplies"),
        document_type_accounts={DocumentType.CREDIT_NOTE: AccountRef("5.1.9.001", "Purchase Returns")},
        cost_center="ADM",
    )
    beta = EntityAccountMapping(
        entity_tax_id="77654321-K",
        entity_name="Beta Services",
        account=AccountRef("5.1.1.001", "Operating Expenses"),
    )
    gamma = EntityAccountMapping(
        entity_tax_id="96555444-3",
        entity_name="Gamma Retail",
        account=AccountRef("4.1.2.001", "Service Income"),
    )
    return {m.entity_tax_id: m for m in (acme, beta, gamma)}


@pytest.fixture
def make_transaction():
    """Build transactions with sensible defaults; total defaults to net + tax."""

    def _make(
        tax_id="76123456-7",
        net="100000",
        tax="19000",
        total=None,
        document_type="33",
        number="1001",
        name="Acme Supplies",
    ):
        net = Decimal(net)
        tax = Decimal(tax)
        return Transaction(
            entity_tax_id=tax_id,
            entity_name=name,
            document_type=document_type,
            document_number=number,
            net_amount=net,
            tax_amount=tax,
            total_amount=Decimal(total) if total is not None else net + tax,
            emission_date=date(2024, 3, 15),
        )

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
