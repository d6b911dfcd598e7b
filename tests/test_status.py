"""Tests for the integration readiness report."""

from decimal import Decimal

from journalsynth.cli.main import cli
from journalsynth.domain.entities import BatchLimits
from journalsynth.domain.status import IntegrationStatusService


def test_empty_company_not_ready(temp_db, company_id):
    report = IntegrationStatusService(temp_db).get_status(company_id)

    assert report.total_entities == 0
    assert report.coverage_percentage == Decimal("0.00")
    assert not report.defaults_configured
    assert not report.has_tax_accounts
    assert not report.ready_for_processing


def test_configured_company_ready(temp_db, sample_entities, company_id):
    sample_entities.set_entity("11111111-1", "Walk-in")
    limits = BatchLimits(max_transactions=10)

    report = IntegrationStatusService(temp_db, limits=limits).get_status(company_id)

    assert report.total_entities == 4
    assert report.entities_with_account == 3
    assert report.active_entities == 4
    assert report.coverage_percentage == Decimal("75.00")
    assert report.defaults_configured
    assert report.has_default_accounts
    assert report.has_tax_accounts
    assert report.has_counterparty_accounts
    assert report.limits.max_transactions == 10
    assert report.ready_for_processing


def test_status_command(cli_runner, temp_db, sample_entities, company_id):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "status", "--company", company_id, "--max-transactions", "40"],
    )

    assert result.exit_code == 0
    assert "Entities registered:      3" in result.output
    assert "40 transactions" in result.output
    assert "Ready for processing:     yes" in result.output


def test_status_command_not_ready(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "status", "--company", "nobody"])

    assert result.exit_code == 0
    assert "not configured" in result.output
    assert "Ready for processing:     no" in result.output
