"""Tests for the integrate command."""

import csv

from journalsynth.cli.main import cli


def _integrate(cli_runner, temp_db, path, *args):
    return cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "integrate",
            str(path),
            "--company",
            "acme",
            "--period",
            "2024-03",
            *args,
        ],
    )


def test_preview(cli_runner, temp_db, sample_entities, fixtures_dir):
    result = _integrate(cli_runner, temp_db, fixtures_dir / "purchases.csv")

    assert result.exit_code == 0
    assert "RCV-PURCHASE-2024-03-L1  2024-03-31  RCV Purchases 2024-03 - Batch 1/1" in result.output
    assert "Transactions: 3" in result.output
    assert "Batches: 1/1 balanced" in result.output
    assert "Stored: 0" in result.output
    assert "Total amount: 190,400.00" in result.output
    assert temp_db.list_entries("acme") == []


def test_save(cli_runner, temp_db, sample_entities, fixtures_dir):
    result = _integrate(cli_runner, temp_db, fixtures_dir / "purchases.csv", "--save")

    assert result.exit_code == 0
    assert "Stored: 1" in result.output
    assert [e.reference for e in temp_db.list_entries("acme")] == ["RCV-PURCHASE-2024-03-L1"]


def test_rerun_is_not_stored_twice(cli_runner, temp_db, sample_entities, fixtures_dir):
    _integrate(cli_runner, temp_db, fixtures_dir / "purchases.csv", "--save")

    result = _integrate(cli_runner, temp_db, fixtures_dir / "purchases.csv", "--save")

    assert result.exit_code == 1
    assert "Not stored: RCV-PURCHASE-2024-03-L1" in result.output
    assert len(temp_db.list_entries("acme")) == 1


def test_batches_follow_limits(cli_runner, temp_db, sample_entities, fixtures_dir):
    result = _integrate(cli_runner, temp_db, fixtures_dir / "purchases.csv", "--max-transactions", "1")

    assert result.exit_code == 0
    assert "Batches: 3/3 balanced" in result.output
    assert "RCV-PURCHASE-2024-03-L3" in result.output


def test_limits_from_environment(cli_runner, temp_db, sample_entities, fixtures_dir, monkeypatch):
    monkeypatch.setenv("JOURNALSYNTH_MAX_TRANSACTIONS", "2")

    result = _integrate(cli_runner, temp_db, fixtures_dir / "purchases.csv")

    assert "Batches: 2/2 balanced" in result.output


def test_invalid_limits(cli_runner, temp_db, sample_entities, fixtures_dir):
    result = _integrate(cli_runner, temp_db, fixtures_dir / "purchases.csv", "--max-lines", "0")

    assert result.exit_code == 1
    assert "Error: max_lines must be at least 1" in result.output


def test_invalid_max_amount(cli_runner, temp_db, sample_entities, fixtures_dir):
    result = _integrate(cli_runner, temp_db, fixtures_dir / "purchases.csv", "--max-amount", "lots")

    assert result.exit_code == 2
    assert "is not a number" in result.output


def test_non_finite_max_amount(cli_runner, temp_db, sample_entities, fixtures_dir):
    result = _integrate(cli_runner, temp_db, fixtures_dir / "purchases.csv", "--max-amount", "NaN")

    assert result.exit_code == 1
    assert "Error: max_amount must be a finite number" in result.output


def test_blocked_run(cli_runner, temp_db, sample_entities, fixtures_dir):
    result = _integrate(cli_runner, temp_db, fixtures_dir / "unmapped_purchases.csv")

    assert result.exit_code == 1
    assert "Integration blocked." in result.output
    assert "Entities not in the registry: 11111111-1" in result.output


def test_forced_run(cli_runner, temp_db, sample_entities, fixtures_dir):
    result = _integrate(cli_runner, temp_db, fixtures_dir / "unmapped_purchases.csv", "--force")

    assert result.exit_code == 0
    assert "Warning:" in result.output
    assert "5.1.1.001" in result.output


def test_sales_register(cli_runner, temp_db, sample_entities, fixtures_dir):
    result = _integrate(
        cli_runner, temp_db, fixtures_dir / "sales.csv", "--direction", "sale", "--entry-date", "2024-04-01"
    )

    assert result.exit_code == 0
    assert "RCV-SALE-2024-03-L1  2024-04-01  RCV Sales 2024-03" in result.output
    assert "Total amount: 297,500.00" in result.output


def test_skipped_rows_reported(cli_runner, temp_db, sample_entities, fixtures_dir):
    result = _integrate(cli_runner, temp_db, fixtures_dir / "bad_rows.csv")

    assert result.exit_code == 0
    assert "Skipped Row 3:" in result.output
    assert "Transactions: 1" in result.output


def test_no_transactions(cli_runner, temp_db, sample_entities, tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("entity_tax_id,document_type,document_number,total_amount\n", encoding="utf-8")

    result = _integrate(cli_runner, temp_db, path)

    assert result.exit_code == 1
    assert "No transactions could be read from the file" in result.output


def test_export(cli_runner, temp_db, sample_entities, fixtures_dir, tmp_path):
    export_path = tmp_path / "lines.csv"

    result = _integrate(cli_runner, temp_db, fixtures_dir / "purchases.csv", "--detailed", "--export", str(export_path))

    assert result.exit_code == 0
    with open(export_path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert f"Exported {len(rows)} lines to {export_path}" in result.output
    assert {row["document_reference"] for row in rows if row["document_reference"]} == {"1001", "2001", "1002"}
