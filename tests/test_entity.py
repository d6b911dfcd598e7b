"""Tests for entity registry and central account commands."""

from journalsynth.cli.main import cli


def _invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args, "--company", "acme"])


def test_entity_set(cli_runner, temp_db, seeded_chart):
    result = _invoke(
        cli_runner, temp_db, "entity", "set", "76.123.456-7", "Acme Supplies", "--account", "5.1.2.010",
        "--cost-center", "ADM",
    )

    assert result.exit_code == 0
    assert "Saved entity 76123456-7 'Acme Supplies'" in result.output
    assert "No account set" not in result.output


def test_entity_set_without_account(cli_runner, temp_db, seeded_chart):
    result = _invoke(cli_runner, temp_db, "entity", "set", "11111111-1", "Walk-in")

    assert result.exit_code == 0
    assert "No account set; the entity will post to the company default account" in result.output


def test_entity_set_unknown_account(cli_runner, temp_db, seeded_chart):
    result = _invoke(cli_runner, temp_db, "entity", "set", "11111111-1", "Walk-in", "--account", "9.9.9")

    assert result.exit_code == 1
    assert "Error: Account 9.9.9 is not in the chart of accounts" in result.output


def test_entity_override(cli_runner, temp_db, sample_entities):
    result = _invoke(cli_runner, temp_db, "entity", "override", "77654321-K", "credit_note", "5.1.9.001")

    assert result.exit_code == 0
    assert "Documents of type 61 (credit_note) now post to 5.1.9.001" in result.output


def test_entity_override_unknown_entity(cli_runner, temp_db, seeded_chart):
    result = _invoke(cli_runner, temp_db, "entity", "override", "12345678-5", "61", "5.1.9.001")

    assert result.exit_code == 1
    assert "Error: Entity 12345678-5 not found" in result.output


def test_entity_list(cli_runner, temp_db, sample_entities):
    sample_entities.set_entity("11111111-1", "Walk-in", is_active=False)

    result = _invoke(cli_runner, temp_db, "entity", "list")

    assert result.exit_code == 0
    assert "5.1.2.010 [cc ADM]" in result.output
    assert "type 61 -> 5.1.9.001 Purchase Returns" in result.output
    assert "(default) [inactive]" in result.output


def test_entity_list_empty(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "entity", "list")

    assert result.exit_code == 0
    assert "No entities found" in result.output


def test_defaults_show_unconfigured(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "defaults", "show")

    assert result.exit_code == 0
    assert "built-in defaults will be used" in result.output


def test_defaults_set_and_show(cli_runner, temp_db, seeded_chart):
    result = _invoke(cli_runner, temp_db, "defaults", "set", "--payables", "2.1.1.001", "--expense", "5.1.2.010")

    assert result.exit_code == 0
    assert "Central accounts saved:" in result.output
    assert "Default expense  5.1.2.010    Office Supplies" in result.output

    shown = _invoke(cli_runner, temp_db, "defaults", "show")
    assert "Default expense  5.1.2.010" in shown.output
    assert "Input VAT        1.1.4.001" in shown.output


def test_defaults_set_unknown_account(cli_runner, temp_db, seeded_chart):
    result = _invoke(cli_runner, temp_db, "defaults", "set", "--input-tax", "9.9.9")

    assert result.exit_code == 1
    assert "Error:" in result.output
