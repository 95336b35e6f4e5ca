"""Tests for the modelgen command line."""

import json
import sqlite3

import pytest
from typer.testing import CliRunner

from modelgen.config import settings
from modelgen.logging import RunLogger
from modelgen.logging import run_service
from modelgen.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_run_logger(run_logger, monkeypatch):
    """Route run logging to a temporary database."""
    monkeypatch.setattr(run_service, "_run_logger", run_logger)
    return run_logger


class TestGenerateCommand:
    """Test the generate command against a SQLite file."""

    def test_writes_model_files(self, shop_db, tmp_path, isolated_run_logger):
        """Test one file per table is written and the run is logged."""
        output = tmp_path / "models"
        result = runner.invoke(app, ["generate", "-e", "sqlite", "--storage", shop_db, "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in output.iterdir()) == ["Customers.js", "Orders.js"]
        orders = (output / "Orders.js").read_text(encoding="utf-8")
        assert "model: 'customers'" in orders
        assert "tableName: 'orders'" in orders

        runs = isolated_run_logger.query_runs()
        assert len(runs) == 1
        assert runs[0]["status"] == "success"
        assert runs[0]["models_count"] == 2

    def test_dry_run(self, shop_db, tmp_path):
        """Test dry run prints models and writes nothing."""
        output = tmp_path / "models"
        result = runner.invoke(app, ["generate", "-e", "sqlite", "--storage", shop_db, "-o", str(output), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "module.exports = {" in result.output
        assert not output.exists()

    def test_camel_case(self, shop_db, tmp_path):
        """Test camelCase names and field mappings."""
        output = tmp_path / "models"
        result = runner.invoke(app, ["generate", "-e", "sqlite", "--storage", shop_db, "-o", str(output), "-C"])

        assert result.exit_code == 0, result.output
        orders = (output / "Orders.js").read_text(encoding="utf-8")
        assert "customerId: {" in orders
        assert "field: 'customer_id'" in orders

    def test_table_filter(self, shop_db, tmp_path):
        """Test only the selected table is generated."""
        output = tmp_path / "models"
        result = runner.invoke(app, ["generate", "-e", "sqlite", "--storage", shop_db, "-o", str(output), "-t", "orders"])

        assert result.exit_code == 0, result.output
        assert [p.name for p in output.iterdir()] == ["Orders.js"]

    def test_no_matching_tables(self, shop_db, tmp_path):
        """Test an empty selection exits with an error."""
        result = runner.invoke(app, ["generate", "-e", "sqlite", "--storage", shop_db, "-t", "missing", "--dry-run"])

        assert result.exit_code == 1
        assert "No tables found" in result.output

    def test_missing_database_file(self, tmp_path, isolated_run_logger):
        """Test a missing database file fails and is logged as an error."""
        result = runner.invoke(app, ["generate", "-e", "sqlite", "--storage", str(tmp_path / "absent.sqlite")])

        assert result.exit_code == 1
        runs = isolated_run_logger.query_runs()
        assert runs[0]["status"] == "error"
        assert runs[0]["error_type"] == "DatabaseConnectionError"

    def test_unsupported_dialect(self):
        """Test an unknown engine is rejected before connecting."""
        result = runner.invoke(app, ["generate", "-e", "oracle", "-d", "shop"])

        assert result.exit_code == 1
        assert "Unsupported dialect" in result.output


class TestTimestampFields:
    """Test configurable timestamp column names."""

    @pytest.fixture
    def posts_db(self, tmp_path):
        """SQLite database using snake_case timestamp columns."""
        path = tmp_path / "blog.sqlite"
        conn = sqlite3.connect(str(path))
        conn.execute(
            "CREATE TABLE posts (id INTEGER PRIMARY KEY, title TEXT NOT NULL, "
            "created_at DATETIME NOT NULL, updated_at DATETIME, deleted_at DATETIME)"
        )
        conn.close()
        return str(path)

    def test_custom_names_are_managed(self, posts_db, isolated_run_logger):
        """Test renamed timestamp columns are left to the table option."""
        result = runner.invoke(app, [
            "generate", "-e", "sqlite", "--storage", posts_db, "--dry-run", "--timestamps",
            "--created-at", "created_at", "--updated-at", "updated_at", "--deleted-at", "deleted_at",
        ])

        assert result.exit_code == 0, result.output
        assert "title: {" in result.output
        assert "created_at: {" not in result.output
        assert "updated_at: {" not in result.output
        assert "deleted_at: {" not in result.output
        run = isolated_run_logger.query_runs()[0]
        assert json.loads(run["arguments"])["timestamp_fields"] == ["created_at", "updated_at", "deleted_at"]

    def test_custom_created_name_gets_default(self, posts_db):
        """Test the configured created name receives the current time default."""
        result = runner.invoke(app, [
            "generate", "-e", "sqlite", "--storage", posts_db, "--dry-run", "--created-at", "created_at",
        ])

        assert result.exit_code == 0, result.output
        assert "defaultValue: Sequelize.literal('NOW()')" in result.output

    def test_empty_name_disables_field(self, shop_db):
        """Test an empty name stops a column being treated as a timestamp."""
        result = runner.invoke(app, [
            "generate", "-e", "sqlite", "--storage", shop_db, "--dry-run", "--timestamps",
            "--created-at", "", "-t", "customers",
        ])

        assert result.exit_code == 0, result.output
        assert "createdAt: {" in result.output
        assert "updatedAt: {" not in result.output

    def test_names_from_settings(self, posts_db, monkeypatch):
        """Test configured names apply when no option is given."""
        monkeypatch.setattr(settings, "created_at_field", "created_at")
        monkeypatch.setattr(settings, "updated_at_field", "updated_at")
        result = runner.invoke(app, ["generate", "-e", "sqlite", "--storage", posts_db, "--dry-run", "--timestamps"])

        assert result.exit_code == 0, result.output
        assert "created_at: {" not in result.output
        assert "deleted_at: {" in result.output


class TestTablesCommand:
    """Test table listing."""

    def test_lists_tables(self, shop_db):
        result = runner.invoke(app, ["tables", "-e", "sqlite", "--storage", shop_db])

        assert result.exit_code == 0, result.output
        assert "customers" in result.output
        assert "orders" in result.output


class TestRunsCommands:
    """Test run log inspection."""

    def test_no_runs(self):
        result = runner.invoke(app, ["runs", "list"])

        assert result.exit_code == 0
        assert "No runs" in result.output

    def test_show_run(self, shop_db, tmp_path, isolated_run_logger):
        """Test a recorded run can be shown."""
        runner.invoke(app, ["generate", "-e", "sqlite", "--storage", shop_db, "-o", str(tmp_path / "models")])
        run_id = isolated_run_logger.query_runs()[0]["run_id"]

        listed = runner.invoke(app, ["runs", "list"])
        shown = runner.invoke(app, ["runs", "show", run_id])

        assert listed.exit_code == 0
        assert shown.exit_code == 0
        assert f"Run {run_id}" in shown.output
        assert "wrote" in shown.output

    def test_show_unknown_run(self):
        result = runner.invoke(app, ["runs", "show", "nope"])

        assert result.exit_code == 1
        assert "Run not found" in result.output

    def test_disabled_run_log(self, tmp_path, monkeypatch):
        """Test listing fails when run logging is off."""
        monkeypatch.setattr(run_service, "_run_logger", RunLogger(db_path=str(tmp_path / "off.db"), enabled=False))
        result = runner.invoke(app, ["runs", "list"])

        assert result.exit_code == 1
        assert "disabled" in result.output


class TestConfigCommand:
    """Test configuration display."""

    def test_config(self):
        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert "Current Configuration" in result.output
