"""Tests for the Typer CLI."""

import pytest
from typer.testing import CliRunner

from budgetbuddy.presentation.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_ocr_key(monkeypatch):
    monkeypatch.delenv("OCR_SPACE_API_KEY", raising=False)


class TestCurrencyCommands:
    def test_list(self):
        result = runner.invoke(app, ["currency", "list"])

        assert result.exit_code == 0
        assert "PHP, EUR, USD, GBP, CAD, CHF, JPY, AUD" in result.output

    def test_identity_conversion(self):
        result = runner.invoke(app, ["currency", "convert", "12.5", "usd", "USD"])

        assert result.exit_code == 0
        assert "12.5 USD = 12.50 USD" in result.output

    def test_unsupported_code_leaves_amount(self):
        result = runner.invoke(app, ["currency", "convert", "100", "XXX", "EUR"])

        assert result.exit_code == 0
        assert "100 XXX = 100.00 EUR" in result.output

    def test_invalid_amount(self):
        result = runner.invoke(app, ["currency", "convert", "lots", "USD", "EUR"])

        assert result.exit_code != 0


class TestDbCommands:
    def test_init_creates_database(self, tmp_path):
        result = runner.invoke(app, ["db", "init"])

        assert result.exit_code == 0
        assert "Database initialized" in result.output
        assert (tmp_path / "budgetbuddy.db").exists()


class TestReceiptCommands:
    def test_scan_requires_ocr_key(self):
        result = runner.invoke(app, ["receipt", "scan", "https://example.com/r.jpg"])

        assert result.exit_code == 1
        assert "OCR_SPACE_API_KEY" in result.output

    def test_no_args_shows_help(self):
        result = runner.invoke(app, ["receipt"])

        assert "scan" in result.output
