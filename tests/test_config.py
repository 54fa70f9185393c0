"""
Tests for configuration loading and display formatting.
"""

import pytest
from datetime import date, datetime
from decimal import Decimal

from lifeledger.config import (
    InterpreterSettings,
    LedgerSettings,
    ReceiptSettings,
    get_settings,
    validate_all_settings,
)
from lifeledger.formatting import format_currency, format_date


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LEDGER_TREND_MONTHS", raising=False)
        monkeypatch.delenv("INTERPRETER_DEFAULT_ACCOUNT_ID", raising=False)
        assert LedgerSettings().trend_months == 6
        assert LedgerSettings().default_holiday_days == 20
        assert InterpreterSettings().default_account_id == 1

    def test_command_currency_matches_ledger_currency(self, monkeypatch):
        monkeypatch.delenv("INTERPRETER_DEFAULT_CURRENCY", raising=False)
        monkeypatch.delenv("LEDGER_DEFAULT_CURRENCY", raising=False)
        assert InterpreterSettings().default_currency == "USD"
        assert InterpreterSettings().default_currency == LedgerSettings().default_currency

    def test_env_prefixes(self, monkeypatch):
        monkeypatch.setenv("LEDGER_TREND_MONTHS", "12")
        monkeypatch.setenv("INTERPRETER_MIN_CONFIDENCE", "0.7")
        monkeypatch.setenv("RECEIPT_MAX_WIDTH", "1024")

        assert LedgerSettings().trend_months == 12
        assert InterpreterSettings().min_confidence == 0.7
        assert ReceiptSettings().max_width == 1024

    def test_invalid_value_rejected(self, monkeypatch):
        monkeypatch.setenv("INTERPRETER_MIN_CONFIDENCE", "1.5")
        with pytest.raises(ValueError):
            InterpreterSettings()

    def test_missing_vocabulary_file_warns(self):
        with pytest.warns(UserWarning, match="Vocabulary file not found"):
            InterpreterSettings(vocabulary_path="/nonexistent/vocabulary.json")

    def test_upload_size_in_bytes(self):
        assert ReceiptSettings(max_upload_size_mb=2).max_upload_size_bytes == 2 * 1024 * 1024

    def test_validate_all_settings(self, monkeypatch):
        get_settings.cache_clear()
        monkeypatch.setenv("LOG_LEVEL", "VERBOSE")
        try:
            results = validate_all_settings()
        finally:
            get_settings.cache_clear()

        assert results["ledger"] is True
        assert results["interpreter"] is True
        assert results["receipts"] is True
        assert results["app"] is False
        assert "app_error" in results


class TestFormatting:
    """Tests for display helpers."""

    def test_known_currencies(self):
        assert format_currency(Decimal("1250.5"), "USD") == "$1,250.50"
        assert format_currency(Decimal("100"), "INR") == "₹100.00"
        assert format_currency(Decimal("3.456"), "eur") == "€3.46"

    def test_negative_amount(self):
        assert format_currency(Decimal("-1250.5")) == "-$1,250.50"

    def test_unknown_currency_uses_code(self):
        assert format_currency(12, "CHF") == "CHF 12.00"

    def test_format_date(self):
        assert format_date(date(2024, 5, 3)) == "May 03, 2024"
        assert format_date(datetime(2024, 5, 3, 10, 0), "%Y-%m-%d") == "2024-05-03"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
