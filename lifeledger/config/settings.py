"""
Configuration Management for Life Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Values that used to be magic literals (default account, default category,
the currency of voice-entered amounts) are explicit settings so they can be
injected into the command interpreter and the transaction-creation path.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Ledger defaults used when seeding and summarising data."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        extra="ignore"
    )

    default_currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="Currency used for seeded accounts and settings"
    )
    default_holiday_days: int = Field(
        default=20,
        ge=0,
        le=366,
        description="Yearly holiday allowance used when no balance exists yet"
    )
    trend_months: int = Field(
        default=6,
        ge=1,
        le=60,
        description="Number of calendar months in the income/expense trend"
    )
    default_alert_threshold: float = Field(
        default=80.0,
        ge=0.0,
        description="Budget alert threshold (percent) for new budgets"
    )


class InterpreterSettings(BaseSettings):
    """Command interpreter configuration."""

    model_config = SettingsConfigDict(
        env_prefix="INTERPRETER_",
        extra="ignore"
    )

    default_account_id: int = Field(
        default=1,
        ge=1,
        description="Account used for transactions created from commands"
    )
    default_category_id: int = Field(
        default=1,
        ge=1,
        description="Category used when no category of the right type exists"
    )
    default_currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="Currency tagged on amounts parsed from commands, same as the seeded accounts"
    )
    min_confidence: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Commands below this confidence are rejected"
    )
    vocabulary_path: Optional[str] = Field(
        default=None,
        description="Optional JSON file overriding the keyword vocabulary"
    )

    @field_validator('vocabulary_path')
    @classmethod
    def validate_vocabulary_path(cls, v: Optional[str]) -> Optional[str]:
        """Warn if the vocabulary file doesn't exist (the built-in one is used)."""
        if v and not Path(v).exists():
            import warnings
            warnings.warn(
                f"Vocabulary file not found at {v}. "
                "The built-in keyword vocabulary will be used."
            )
        return v


class ReceiptSettings(BaseSettings):
    """Receipt image compression configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RECEIPT_",
        extra="ignore"
    )

    max_width: int = Field(
        default=800,
        ge=50,
        le=4000,
        description="Receipts wider than this are scaled down"
    )
    jpeg_quality: int = Field(
        default=70,
        ge=1,
        le=95,
        description="JPEG quality used when re-encoding receipts"
    )
    max_upload_size_mb: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum receipt upload size in MB"
    )

    @property
    def max_upload_size_bytes(self) -> int:
        """Get max upload size in bytes."""
        return self.max_upload_size_mb * 1024 * 1024


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for structured logs"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def interpreter(self) -> InterpreterSettings:
        return InterpreterSettings()

    @property
    def receipts(self) -> ReceiptSettings:
        return ReceiptSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with an extra
    "<name>_error" entry for every section that failed to load.
    """
    results = {}
    settings = get_settings()

    for name in ("ledger", "interpreter", "receipts", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
