"""
Configuration Management for BudgetPulse

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see where data lives and which limits apply,
and ensures configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local persistence configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGETPULSE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path.home() / ".budgetpulse",
        description="Directory holding the ledger and audit files"
    )
    ledger_filename: str = Field(
        default="ledger.json",
        description="Name of the JSON document holding all records"
    )
    audit_filename: str = Field(
        default="audit.jsonl",
        description="Name of the append-only audit log"
    )
    audit_enabled: bool = Field(
        default=True,
        description="Persist audit events next to the ledger"
    )

    @field_validator("ledger_filename", "audit_filename")
    @classmethod
    def validate_filename(cls, v: str) -> str:
        """Filenames must not smuggle in a directory."""
        if Path(v).name != v:
            raise ValueError(f"Expected a bare filename, got {v!r}")
        return v

    @property
    def ledger_path(self) -> Path:
        return self.data_dir / self.ledger_filename

    @property
    def audit_path(self) -> Path:
        return self.data_dir / self.audit_filename


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGETPULSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug logging"
    )

    # Presentation
    language: str = Field(
        default="en",
        pattern="^(en|fr|es|pt)$",
        description="Interface language"
    )
    is_premium: bool = Field(
        default=False,
        description="Unlock premium features"
    )
    max_free_savings_goals: int = Field(
        default=2,
        ge=0,
        description="How many savings goals a free user may create"
    )

    # Reporting windows
    upcoming_window_days: int = Field(
        default=7,
        ge=1,
        le=60,
        description="How far ahead a payment counts as upcoming"
    )
    trend_days: int = Field(
        default=30,
        ge=1,
        le=366,
        description="Length of the daily spending trend"
    )
    trend_months: int = Field(
        default=6,
        ge=1,
        le=24,
        description="Length of the monthly spending trend"
    )

    # Budget alerts
    budget_alert_thresholds: str = Field(
        default="75,90,100",
        description="Comma-separated percentages that trigger a budget alert"
    )

    # Validation thresholds
    max_expense_amount: float = Field(
        default=100000.0,
        gt=0,
        description="Maximum reasonable single expense (for sanity checking)"
    )
    future_date_tolerance_days: int = Field(
        default=0,
        ge=0,
        description="How many days in the future a record date can be"
    )

    @property
    def alert_thresholds_list(self) -> list[int]:
        """Get alert thresholds as a sorted list."""
        return sorted(
            int(part.strip())
            for part in self.budget_alert_thresholds.split(",")
            if part.strip()
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
    def storage(self) -> StorageSettings:
        return StorageSettings()

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

    Returns a dict of {setting_name: is_valid}, plus "<name>_error"
    entries describing any failure. Useful for startup checks.
    """
    results = {}
    settings = get_settings()

    for name in ("storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
