"""
Configuration Management for the Expense Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The ledger has no required settings; every field has a default so a
fresh checkout runs with nothing configured.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from expense_ledger.models.entry import EntryCategory


class LedgerSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from EXPENSE_LEDGER_* environment variables and
    the .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Storage
    data_directory: Path = Field(
        default=Path("data"),
        description="Directory holding the persisted ledger slot"
    )
    storage_key: str = Field(
        default="expense.entries.v1",
        min_length=1,
        description="Name of the durable slot the ledger is stored under"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Level for the stdlib logger behind structlog"
    )
    audit_history_size: int = Field(
        default=500,
        ge=0,
        le=100000,
        description="How many recent audit events to keep in memory"
    )

    # Export
    export_filename_prefix: str = Field(
        default="expenses",
        min_length=1,
        description="Prefix for CSV export and backup filenames"
    )

    # Add form
    default_category: EntryCategory = Field(
        default=EntryCategory.FOOD,
        description="Category preselected on the add form"
    )

    @field_validator('data_directory', mode='before')
    @classmethod
    def expand_data_directory(cls, v) -> Path:
        """Expand user directories; creation happens when the slot writes."""
        return Path(v).expanduser()

    @field_validator('log_level')
    @classmethod
    def normalise_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def backup_filename(self) -> str:
        """Name offered for the full backup document."""
        return f"{self.export_filename_prefix}_backup.json"


@lru_cache()
def get_settings() -> LedgerSettings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return LedgerSettings()
