"""
Environment-driven settings.

Each concern reads its own prefixed variables (``STORAGE_POOL_SIZE``,
``LEDGER_TREND_WINDOW_DAYS``, ``API_PORT``, ...); the root settings also read
a ``.env`` file when present.
"""

from decimal import Decimal
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """SQLite database location and connection pool."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "inventory.db"

    pool_size: int = Field(default=5, ge=1)
    busy_timeout: int = Field(default=30000, ge=0, description="Milliseconds")

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class LedgerSettings(BaseSettings):
    """Stock classification thresholds and report row caps."""

    model_config = SettingsConfigDict(env_prefix="LEDGER_")

    # Stock counts as efficient above min_stock_level * efficiency_buffer
    efficiency_buffer: Decimal = Field(default=Decimal("1.2"), gt=0)

    top_movers_limit: int = 10
    critical_limit: int = 5
    turnover_limit: int = 8
    trend_window_days: int = Field(default=7, ge=1)

    activity_feed_limit: int = 10
    recent_activity_window: int = Field(default=50, ge=1)

    dashboard_stock_limit: int = 20
    dashboard_alert_limit: int = 5


class APISettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]
    slow_request_ms: float = 1000.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "inventory-ledger"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    storage: StorageSettings = Field(default_factory=StorageSettings, validate_default=True)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)
    api: APISettings = Field(default_factory=APISettings)

    @field_validator("storage")
    @classmethod
    def create_data_dir(cls, storage: StorageSettings) -> StorageSettings:
        storage.data_dir.mkdir(parents=True, exist_ok=True)
        return storage


_settings: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, built on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
