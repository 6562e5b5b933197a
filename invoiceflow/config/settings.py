"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from decimal import Decimal
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "invoiceflow.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class BackupSettings(BaseSettings):
    """Spreadsheet backup webhook configuration."""

    model_config = SettingsConfigDict(env_prefix="BACKUP_")

    script_url: str | None = None
    timeout: float = 10.0
    max_retries: int = 3  # attempts per record on connection errors
    retry_delay: float = 0.5
    sync_delay: float = 0.1  # seconds between records during a full sync


class ShopSettings(BaseSettings):
    """Shop profile printed on rendered documents."""

    model_config = SettingsConfigDict(env_prefix="SHOP_", frozen=True)

    name: str = "InvoiceFlow"
    tagline: str = "A Complete Business Management Solution"
    address: str = "Ground Floor, City Centre Mall, New Delhi - 110001"
    contact: str = "+91 98765 43210"
    currency: str = "Rs."


class LedgerSettings(BaseSettings):
    """Numbering and defaulting rules for the ledger."""

    model_config = SettingsConfigDict(env_prefix="LEDGER_")

    invoice_prefix: str = "INV-"
    invoice_number_width: int = 4
    purchase_prefix: str = "PUR-"

    # Defaults for products created implicitly by a purchase line
    default_min_stock: int = 10
    default_category: str = "Fertilizer"
    default_unit: str = "Bag"
    default_gst: Decimal = Decimal("5")

    # Reporting
    expiry_window_days: int = 30
    top_products: int = 5


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "InvoiceFlow"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    backup: BackupSettings = Field(default_factory=BackupSettings)
    shop: ShopSettings = Field(default_factory=ShopSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
