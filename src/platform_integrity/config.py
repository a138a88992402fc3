"""
Configuration management using Pydantic Settings.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PLATFORM_INTEGRITY_",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Platform Integrity"
    debug: bool = False
    log_level: str = "INFO"

    # API server
    host: str = "127.0.0.1"
    port: int = 8000

    # Firmware sources (Linux sysfs)
    efivars_dir: Path = Path("/sys/firmware/efi/efivars")
    acpi_tables_dir: Path = Path("/sys/firmware/acpi/tables")
    acpi_tables: list[str] = ["SLIC"]

    # Storage paths
    data_dir: Path = Path("./data")
    reports_dir: Path = Path("./reports")
    baseline_file: Path | None = None  # defaults to <data_dir>/integrity.txt

    def model_post_init(self, __context) -> None:
        """Resolve derived paths and ensure directories exist."""
        if self.baseline_file is None:
            self.baseline_file = self.data_dir / "integrity.txt"
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.reports_dir.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
