"""
Configuration management using pydantic-settings.

Loads configuration from environment variables (prefixed ``DAILYMED_``)
and an optional .env file.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Mapping files shipped with the package
PACKAGE_DATA_DIR = Path(__file__).parent / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DAILYMED_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -----------------
    # DailyMed API
    # -----------------
    base_url: str = Field(
        default="https://dailymed.nlm.nih.gov/dailymed/services/v2",
        description="DailyMed REST API base URL",
    )
    request_timeout: float = Field(
        default=30.0,
        description="Overall timeout for a single API request, in seconds",
    )
    user_agent: str = Field(
        default="MCP-DailyMed-Server/1.0.0",
        description="User-Agent header sent with every request",
    )
    max_api_page_size: int = Field(
        default=100,
        description="Largest page size the DailyMed API accepts",
    )
    default_pharmacologic_class_coding_system: str = Field(
        default="2.16.840.1.113883.6.345",
        description="Coding system used when searching SPLs by drug class code",
    )

    # -----------------
    # Mapping files
    # -----------------
    mappings_dir: Path = Field(
        default=PACKAGE_DATA_DIR,
        description="Directory holding the DailyMed mapping files",
    )
    pharmacologic_class_file: str = Field(
        default="pharmacologic_class_mappings.txt",
        description="SPL set id to pharmacologic class mapping file name",
    )
    rxnorm_file: str = Field(
        default="rxnorm_mappings.txt",
        description="SPL set id to RxNorm mapping file name",
    )

    # -----------------
    # Application
    # -----------------
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production",
    )

    @property
    def pharmacologic_class_path(self) -> Path:
        """Full path of the pharmacologic class mapping file."""
        return self.mappings_dir / self.pharmacologic_class_file

    @property
    def rxnorm_path(self) -> Path:
        """Full path of the RxNorm mapping file."""
        return self.mappings_dir / self.rxnorm_file


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


# Convenience access
settings = get_settings()
