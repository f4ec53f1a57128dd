"""
Configuration Management for Comissio

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiSettings(BaseSettings):
    """Gemini LLM configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_key: str = Field(
        ...,
        description="Gemini API key"
    )
    model_name: str = Field(
        default="gemini-1.5-flash",
        description="Gemini model to use"
    )
    max_tokens: int = Field(
        default=1024,
        ge=100,
        le=8192,
        description="Maximum tokens in response"
    )
    temperature: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Model temperature (lower = more deterministic)"
    )


class StorageSettings(BaseSettings):
    """Local storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: str = Field(
        default=".comissio",
        description="Directory holding the serialized lists"
    )

    # Slot keys, one per entity list
    commissions_key: str = Field(
        default="comissio_commissions",
        description="Slot key for the commission list"
    )
    installments_key: str = Field(
        default="comissio_installments",
        description="Slot key for the installment list"
    )
    audit_log_filename: str = Field(
        default="audit.jsonl",
        description="Audit log file inside the data directory"
    )

    @field_validator("commissions_key", "installments_key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Slot keys become file names, so keep them simple."""
        v = v.strip()
        if not v or any(sep in v for sep in ("/", "\\", "..")):
            raise ValueError(f"Invalid storage key: {v!r}")
        return v

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir).expanduser()

    @property
    def audit_log_path(self) -> Path:
        return self.data_path / self.audit_log_filename


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

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Intake form
    allowed_installment_counts: str = Field(
        default="1,2,3,4,5,6,12,18,24",
        description="Comma-separated list of installment counts offered by the form"
    )
    max_commission_value: float = Field(
        default=10000000.0,
        gt=0,
        description="Maximum reasonable commission value (for sanity checking)"
    )

    @property
    def installment_counts_list(self) -> list[int]:
        """Get allowed installment counts as a sorted list."""
        counts = {
            int(part.strip())
            for part in self.allowed_installment_counts.split(",")
            if part.strip()
        }
        return sorted(count for count in counts if count >= 1)


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

    # Note: These are loaded lazily to allow partial configuration

    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()

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

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.gemini
        results["gemini"] = True
    except Exception as e:
        results["gemini"] = False
        results["gemini_error"] = str(e)

    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
