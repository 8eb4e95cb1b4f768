"""
Configuration management for the audit behaviors.
Uses Pydantic Settings for environment variable handling and validation.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


TIMESTAMP_FORMATS = ("datetime", "unix")


class Settings(BaseSettings):
    """Library settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = Field(default="Logable", description="Name used in diagnostics")
    log_level: str = Field(default="INFO", description="Level applied by configure_logging()")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Format applied by configure_logging()",
    )

    # Database Configuration
    database_url: str = Field(default="sqlite:///:memory:", description="Default engine URL")
    database_echo: bool = Field(default=False, description="Log SQL statements")

    # Audit Behavior Defaults
    audit_timestamp_format: str = Field(default="datetime", description="'datetime' or 'unix'")
    audit_skip_update_on_clean: bool = Field(default=True)
    audit_preserve_non_empty_values: bool = Field(default=False)
    audit_replace_regular_delete: bool = Field(default=True)

    @field_validator("audit_timestamp_format", mode="before")
    @classmethod
    def validate_timestamp_format(cls, v):
        """Normalize and validate the timestamp format."""
        value = str(v).strip().lower()
        if value not in TIMESTAMP_FORMATS:
            raise ValueError(
                f"audit_timestamp_format must be one of {', '.join(TIMESTAMP_FORMATS)}, got {v!r}"
            )
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Upper-case the log level name."""
        return str(v).strip().upper()


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings
