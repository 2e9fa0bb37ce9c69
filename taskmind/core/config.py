"""Configuration management for taskmind."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # SQLite Configuration
    sqlite_db_path: str = Field(default="./data/taskmind.db", description="Path to the SQLite database file")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")

    # Service Metadata
    service_name: str = Field(default="taskmind", description="Service name reported to Logfire")
    environment: str = Field(default="development", description="Deployment environment name")

    # Calendar Configuration
    timezone: str = Field(
        default="UTC",
        description="IANA timezone used for calendar-day comparisons (e.g. 'Europe/Berlin')",
    )

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value

    @property
    def is_production(self) -> bool:
        """Whether the service runs in production."""
        return self.environment.lower() == "production"


# Application Constants
class Constants:
    """Application-wide constants."""

    # HTTP Status Codes
    HTTP_OK: int = 200
    HTTP_BAD_REQUEST: int = 400
    HTTP_NOT_FOUND: int = 404
    HTTP_SERVER_ERROR: int = 500

    # Recurrence
    WEEKLY_RESET_DAYS: int = 7

    # Completion details
    MIN_COMPLETION_QUALITY: int = 1
    MAX_COMPLETION_QUALITY: int = 5

    # Pagination Defaults
    DEFAULT_PER_PAGE_LIMIT: int = 500  # Page size when reading every matching row

    # Request Headers
    OWNER_ID_HEADER: str = "X-User-Id"


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
