"""Configuration management for keyward."""

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

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="development", description="Deployment environment name")

    # Store Configuration
    seed_demo_data: bool = Field(default=True, description="Load the demo accounts, keys and tasks on startup")
    default_supervisor_id: str = Field(
        default="sv-default", description="Account ID of the seeded supervisor that cannot be deleted"
    )
    record_implicit_returns: bool = Field(
        default=False,
        description="Write return entries to the key history when an account deletion releases its keys",
    )

    # Reports
    report_name_prefix: str = Field(default="Key History Report", description="Default name for generated reports")


# Application Constants
class Constants:
    """Application-wide constants."""

    # HTTP Status Codes
    HTTP_UNAUTHORIZED: int = 401
    HTTP_FORBIDDEN: int = 403
    HTTP_NOT_FOUND: int = 404
    HTTP_CONFLICT: int = 409
    HTTP_UNPROCESSABLE: int = 422
    HTTP_SERVER_ERROR: int = 500

    # ID generation for records created at runtime (seeded records use fixed IDs)
    ID_COUNTER_START: int = 1000

    # Date formats
    DATE_FORMAT: str = "%Y-%m-%d"


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
