"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    storage_backend: Literal["memory", "database"] = Field(
        default="memory",
        description="Entity store backend: volatile in-process memory or a SQLAlchemy database",
    )
    database_url: str = Field(
        default="sqlite+aiosqlite:///./lighttower.db",
        description="Async SQLAlchemy connection string (used when storage_backend=database)",
    )
    seed_on_startup: bool = Field(
        default=True,
        description="Load the sample admin user, towers and activity logs into an empty store on startup",
    )

    # Towers
    enforce_reference_locations: bool = Field(
        default=True,
        description="Reject registrations whose constituency/ward is not in the Nairobi reference list",
    )
    activity_default_limit: int = Field(
        default=10,
        description="Number of activity logs returned when no valid limit is supplied",
        gt=0,
    )

    # Maintenance tasks
    task_due_days: int = Field(
        default=7,
        description="Days until a newly created maintenance task is due",
        gt=0,
    )

    # QR codes
    qr_service_url: str = Field(
        default="https://api.qrserver.com/v1/create-qr-code/",
        description="External QR rendering endpoint; the tower code is passed as the data parameter",
    )
    qr_default_size: int = Field(
        default=150,
        description="Default QR image edge length in pixels",
        gt=0,
        le=1000,
    )

    @field_validator("qr_service_url")
    @classmethod
    def validate_qr_service_url(cls, v: str) -> str:
        if not v.startswith(("https://", "http://")):
            msg = "qr_service_url must be an http(s) URL"
            raise ValueError(msg)
        return v

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )
    log_json: bool = Field(
        default=False,
        description="Emit stderr logs as one JSON object per line",
    )

    # CORS
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins (must be explicitly configured)",
    )

    # Environment
    environment: str = Field(
        default="production",
        description="Deployment environment name (e.g. production, dev, staging)",
    )

    # API
    api_prefix: str = Field(
        default="/api",
        description="API route prefix",
    )
    rate_limit_per_minute: int = Field(
        default=200,
        description="Maximum API requests per minute per IP address",
        gt=0,
    )
    trusted_proxy_headers: str = Field(
        default="CF-Connecting-IP,X-Forwarded-For,X-Real-IP",
        description="Comma-separated list of HTTP headers to check for real client IP, in priority order",
    )

    @property
    def trusted_proxy_header_list(self) -> list[str]:
        """Parse trusted proxy headers string into a list."""
        if not self.trusted_proxy_headers.strip():
            return []
        return [h.strip() for h in self.trusted_proxy_headers.split(",") if h.strip()]

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        if not self.cors_origins.strip():
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
