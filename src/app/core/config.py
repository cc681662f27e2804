from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Project Hours Service"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True

    # Database
    database_url: str
    database_migrations_url: str | None = None  # Falls back to database_url
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full
    database_statement_cache_size: int = 100

    # Shutdown
    shutdown_grace_period: int = 30

    # Temporal
    temporal_host: str = "localhost:7233"
    temporal_namespace: str = "default"
    temporal_queue_prefix: str = "projects"

    # Expiration sweep (Temporal cron workflow)
    expiration_schedule: str | None = "0 * * * *"  # Hourly; None disables the cron workflow
    expiration_workflow_id: str = "project-expiration-sweep"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    # Email (Resend)
    resend_api_key: str | None = None  # If not set, emails are logged but not sent
    email_from: str = "noreply@example.com"
    email_send_timeout_seconds: int = 10
    project_notification_recipients: list[str] = []

    # Project lifecycle & hour budget
    reason_min_length: int = 3
    project_initial_status: str = "Pending"
    project_auto_activate_roles: list[str] = ["manager", "admin"]
    near_deadline_days: int = 7
    project_code_start: int = 100001
    project_lock_timeout_ms: int = 5000

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Validate CORS origins - reject wildcards when credentials are used."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    @field_validator("project_initial_status")
    @classmethod
    def validate_initial_status(cls, v: str) -> str:
        """Only Pending and Active are valid starting states."""
        if v not in ("Pending", "Active"):
            raise ValueError("PROJECT_INITIAL_STATUS must be 'Pending' or 'Active'")
        return v

    @field_validator("reason_min_length")
    @classmethod
    def validate_reason_min_length(cls, v: int) -> int:
        if v < 1:
            raise ValueError("REASON_MIN_LENGTH must be at least 1")
        return v

    @field_validator("project_auto_activate_roles")
    @classmethod
    def normalize_roles(cls, v: list[str]) -> list[str]:
        return [role.strip().lower() for role in v if role.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
