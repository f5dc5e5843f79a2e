"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - mail_retry_attempts defaults to 1: notification retry is opt-in
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://storefront:storefront@db:5432/storefront"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_create_schema: bool = True

    # API
    cors_origins: list[str] = ["http://localhost:5173"]
    auth_enabled: bool = True

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100

    # Access codes: the default code is seeded once at startup if absent
    default_access_code: str = "333333"
    default_access_discount: float = 0.0
    default_access_assigned_to: str = "public"

    # Mail
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = False
    smtp_start_tls: bool = True
    smtp_timeout_seconds: int = 30
    mail_from_email: str = "noreply@storefront.local"
    mail_from_name: str = "Storefront"
    shop_name: str = "Storefront"
    operator_email: str = "orders@storefront.local"
    mail_retry_attempts: int = 1
    mail_retry_delay_ms: int = 1000

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
