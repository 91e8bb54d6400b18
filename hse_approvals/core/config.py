"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Firebase values are optional so the service can start
(and report itself unavailable) without a database.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_subject_collections() -> dict[str, str]:
    return {"recruitment": "recruit", "access": "access", "staff": "staff"}


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings have defaults; validate_firebase only checks that values
    which are set are well formed.
    """

    # App
    app_name: str = "hse-approvals"
    app_version: str = "1.0.0"
    debug: bool = False

    # Firebase Realtime Database: use key (env) or path (file) for credentials.
    firebase_database_url: str | None = None
    firebase_project_id: str | None = None
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None

    # Resolution
    store_read_timeout_seconds: float = 5.0
    # process type -> top-level node holding subjects and their approvals
    subject_collections: dict[str, str] = Field(
        default_factory=_default_subject_collections
    )

    # Request
    company_header_name: str = "X-Company-ID"
    auth_enabled: bool = True

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Redis Cache
    redis_enabled: bool = False
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    redis_max_connections: int = 10
    cache_ttl_flow_definitions: int = 300
    cache_ttl_org_levels: int = 900
    cache_ttl_function_names: int = 900

    # OpenTelemetry
    telemetry_enabled: bool = True
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_firebase(self) -> "Settings":
        """Validate Firebase and resolution settings when provided.

        - FIREBASE_DATABASE_URL must use https.
        - STORE_READ_TIMEOUT_SECONDS must be positive.
        """
        if self.firebase_database_url:
            url = self.firebase_database_url.rstrip("/")
            if not url.startswith("https://"):
                raise ValueError(
                    "FIREBASE_DATABASE_URL must be an https:// URL, "
                    f"got: {self.firebase_database_url!r}"
                )
            self.firebase_database_url = url
        if self.store_read_timeout_seconds <= 0:
            raise ValueError("STORE_READ_TIMEOUT_SECONDS must be greater than 0")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
