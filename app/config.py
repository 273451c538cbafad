"""Application configuration."""

from functools import lru_cache
from typing import Any

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_parse_none_str="null",
    )

    # Application
    app_name: str = Field(default="Gatekeeper API", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8080, alias="PORT")
    reload: bool = Field(default=False, alias="RELOAD")

    # Firebase
    project_id: str | None = Field(default=None, alias="PROJECT_ID")
    firebase_credentials_path: str | None = Field(
        default=None,
        alias="FIREBASE_CREDENTIALS_PATH",
        description="Path to Firebase service account JSON file",
    )
    firebase_config_json: str | None = Field(
        default=None,
        alias="FIREBASE_CONFIG_JSON",
        description="Raw JSON string of the Firebase service account",
    )

    # Visit token secret
    secret_key: SecretStr | None = Field(
        default=None,
        alias="SECRET_KEY",
        description="Shared secret used to derive visit tokens",
    )

    # Date/time policy
    timezone: str = Field(
        default="UTC",
        alias="TIMEZONE",
        description="Civil timezone used for every naive date/time",
    )

    # Upstream calls
    upstream_timeout_seconds: float = Field(default=10.0, gt=0, alias="UPSTREAM_TIMEOUT_SECONDS")
    report_concurrency: int = Field(default=8, ge=1, alias="REPORT_CONCURRENCY")

    # CORS
    cors_origins_str: str = Field(default="*", alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")

    @property
    def cors_origins(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")

    @property
    def has_secret_key(self) -> bool:
        """Check whether a non-empty token secret is configured."""
        return bool(self.secret_key and self.secret_key.get_secret_value())

    def startup_summary(self) -> dict[str, Any]:
        """
        Build a loggable view of the configuration.

        Secrets are reduced to booleans.
        """
        return {
            "environment": self.environment,
            "version": self.app_version,
            "project_id": self.project_id,
            "port": self.port,
            "timezone": self.timezone,
            "upstream_timeout_seconds": self.upstream_timeout_seconds,
            "report_concurrency": self.report_concurrency,
            "secret_key_configured": self.has_secret_key,
            "firebase_credentials": (
                "json"
                if self.firebase_config_json
                else "file"
                if self.firebase_credentials_path
                else "default"
            ),
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()  # type: ignore[call-arg]


# Global settings instance
settings = get_settings()
