"""Runtime configuration.

Every setting comes from the environment (or a local ``.env`` file) through
pydantic-settings; field names map to upper-case variable names.
"""

import re

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SCHEMA_NAME = re.compile(r"^[a-z_][a-z0-9_]{0,62}$")


def _split_csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class Settings(BaseSettings):
    """Geo-targeting service settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        default="production",
        description="Deployment name reported by /health (production, staging, dev)",
    )

    # HTTP surface
    api_v1_prefix: str = Field(default="/api/v1", description="Mount point of the versioned routers")
    cors_origins: str = Field(
        default="",
        description="Comma-separated browser origins allowed to call the API with credentials",
    )
    cors_origin_regex: str = Field(default="", description="Regex alternative to cors_origins")
    rate_limit_per_minute: int = Field(
        default=200,
        description="Per-client request budget for /api routes",
        gt=0,
    )
    trusted_proxy_headers: str = Field(
        default="CF-Connecting-IP,X-Forwarded-For,X-Real-IP",
        description="Comma-separated headers carrying the real client address, highest priority first",
    )

    # Address index storage
    database_url: str = Field(
        default="sqlite+aiosqlite:///./geotarget.db",
        description="Async connection string for the address index database",
    )
    database_schema: str | None = Field(
        default=None,
        description="PostgreSQL schema to place on the search path (e.g. pr_42)",
    )

    # Sessions hold each browser's state whitelist
    session_secret_key: str = Field(
        min_length=32,
        description="Key that signs the session cookie (minimum 32 characters)",
    )
    session_max_age_seconds: int = Field(
        default=14 * 24 * 60 * 60,
        description="Session cookie lifetime in seconds",
        gt=0,
    )
    session_https_only: bool = Field(default=False, description="Send the session cookie over HTTPS only")

    # Location search
    default_country_code: str = Field(
        default="US",
        min_length=2,
        max_length=2,
        description="Country assumed when a request does not name one",
    )
    search_default_limit: int = Field(default=20, description="Typeahead results when no limit is given", gt=0)
    search_max_limit: int = Field(default=100, description="Largest typeahead limit a caller may ask for", gt=0)

    # Google Ads
    google_ads_api_base_url: str = Field(
        default="https://googleads.googleapis.com",
        description="Google Ads REST API base URL",
    )
    google_ads_api_version: str = Field(default="v22", description="Google Ads REST API version")
    google_ads_token_url: str = Field(
        default="https://oauth2.googleapis.com/token",
        description="OAuth endpoint that exchanges the refresh token for access tokens",
    )
    google_ads_developer_token: str | None = Field(default=None, description="Google Ads developer token")
    google_ads_client_id: str | None = Field(default=None, description="OAuth client ID")
    google_ads_client_secret: str | None = Field(default=None, description="OAuth client secret")
    google_ads_refresh_token: str | None = Field(
        default=None,
        description="OAuth refresh token for the connected Google Ads account",
    )
    google_ads_login_customer_id: str | None = Field(
        default=None,
        description="Manager account ID sent as login-customer-id",
    )
    google_ads_customer_id: str | None = Field(
        default=None,
        description="Customer ID used when a request does not supply one",
    )
    google_ads_timeout: float = Field(default=30.0, description="Google Ads request timeout in seconds", gt=0)

    # Logging
    log_level: str = Field(default="INFO", description="Minimum log level")
    log_dir: str | None = Field(
        default=None,
        description="When set, logs are also written to a daily-rotated file in this directory",
    )

    @field_validator("database_schema")
    @classmethod
    def validate_database_schema(cls, v: str | None) -> str | None:
        if v is not None and not _SCHEMA_NAME.match(v):
            msg = f"Invalid database_schema: must match {_SCHEMA_NAME.pattern}"
            raise ValueError(msg)
        return v

    @field_validator("google_ads_login_customer_id", "google_ads_customer_id")
    @classmethod
    def strip_customer_id_dashes(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.replace("-", "").strip() or None

    @property
    def cors_origin_list(self) -> list[str]:
        return _split_csv(self.cors_origins)

    @property
    def trusted_proxy_header_list(self) -> list[str]:
        return _split_csv(self.trusted_proxy_headers)

    @property
    def google_ads_configured(self) -> bool:
        """Whether every credential needed to call Google Ads is present."""
        return all(
            (
                self.google_ads_developer_token,
                self.google_ads_client_id,
                self.google_ads_client_secret,
                self.google_ads_refresh_token,
            )
        )


def get_settings() -> Settings:
    """Read settings from the environment."""
    return Settings()  # type: ignore[call-arg]
