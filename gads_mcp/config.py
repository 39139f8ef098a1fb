"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

REQUIRED_CREDENTIALS: dict[str, str] = {
    "google_ads_developer_token": "GOOGLE_ADS_DEVELOPER_TOKEN",
    "google_ads_client_id": "GOOGLE_ADS_CLIENT_ID",
    "google_ads_client_secret": "GOOGLE_ADS_CLIENT_SECRET",
    "google_ads_refresh_token": "GOOGLE_ADS_REFRESH_TOKEN",
}


class Settings(BaseSettings):
    """Central settings pulled from .env / environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Google Ads OAuth credentials
    google_ads_developer_token: str | None = None
    google_ads_client_id: str | None = None
    google_ads_client_secret: str | None = None
    google_ads_refresh_token: str | None = None

    # Account identifiers
    google_ads_login_customer_id: str | None = None
    """Manager (MCC) account used as the root for list_accounts and as login-customer-id."""

    google_ads_default_customer_id: str | None = None
    """Account used by query/mutate when the caller omits customer_id."""

    # App
    log_level: str = "INFO"

    # MCP
    mcp_server_name: str = "google-ads-mcp"
    mcp_server_version: str = "1.0.0"

    # SSE transport
    fastapi_host: str = "0.0.0.0"
    fastapi_port: int = 8000

    @field_validator("google_ads_login_customer_id", "google_ads_default_customer_id")
    @classmethod
    def _strip_dashes(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.replace("-", "").strip()
        return value or None

    def missing_credentials(self) -> list[str]:
        """Return the environment variable names of credentials that are not set."""
        return [env for field, env in REQUIRED_CREDENTIALS.items() if not getattr(self, field)]


settings = Settings()
