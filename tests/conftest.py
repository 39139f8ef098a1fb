"""Shared pytest fixtures – a fake Google Ads gateway behind a real ToolContext."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from gads_mcp.config import Settings
from gads_mcp.context import ToolContext


@pytest.fixture
def settings() -> Settings:
    """Fully configured settings that ignore any local .env file."""
    return Settings(
        _env_file=None,
        google_ads_developer_token="dev-token",
        google_ads_client_id="client-id",
        google_ads_client_secret="client-secret",
        google_ads_refresh_token="refresh-token",
        google_ads_login_customer_id="999-999-9999",
        google_ads_default_customer_id="123-456-7890",
    )


@pytest.fixture
def gateway() -> AsyncMock:
    """Stand-in for GoogleAdsGateway; search returns no rows unless told otherwise."""
    fake = AsyncMock()
    fake.search.return_value = []
    fake.mutate.return_value = {"results": [], "partial_failures": []}
    return fake


@pytest.fixture
def context(settings, gateway) -> ToolContext:
    return ToolContext(settings=settings, gateway=gateway)


@pytest.fixture
def account_rows() -> list[dict]:
    """customer_client rows as the gateway returns them."""
    return [
        {
            "customer_client": {
                "id": "1111111111",
                "descriptive_name": "Shop EU",
                "manager": False,
                "currency_code": "EUR",
                "time_zone": "Europe/Berlin",
                "status": "ENABLED",
            }
        },
        {
            "customer_client": {
                "id": "2222222222",
                "descriptive_name": "Shop US",
                "manager": False,
                "currency_code": "USD",
                "time_zone": "America/New_York",
                "status": "ENABLED",
            }
        },
        {
            "customer_client": {
                "id": "9999999999",
                "descriptive_name": "Agency MCC",
                "manager": True,
                "currency_code": "USD",
                "time_zone": "America/New_York",
                "status": "ENABLED",
            }
        },
    ]
