"""Account-related Pydantic schemas."""

from __future__ import annotations

from pydantic import BaseModel


class AccountRecord(BaseModel):
    """One accessible Google Ads account under the root customer."""

    id: str
    name: str | None = None
    is_manager: bool = False
    currency: str | None = None
    timezone: str | None = None
    status: str | None = None
