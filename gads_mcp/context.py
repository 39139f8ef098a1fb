"""Per-process dependencies handed to every tool handler."""

from __future__ import annotations

from dataclasses import dataclass

from gads_mcp.config import Settings
from gads_mcp.services.google_ads import GoogleAdsGateway


@dataclass(frozen=True)
class ToolContext:
    settings: Settings
    gateway: GoogleAdsGateway

    @classmethod
    def from_settings(cls, settings: Settings) -> "ToolContext":
        return cls(settings=settings, gateway=GoogleAdsGateway(settings))
