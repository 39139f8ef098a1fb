"""Shared response envelopes and small value types."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DateRange(BaseModel):
    """Concrete reporting window, both ends formatted ``YYYY-MM-DD``."""

    model_config = ConfigDict(frozen=True)

    start: str
    end: str

    @model_validator(mode="after")
    def _ordered(self) -> "DateRange":
        if self.start > self.end:
            raise ValueError(f"start_date {self.start} is after end_date {self.end}")
        return self


class ValidationResult(BaseModel):
    """Findings from linting a GAQL query."""

    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    """Structured error returned when a tool fails."""

    error_code: str
    message: str
    hint: str | None = None


class ToolResponse(BaseModel):
    """Standard envelope for every successful tool result."""

    success: bool = True
    summary: str
    data: Any = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class ToolErrorResponse(BaseModel):
    """Envelope returned to the MCP client when a tool call fails."""

    tool: str
    success: bool = False
    error: ErrorDetail
