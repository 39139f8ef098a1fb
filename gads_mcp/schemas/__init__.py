"""Pydantic response schemas."""

from gads_mcp.schemas.common import (
    DateRange,
    ErrorDetail,
    ToolErrorResponse,
    ToolResponse,
    ValidationResult,
)
from gads_mcp.schemas.account import AccountRecord
from gads_mcp.schemas.mutation import MutationOutcome, OperationFailure, OperationSuccess

__all__ = [
    "DateRange",
    "ErrorDetail",
    "ToolErrorResponse",
    "ToolResponse",
    "ValidationResult",
    "AccountRecord",
    "MutationOutcome",
    "OperationFailure",
    "OperationSuccess",
]
