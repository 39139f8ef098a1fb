"""Error taxonomy for tool input validation and classified tool failures.

Two families live here:

* ``AdsToolError`` subclasses are raised locally, before any remote call,
  when tool parameters are missing or malformed.
* ``ToolCallError`` subclasses are the classified, outward-facing errors
  produced by ``response_format.format_error``.  They are ``McpError``
  instances so the MCP runtime can surface them as protocol errors.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable

from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, ErrorData


# ---------------------------------------------------------------------------
# Local validation errors
# ---------------------------------------------------------------------------


class AdsToolError(Exception):
    """Base class for parameter errors detected before calling Google Ads."""

    error_code = "INVALID_INPUT"


class MissingRequired(AdsToolError):
    error_code = "MISSING_REQUIRED"

    def __init__(self, fields: Iterable[str], message: str | None = None) -> None:
        self.fields = list(fields)
        if message is None:
            plural = "s" if len(self.fields) > 1 else ""
            message = f"Missing required parameter{plural}: {', '.join(self.fields)}"
        super().__init__(message)


class InvalidEnum(AdsToolError):
    error_code = "INVALID_ENUM"

    def __init__(self, field_label: str, value: Any, allowed: Iterable[Any]) -> None:
        self.field_label = field_label
        self.value = value
        self.allowed = list(allowed)
        super().__init__(
            f"Invalid {field_label}: {value}. "
            f"Allowed values: {', '.join(str(a) for a in self.allowed)}"
        )


class InvalidParameter(AdsToolError):
    """A parameter is present but has the wrong type or shape."""

    error_code = "INVALID_PARAMETER"


class InvalidRange(AdsToolError):
    error_code = "INVALID_RANGE"


class MissingCustomBounds(AdsToolError):
    error_code = "MISSING_CUSTOM_BOUNDS"

    def __init__(self) -> None:
        super().__init__("start_date and end_date required for CUSTOM range")


class MutationBlocked(AdsToolError):
    error_code = "MUTATION_BLOCKED"

    def __init__(self, keyword: str) -> None:
        self.keyword = keyword
        super().__init__(
            f'Mutation operations not allowed in query tool. Query contains: "{keyword}". '
            "Use the mutate tool for write operations."
        )


class QueryTooPermissive(AdsToolError):
    error_code = "QUERY_NOT_SELECT"

    def __init__(self) -> None:
        super().__init__(
            "Query must start with SELECT. This tool only supports read operations. "
            "Use the mutate tool for write operations."
        )


class UnresolvedPlaceholders(AdsToolError):
    error_code = "UNRESOLVED_PLACEHOLDERS"

    def __init__(self, template_name: str, tokens: Iterable[str]) -> None:
        self.template_name = template_name
        self.tokens = sorted(tokens)
        super().__init__(
            f"Invalid query template {template_name}: unresolved placeholders "
            f"{', '.join(self.tokens)}"
        )


# ---------------------------------------------------------------------------
# Remote errors
# ---------------------------------------------------------------------------


class GoogleAdsApiError(Exception):
    """Normalized failure from the Google Ads API.

    Carries no exception message of its own; the human-readable text lives
    in the ``errors`` array, mirroring the shape of ``GoogleAdsFailure``.
    """

    def __init__(
        self,
        errors: list[dict[str, Any]],
        code: str | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__()
        self.errors = errors
        self.code = code
        self.request_id = request_id


# ---------------------------------------------------------------------------
# Classified outward errors
# ---------------------------------------------------------------------------


class ErrorKind(str, Enum):
    INVALID_PARAMS = "INVALID_PARAMS"
    RATE_LIMIT = "RATE_LIMIT"
    AUTH_FAILURE = "AUTH_FAILURE"
    INTERNAL = "INTERNAL_ERROR"


class ToolCallError(McpError):
    """A tool failure after classification, ready to be shown to the caller."""

    kind: ErrorKind = ErrorKind.INTERNAL
    rpc_code: int = INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(
            ErrorData(code=self.rpc_code, message=message, data={"kind": self.kind.value})
        )
        self.message = message


class InvalidToolParams(ToolCallError):
    kind = ErrorKind.INVALID_PARAMS
    rpc_code = INVALID_PARAMS


class RemoteRateLimit(ToolCallError):
    kind = ErrorKind.RATE_LIMIT


class RemoteAuthFailure(ToolCallError):
    kind = ErrorKind.AUTH_FAILURE


class RemoteGeneric(ToolCallError):
    kind = ErrorKind.INTERNAL
