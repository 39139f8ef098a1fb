"""Success envelopes and error normalization for tool results.

Errors reach the tool handlers in many shapes: plain strings, Python
exceptions, ``GoogleAdsApiError`` with an ``errors`` array, or loosely
structured mappings with a ``failures`` array whose entries nest their own
``errors``.  ``describe_error`` tags the shape first and then runs the one
extractor that understands it, so every failure yields exactly one
human-readable message.  ``format_error`` then classifies that message and
raises the matching ``ToolCallError``.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Callable, Mapping, NoReturn, Sequence

from gads_mcp.errors import (
    InvalidToolParams,
    RemoteAuthFailure,
    RemoteGeneric,
    RemoteRateLimit,
)
from gads_mcp.schemas.common import ToolResponse

logger = logging.getLogger("mcp.tools")

RATE_LIMIT_MESSAGE = "Google Ads API rate limit exceeded. Please try again in a few moments."
AUTH_FAILURE_MESSAGE = "Authentication failed. Please check your Google Ads credentials."


# ---------------------------------------------------------------------------
# Success
# ---------------------------------------------------------------------------


def format_success(summary: str, data: Any, metadata: Mapping[str, Any] | None = None) -> dict:
    """Wrap a tool result in the standard success envelope.

    ``metadata.rowCount`` defaults to ``len(data)`` for list results; any
    key in *metadata* overrides the defaults.
    """
    meta: dict[str, Any] = {"warnings": []}
    if isinstance(data, (list, tuple)):
        meta["rowCount"] = len(data)
    meta.update(metadata or {})
    return ToolResponse(summary=summary, data=data, metadata=meta).model_dump()


# ---------------------------------------------------------------------------
# Error shapes
# ---------------------------------------------------------------------------


class ErrorShape(str, Enum):
    STRING = "string"
    MESSAGE = "message"
    DETAILS = "details"
    FAILURES = "failures"
    ERRORS = "errors"
    OPAQUE = "opaque"


def _field(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)


def _message_of(value: Any) -> Any:
    message = _field(value, "message")
    if not message and isinstance(value, BaseException) and value.args:
        message = str(value)
    return message


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _to_json(value: Any) -> str:
    return json.dumps(value, default=str)


def classify_error_shape(error: Any) -> ErrorShape:
    """Decide which extractor understands *error*."""
    if isinstance(error, str):
        return ErrorShape.STRING
    if _message_of(error):
        return ErrorShape.MESSAGE
    if isinstance(_field(error, "details"), str) and _field(error, "details"):
        return ErrorShape.DETAILS
    if _is_sequence(_field(error, "failures")):
        return ErrorShape.FAILURES
    if _is_sequence(_field(error, "errors")):
        return ErrorShape.ERRORS
    return ErrorShape.OPAQUE


def _entry_message(entry: Any) -> str:
    if isinstance(entry, str):
        return entry
    return _field(entry, "message") or _field(entry, "error_message") or _to_json(entry)


def _failure_message(failure: Any) -> str:
    if isinstance(failure, str):
        return failure
    direct = _field(failure, "message") or _field(failure, "error_message")
    if direct:
        return direct
    nested = _field(failure, "errors")
    if _is_sequence(nested):
        return "; ".join(_entry_message(e) for e in nested)
    return _to_json(failure)


def _from_failures(error: Any) -> str:
    joined = "; ".join(m for m in map(_failure_message, _field(error, "failures")) if m)
    return joined or "Google Ads API error (see failures array)"


def _from_errors(error: Any) -> str:
    joined = "; ".join(m for m in map(_entry_message, _field(error, "errors")) if m)
    return joined or "Google Ads API error (see errors array)"


def _own_properties(error: Any) -> dict[str, Any]:
    if isinstance(error, Mapping):
        return dict(error)
    props = dict(getattr(error, "__dict__", {}))
    if isinstance(error, BaseException) and error.args:
        props.setdefault("args", list(error.args))
    return props


def _serialize_property(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)):
        return value
    if _is_sequence(value):
        return [_to_json(v) if isinstance(v, (Mapping, list, tuple)) else v for v in value]
    return _to_json(value)


def _string_conversion(error: Any) -> str:
    if error is None or isinstance(error, Mapping):
        return ""
    try:
        text = str(error)
    except Exception:
        return ""
    if text == object.__repr__(error):
        return ""
    return text


def _from_opaque(error: Any) -> str:
    text = _string_conversion(error)
    if text:
        return text

    serialized: dict[str, Any] = {}
    for name, value in _own_properties(error).items():
        try:
            serialized[name] = None if value is None else _serialize_property(value)
        except (TypeError, ValueError, RecursionError) as exc:
            serialized[name] = f"[Could not serialize: {exc}]"
    if serialized:
        return json.dumps(serialized, indent=2, default=str)
    return ""


_EXTRACTORS: dict[ErrorShape, Callable[[Any], str]] = {
    ErrorShape.STRING: lambda e: e,
    ErrorShape.MESSAGE: lambda e: str(_message_of(e)),
    ErrorShape.DETAILS: lambda e: _field(e, "details"),
    ErrorShape.FAILURES: _from_failures,
    ErrorShape.ERRORS: _from_errors,
    ErrorShape.OPAQUE: _from_opaque,
}


def describe_error(error: Any) -> str:
    """Reduce any raised value to a single human-readable message."""
    message = _EXTRACTORS[classify_error_shape(error)](error)
    if not message or message in ("{}", "[object Object]"):
        message = (
            f"Unknown error type: {type(error).__name__} - check server logs for details"
        )
    return message


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def _error_name(error: Any) -> str:
    name = _field(error, "name") if isinstance(error, Mapping) else None
    if name is None and isinstance(error, BaseException):
        name = type(error).__name__
    if not name or name in ("Error", "Exception"):
        return ""
    return f"{name}: "


def format_error(error: Any) -> NoReturn:
    """Normalize *error* and raise the classified ``ToolCallError``.

    Classification sniffs the normalized message (case-sensitive):

    * ``required`` / ``Invalid`` -> ``InvalidToolParams`` (message kept)
    * ``RATE_LIMIT`` / ``quota`` -> ``RemoteRateLimit`` (fixed message)
    * ``AUTHENTICATION`` / ``credentials`` / ``auth`` -> ``RemoteAuthFailure`` (fixed message)
    * anything else -> ``RemoteGeneric`` with name, message and code
    """
    message = describe_error(error)

    if "required" in message or "Invalid" in message:
        raise InvalidToolParams(message)

    if "RATE_LIMIT" in message or "quota" in message:
        logger.warning("Google Ads rate limit: %s", message)
        raise RemoteRateLimit(RATE_LIMIT_MESSAGE)

    if "AUTHENTICATION" in message or "credentials" in message or "auth" in message:
        logger.warning("Google Ads authentication failure: %s", message)
        raise RemoteAuthFailure(AUTH_FAILURE_MESSAGE)

    code = _field(error, "code") if not isinstance(error, str) else None
    suffix = f" (code: {code})" if code else ""
    raise RemoteGeneric(f"{_error_name(error)}{message}{suffix}")
