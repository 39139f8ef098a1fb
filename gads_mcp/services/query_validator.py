"""Structural lint for finished GAQL queries.

Catches the mistakes that otherwise only surface as opaque API errors:
unreplaced template tokens, a missing SELECT/FROM, and a handful of
field names that are easy to get wrong.  Findings are advisory; nothing
here raises.
"""

from __future__ import annotations

import logging
import re

from gads_mcp.schemas.common import ValidationResult

logger = logging.getLogger("gaql.validator")

PLACEHOLDER_PATTERN = re.compile(r"\{\{[A-Z_]+\}\}")

# (pattern, warning)
FIELD_NAME_ISSUES: list[tuple[re.Pattern[str], str]] = [
    (
        re.compile(r"conversionsvalue", re.IGNORECASE),
        "Should be conversions_value (with underscore)",
    ),
    (
        re.compile(r"conversion_value(?!s)", re.IGNORECASE),
        "Should be conversions_value (plural)",
    ),
    (
        re.compile(r"segments\.product_item_id.*FROM shopping_performance_view", re.IGNORECASE),
        "segments.product_item_id may not be available in shopping_performance_view",
    ),
]


def lint_query(query: str) -> ValidationResult:
    """Check *query* for unresolved tokens, basic clause structure and field footguns."""
    errors: list[str] = []
    warnings: list[str] = []

    leftovers = PLACEHOLDER_PATTERN.findall(query)
    if leftovers:
        errors.append(f"Unreplaced template variables: {', '.join(leftovers)}")

    if not query.strip().upper().startswith("SELECT"):
        errors.append("Query must start with SELECT")

    if "FROM" not in query.upper():
        errors.append("Query must include FROM clause")

    for pattern, note in FIELD_NAME_ISSUES:
        if pattern.search(query):
            warnings.append(note)

    if "keyword_view" in query and "segments.product_" in query:
        warnings.append("keyword_view and product segments may be incompatible")

    if "shopping_performance_view" in query and "ad_group_criterion.keyword" in query:
        warnings.append("shopping_performance_view and keyword fields may be incompatible")

    if "segments.date" in query and "WHERE" not in query:
        warnings.append(
            "Query uses segments.date but has no WHERE clause - may return too much data"
        )

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def log_validation(query: str, result: ValidationResult) -> None:
    """Emit lint findings for *query* to the log."""
    if result.errors:
        logger.error("GAQL validation errors: %s | query=%s", "; ".join(result.errors), query)
    for warning in result.warnings:
        logger.warning("GAQL validation warning: %s", warning)
