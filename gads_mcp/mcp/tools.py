"""MCP tool handlers – the bridge between MCP protocol and the Google Ads gateway."""

from __future__ import annotations

import logging
import re
import time
from typing import Any

from gads_mcp.context import ToolContext
from gads_mcp.errors import InvalidParameter, MissingRequired, QueryTooPermissive
from gads_mcp.schemas.account import AccountRecord
from gads_mcp.services.gaql_templates import TEMPLATES, build_query
from gads_mcp.services.metrics import flatten_row, pluralize
from gads_mcp.services.mutations import summarize_mutation
from gads_mcp.services.response_format import format_error, format_success
from gads_mcp.services.validation import block_mutations, get_customer_id

logger = logging.getLogger("mcp.tools")

DEFAULT_QUERY_LIMIT = 100
MAX_QUERY_LIMIT = 10_000
QUERY_PREVIEW_CHARS = 200

_LIMIT_CLAUSE = re.compile(r"\bLIMIT\s+(\d+)", re.IGNORECASE)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _elapsed_ms(t0: float) -> float:
    return round((time.perf_counter() - t0) * 1000, 2)


def _account_from_row(row: dict[str, Any]) -> AccountRecord:
    client = row.get("customer_client") or {}
    return AccountRecord(
        id=str(client.get("id", "")),
        name=client.get("descriptive_name"),
        is_manager=bool(client.get("manager", False)),
        currency=client.get("currency_code"),
        timezone=client.get("time_zone"),
        status=client.get("status"),
    )


def _coerce_limit(raw: Any) -> int:
    """Requested row limit, defaulted to 100 and clamped to [1, 10000]."""
    requested = raw or DEFAULT_QUERY_LIMIT
    try:
        requested = int(requested)
    except (TypeError, ValueError):
        raise InvalidParameter(f"Invalid limit: {raw}. Expected an integer") from None
    return min(max(1, requested), MAX_QUERY_LIMIT)


def apply_limit(query: str, limit: int) -> str:
    """Append ``LIMIT <limit>`` when absent; cap an existing LIMIT at 10000."""
    match = _LIMIT_CLAUSE.search(query)
    if match is None:
        return f"{query} LIMIT {limit}"
    if int(match.group(1)) > MAX_QUERY_LIMIT:
        return _LIMIT_CLAUSE.sub(f"LIMIT {MAX_QUERY_LIMIT}", query, count=1)
    return query


def _preview(query: str) -> str:
    if len(query) > QUERY_PREVIEW_CHARS:
        return query[:QUERY_PREVIEW_CHARS] + "..."
    return query


# ---------------------------------------------------------------------------
# Tool implementations
# ---------------------------------------------------------------------------


async def handle_list_accounts(context: ToolContext, arguments: dict) -> dict:
    """List accounts reachable from the configured root account.

    Args:
        arguments: {"include_manager_accounts": bool (default False)}
    """
    t0 = time.perf_counter()
    try:
        include_managers = bool(arguments.get("include_manager_accounts", False))

        settings = context.settings
        root_id = settings.google_ads_login_customer_id or settings.google_ads_default_customer_id
        if not root_id:
            raise MissingRequired(
                ["GOOGLE_ADS_LOGIN_CUSTOMER_ID", "GOOGLE_ADS_DEFAULT_CUSTOMER_ID"],
                "Either GOOGLE_ADS_LOGIN_CUSTOMER_ID or GOOGLE_ADS_DEFAULT_CUSTOMER_ID "
                "must be set (one is required)",
            )

        filters = "" if include_managers else "WHERE customer_client.manager = false"
        query = build_query(TEMPLATES["LIST_ACCOUNTS"], filters=filters)
        rows = await context.gateway.search(root_id, query)

        accounts = [_account_from_row(r) for r in rows]
        managers = sum(1 for a in accounts if a.is_manager)
        clients = len(accounts) - managers

        logger.info(
            "list_accounts root=%s managers=%s results=%d ms=%.1f",
            root_id,
            include_managers,
            len(accounts),
            _elapsed_ms(t0),
        )
        return format_success(
            f"Found {pluralize(len(accounts), 'accessible account')} "
            f"({clients} client, {managers} manager)",
            [a.model_dump() for a in accounts],
            {
                "totalAccounts": len(accounts),
                "clientAccounts": clients,
                "managerAccounts": managers,
            },
        )
    except Exception as exc:
        format_error(exc)


async def handle_query(context: ToolContext, arguments: dict) -> dict:
    """Run a read-only GAQL query.

    Args:
        arguments: {"query": str, "customer_id": str | None, "limit": int (default 100)}
    """
    t0 = time.perf_counter()
    try:
        raw_query = arguments.get("query")
        if not raw_query or not isinstance(raw_query, str):
            raise MissingRequired(["query"], "query parameter is required and must be a string")
        query = raw_query.strip()
        if not query:
            raise InvalidParameter("Invalid query: query cannot be empty")

        block_mutations(query)
        if not query.upper().startswith("SELECT"):
            raise QueryTooPermissive()

        customer_id = get_customer_id(arguments, context.settings)
        limit = _coerce_limit(arguments.get("limit"))
        final_query = apply_limit(query, limit)

        started = time.perf_counter()
        results = await context.gateway.search(customer_id, final_query)
        execution_ms = round((time.perf_counter() - started) * 1000)

        rows = [flatten_row(r) for r in results]
        fields = list(rows[0]) if rows else []

        logger.info(
            "query customer=%s rows=%d limit=%d ms=%.1f",
            customer_id,
            len(rows),
            limit,
            _elapsed_ms(t0),
        )
        return format_success(
            f"Query returned {pluralize(len(rows), 'row')} in {execution_ms}ms",
            {"rows": rows, "fields": fields},
            {
                "customer_id": customer_id,
                "row_count": len(rows),
                "field_count": len(fields),
                "execution_time_ms": execution_ms,
                "limit_applied": limit,
                "query_truncated": len(rows) >= limit,
                "query_preview": _preview(final_query),
            },
        )
    except Exception as exc:
        format_error(exc)


async def handle_mutate(context: ToolContext, arguments: dict) -> dict:
    """Send write operations through GoogleAdsService.Mutate.

    Args:
        arguments: {"operations": list[dict], "customer_id": str | None,
                    "partial_failure": bool (default True), "dry_run": bool (default True)}
    """
    t0 = time.perf_counter()
    try:
        operations = arguments.get("operations")
        if not operations or not isinstance(operations, list):
            raise MissingRequired(
                ["operations"],
                "operations array is required and must contain at least one operation",
            )
        partial_failure = bool(arguments.get("partial_failure", True))
        dry_run = bool(arguments.get("dry_run", True))
        customer_id = get_customer_id(arguments, context.settings)

        response = await context.gateway.mutate(
            customer_id,
            operations,
            partial_failure=partial_failure,
            validate_only=dry_run,
        )

        outcome = summarize_mutation(
            operations, response, dry_run=dry_run, partial_failure=partial_failure
        )
        verb = (
            "Validation successful - no changes made"
            if dry_run
            else "Mutations applied successfully"
        )

        logger.info(
            "mutate customer=%s ops=%d dry_run=%s failed=%d ms=%.1f",
            customer_id,
            len(operations),
            dry_run,
            len(outcome.failed),
            _elapsed_ms(t0),
        )
        return format_success(
            f"{verb} ({pluralize(len(operations), 'operation')})",
            outcome.model_dump(),
            {
                "dry_run": dry_run,
                "operations_count": len(operations),
                "all_succeeded": outcome.all_succeeded,
                "customer_id": customer_id,
            },
        )
    except Exception as exc:
        format_error(exc)
