"""Parameter validators shared by the tool handlers."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from gads_mcp.config import Settings
from gads_mcp.errors import InvalidEnum, MissingRequired, MutationBlocked

# Scanned in this order; the first hit is reported.
MUTATION_KEYWORDS: tuple[str, ...] = ("create", "update", "remove", "mutate", "delete")


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def require_fields(params: Mapping[str, Any], field_names: Iterable[str]) -> None:
    """Raise ``MissingRequired`` naming every absent, ``None`` or empty-string field.

    ``0`` and ``False`` count as present.
    """
    missing = [name for name in field_names if _is_missing(params.get(name))]
    if missing:
        raise MissingRequired(missing)


def require_enum(value: Any, allowed_values: Sequence[Any], field_label: str = "value") -> None:
    """Raise ``InvalidEnum`` unless *value* is one of *allowed_values* (case-sensitive)."""
    if value not in allowed_values:
        raise InvalidEnum(field_label, value, allowed_values)


def block_mutations(query_text: str) -> None:
    """Reject a query containing any mutation keyword as a substring.

    Matching is deliberately substring-based, so an identifier such as
    ``last_update_date`` is rejected too.
    """
    lowered = query_text.lower()
    for keyword in MUTATION_KEYWORDS:
        if keyword in lowered:
            raise MutationBlocked(keyword)


def get_customer_id(params: Mapping[str, Any], settings: Settings) -> str:
    """Return the explicit ``customer_id`` or the configured default account."""
    customer_id = params.get("customer_id") or settings.google_ads_default_customer_id
    if not customer_id:
        raise MissingRequired(
            ["customer_id"],
            "customer_id parameter or GOOGLE_ADS_DEFAULT_CUSTOMER_ID environment variable required",
        )
    return str(customer_id).replace("-", "")


def build_campaign_filter(campaign_ids: Sequence[Any] | None) -> str:
    """GAQL clause restricting results to *campaign_ids*, or ``""`` when none given."""
    if not campaign_ids:
        return ""
    return f"AND campaign.id IN ({', '.join(str(c) for c in campaign_ids)})"
