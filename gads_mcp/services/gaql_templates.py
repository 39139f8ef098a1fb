"""GAQL query templates and placeholder substitution."""

from __future__ import annotations

import logging
import math
import re
from typing import Any

from pydantic import BaseModel, ConfigDict

from gads_mcp.errors import UnresolvedPlaceholders
from gads_mcp.schemas.common import DateRange
from gads_mcp.services.query_validator import PLACEHOLDER_PATTERN, lint_query, log_validation

logger = logging.getLogger("gaql.templates")

# Placeholder token -> QuerySubstitutions field that fills it.
TOKEN_SOURCES: dict[str, str] = {
    "METRICS": "metrics",
    "START_DATE": "dates",
    "END_DATE": "dates",
    "FILTERS": "filters",
    "ORDER_BY": "order_by",
    "LIMIT": "limit",
    "MIN_IMPRESSIONS": "min_impressions",
    "MIN_COST_MICROS": "min_cost",
    "MAX_CONVERSIONS": "max_conversions",
    "RESOURCE_ID": "resource_id",
    "DATE": "date",
    "MAX_QUALITY_SCORE": "max_quality_score",
    "SEGMENT_FIELD": "segment_field",
    "STATUS_FILTER": "status_filter",
    "GEO_LEVEL": "geo_level",
}

# Tokens that always resolve because they carry a default.
DEFAULTED_TOKENS = frozenset(
    {"FILTERS", "ORDER_BY", "LIMIT", "MIN_IMPRESSIONS", "MAX_CONVERSIONS", "STATUS_FILTER"}
)


class QueryTemplate(BaseModel):
    """A named, immutable GAQL template containing ``{{TOKEN}}`` placeholders."""

    model_config = ConfigDict(frozen=True)

    name: str
    text: str

    @property
    def tokens(self) -> frozenset[str]:
        return frozenset(m[2:-2] for m in PLACEHOLDER_PATTERN.findall(self.text))

    def unresolved(self, substitutions: "QuerySubstitutions") -> frozenset[str]:
        """Tokens this template needs that *substitutions* leaves empty."""
        return frozenset(
            token
            for token in self.tokens
            if token not in DEFAULTED_TOKENS
            and getattr(substitutions, TOKEN_SOURCES.get(token, ""), None) is None
        )


class QuerySubstitutions(BaseModel):
    """Values substituted into a template; every field is optional."""

    metrics: list[str] | None = None
    dates: DateRange | None = None
    filters: str | None = None
    order_by: str | None = None
    limit: int | None = None
    min_impressions: int | None = None
    min_cost: float | None = None
    max_conversions: float | None = None
    resource_id: str | int | None = None
    date: str | None = None
    max_quality_score: int | None = None
    segment_field: str | None = None
    status_filter: str | None = None
    geo_level: str | None = None


def _metric_name(name: str) -> str:
    return name if name.startswith("metrics.") else f"metrics.{name}"


def _to_micros(amount: float) -> int:
    # half-up rounding
    return math.floor(amount * 1_000_000 + 0.5)


def build_query(
    template: QueryTemplate | str,
    *,
    strict: bool = False,
    **params: Any,
) -> str:
    """Substitute *params* into *template* and return a single-line GAQL query.

    Placeholders with no matching substitution are left in place unless
    *strict* is set, in which case ``UnresolvedPlaceholders`` is raised.
    The finished query is linted and any findings are logged.
    """
    if isinstance(template, str):
        template = QueryTemplate(name="inline", text=template)
    subs = QuerySubstitutions(**params)

    if strict:
        missing = template.unresolved(subs)
        if missing:
            raise UnresolvedPlaceholders(template.name, missing)

    query = template.text

    if subs.metrics:
        query = query.replace("{{METRICS}}", ", ".join(_metric_name(m) for m in subs.metrics))

    if subs.dates:
        query = query.replace("{{START_DATE}}", subs.dates.start)
        query = query.replace("{{END_DATE}}", subs.dates.end)

    query = query.replace("{{FILTERS}}", subs.filters or "")
    query = query.replace("{{ORDER_BY}}", subs.order_by or "metrics.cost_micros")
    query = query.replace("{{LIMIT}}", str(subs.limit or 50))
    query = query.replace(
        "{{MIN_IMPRESSIONS}}",
        str(subs.min_impressions if subs.min_impressions is not None else 10),
    )

    if subs.min_cost is not None:
        query = query.replace("{{MIN_COST_MICROS}}", str(_to_micros(subs.min_cost)))

    query = query.replace(
        "{{MAX_CONVERSIONS}}",
        str(subs.max_conversions if subs.max_conversions is not None else 0),
    )

    if subs.resource_id is not None:
        query = query.replace("{{RESOURCE_ID}}", str(subs.resource_id))
    if subs.date:
        query = query.replace("{{DATE}}", subs.date)
    if subs.max_quality_score is not None:
        query = query.replace("{{MAX_QUALITY_SCORE}}", str(subs.max_quality_score))
    if subs.segment_field:
        query = query.replace("{{SEGMENT_FIELD}}", subs.segment_field)

    if subs.status_filter:
        query = query.replace("{{STATUS_FILTER}}", f"= '{subs.status_filter}'")
    else:
        query = query.replace("{{STATUS_FILTER}}", "IS NOT NULL")

    if subs.geo_level:
        query = query.replace("{{GEO_LEVEL}}", subs.geo_level)

    query = re.sub(r"\s+", " ", query.strip())

    result = lint_query(query)
    if not result.valid:
        log_validation(query, result)
    else:
        logger.debug("Built %s query: %s", template.name, query)

    return query


def _template(name: str, text: str) -> QueryTemplate:
    return QueryTemplate(name=name, text=text)


TEMPLATES: dict[str, QueryTemplate] = {
    t.name: t
    for t in [
        _template(
            "LIST_ACCOUNTS",
            """
            SELECT
              customer_client.id,
              customer_client.descriptive_name,
              customer_client.manager,
              customer_client.currency_code,
              customer_client.time_zone,
              customer_client.status
            FROM customer_client
            {{FILTERS}}
            """,
        ),
        _template(
            "CAMPAIGN_PERFORMANCE",
            """
            SELECT
              campaign.id,
              campaign.name,
              campaign.status,
              campaign.advertising_channel_type,
              {{METRICS}}
            FROM campaign
            WHERE segments.date BETWEEN '{{START_DATE}}' AND '{{END_DATE}}'
              {{FILTERS}}
            ORDER BY {{ORDER_BY}} DESC
            LIMIT {{LIMIT}}
            """,
        ),
        _template(
            "AD_GROUP_PERFORMANCE",
            """
            SELECT
              ad_group.id,
              ad_group.name,
              ad_group.status,
              campaign.id,
              campaign.name,
              {{METRICS}}
            FROM ad_group
            WHERE segments.date BETWEEN '{{START_DATE}}' AND '{{END_DATE}}'
              {{FILTERS}}
            ORDER BY {{ORDER_BY}} DESC
            LIMIT {{LIMIT}}
            """,
        ),
        _template(
            "KEYWORD_PERFORMANCE",
            """
            SELECT
              ad_group_criterion.criterion_id,
              ad_group_criterion.keyword.text,
              ad_group_criterion.keyword.match_type,
              ad_group_criterion.status,
              ad_group.id,
              ad_group.name,
              campaign.id,
              campaign.name,
              {{METRICS}}
            FROM keyword_view
            WHERE segments.date BETWEEN '{{START_DATE}}' AND '{{END_DATE}}'
              {{FILTERS}}
            ORDER BY {{ORDER_BY}} DESC
            LIMIT {{LIMIT}}
            """,
        ),
        _template(
            "PRODUCT_GROUP_PERFORMANCE",
            """
            SELECT
              shopping_performance_view.product_item_id,
              shopping_performance_view.product_title,
              shopping_performance_view.product_brand,
              campaign.id,
              campaign.name,
              {{METRICS}}
            FROM shopping_performance_view
            WHERE segments.date BETWEEN '{{START_DATE}}' AND '{{END_DATE}}'
              {{FILTERS}}
            ORDER BY {{ORDER_BY}} DESC
            LIMIT {{LIMIT}}
            """,
        ),
        _template(
            "SEARCH_TERMS",
            """
            SELECT
              search_term_view.search_term,
              search_term_view.status,
              ad_group.id,
              ad_group.name,
              campaign.id,
              campaign.name,
              {{METRICS}}
            FROM search_term_view
            WHERE segments.date BETWEEN '{{START_DATE}}' AND '{{END_DATE}}'
              AND metrics.impressions >= {{MIN_IMPRESSIONS}}
              {{FILTERS}}
            ORDER BY {{ORDER_BY}} DESC
            LIMIT {{LIMIT}}
            """,
        ),
        _template(
            "WASTED_SPEND_SEARCH_TERMS",
            """
            SELECT
              search_term_view.search_term,
              ad_group.id,
              ad_group.name,
              campaign.id,
              campaign.name,
              metrics.cost_micros,
              metrics.conversions,
              metrics.clicks,
              metrics.impressions
            FROM search_term_view
            WHERE segments.date BETWEEN '{{START_DATE}}' AND '{{END_DATE}}'
              AND metrics.cost_micros >= {{MIN_COST_MICROS}}
              AND metrics.conversions = {{MAX_CONVERSIONS}}
              {{FILTERS}}
            ORDER BY metrics.cost_micros DESC
            LIMIT {{LIMIT}}
            """,
        ),
        _template(
            "WASTED_SPEND_KEYWORDS",
            """
            SELECT
              ad_group_criterion.criterion_id,
              ad_group_criterion.keyword.text,
              ad_group_criterion.keyword.match_type,
              ad_group.id,
              ad_group.name,
              campaign.id,
              campaign.name,
              metrics.cost_micros,
              metrics.conversions,
              metrics.clicks,
              metrics.impressions
            FROM keyword_view
            WHERE segments.date BETWEEN '{{START_DATE}}' AND '{{END_DATE}}'
              AND metrics.cost_micros >= {{MIN_COST_MICROS}}
              AND metrics.conversions = {{MAX_CONVERSIONS}}
              {{FILTERS}}
            ORDER BY metrics.cost_micros DESC
            LIMIT {{LIMIT}}
            """,
        ),
        _template(
            "ACCOUNT_CPA",
            """
            SELECT
              metrics.cost_per_conversion
            FROM customer
            WHERE segments.date DURING LAST_30_DAYS
            """,
        ),
        _template(
            "QUALITY_SCORE_ANALYSIS",
            """
            SELECT
              ad_group_criterion.criterion_id,
              ad_group_criterion.keyword.text,
              ad_group_criterion.keyword.match_type,
              ad_group_criterion.status,
              ad_group_criterion.quality_info.quality_score,
              ad_group_criterion.quality_info.creative_quality_score,
              ad_group_criterion.quality_info.post_click_quality_score,
              ad_group_criterion.quality_info.search_predicted_ctr,
              ad_group.id,
              ad_group.name,
              campaign.id,
              campaign.name,
              metrics.impressions,
              metrics.clicks,
              metrics.cost_micros,
              metrics.conversions
            FROM keyword_view
            WHERE segments.date BETWEEN '{{START_DATE}}' AND '{{END_DATE}}'
              AND ad_group_criterion.status = 'ENABLED'
              AND metrics.impressions >= {{MIN_IMPRESSIONS}}
              {{FILTERS}}
            ORDER BY metrics.cost_micros DESC
            LIMIT {{LIMIT}}
            """,
        ),
        _template(
            "CAMPAIGN_BUDGET",
            """
            SELECT
              campaign.id,
              campaign.name,
              campaign.status,
              campaign.advertising_channel_type,
              campaign_budget.id,
              campaign_budget.name,
              campaign_budget.amount_micros,
              campaign_budget.period,
              campaign_budget.delivery_method,
              campaign_budget.explicitly_shared,
              campaign_budget.has_recommended_budget,
              campaign_budget.recommended_budget_amount_micros,
              metrics.cost_micros,
              metrics.impressions,
              metrics.clicks,
              metrics.conversions
            FROM campaign
            WHERE campaign.status = 'ENABLED'
              AND segments.date BETWEEN '{{START_DATE}}' AND '{{END_DATE}}'
              {{FILTERS}}
            """,
        ),
        _template(
            "CAMPAIGN_DAILY_SPEND",
            """
            SELECT
              campaign.id,
              campaign.name,
              metrics.cost_micros
            FROM campaign
            WHERE campaign.status = 'ENABLED'
              AND segments.date = '{{DATE}}'
              {{FILTERS}}
            """,
        ),
        _template(
            "SHOPPING_PRODUCT_STATUS",
            """
            SELECT
              shopping_product.resource_name,
              shopping_product.merchant_center_id,
              shopping_product.channel,
              shopping_product.language_code,
              shopping_product.feed_label,
              shopping_product.item_id,
              shopping_product.title,
              shopping_product.brand,
              shopping_product.price_micros,
              shopping_product.currency_code,
              shopping_product.status,
              shopping_product.issues
            FROM shopping_product
            WHERE shopping_product.status {{STATUS_FILTER}}
            {{FILTERS}}
            LIMIT {{LIMIT}}
            """,
        ),
        _template(
            "SHOPPING_PERFORMANCE",
            """
            SELECT
              {{SEGMENT_FIELD}},
              campaign.id,
              campaign.name,
              campaign.advertising_channel_type,
              {{METRICS}}
            FROM shopping_performance_view
            WHERE segments.date BETWEEN '{{START_DATE}}' AND '{{END_DATE}}'
              AND metrics.impressions >= {{MIN_IMPRESSIONS}}
              {{FILTERS}}
            ORDER BY {{ORDER_BY}} DESC
            LIMIT {{LIMIT}}
            """,
        ),
        _template(
            "PERFORMANCE_BY_HOUR",
            """
            SELECT
              segments.hour,
              {{METRICS}}
            FROM campaign
            WHERE segments.date BETWEEN '{{START_DATE}}' AND '{{END_DATE}}'
              {{FILTERS}}
            """,
        ),
        _template(
            "PERFORMANCE_BY_DAY_OF_WEEK",
            """
            SELECT
              segments.day_of_week,
              {{METRICS}}
            FROM campaign
            WHERE segments.date BETWEEN '{{START_DATE}}' AND '{{END_DATE}}'
              {{FILTERS}}
            """,
        ),
        _template(
            "PERFORMANCE_BY_DEVICE",
            """
            SELECT
              segments.device,
              {{METRICS}}
            FROM campaign
            WHERE segments.date BETWEEN '{{START_DATE}}' AND '{{END_DATE}}'
              {{FILTERS}}
            """,
        ),
        _template(
            "PERFORMANCE_BY_GEO",
            """
            SELECT
              geographic_view.country_criterion_id,
              geographic_view.location_type,
              {{METRICS}}
            FROM geographic_view
            WHERE segments.date BETWEEN '{{START_DATE}}' AND '{{END_DATE}}'
              {{FILTERS}}
            ORDER BY {{ORDER_BY}} DESC
            LIMIT {{LIMIT}}
            """,
        ),
        _template(
            "PERFORMANCE_BY_AUDIENCE",
            """
            SELECT
              user_list.id,
              user_list.name,
              user_list.type,
              {{METRICS}}
            FROM user_list
            WHERE segments.date BETWEEN '{{START_DATE}}' AND '{{END_DATE}}'
              {{FILTERS}}
            ORDER BY {{ORDER_BY}} DESC
            LIMIT {{LIMIT}}
            """,
        ),
    ]
}
