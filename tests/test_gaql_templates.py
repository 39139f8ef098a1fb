"""Tests for GAQL template substitution."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from gads_mcp.errors import UnresolvedPlaceholders
from gads_mcp.schemas.common import DateRange
from gads_mcp.services.gaql_templates import TEMPLATES, QueryTemplate, build_query

JANUARY = DateRange(start="2024-01-01", end="2024-01-31")


def test_every_template_is_registered_under_its_name():
    assert len(TEMPLATES) == 19
    for name, template in TEMPLATES.items():
        assert template.name == name


def test_template_tokens():
    assert TEMPLATES["LIST_ACCOUNTS"].tokens == {"FILTERS"}
    assert TEMPLATES["CAMPAIGN_PERFORMANCE"].tokens == {
        "METRICS",
        "START_DATE",
        "END_DATE",
        "FILTERS",
        "ORDER_BY",
        "LIMIT",
    }


def test_campaign_performance_defaults():
    query = build_query(
        TEMPLATES["CAMPAIGN_PERFORMANCE"],
        metrics=["impressions", "metrics.clicks"],
        dates=JANUARY,
    )
    assert query == (
        "SELECT campaign.id, campaign.name, campaign.status, "
        "campaign.advertising_channel_type, metrics.impressions, metrics.clicks "
        "FROM campaign WHERE segments.date BETWEEN '2024-01-01' AND '2024-01-31' "
        "ORDER BY metrics.cost_micros DESC LIMIT 50"
    )


def test_metric_names_are_prefixed_once():
    query = build_query("SELECT {{METRICS}} FROM campaign", metrics=["clicks", "metrics.ctr"])
    assert "metrics.clicks, metrics.ctr" in query
    assert "metrics.metrics." not in query


def test_explicit_filters_order_and_limit():
    query = build_query(
        TEMPLATES["AD_GROUP_PERFORMANCE"],
        metrics=["clicks"],
        dates=JANUARY,
        filters="AND campaign.id IN (1, 2)",
        order_by="metrics.clicks",
        limit=10,
    )
    assert "AND campaign.id IN (1, 2)" in query
    assert query.endswith("ORDER BY metrics.clicks DESC LIMIT 10")


def test_output_is_single_spaced():
    query = build_query(TEMPLATES["LIST_ACCOUNTS"])
    assert "\n" not in query
    assert "  " not in query
    assert query.endswith("FROM customer_client")


def test_list_accounts_filter():
    query = build_query(TEMPLATES["LIST_ACCOUNTS"], filters="WHERE customer_client.manager = false")
    assert query.endswith("FROM customer_client WHERE customer_client.manager = false")


def test_min_cost_is_converted_to_micros():
    query = build_query(TEMPLATES["WASTED_SPEND_SEARCH_TERMS"], dates=JANUARY, min_cost=20)
    assert "metrics.cost_micros >= 20000000" in query
    assert "metrics.conversions = 0" in query


def test_min_cost_rounds_to_whole_micros():
    query = build_query("SELECT a FROM b WHERE c >= {{MIN_COST_MICROS}}", min_cost=12.34)
    assert query.endswith(">= 12340000")


def test_zero_thresholds_are_kept():
    query = build_query(
        TEMPLATES["SEARCH_TERMS"], metrics=["clicks"], dates=JANUARY, min_impressions=0
    )
    assert "metrics.impressions >= 0" in query


def test_default_min_impressions():
    query = build_query(TEMPLATES["SEARCH_TERMS"], metrics=["clicks"], dates=JANUARY)
    assert "metrics.impressions >= 10" in query


@pytest.mark.parametrize(
    "status,expected",
    [
        (None, "shopping_product.status IS NOT NULL"),
        ("DISAPPROVED", "shopping_product.status = 'DISAPPROVED'"),
    ],
)
def test_status_filter(status, expected):
    query = build_query(TEMPLATES["SHOPPING_PRODUCT_STATUS"], status_filter=status)
    assert expected in query


def test_segment_field_and_date():
    query = build_query(
        TEMPLATES["SHOPPING_PERFORMANCE"],
        segment_field="segments.product_brand",
        metrics=["clicks"],
        dates=JANUARY,
    )
    assert query.startswith("SELECT segments.product_brand, campaign.id")

    daily = build_query(TEMPLATES["CAMPAIGN_DAILY_SPEND"], date="2024-01-15")
    assert "segments.date = '2024-01-15'" in daily


def test_unresolved_tokens_pass_through_by_default(caplog):
    with caplog.at_level(logging.ERROR, logger="gaql.validator"):
        query = build_query(TEMPLATES["CAMPAIGN_PERFORMANCE"])
    assert "{{METRICS}}" in query
    assert "{{START_DATE}}" in query
    assert "Unreplaced template variables" in caplog.text


def test_strict_mode_raises_on_unresolved_tokens():
    with pytest.raises(UnresolvedPlaceholders) as exc_info:
        build_query(TEMPLATES["CAMPAIGN_PERFORMANCE"], strict=True, metrics=["clicks"])
    assert exc_info.value.tokens == ["END_DATE", "START_DATE"]
    assert "CAMPAIGN_PERFORMANCE" in str(exc_info.value)


def test_strict_mode_accepts_complete_substitutions():
    query = build_query(
        TEMPLATES["CAMPAIGN_PERFORMANCE"], strict=True, metrics=["clicks"], dates=JANUARY
    )
    assert "{{" not in query


def test_inline_template():
    template = QueryTemplate(name="custom", text="SELECT {{METRICS}} FROM customer")
    assert build_query(template, metrics=["cost_micros"]) == (
        "SELECT metrics.cost_micros FROM customer"
    )


def test_date_range_rejects_reversed_bounds():
    with pytest.raises(ValidationError, match="start_date 2024-02-01 is after end_date 2024-01-01"):
        DateRange(start="2024-02-01", end="2024-01-01")


def test_reversed_dates_mapping_is_rejected():
    with pytest.raises(ValidationError):
        build_query(
            TEMPLATES["CAMPAIGN_PERFORMANCE"],
            metrics=["clicks"],
            dates={"start": "2024-02-01", "end": "2024-01-01"},
        )


def test_single_day_range_is_allowed():
    query = build_query(
        TEMPLATES["CAMPAIGN_PERFORMANCE"],
        metrics=["clicks"],
        dates={"start": "2024-01-15", "end": "2024-01-15"},
    )
    assert "BETWEEN '2024-01-15' AND '2024-01-15'" in query
