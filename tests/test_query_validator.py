"""Tests for the GAQL structure linter."""

from __future__ import annotations

import logging

from gads_mcp.services.query_validator import lint_query, log_validation


def test_clean_query():
    result = lint_query(
        "SELECT campaign.id FROM campaign WHERE segments.date DURING LAST_7_DAYS"
    )
    assert result.valid
    assert result.errors == []
    assert result.warnings == []


def test_unreplaced_placeholders():
    result = lint_query("SELECT {{METRICS}} FROM campaign WHERE x = '{{DATE}}'")
    assert not result.valid
    assert "Unreplaced template variables: {{METRICS}}, {{DATE}}" in result.errors


def test_missing_select():
    result = lint_query("campaign.id FROM campaign")
    assert "Query must start with SELECT" in result.errors


def test_missing_from():
    result = lint_query("SELECT campaign.id")
    assert "Query must include FROM clause" in result.errors


def test_conversions_value_spelling():
    assert lint_query("SELECT metrics.conversionsvalue FROM campaign").warnings == [
        "Should be conversions_value (with underscore)"
    ]
    assert lint_query("SELECT metrics.conversion_value FROM campaign").warnings == [
        "Should be conversions_value (plural)"
    ]
    assert lint_query("SELECT metrics.conversions_value FROM campaign").warnings == []


def test_incompatible_views():
    keyword = lint_query("SELECT segments.product_brand FROM keyword_view")
    assert "keyword_view and product segments may be incompatible" in keyword.warnings

    shopping = lint_query("SELECT ad_group_criterion.keyword.text FROM shopping_performance_view")
    assert "shopping_performance_view and keyword fields may be incompatible" in shopping.warnings


def test_unbounded_date_segment():
    result = lint_query("SELECT segments.date, metrics.clicks FROM campaign")
    assert result.valid
    assert any("no WHERE clause" in w for w in result.warnings)


def test_log_validation(caplog):
    result = lint_query("SELECT metrics.conversion_value")
    with caplog.at_level(logging.WARNING, logger="gaql.validator"):
        log_validation("SELECT metrics.conversion_value", result)
    levels = {r.levelname for r in caplog.records}
    assert levels == {"ERROR", "WARNING"}
    assert "Query must include FROM clause" in caplog.text
