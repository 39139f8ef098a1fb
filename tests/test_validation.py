"""Tests for the shared parameter validators."""

from __future__ import annotations

import pytest

from gads_mcp.config import Settings
from gads_mcp.errors import InvalidEnum, MissingRequired, MutationBlocked
from gads_mcp.services.validation import (
    block_mutations,
    build_campaign_filter,
    get_customer_id,
    require_enum,
    require_fields,
)

# ---------------------------------------------------------------------------
# require_fields
# ---------------------------------------------------------------------------


def test_require_fields_passes_with_all_present():
    require_fields({"customer_id": "123", "date_range": "LAST_7_DAYS"}, ["customer_id", "date_range"])


@pytest.mark.parametrize("value", [0, False, [], "0"])
def test_require_fields_falsy_but_present(value):
    require_fields({"limit": value}, ["limit"])


@pytest.mark.parametrize("params", [{}, {"customer_id": None}, {"customer_id": ""}])
def test_require_fields_missing(params):
    with pytest.raises(MissingRequired, match="Missing required parameter: customer_id"):
        require_fields(params, ["customer_id"])


def test_require_fields_names_every_missing_field():
    with pytest.raises(MissingRequired) as exc_info:
        require_fields({"b": 1}, ["a", "b", "c"])
    assert exc_info.value.fields == ["a", "c"]
    assert str(exc_info.value) == "Missing required parameters: a, c"


# ---------------------------------------------------------------------------
# require_enum
# ---------------------------------------------------------------------------


def test_require_enum_accepts_member():
    require_enum("PAUSED", ["ENABLED", "PAUSED"], "status")


def test_require_enum_message():
    with pytest.raises(InvalidEnum) as exc_info:
        require_enum("INVALID", ["ENABLED", "PAUSED"], "status")
    assert str(exc_info.value) == "Invalid status: INVALID. Allowed values: ENABLED, PAUSED"


def test_require_enum_is_case_sensitive():
    with pytest.raises(InvalidEnum):
        require_enum("enabled", ["ENABLED", "PAUSED"], "status")


def test_require_enum_with_no_allowed_values_always_fails():
    with pytest.raises(InvalidEnum):
        require_enum("x", [], "f")


# ---------------------------------------------------------------------------
# block_mutations
# ---------------------------------------------------------------------------


def test_plain_select_passes():
    block_mutations("SELECT campaign.id FROM campaign")


@pytest.mark.parametrize("query", ["", "  \n "])
def test_blank_query_passes(query):
    block_mutations(query)


@pytest.mark.parametrize(
    "query,keyword",
    [
        ("CREATE campaign", "create"),
        ("update campaign set x", "update"),
        ("REMOVE ad_group", "remove"),
        ("mutate it", "mutate"),
        ("Delete from campaign", "delete"),
    ],
)
def test_blocks_mutation_keywords(query, keyword):
    with pytest.raises(MutationBlocked) as exc_info:
        block_mutations(query)
    assert exc_info.value.keyword == keyword
    assert f'Query contains: "{keyword}"' in str(exc_info.value)


def test_substring_match_rejects_identifiers():
    with pytest.raises(MutationBlocked):
        block_mutations("SELECT change_event.change_date_time, last_update_date FROM change_event")


def test_first_keyword_in_scan_order_is_reported():
    with pytest.raises(MutationBlocked) as exc_info:
        block_mutations("delete then create")
    assert exc_info.value.keyword == "create"


# ---------------------------------------------------------------------------
# get_customer_id / build_campaign_filter
# ---------------------------------------------------------------------------


def test_explicit_customer_id_wins(settings):
    assert get_customer_id({"customer_id": "555-666-7777"}, settings) == "5556667777"


def test_falls_back_to_default_customer(settings):
    assert get_customer_id({}, settings) == "1234567890"


def test_no_customer_id_anywhere(monkeypatch):
    monkeypatch.delenv("GOOGLE_ADS_DEFAULT_CUSTOMER_ID", raising=False)
    bare = Settings(_env_file=None)
    with pytest.raises(MissingRequired, match="required"):
        get_customer_id({}, bare)


def test_campaign_filter():
    assert build_campaign_filter(["1", 2]) == "AND campaign.id IN (1, 2)"


@pytest.mark.parametrize("ids", [None, []])
def test_campaign_filter_empty(ids):
    assert build_campaign_filter(ids) == ""
