"""Static markdown reference documents exposed as MCP resources."""

from __future__ import annotations

from pathlib import Path

from mcp.types import Resource

REFERENCE_DIR = Path(__file__).parent / "reference"
MARKDOWN = "text/markdown"

RESOURCES: list[Resource] = [
    Resource(
        uri="gaql://reference",
        name="GAQL Reference",
        description="Google Ads Query Language syntax reference with examples",
        mimeType=MARKDOWN,
    ),
    Resource(
        uri="metrics://definitions",
        name="Metrics Glossary",
        description="Google Ads metrics definitions and calculations",
        mimeType=MARKDOWN,
    ),
]

_FILES = {
    "gaql://reference": "gaql-reference.md",
    "metrics://definitions": "metrics-glossary.md",
}


def list_resources() -> list[Resource]:
    return RESOURCES


def read_resource(uri: str) -> str:
    """Return the markdown text behind *uri*."""
    filename = _FILES.get(str(uri))
    if filename is None:
        raise ValueError(f"Unknown resource: {uri}. Available: {', '.join(_FILES)}")
    return (REFERENCE_DIR / filename).read_text(encoding="utf-8")
