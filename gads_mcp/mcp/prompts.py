"""Workflow prompt templates that chain the Google Ads tools together."""

from __future__ import annotations

import re

from mcp.types import Prompt, PromptArgument, PromptMessage, TextContent
from pydantic import BaseModel


class PromptSpec(BaseModel):
    """A prompt definition plus the ``{{arg}}`` template it renders."""

    name: str
    description: str
    arguments: list[PromptArgument]
    template: str
    defaults: dict[str, str] = {}

    def as_prompt(self) -> Prompt:
        return Prompt(name=self.name, description=self.description, arguments=self.arguments)


_CUSTOMER_ID_ARG = PromptArgument(
    name="customer_id",
    description="Google Ads account ID (without dashes)",
    required=True,
)


PROMPTS: dict[str, PromptSpec] = {
    p.name: p
    for p in [
        PromptSpec(
            name="quick_health_check",
            description="Fast daily check on account status",
            arguments=[_CUSTOMER_ID_ARG],
            template=(
                "Quick health check for Google Ads account {{customer_id}}:\n\n"
                "1. Yesterday's spend vs daily average - any anomalies?\n"
                "2. Any campaigns with $0 spend that should be running?\n"
                "3. Budget pacing - anything hitting limits early?\n"
                "4. Any new disapprovals or policy issues?\n"
                "5. Conversion tracking - are conversions recording normally?\n\n"
                "Just flag issues, don't deep-dive unless something's wrong.\n\n"
                "To complete this check:\n"
                "- Use query with a campaign SELECT over segments.date DURING YESTERDAY\n"
                "- Use query over segments.date DURING LAST_7_DAYS to get the daily average\n"
                "- Use query on campaign_budget to find campaigns limited by budget\n"
                "- Flag any enabled campaigns with zero impressions or spend"
            ),
        ),
        PromptSpec(
            name="weekly_account_review",
            description="Comprehensive weekly performance review for search and shopping campaigns",
            arguments=[_CUSTOMER_ID_ARG],
            template=(
                "Run a weekly account review for Google Ads account {{customer_id}}:\n\n"
                "1. Start with campaign-level performance for the last 7 days vs prior 7 days\n"
                "2. Identify the top 3 campaigns by spend and analyze their trend\n"
                "3. Check search terms for wasted spend (high cost, no conversions)\n"
                "4. Review Quality Score distribution - flag any high-spend keywords with QS < 5\n"
                "5. Check budget pacing - are any campaigns limited?\n"
                "6. For shopping campaigns, check for product disapprovals\n"
                "7. Analyze device performance - any major mobile vs desktop differences?\n"
                "8. Summarize top 3 opportunities and top 3 concerns\n\n"
                "Keep the analysis actionable and prioritized by impact.\n\n"
                "To complete this review:\n"
                "- Use query on campaign for the current and prior period\n"
                "- Use query on search_term_view filtered to metrics.conversions = 0\n"
                "- Use query on keyword_view with ad_group_criterion.quality_info.quality_score\n"
                "- Use query on shopping_product for product status\n"
                "- Use query on campaign segmented by segments.device"
            ),
        ),
        PromptSpec(
            name="negative_keyword_mining",
            description="Find and add negative keywords from search terms data",
            arguments=[
                _CUSTOMER_ID_ARG,
                PromptArgument(
                    name="date_range",
                    description="Date range to analyze (default LAST_30_DAYS)",
                    required=False,
                ),
                PromptArgument(
                    name="min_spend",
                    description="Minimum spend threshold in dollars (default 20)",
                    required=False,
                ),
            ],
            defaults={"date_range": "LAST_30_DAYS", "min_spend": "20"},
            template=(
                "Analyze search terms for {{customer_id}} over the last {{date_range}}:\n\n"
                "1. Pull search terms with spend > ${{min_spend}} and 0 conversions\n"
                "2. Group them into themes (irrelevant intent, competitor, informational, etc.)\n"
                "3. Recommend specific negative keywords with appropriate match types\n"
                "4. Flag any search terms that might be worth adding as keywords instead\n"
                "5. After I approve, add the negatives at the appropriate level "
                "(campaign vs ad group)\n\n"
                "Be aggressive on clear waste, conservative on ambiguous terms.\n\n"
                "Use query on search_term_view to pull the terms, then mutate with "
                "dry_run=true to validate the negatives before applying them with dry_run=false."
            ),
        ),
        PromptSpec(
            name="shopping_optimization",
            description="Shopping campaign deep-dive and optimization recommendations",
            arguments=[_CUSTOMER_ID_ARG],
            template=(
                "Deep-dive into Shopping performance for {{customer_id}}:\n\n"
                "1. Product-level performance - find winners (high ROAS) and losers "
                "(high spend, low return)\n"
                "2. Check product disapprovals and feed health\n"
                "3. Analyze by brand and category - where should we increase/decrease investment?\n"
                "4. Compare to last period - any products trending significantly up or down?\n"
                "5. Recommend bid adjustments for top 10 products to optimize\n"
                "6. Identify products with high impressions but low click-through "
                "(possible title/image issues)\n\n"
                "Focus on actionable changes with clear expected impact.\n\n"
                "To complete this analysis:\n"
                "- Use query on shopping_performance_view grouped by segments.product_item_id\n"
                "- Use query on shopping_performance_view grouped by segments.product_brand\n"
                "- Use query on shopping_performance_view grouped by segments.product_category_level1\n"
                "- Use query on shopping_product to check for disapprovals and feed issues"
            ),
        ),
    ]
}


def list_prompts() -> list[Prompt]:
    """Prompt definitions advertised to MCP clients."""
    return [p.as_prompt() for p in PROMPTS.values()]


def _substitute(text: str, name: str, value: str) -> str:
    return re.sub(r"\{\{" + re.escape(name) + r"\}\}", lambda _: value, text)


def render_prompt(name: str, arguments: dict | None = None) -> list[PromptMessage]:
    """Fill the named template and return it as a single user message.

    Raises ``ValueError`` for an unknown prompt or a missing required argument.
    """
    spec = PROMPTS.get(name)
    if spec is None:
        raise ValueError(f"Unknown prompt: {name}. Available prompts: {', '.join(PROMPTS)}")

    args = arguments or {}
    missing = [a.name for a in spec.arguments if a.required and not args.get(a.name)]
    if missing:
        raise ValueError(f'Missing required arguments for prompt "{name}": {", ".join(missing)}')

    text = spec.template
    for key, value in args.items():
        text = _substitute(text, key, str(value))
    for key, value in spec.defaults.items():
        text = _substitute(text, key, value)

    return [PromptMessage(role="user", content=TextContent(type="text", text=text))]
