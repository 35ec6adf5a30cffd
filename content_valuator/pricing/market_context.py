"""Market context - descriptive notes attached to every valuation"""

from typing import Dict, Optional

from content_valuator.models.valuation import MarketContext
from content_valuator.registry.rate_tables import RateTables

TIER_1_ACTORS = ("OpenAI", "Google", "Anthropic", "Meta")
TIER_2_ACTORS = ("Apple", "Amazon", "Perplexity", "ByteDance", "Cohere")

TIER_1_LABEL = "Tier 1 - Major AI Companies"
TIER_2_LABEL = "Tier 2 - Commercial AI Companies"
TIER_3_LABEL = "Tier 3 - Emerging/Unknown"

CONTENT_DEMAND = {
    "article": "Very High - Core training data for language models",
    "image": "High - Visual AI training and multimodal models",
    "video": "Growing - Video AI and multimedia training",
    "audio": "Moderate - Voice and audio AI applications",
    "code": "High - Code generation and programming AI",
    "data": "High - Structured data for AI training",
}
DEFAULT_CONTENT_DEMAND = "Moderate"

MARKET_TRENDS = {
    "ai_training_demand": "High - AI companies increasingly paying for quality data",
    "content_scarcity": "Growing - Quality content becoming more valuable",
    "legal_landscape": "Evolving - More licensing deals being struck",
    "regulatory_impact": "Increasing - Compliance driving up values",
}


def actor_tier(actor_name: Optional[str]) -> str:
    if actor_name in TIER_1_ACTORS:
        return TIER_1_LABEL
    if actor_name in TIER_2_ACTORS:
        return TIER_2_LABEL
    return TIER_3_LABEL


def content_demand(content_type: Optional[str]) -> str:
    return CONTENT_DEMAND.get(content_type or "", DEFAULT_CONTENT_DEMAND)


def build_market_context(
    tables: RateTables, actor_name: Optional[str], content_type: Optional[str]
) -> MarketContext:
    """Market context for an (actor, content type) pair. Never affects the value."""
    rate = tables.actor_rate(actor_name)
    trends: Dict[str, str] = dict(MARKET_TRENDS)
    return MarketContext(
        actor_tier=actor_tier(actor_name),
        market_position=rate.reason,
        content_demand=content_demand(content_type),
        licensing_precedent=rate.precedent,
        market_trends=trends,
    )
