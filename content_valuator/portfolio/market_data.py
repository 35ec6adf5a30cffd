"""Licensing market data - recommendations, comparable deals and industry benchmarks"""

from typing import Any, Dict, Iterable, List, Optional

from content_valuator.models.portfolio import BenchmarkResult, LicensingRecommendation
from content_valuator.utils.logger import get_logger

logger = get_logger(__name__)

ENTERPRISE_LICENSING_THRESHOLD = 50000
SUBSCRIPTION_THRESHOLD = 10000
ENTERPRISE_ANNUAL_RATE = 0.25
SUBSCRIPTION_ANNUAL_RATE = 0.15
ACADEMIC_RATE_MULTIPLIER = 3.5

NEWS_DEALS = {
    "AP + OpenAI": "Multi-year news content licensing deal",
    "Axel Springer + OpenAI": "Business Insider content licensing",
    "Reuters + Multiple": "Professional news syndication",
}

RESEARCH_DEALS = {
    "Taylor & Francis + Microsoft": "$10M academic content deal",
    "Wiley + Undisclosed": "$23M academic publishing deal",
    "Nature + Various": "Premium academic content licensing",
}

# annual revenue ranges per publisher category, smallest first
INDUSTRY_BENCHMARKS: Dict[str, Dict[str, float]] = {
    "content_creator": {"low": 1000, "average": 5000, "high": 25000},
    "small_publisher": {"low": 5000, "average": 25000, "high": 100000},
    "medium_publisher": {"low": 25000, "average": 150000, "high": 500000},
    "enterprise_publisher": {"low": 500000, "average": 2000000, "high": 10000000},
}
TOP_TIER_CATEGORY = "enterprise_publisher"


def licensing_recommendations(
    portfolio_value: float, content_types: Iterable[str] = ()
) -> List[LicensingRecommendation]:
    """
    Licensing routes worth pursuing for a portfolio.

    Args:
        portfolio_value: Total portfolio value.
        content_types: Content types or characteristic tags present in the
            portfolio; anything mentioning research unlocks the academic premium.
    """
    recommendations = []

    if portfolio_value > ENTERPRISE_LICENSING_THRESHOLD:
        recommendations.append(LicensingRecommendation(
            type="enterprise_licensing",
            description="Pursue direct enterprise licensing deals",
            next_steps="Contact AI companies directly or through licensing platform",
            estimated_annual=round(portfolio_value * ENTERPRISE_ANNUAL_RATE, 2),
        ))

    if portfolio_value > SUBSCRIPTION_THRESHOLD:
        recommendations.append(LicensingRecommendation(
            type="subscription_model",
            description="Offer subscription access to content portfolio",
            next_steps="Set up content licensing platform",
            estimated_monthly=round(portfolio_value * SUBSCRIPTION_ANNUAL_RATE / 12, 2),
        ))

    if any("research" in (t or "") for t in content_types):
        recommendations.append(LicensingRecommendation(
            type="academic_premium",
            description="Premium rates for research content",
            next_steps="Highlight research credentials and citations",
            rate_multiplier=ACADEMIC_RATE_MULTIPLIER,
        ))

    return recommendations


def comparable_deals(content_type: Optional[str]) -> Dict[str, str]:
    """Public licensing deals comparable to a content type (empty when none are known)."""
    content_type = (content_type or "").lower()
    if content_type in ("news", "news_article"):
        return dict(NEWS_DEALS)
    if "research" in content_type:
        return dict(RESEARCH_DEALS)
    return {}


def industry_benchmark(annual_revenue: float) -> BenchmarkResult:
    """Place an estimated annual revenue among the publisher categories."""
    category = None
    percentile = ""
    for name, ranges in INDUSTRY_BENCHMARKS.items():
        if annual_revenue <= ranges["high"]:
            category = name
            if annual_revenue <= ranges["low"]:
                percentile = "Below Average"
            elif annual_revenue <= ranges["average"]:
                percentile = "Average"
            else:
                percentile = "Above Average"
            break

    if category is None:
        category = TOP_TIER_CATEGORY
        percentile = "Top Tier"

    benchmark = INDUSTRY_BENCHMARKS[category]
    logger.debug("Benchmark: annual %.2f -> %s (%s)", annual_revenue, category, percentile)
    return BenchmarkResult(
        category=category,
        percentile=percentile,
        benchmark=dict(benchmark),
        improvement_potential=round(max(0.0, benchmark["high"] - annual_revenue), 2),
        next_tier_target=_next_tier_target(category),
    )


def _next_tier_target(category: str) -> Optional[Dict[str, Any]]:
    tiers = list(INDUSTRY_BENCHMARKS)
    index = tiers.index(category)
    if index < len(tiers) - 1:
        next_tier = tiers[index + 1]
        return {"tier": next_tier, "target_value": INDUSTRY_BENCHMARKS[next_tier]["low"]}
    return None
