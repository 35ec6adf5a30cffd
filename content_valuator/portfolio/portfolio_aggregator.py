"""Module 4: Portfolio Aggregator - many valuations -> portfolio summary"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from content_valuator.models.classification import ClassificationResult
from content_valuator.models.detection import DetectionRecord
from content_valuator.models.portfolio import PortfolioSummary
from content_valuator.models.valuation import ValuationResult
from content_valuator.utils.config_manager import ConfigManager
from content_valuator.utils.logger import get_logger

logger = get_logger(__name__)

UNKNOWN_ACTOR = "Unknown"

DEFAULT_RECOMMENDATION_RULES = [
    {
        "metric": "total_value",
        "above": 10000,
        "message": "High-value portfolio - consider professional licensing consultation",
    },
    {
        "metric": "licensing_candidate_count",
        "above": 10,
        "message": "Multiple licensing opportunities - explore bulk licensing deals",
    },
    {
        "metric": "total_value",
        "above": 1000,
        "message": "Significant content value - document all automated access for licensing negotiations",
    },
]
DEFAULT_STANDING_RECOMMENDATION = "Keep monitoring automated access to build licensing evidence"


class PortfolioAggregator:
    """
    Module 4: pure fold over (classification, valuation) pairs.

    - totals, average, high-value count, High licensing potential count
    - per-actor sums, ranked descending and truncated to top-K
    - recommendations from a fixed decision table

    Usage:
        aggregator = PortfolioAggregator(config)
        summary = aggregator.aggregate([(classification, valuation), ...])
    """

    def __init__(self, config: Optional[ConfigManager] = None) -> None:
        if config:
            self._high_value_threshold = float(config.get("portfolio.high_value_threshold", 100.0))
            self._top_k = int(config.get("portfolio.top_k", 5))
            self._annual_revenue_rate = float(config.get("portfolio.annual_revenue_rate", 0.15))
            self._rules = config.get("portfolio.recommendations", DEFAULT_RECOMMENDATION_RULES)
            self._standing = config.get("portfolio.standing_recommendation", DEFAULT_STANDING_RECOMMENDATION)
        else:
            self._high_value_threshold = 100.0
            self._top_k = 5
            self._annual_revenue_rate = 0.15
            self._rules = DEFAULT_RECOMMENDATION_RULES
            self._standing = DEFAULT_STANDING_RECOMMENDATION

    def aggregate(
        self,
        valuations: Iterable[Tuple[Optional[ClassificationResult], ValuationResult]],
    ) -> PortfolioSummary:
        """
        Summarize many valuations. Empty input gives an all-zero summary.

        Args:
            valuations: (classification, valuation) pairs; a None classification
                counts toward the "Unknown" actor.
        """
        summary = PortfolioSummary()
        actor_totals: Dict[str, float] = {}
        type_totals: Dict[str, float] = {}
        total = 0.0

        for classification, valuation in valuations:
            value = valuation.estimated_value
            summary.item_count += 1
            total += value

            if value > self._high_value_threshold:
                summary.high_value_count += 1
            if valuation.licensing_potential == "High":
                summary.licensing_candidate_count += 1

            actor = (classification.actor_name if classification else None) or UNKNOWN_ACTOR
            actor_totals[actor] = actor_totals.get(actor, 0.0) + value

            content_type = valuation.breakdown.content_type or "unknown"
            type_totals[content_type] = type_totals.get(content_type, 0.0) + value

        summary.total_value = round(total, 2)
        if summary.item_count:
            summary.average_value = round(total / summary.item_count, 2)
        summary.top_actors_by_value = self._rank_actors(actor_totals)
        summary.content_type_values = {k: round(v, 2) for k, v in type_totals.items()}
        summary.estimated_annual_revenue = round(total * self._annual_revenue_rate, 2)
        summary.recommendations = self.recommend(summary.total_value, summary.licensing_candidate_count)

        logger.info(
            "Portfolio aggregated: %d items, total %.2f, %d candidates",
            summary.item_count, summary.total_value, summary.licensing_candidate_count,
        )
        return summary

    def aggregate_window(
        self,
        records: Iterable[DetectionRecord],
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> PortfolioSummary:
        """Aggregate detection records observed within [start, end)."""
        selected = [
            (record.classification, record.valuation)
            for record in records
            if (start is None or record.observed_at >= start)
            and (end is None or record.observed_at < end)
        ]
        logger.debug("Window %s ~ %s: %d records", start, end, len(selected))
        return self.aggregate(selected)

    def recommend(self, total_value: float, licensing_candidate_count: int) -> List[str]:
        """Decision table over the portfolio metrics, followed by the standing advice."""
        metrics = {
            "total_value": total_value,
            "licensing_candidate_count": licensing_candidate_count,
        }
        recommendations = []
        for rule in self._rules or []:
            metric = metrics.get(rule.get("metric"))
            if metric is not None and metric > float(rule.get("above", 0)):
                recommendations.append(rule.get("message", ""))
        if self._standing:
            recommendations.append(self._standing)
        return recommendations

    def _rank_actors(self, actor_totals: Dict[str, float]) -> List[Tuple[str, float]]:
        # sorted() is stable, so equal totals keep first-seen order
        ranked = sorted(actor_totals.items(), key=lambda item: item[1], reverse=True)
        return [(actor, round(value, 2)) for actor, value in ranked[: self._top_k]]
