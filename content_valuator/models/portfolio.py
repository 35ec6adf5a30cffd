"""Portfolio summary models"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class PortfolioSummary:
    """PortfolioAggregator output: a fold over many valuations."""

    item_count: int = 0
    total_value: float = 0.0
    average_value: float = 0.0
    high_value_count: int = 0
    licensing_candidate_count: int = 0
    top_actors_by_value: List[Tuple[str, float]] = field(default_factory=list)
    content_type_values: Dict[str, float] = field(default_factory=dict)
    estimated_annual_revenue: float = 0.0
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_count": self.item_count,
            "total_value": self.total_value,
            "average_value": self.average_value,
            "high_value_count": self.high_value_count,
            "licensing_candidate_count": self.licensing_candidate_count,
            "top_actors_by_value": [
                {"actor": actor, "value": value} for actor, value in self.top_actors_by_value
            ],
            "content_type_values": dict(self.content_type_values),
            "estimated_annual_revenue": self.estimated_annual_revenue,
            "recommendations": list(self.recommendations),
        }


@dataclass
class LicensingRecommendation:
    """A licensing route suggested for a portfolio."""

    type: str = ""
    description: str = ""
    next_steps: str = ""
    estimated_annual: Optional[float] = None
    estimated_monthly: Optional[float] = None
    rate_multiplier: Optional[float] = None


@dataclass
class BenchmarkResult:
    """Position of a portfolio's annual revenue among publisher categories."""

    category: str = ""
    percentile: str = ""
    benchmark: Dict[str, float] = field(default_factory=dict)
    improvement_potential: float = 0.0
    next_tier_target: Optional[Dict[str, Any]] = None
