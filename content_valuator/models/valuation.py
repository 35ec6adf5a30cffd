"""Valuation result models"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ValuationBreakdown:
    """Every factor of the pricing pipeline, kept unrounded for auditing."""

    base_value: float = 0.0
    actor_multiplier: float = 1.0
    characteristic_multiplier: float = 1.0
    market_multiplier: float = 1.0
    confidence_factor: float = 0.5
    risk_factor: float = 1.0

    content_type: str = "unknown"
    raw_estimate: float = 0.0
    # which stage limited the value: "global_min", "global_max",
    # "content_type", "quality" or None
    binding_cap: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_value": self.base_value,
            "actor_multiplier": self.actor_multiplier,
            "characteristic_multiplier": self.characteristic_multiplier,
            "market_multiplier": self.market_multiplier,
            "confidence_factor": self.confidence_factor,
            "risk_factor": self.risk_factor,
            "content_type": self.content_type,
            "raw_estimate": self.raw_estimate,
            "binding_cap": self.binding_cap,
        }


@dataclass
class MarketContext:
    """Descriptive market information attached to a valuation."""

    actor_tier: str = ""
    market_position: str = ""
    content_demand: str = ""
    licensing_precedent: str = ""
    market_trends: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actor_tier": self.actor_tier,
            "market_position": self.market_position,
            "content_demand": self.content_demand,
            "licensing_precedent": self.licensing_precedent,
            "market_trends": dict(self.market_trends),
        }


@dataclass
class ValuationResult:
    """PricingEngine output."""

    estimated_value: float = 0.0
    breakdown: ValuationBreakdown = field(default_factory=ValuationBreakdown)
    licensing_potential: str = "Low"
    market_context: MarketContext = field(default_factory=MarketContext)

    licensing_recommendation: str = ""
    estimated_annual_value: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "estimated_value": self.estimated_value,
            "breakdown": self.breakdown.to_dict(),
            "licensing_potential": self.licensing_potential,
            "market_context": self.market_context.to_dict(),
            "licensing_recommendation": self.licensing_recommendation,
            "estimated_annual_value": self.estimated_annual_value,
        }
