"""Pricing Policy - value band, market-realism ceilings and licensing thresholds"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from content_valuator.utils.config_manager import ConfigManager
from content_valuator.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE_CEILINGS = {
    "article": {"short": 25.00, "medium": 60.00, "long": 150.00},
    "image": 40.00,
    "video": 90.00,
    "audio": 50.00,
    "code": 75.00,
    "data": 35.00,
    "unknown": 20.00,
}

# (quality below, cap), ascending
DEFAULT_QUALITY_CEILINGS = ((40, 20.00), (60, 60.00))


@dataclass(frozen=True)
class PricingPolicy:
    """
    Immutable policy numbers applied by the PricingEngine after the
    multiplicative stages.

    Ceiling lookups are total: a content type missing from the ceiling table
    uses the "unknown" entry; a quality score above every tier is uncapped.
    """

    min_value: float = 0.50
    max_value: float = 500.00

    default_confidence: int = 50
    default_word_count: int = 500
    default_quality_score: int = 50

    short_max_words: int = 499
    medium_max_words: int = 2000
    # content type -> fixed cap, or {word tier -> cap}
    content_type_ceilings: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_CONTENT_TYPE_CEILINGS))
    )
    quality_ceilings: Tuple[Tuple[int, float], ...] = DEFAULT_QUALITY_CEILINGS

    high_value_threshold: float = 100.00
    medium_value_threshold: float = 50.00
    annual_access_divisor: float = 10

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PricingPolicy":
        """Build from the valuation / ceilings / licensing sections of config.yaml."""
        valuation = data.get("valuation") or {}
        ceilings = data.get("ceilings") or {}
        licensing = data.get("licensing") or {}
        tiers = ceilings.get("word_count_tiers") or {}

        content_type_ceilings = dict(DEFAULT_CONTENT_TYPE_CEILINGS)
        for content_type, cap in (ceilings.get("content_type") or {}).items():
            if isinstance(cap, dict):
                content_type_ceilings[content_type] = MappingProxyType(
                    {str(k): float(v) for k, v in cap.items()}
                )
            else:
                content_type_ceilings[content_type] = float(cap)

        quality_ceilings = DEFAULT_QUALITY_CEILINGS
        if ceilings.get("quality"):
            quality_ceilings = tuple(sorted(
                (int(entry["below"]), float(entry["cap"]))
                for entry in ceilings["quality"]
                if "below" in entry and "cap" in entry
            ))

        policy = cls(
            min_value=float(valuation.get("min_value", cls.min_value)),
            max_value=float(valuation.get("max_value", cls.max_value)),
            default_confidence=int(valuation.get("default_confidence", cls.default_confidence)),
            default_word_count=int(valuation.get("default_word_count", cls.default_word_count)),
            default_quality_score=int(valuation.get("default_quality_score", cls.default_quality_score)),
            short_max_words=int(tiers.get("short", cls.short_max_words)),
            medium_max_words=int(tiers.get("medium", cls.medium_max_words)),
            content_type_ceilings=MappingProxyType(content_type_ceilings),
            quality_ceilings=quality_ceilings,
            high_value_threshold=float(licensing.get("high_value_threshold", cls.high_value_threshold)),
            medium_value_threshold=float(licensing.get("medium_value_threshold", cls.medium_value_threshold)),
            annual_access_divisor=float(licensing.get("annual_access_divisor", cls.annual_access_divisor)) or 10,
        )
        if policy.min_value > policy.max_value:
            logger.warning(
                "Invalid value band %.2f > %.2f, using defaults", policy.min_value, policy.max_value
            )
            policy = replace(policy, min_value=cls.min_value, max_value=cls.max_value)
        return policy

    @classmethod
    def from_config(cls, config: ConfigManager) -> "PricingPolicy":
        return cls.from_dict({
            "valuation": config.get_section("valuation"),
            "ceilings": config.get_section("ceilings"),
            "licensing": config.get_section("licensing"),
        })

    def word_count_tier(self, word_count: int) -> str:
        if word_count <= self.short_max_words:
            return "short"
        if word_count <= self.medium_max_words:
            return "medium"
        return "long"

    def content_type_ceiling(self, content_type: Optional[str], word_count: int) -> float:
        """Cap for a content type and word-count tier."""
        cap = self.content_type_ceilings.get(content_type or "unknown")
        if cap is None:
            cap = self.content_type_ceilings.get("unknown", self.max_value)
        if isinstance(cap, Mapping):
            return float(cap.get(self.word_count_tier(word_count), self.max_value))
        return float(cap)

    def quality_ceiling(self, quality_score: int) -> Optional[float]:
        """Cap for a quality score, or None when no tier applies."""
        for below, cap in self.quality_ceilings:
            if quality_score < below:
                return cap
        return None
