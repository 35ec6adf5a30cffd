"""Rate Tables - static pricing tables with total lookups"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from content_valuator.utils.config_manager import ConfigManager
from content_valuator.utils.logger import get_logger

logger = get_logger(__name__)

FALLBACK_BASE_RATE = 25.00
DEFAULT_ACTOR_KEY = "default"
NEUTRAL = 1.0

# word count upper bounds (inclusive) for the length multiplier buckets
SHORT_MAX_WORDS = 499
MEDIUM_MAX_WORDS = 2000
LONG_MAX_WORDS = 5000


@dataclass(frozen=True)
class ContentTypeRate:
    """Per content type: base rate, plus per-unit rate and multipliers kept as reference data."""

    base_rate: float = FALLBACK_BASE_RATE
    unit_rate: float = 0.0
    multipliers: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class ActorRate:
    """Per actor: rate multiplier, base value and market notes."""

    multiplier: float = 1.5
    base_value: float = 15.00
    reason: str = "Unknown commercial intent"
    precedent: str = "Limited public precedent"


DEFAULT_ACTOR_RATE = ActorRate()


def _freeze(mapping: Optional[Dict[str, Any]]) -> Mapping[str, float]:
    return MappingProxyType({str(k): float(v) for k, v in (mapping or {}).items()})


@dataclass(frozen=True)
class RateTables:
    """
    Immutable pricing tables.

    Every lookup is total: a missing key returns a documented default
    (fallback base rate, the "default" actor, or the neutral 1.0 multiplier).
    """

    content_type_rates: Mapping[str, ContentTypeRate] = field(
        default_factory=lambda: MappingProxyType({})
    )
    fallback_base_rate: float = FALLBACK_BASE_RATE
    actor_rates: Mapping[str, ActorRate] = field(default_factory=lambda: MappingProxyType({}))
    characteristic_multipliers: Mapping[str, float] = field(
        default_factory=lambda: MappingProxyType({})
    )
    # ((max_days or None, multiplier), ...) in ascending order
    age_multipliers: Tuple[Tuple[Optional[int], float], ...] = ()
    length_multipliers: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    market_factors: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    risk_multipliers: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    commercial_risk_multiplier: float = 2.2

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RateTables":
        """Build the tables from the rate_tables.yaml structure."""
        content_type_rates = {}
        for content_type, rate in (data.get("content_type_rates") or {}).items():
            rate = rate or {}
            content_type_rates[content_type] = ContentTypeRate(
                base_rate=float(rate.get("base_rate", FALLBACK_BASE_RATE)),
                unit_rate=float(rate.get("unit_rate", 0.0)),
                multipliers=_freeze(rate.get("multipliers")),
            )

        actor_rates = {}
        for actor, rate in (data.get("actor_rates") or {}).items():
            rate = rate or {}
            actor_rates[actor] = ActorRate(
                multiplier=float(rate.get("multiplier", DEFAULT_ACTOR_RATE.multiplier)),
                base_value=float(rate.get("base_value", DEFAULT_ACTOR_RATE.base_value)),
                reason=rate.get("reason", DEFAULT_ACTOR_RATE.reason),
                precedent=rate.get("precedent", DEFAULT_ACTOR_RATE.precedent),
            )

        age_buckets = []
        for bucket in data.get("age_multipliers") or []:
            max_days = bucket.get("max_days")
            age_buckets.append(
                (int(max_days) if max_days is not None else None, float(bucket.get("multiplier", NEUTRAL)))
            )
        # open-ended bucket last
        age_buckets.sort(key=lambda b: float("inf") if b[0] is None else b[0])

        return cls(
            content_type_rates=MappingProxyType(content_type_rates),
            fallback_base_rate=float(data.get("fallback_base_rate", FALLBACK_BASE_RATE)),
            actor_rates=MappingProxyType(actor_rates),
            characteristic_multipliers=_freeze(data.get("characteristic_multipliers")),
            age_multipliers=tuple(age_buckets),
            length_multipliers=_freeze(data.get("length_multipliers")),
            market_factors=_freeze(data.get("market_factors")),
            risk_multipliers=_freeze(data.get("risk_multipliers")),
            commercial_risk_multiplier=float(data.get("commercial_risk_multiplier", 2.2)),
        )

    @classmethod
    def from_config(cls, config: ConfigManager) -> "RateTables":
        data = config.get_file_config("rate_tables")
        if not data:
            logger.warning("rate_tables.yaml not found, pricing uses built-in defaults only")
        tables = cls.from_dict(data)
        logger.info(
            "Rate tables loaded: %d content types, %d actors, %d characteristics",
            len(tables.content_type_rates), len(tables.actor_rates),
            len(tables.characteristic_multipliers),
        )
        return tables

    # ===== total lookups =====

    def content_type_rate(self, content_type: Optional[str]) -> ContentTypeRate:
        """Rate entry for a content type; unknown types get the fallback base rate."""
        rate = self.content_type_rates.get(content_type or "")
        if rate is None:
            return ContentTypeRate(base_rate=self.fallback_base_rate)
        return rate

    def actor_rate(self, actor_name: Optional[str]) -> ActorRate:
        """Rate entry for an actor; unknown or missing actors get the "default" entry."""
        if actor_name and actor_name in self.actor_rates:
            return self.actor_rates[actor_name]
        return self.actor_rates.get(DEFAULT_ACTOR_KEY, DEFAULT_ACTOR_RATE)

    def characteristic_multiplier(self, characteristic: str) -> float:
        return self.characteristic_multipliers.get(characteristic, NEUTRAL)

    def age_multiplier(self, age_days: Optional[int]) -> float:
        """Decay multiplier by content age; no age data is neutral."""
        if age_days is None:
            return NEUTRAL
        age_days = max(0, age_days)
        for max_days, multiplier in self.age_multipliers:
            if max_days is None or age_days <= max_days:
                return multiplier
        return NEUTRAL

    @staticmethod
    def length_bucket(word_count: int) -> str:
        if word_count <= SHORT_MAX_WORDS:
            return "short"
        if word_count <= MEDIUM_MAX_WORDS:
            return "medium"
        if word_count <= LONG_MAX_WORDS:
            return "long"
        return "comprehensive"

    def length_multiplier(self, word_count: int) -> float:
        return self.length_multipliers.get(self.length_bucket(word_count), NEUTRAL)

    def market_multiplier(self) -> float:
        """Product of every market factor."""
        multiplier = NEUTRAL
        for value in self.market_factors.values():
            multiplier *= value
        return multiplier

    def risk_multiplier(self, risk_level: Optional[str]) -> float:
        return self.risk_multipliers.get((risk_level or "").lower(), NEUTRAL)
