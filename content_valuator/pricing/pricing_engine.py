"""Module 3: Pricing Engine - (classification, features) -> bounded licensing value"""

import math
from typing import Iterable, List, Optional, Tuple

from content_valuator.models.classification import ClassificationResult
from content_valuator.models.features import FeatureBundle
from content_valuator.models.valuation import ValuationBreakdown, ValuationResult
from content_valuator.pricing.market_context import build_market_context
from content_valuator.pricing.pricing_policy import PricingPolicy
from content_valuator.registry.rate_tables import RateTables
from content_valuator.utils.config_manager import ConfigManager
from content_valuator.utils.logger import get_logger

logger = get_logger(__name__)

LICENSING_RECOMMENDATIONS = {
    "High": "Strong candidate for licensing negotiation",
    "Medium": "Consider bulk licensing for multiple assets",
    "Low": "Monitor for patterns",
}


def _number(value, default: float) -> float:
    """Finite float from value, or default."""
    if value is None or isinstance(value, bool):
        return float(default)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return float(default)
    if math.isnan(number) or math.isinf(number):
        return float(default)
    return number


class PricingEngine:
    """
    Module 3: multi-stage deterministic valuation.

    Stages:
        1. base value      = (content type base rate + actor base value) x actor multiplier
        2. characteristics = product of tag multipliers x age bucket x length bucket
        3. market          = product of the static market factors
        4. confidence      = confidence / 100
        5. risk            = risk level multiplier (x commercial multiplier)
        6. raw estimate    = product of 1~5
        7. global band clamp
        8. content type ceiling (by word-count tier)
        9. quality ceiling
        10. round to 2 decimals

    Every lookup has a default, so price() never raises.

    Usage:
        engine = PricingEngine(RateTables.from_config(config), PricingPolicy.from_config(config))
        result = engine.price(classification, features)
    """

    def __init__(
        self,
        tables: Optional[RateTables] = None,
        policy: Optional[PricingPolicy] = None,
    ) -> None:
        if tables is None or policy is None:
            config = ConfigManager()
            tables = tables or RateTables.from_config(config)
            policy = policy or PricingPolicy.from_config(config)
        self._tables = tables
        self._policy = policy

    @property
    def tables(self) -> RateTables:
        return self._tables

    @property
    def policy(self) -> PricingPolicy:
        return self._policy

    def price(
        self,
        classification: Optional[ClassificationResult],
        features: Optional[FeatureBundle],
    ) -> ValuationResult:
        """
        Value one access of one piece of content.

        Args:
            classification: SignatureClassifier result (None = unknown requester).
            features: ContentFeatureExtractor result (None = nothing known).

        Returns:
            ValuationResult with the full breakdown.
        """
        if classification is None:
            classification = ClassificationResult(confidence=None)
        if features is None:
            features = FeatureBundle(locator="")

        policy = self._policy
        tables = self._tables

        actor_name = classification.actor_name
        content_type = features.content_type or "unknown"
        word_count = max(0, int(_number(features.word_count, policy.default_word_count)))
        quality = int(_number(features.quality_score, policy.default_quality_score))
        quality = max(0, min(100, quality))

        # 1. base value
        actor_rate = tables.actor_rate(actor_name)
        base_rate = tables.content_type_rate(content_type).base_rate
        actor_multiplier = actor_rate.multiplier
        base_value = (base_rate + actor_rate.base_value) * actor_multiplier

        # 2. characteristics, age, length
        characteristic_multiplier = 1.0
        for characteristic in dict.fromkeys(features.characteristics or []):
            characteristic_multiplier *= tables.characteristic_multiplier(characteristic)
        characteristic_multiplier *= tables.age_multiplier(features.publish_age_days)
        characteristic_multiplier *= tables.length_multiplier(word_count)

        # 3. market
        market_multiplier = tables.market_multiplier()

        # 4. confidence
        confidence = _number(classification.confidence, policy.default_confidence)
        confidence_factor = max(0.0, min(100.0, confidence)) / 100

        # 5. risk
        risk_factor = tables.risk_multiplier(classification.risk_level)
        if classification.is_commercial:
            risk_factor *= tables.commercial_risk_multiplier

        # 6. raw estimate
        raw_estimate = (
            base_value * characteristic_multiplier * market_multiplier
            * confidence_factor * risk_factor
        )

        value, binding_cap = self._apply_caps(raw_estimate, content_type, word_count, quality)
        value = round(value, 2)

        breakdown = ValuationBreakdown(
            base_value=base_value,
            actor_multiplier=actor_multiplier,
            characteristic_multiplier=characteristic_multiplier,
            market_multiplier=market_multiplier,
            confidence_factor=confidence_factor,
            risk_factor=risk_factor,
            content_type=content_type,
            raw_estimate=raw_estimate,
            binding_cap=binding_cap,
        )
        potential = self.licensing_potential(value, classification.is_commercial)

        logger.debug(
            "Valuation: actor=%s type=%s words=%d quality=%d base=%.2f char=%.3f "
            "market=%.3f conf=%.2f risk=%.2f raw=%.2f -> %.2f (%s, cap=%s)",
            actor_name, content_type, word_count, quality, base_value,
            characteristic_multiplier, market_multiplier, confidence_factor,
            risk_factor, raw_estimate, value, potential, binding_cap,
        )

        return ValuationResult(
            estimated_value=value,
            breakdown=breakdown,
            licensing_potential=potential,
            market_context=build_market_context(tables, actor_name, content_type),
            licensing_recommendation=LICENSING_RECOMMENDATIONS[potential],
            estimated_annual_value=self.annual_value(value),
        )

    def price_batch(
        self,
        pairs: Iterable[Tuple[Optional[ClassificationResult], Optional[FeatureBundle]]],
    ) -> List[ValuationResult]:
        results = [self.price(classification, features) for classification, features in pairs]
        logger.info(
            "Batch valuation done: %d items, total %.2f",
            len(results), sum(r.estimated_value for r in results),
        )
        return results

    def _apply_caps(
        self, raw_estimate: float, content_type: str, word_count: int, quality: int
    ) -> Tuple[float, Optional[str]]:
        """Stages 7~9, in order. Returns (value, name of the last cap that lowered or raised it)."""
        policy = self._policy
        binding_cap = None

        value = raw_estimate
        if value < policy.min_value:
            value = policy.min_value
            binding_cap = "global_min"
        elif value > policy.max_value:
            value = policy.max_value
            binding_cap = "global_max"

        type_cap = policy.content_type_ceiling(content_type, word_count)
        if value > type_cap:
            value = type_cap
            binding_cap = "content_type"

        quality_cap = policy.quality_ceiling(quality)
        if quality_cap is not None and value > quality_cap:
            value = quality_cap
            binding_cap = "quality"

        return value, binding_cap

    def licensing_potential(self, value: float, is_commercial: bool) -> str:
        if value > self._policy.high_value_threshold and is_commercial:
            return "High"
        if value > self._policy.medium_value_threshold:
            return "Medium"
        return "Low"

    def annual_value(self, value: float) -> float:
        """Per-access value x estimated yearly accesses (higher value, fewer accesses)."""
        accesses = max(1, int(math.floor(value / self._policy.annual_access_divisor + 0.5)))
        return round(value * accesses, 2)
