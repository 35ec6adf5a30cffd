"""Module 1: Signature Classifier - identifying string -> actor and risk tier"""

from typing import Iterable, List, Optional

from content_valuator.models.classification import ClassificationResult
from content_valuator.registry.signature_registry import SignatureRegistry
from content_valuator.utils.config_manager import ConfigManager
from content_valuator.utils.logger import get_logger

logger = get_logger(__name__)

UNKNOWN_BOT_TYPE = "Unknown Bot"


class SignatureClassifier:
    """
    Module 1: classify a request identifier (usually a User-Agent).

    1. ordered signature scan, first match wins (confidence 95)
    2. heuristic scoring when nothing matched

    Never raises: empty or odd input is simply "not a bot".

    Usage:
        classifier = SignatureClassifier()
        result = classifier.classify("Mozilla/5.0 (compatible; GPTBot/1.0)")
    """

    def __init__(self, registry: Optional[SignatureRegistry] = None) -> None:
        self._registry = registry or SignatureRegistry.from_config(ConfigManager())
        self._rules = self._registry.heuristics

    @property
    def registry(self) -> SignatureRegistry:
        return self._registry

    def classify(self, identifying_string: Optional[str]) -> ClassificationResult:
        """
        Classify one identifying string.

        Args:
            identifying_string: Client-supplied identity token, may be empty or None.

        Returns:
            ClassificationResult.
        """
        if not isinstance(identifying_string, str):
            identifying_string = "" if identifying_string is None else str(identifying_string)

        matched = self._match_signature(identifying_string)
        if matched is not None:
            return matched

        return self._heuristic_classify(identifying_string)

    def classify_batch(self, identifying_strings: Iterable[Optional[str]]) -> List[ClassificationResult]:
        results = [self.classify(s) for s in identifying_strings]
        logger.info(
            "Batch classification done: %d inputs, %d bots",
            len(results), sum(1 for r in results if r.is_bot),
        )
        return results

    def known_actors(self) -> List[str]:
        return self._registry.names()

    def _match_signature(self, identifying_string: str) -> Optional[ClassificationResult]:
        """Scan signatures in order; the first pattern found wins."""
        if not identifying_string:
            return None

        lowered = identifying_string.lower()
        for signature in self._registry:
            for pattern in signature.patterns:
                if pattern.lower() in lowered:
                    logger.debug("Signature match: %s (pattern=%s)", signature.name, pattern)
                    return ClassificationResult(
                        is_bot=True,
                        confidence=self._rules.signature_confidence,
                        actor_name=signature.name,
                        risk_level=signature.risk_level,
                        is_commercial=signature.is_commercial,
                        evidence=[f"Identifier matches '{pattern}'"],
                        bot_type=signature.name,
                        purpose=signature.purpose,
                    )
        return None

    def _heuristic_classify(self, identifying_string: str) -> ClassificationResult:
        """Score generic automation hints for identifiers no signature knows."""
        rules = self._rules
        lowered = identifying_string.lower()
        score = 0
        evidence: List[str] = []

        for indicator in rules.bot_indicators:
            if indicator.lower() in lowered:
                score += rules.bot_indicator_points
                evidence.append(f"Contains '{indicator}' in identifier")

        has_browser_token = any(b.lower() in lowered for b in rules.browser_indicators)
        if identifying_string and not has_browser_token:
            score += rules.no_browser_points
            evidence.append("No typical browser identifiers")

        if score > rules.bot_threshold:
            risk_level = "medium" if score > rules.medium_risk_threshold else "low"
            logger.debug("Heuristic bot: score=%d risk=%s", score, risk_level)
            return ClassificationResult(
                is_bot=True,
                confidence=min(score, rules.max_heuristic_confidence),
                actor_name=None,
                risk_level=risk_level,
                is_commercial=False,
                evidence=evidence,
                bot_type=UNKNOWN_BOT_TYPE,
            )

        return ClassificationResult(
            is_bot=False,
            confidence=0,
            risk_level="low",
            evidence=evidence,
        )
