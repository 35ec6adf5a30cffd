"""Signature Registry - ordered table of known actor signatures"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from content_valuator.models.classification import ActorSignature
from content_valuator.utils.config_manager import ConfigManager
from content_valuator.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class HeuristicRules:
    """Fallback scoring rules for identifiers without a signature match."""

    bot_indicators: Tuple[str, ...] = ("bot", "crawler", "spider", "scraper", "fetch")
    bot_indicator_points: int = 30
    browser_indicators: Tuple[str, ...] = ("Mozilla", "Chrome", "Safari", "Firefox", "Edge")
    no_browser_points: int = 25
    bot_threshold: int = 50
    medium_risk_threshold: int = 70
    max_heuristic_confidence: int = 85
    signature_confidence: int = 95

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HeuristicRules":
        defaults = cls()
        return cls(
            bot_indicators=tuple(data.get("bot_indicators", defaults.bot_indicators)),
            bot_indicator_points=int(data.get("bot_indicator_points", defaults.bot_indicator_points)),
            browser_indicators=tuple(data.get("browser_indicators", defaults.browser_indicators)),
            no_browser_points=int(data.get("no_browser_points", defaults.no_browser_points)),
            bot_threshold=int(data.get("bot_threshold", defaults.bot_threshold)),
            medium_risk_threshold=int(data.get("medium_risk_threshold", defaults.medium_risk_threshold)),
            max_heuristic_confidence=int(
                data.get("max_heuristic_confidence", defaults.max_heuristic_confidence)
            ),
            signature_confidence=int(data.get("signature_confidence", defaults.signature_confidence)),
        )


class SignatureRegistry:
    """
    Holds the actor signatures in their documented order.

    - loaded once from signatures.yaml
    - order is part of the contract: the classifier scans it front to back
      and stops at the first match

    Usage:
        registry = SignatureRegistry.from_config(ConfigManager())
        for signature in registry:
            ...
    """

    def __init__(
        self,
        signatures: Optional[List[ActorSignature]] = None,
        heuristics: Optional[HeuristicRules] = None,
    ) -> None:
        self._signatures: Tuple[ActorSignature, ...] = tuple(signatures or ())
        self._heuristics = heuristics or HeuristicRules()

    @classmethod
    def from_config(cls, config: ConfigManager) -> "SignatureRegistry":
        """Build the registry from signatures.yaml."""
        data = config.get_file_config("signatures")
        if not data:
            logger.warning("signatures.yaml not found, only heuristic detection is available")
            return cls()

        signatures = []
        seen = set()
        for entry in data.get("signatures", []) or []:
            signature = ActorSignature.from_dict(entry)
            if not signature.name or not signature.patterns:
                logger.warning("Skipping incomplete signature entry: %s", entry)
                continue
            if signature.name in seen:
                logger.warning("Duplicate signature name, keeping the first: %s", signature.name)
                continue
            seen.add(signature.name)
            signatures.append(signature)

        heuristics = HeuristicRules.from_dict(data.get("heuristics", {}) or {})
        logger.info("Signature registry loaded: %d signatures", len(signatures))
        return cls(signatures, heuristics)

    @property
    def heuristics(self) -> HeuristicRules:
        return self._heuristics

    @property
    def signatures(self) -> Tuple[ActorSignature, ...]:
        return self._signatures

    def get(self, name: str) -> Optional[ActorSignature]:
        """Find a signature by actor name."""
        for signature in self._signatures:
            if signature.name == name:
                return signature
        return None

    def names(self) -> List[str]:
        return [s.name for s in self._signatures]

    def __iter__(self):
        return iter(self._signatures)

    def __len__(self) -> int:
        return len(self._signatures)
