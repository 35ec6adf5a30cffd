"""Actor signature and classification result models"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

VALID_RISK_LEVELS = ("low", "medium", "high")


@dataclass(frozen=True)
class ActorSignature:
    """A known actor and the identifier patterns that reveal it."""

    name: str
    patterns: Tuple[str, ...] = ()
    risk_level: str = "low"  # "low", "medium", "high"
    is_commercial: bool = False
    purpose: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActorSignature":
        """Build a signature from a signatures.yaml entry."""
        risk_level = str(data.get("risk_level", "low")).lower()
        if risk_level not in VALID_RISK_LEVELS:
            risk_level = "low"
        return cls(
            name=data.get("name", ""),
            patterns=tuple(p for p in data.get("patterns", []) if p),
            risk_level=risk_level,
            is_commercial=bool(data.get("is_commercial", False)),
            purpose=data.get("purpose", ""),
        )


@dataclass
class ClassificationResult:
    """SignatureClassifier output for one identifying string."""

    is_bot: bool = False
    confidence: Optional[int] = 0  # 0~100, None means "not measured"
    actor_name: Optional[str] = None
    risk_level: str = "low"
    is_commercial: bool = False
    evidence: List[str] = field(default_factory=list)

    # signature name, "Unknown Bot" for heuristic hits
    bot_type: Optional[str] = None
    purpose: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_bot": self.is_bot,
            "confidence": self.confidence,
            "actor_name": self.actor_name,
            "risk_level": self.risk_level,
            "is_commercial": self.is_commercial,
            "evidence": list(self.evidence),
            "bot_type": self.bot_type,
            "purpose": self.purpose,
        }
