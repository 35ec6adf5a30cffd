"""Detection record model handed to the detection sink"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict

from content_valuator.models.classification import ClassificationResult
from content_valuator.models.features import FeatureBundle
from content_valuator.models.valuation import ValuationResult


@dataclass
class DetectionRecord:
    """One classified and valued access, as stored by a DetectionSink."""

    classification: ClassificationResult
    features: FeatureBundle
    valuation: ValuationResult
    source_identifier: str = ""
    observed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def actor_name(self) -> str:
        return self.classification.actor_name or "Unknown"

    @property
    def estimated_value(self) -> float:
        return self.valuation.estimated_value

    def to_dict(self) -> Dict[str, Any]:
        """Flat export shape; breakdown and market context stay nested and complete."""
        return {
            "observed_at": self.observed_at.isoformat(),
            "source_identifier": self.source_identifier,
            "classification": self.classification.to_dict(),
            "features": self.features.to_dict(),
            "valuation": self.valuation.to_dict(),
        }
