"""Content feature models"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

CONTENT_TYPES = ("article", "image", "video", "audio", "code", "data", "unknown")
TECHNICAL_DEPTHS = ("basic", "intermediate", "advanced", "expert")
DEFAULT_QUALITY_SCORE = 50


def clamp_quality(value: Any) -> int:
    """Quality score within 0~100; unreadable, NaN or infinite values give the default."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return DEFAULT_QUALITY_SCORE
    if math.isnan(number) or math.isinf(number):
        return DEFAULT_QUALITY_SCORE
    return max(0, min(100, int(number)))


@dataclass
class RawContent:
    """Content handed over by a ContentResolver (or by the caller)."""

    title: str = ""
    body: str = ""
    excerpt: str = ""
    publish_date: Optional[Union[datetime, str]] = None
    categories: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawContent":
        categories = data.get("categories", [])
        tags = data.get("tags", [])
        if isinstance(categories, str):
            categories = [c.strip() for c in categories.split(",") if c.strip()]
        if isinstance(tags, str):
            tags = [t.strip() for t in tags.split(",") if t.strip()]
        return cls(
            title=data.get("title", "") or "",
            body=data.get("body", "") or data.get("content", "") or "",
            excerpt=data.get("excerpt", "") or "",
            publish_date=data.get("publish_date"),
            categories=list(categories or []),
            tags=list(tags or []),
        )


@dataclass
class FeatureBundle:
    """ContentFeatureExtractor output for one content locator."""

    locator: str = ""
    content_type: str = "unknown"
    word_count: int = 500
    quality_score: int = DEFAULT_QUALITY_SCORE  # always within 0~100
    technical_depth: str = "basic"
    characteristics: List[str] = field(default_factory=list)
    publish_age_days: Optional[int] = None

    # only available when the content itself was analyzed
    seo_tier: Optional[str] = None  # "optimized", "basic"
    engagement_tier: Optional[str] = None  # "high", "medium", "low"

    # URL hints: "high_value", "evergreen", "analytical"
    quality_indicators: List[str] = field(default_factory=list)
    estimated_read_time: int = 0  # minutes

    # metadata
    title: str = ""
    published_at: Optional[datetime] = None
    categories: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)

    # "content" or "url_only"
    analysis_method: str = "content"
    low_confidence: bool = False

    def __post_init__(self) -> None:
        if self.content_type not in CONTENT_TYPES:
            self.content_type = "unknown"
        if self.technical_depth not in TECHNICAL_DEPTHS:
            self.technical_depth = "basic"
        if self.quality_score is not None:
            self.quality_score = clamp_quality(self.quality_score)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "locator": self.locator,
            "content_type": self.content_type,
            "word_count": self.word_count,
            "quality_score": self.quality_score,
            "technical_depth": self.technical_depth,
            "characteristics": list(self.characteristics),
            "publish_age_days": self.publish_age_days,
            "seo_tier": self.seo_tier,
            "engagement_tier": self.engagement_tier,
            "quality_indicators": list(self.quality_indicators),
            "estimated_read_time": self.estimated_read_time,
            "title": self.title,
            "published_at": self.published_at.isoformat() if self.published_at else None,
            "categories": list(self.categories),
            "tags": list(self.tags),
            "analysis_method": self.analysis_method,
            "low_confidence": self.low_confidence,
        }


@dataclass
class ContentSummary:
    """Summary over many FeatureBundles."""

    total_analyzed: int = 0
    content_types: Dict[str, int] = field(default_factory=dict)
    avg_quality_score: float = 0.0
    high_quality_count: int = 0
    technical_count: int = 0
    research_count: int = 0
