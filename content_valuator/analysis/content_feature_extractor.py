"""Module 2: Content Feature Extractor - locator (+ raw content) -> FeatureBundle"""

import html as html_module
import math
import re
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from dateutil import parser as dateutil_parser

from content_valuator.analysis.content_resolver import ContentResolver, locator_path
from content_valuator.analysis.feature_cache import FeatureCache, InMemoryFeatureCache
from content_valuator.models.features import ContentSummary, FeatureBundle, RawContent
from content_valuator.utils.config_manager import ConfigManager
from content_valuator.utils.logger import get_logger

logger = get_logger(__name__)

RESEARCH_KEYWORDS = [
    "study", "research", "analysis", "methodology", "findings",
    "conclusion", "abstract", "peer-reviewed", "citation", "bibliography",
    "experiment", "hypothesis", "data", "results", "statistical",
]

TECHNICAL_KEYWORDS = [
    "algorithm", "implementation", "architecture", "framework",
    "optimization", "performance", "scalability", "api", "database",
    "security", "encryption", "authentication", "protocol",
]

# technical depth vocabulary
ADVANCED_TERMS = [
    "algorithm", "implementation", "architecture", "scalability",
    "optimization", "performance", "security", "encryption",
    "machine learning", "artificial intelligence", "neural network",
    "api", "rest", "graphql", "microservices", "containerization",
]

# characteristic -> detection patterns, any match is enough
CHARACTERISTIC_PATTERNS: Dict[str, List[str]] = {
    "original_research": [
        r"\b(our study|our research|we found|we analyzed)\b",
        r"\b(methodology|participants|sample size|statistical significance)\b",
        r"\b(peer.?review|journal|publication)\b|\bdoi:",
    ],
    "exclusive_content": [
        r"\b(exclusive|first.?time|never.?before|breaking)\b",
        r"\b(interview|investigation|expose|reveal)\b",
    ],
    "technical_depth": [
        r"\b(algorithm|implementation|architecture|framework)\b",
        r"\b(code|programming|development|software)\b",
        r"\b(api|database|server|infrastructure)\b",
    ],
    "multimedia_rich": [
        r"<img[^>]+>",
        r"<video[^>]+>",
        r"<audio[^>]+>",
        r"\b(chart|graph|diagram|infographic)\b",
    ],
}

# URL rules, checked in order on the locator path
URL_TYPE_RULES: List[Tuple[str, str, Optional[str]]] = [
    (r"\.(jpg|jpeg|png|gif|svg|webp)$", "image", None),
    (r"\.(mp4|avi|mov|wmv|flv|webm)$", "video", None),
    (r"\.(mp3|wav|flac|aac|ogg)$", "audio", None),
    (r"/(blog|article|post|news)", "article", None),
    (r"/(research|study|paper|academic)", "article", "research"),
    (r"/(api|data|json|xml|csv)", "data", None),
    (r"/(code|github|programming)", "code", None),
]

URL_QUALITY_RULES: List[Tuple[str, str]] = [
    (r"/(breaking|exclusive|investigation)", "high_value"),
    (r"/(tutorial|guide|how-to)", "evergreen"),
    (r"/(review|analysis|comparison)", "analytical"),
]

HEADING_PATTERN = re.compile(r"<h[1-6][^>]*>", re.IGNORECASE)
LIST_PATTERN = re.compile(r"<ul|<ol", re.IGNORECASE)
IMAGE_ALT_PATTERN = re.compile(r"<img[^>]+alt=", re.IGNORECASE)
EXTERNAL_LINK_PATTERN = re.compile(r"<a[^>]+href=[\"']https?://[^\"']+", re.IGNORECASE)
CODE_PATTERN = re.compile(r"<code|<pre|```", re.IGNORECASE)
MATH_PATTERN = re.compile(r"\$[^$\n]+\$|\\\[.+?\\\]", re.DOTALL)
WORD_PATTERN = re.compile(r"[^\W\d_]+(?:['-][^\W\d_]+)*")

DEPTH_THRESHOLDS = [(20, "expert"), (12, "advanced"), (6, "intermediate")]


class ContentFeatureExtractor:
    """
    Module 2: derive quality, technical and engagement signals from a page.

    - raw content available (given or resolved) -> full analysis
    - otherwise -> locator-only bundle marked low confidence
    - results cached by locator; force_refresh recomputes

    Content age is measured against a caller-supplied reference time only,
    so identical inputs always give identical bundles.

    Usage:
        extractor = ContentFeatureExtractor(resolver=MappingContentResolver({...}))
        bundle = extractor.extract("https://site.example/research/llm-eval")
    """

    def __init__(
        self,
        resolver: Optional[ContentResolver] = None,
        cache: Optional[FeatureCache] = None,
        config: Optional[ConfigManager] = None,
        reference_time: Optional[datetime] = None,
    ) -> None:
        self._resolver = resolver
        self._cache = cache if cache is not None else InMemoryFeatureCache()
        self._reference_time = reference_time

        if config:
            self._estimated_word_count = int(config.get("analysis.estimated_word_count", 500))
            self._default_quality = int(config.get("analysis.default_quality_score", 50))
            self._words_per_minute = int(config.get("analysis.words_per_minute", 200)) or 200
            self._high_quality_threshold = int(config.get("analysis.high_quality_threshold", 80))
        else:
            self._estimated_word_count = 500
            self._default_quality = 50
            self._words_per_minute = 200
            self._high_quality_threshold = 80

    def extract(
        self,
        locator: str,
        raw_content: Optional[RawContent] = None,
        force_refresh: bool = False,
        reference_time: Optional[datetime] = None,
    ) -> FeatureBundle:
        """
        Build the feature bundle for one locator.

        Args:
            locator: Content URL or path.
            raw_content: Content to analyze. When given, it is always analyzed
                and replaces any cached entry for the locator.
            force_refresh: Ignore the cached entry.
            reference_time: Moment the content was accessed, used for its age.

        Returns:
            FeatureBundle (never raises).
        """
        locator = locator or ""
        reference_time = reference_time or self._reference_time

        if raw_content is None and not force_refresh:
            cached = self._cache.get(locator)
            if cached is not None:
                logger.debug("Feature cache hit: %s", locator[:80])
                return self._with_age(cached, reference_time)

        if raw_content is None:
            raw_content = self._resolve(locator)

        if raw_content is None:
            bundle = self._url_only_bundle(locator)
        else:
            bundle = self._analyze(locator, raw_content)

        self._cache.set(locator, bundle)
        return self._with_age(bundle, reference_time)

    def extract_batch(
        self,
        locators: Iterable[str],
        reference_time: Optional[datetime] = None,
    ) -> Dict[str, FeatureBundle]:
        results = {}
        for locator in locators:
            results[locator] = self.extract(locator, reference_time=reference_time)
        return results

    def clear_cache(self) -> None:
        self._cache.clear()

    # ===== resolution =====

    def _resolve(self, locator: str) -> Optional[RawContent]:
        """Ask the resolver; failures fall back to the locator-only path."""
        if self._resolver is None or not locator:
            return None
        try:
            content = self._resolver.resolve(locator)
        except Exception as e:
            logger.warning("Content resolution failed, using URL analysis: %s - %s", locator[:80], e)
            return None
        if content is not None and not (content.title or content.body):
            return None
        return content

    # ===== analysis paths =====

    def _url_only_bundle(self, locator: str) -> FeatureBundle:
        """Best-effort bundle from the locator path alone."""
        content_type, url_characteristics, indicators = self.analyze_url(locator)
        logger.debug("URL-only analysis: %s -> %s", locator[:80], content_type)
        return FeatureBundle(
            locator=locator,
            content_type=content_type,
            word_count=self._estimated_word_count,
            quality_score=self._default_quality,
            technical_depth="basic",
            characteristics=url_characteristics,
            quality_indicators=indicators,
            estimated_read_time=self._read_time(self._estimated_word_count),
            analysis_method="url_only",
            low_confidence=True,
        )

    def _analyze(self, locator: str, raw: RawContent) -> FeatureBundle:
        """Full analysis of resolved content."""
        body = raw.body or ""
        word_count = self.count_words(body)

        content_type = "article"
        url_type, url_characteristics, indicators = self.analyze_url(locator)
        if url_type != "unknown":
            content_type = url_type

        characteristics = self.extract_characteristics(body)
        for characteristic in url_characteristics:
            if characteristic not in characteristics:
                characteristics.append(characteristic)

        published_at = self._parse_datetime(raw.publish_date)

        bundle = FeatureBundle(
            locator=locator,
            content_type=content_type,
            word_count=word_count,
            quality_score=self.calculate_quality_score(body),
            technical_depth=self.assess_technical_depth(body),
            characteristics=characteristics,
            seo_tier=self.check_seo(raw, word_count),
            engagement_tier=self.assess_engagement(body),
            quality_indicators=indicators,
            estimated_read_time=self._read_time(word_count),
            title=raw.title or "",
            published_at=published_at,
            categories=list(raw.categories),
            tags=list(raw.tags),
            analysis_method="content",
            low_confidence=False,
        )
        logger.debug(
            "Content analysis: %s -> type=%s words=%d quality=%d depth=%s",
            locator[:80], bundle.content_type, bundle.word_count,
            bundle.quality_score, bundle.technical_depth,
        )
        return bundle

    # ===== URL rules =====

    def analyze_url(self, locator: str) -> Tuple[str, List[str], List[str]]:
        """
        Content type, characteristics and quality indicators from the locator path.

        Returns:
            (content_type, characteristics, quality_indicators)
        """
        path = locator_path(locator).lower()
        content_type = "unknown"
        characteristics: List[str] = []
        indicators: List[str] = []

        for pattern, rule_type, characteristic in URL_TYPE_RULES:
            if re.search(pattern, path):
                content_type = rule_type
                if characteristic:
                    characteristics.append(characteristic)
                break

        for pattern, indicator in URL_QUALITY_RULES:
            if re.search(pattern, path):
                indicators.append(indicator)

        return content_type, characteristics, indicators

    # ===== scoring =====

    def calculate_quality_score(self, content: str) -> int:
        """Quality score (0~100)."""
        score = 50
        content_lower = (content or "").lower()

        for keyword in RESEARCH_KEYWORDS:
            if keyword in content_lower:
                score += 3

        for keyword in TECHNICAL_KEYWORDS:
            if keyword in content_lower:
                score += 2

        # structure
        if HEADING_PATTERN.search(content or ""):
            score += 5
        if LIST_PATTERN.search(content or ""):
            score += 3
        if IMAGE_ALT_PATTERN.search(content or ""):
            score += 4

        external_links = len(EXTERNAL_LINK_PATTERN.findall(content or ""))
        if external_links > 0:
            score += min(external_links * 2, 10)

        word_count = self.count_words(content)
        if word_count > 1000:
            score += 5
        if word_count > 2000:
            score += 5
        if word_count > 5000:
            score += 10

        return max(0, min(score, 100))

    def assess_technical_depth(self, content: str) -> str:
        content_lower = (content or "").lower()
        technical_score = 0

        for term in ADVANCED_TERMS:
            if term in content_lower:
                technical_score += 2

        if CODE_PATTERN.search(content or ""):
            technical_score += 10
        if MATH_PATTERN.search(content or ""):
            technical_score += 8

        for threshold, depth in DEPTH_THRESHOLDS:
            if technical_score >= threshold:
                return depth
        return "basic"

    def extract_characteristics(self, content: str) -> List[str]:
        """Each characteristic is added once, however many of its patterns match."""
        characteristics = []
        for name, patterns in CHARACTERISTIC_PATTERNS.items():
            for pattern in patterns:
                if re.search(pattern, content or "", re.IGNORECASE):
                    characteristics.append(name)
                    break
        return characteristics

    def check_seo(self, raw: RawContent, word_count: int) -> str:
        score = 0
        title = raw.title or ""
        if 30 <= len(title) <= 60:
            score += 20
        if word_count >= 300:
            score += 20
        if raw.categories or raw.tags:
            score += 15
        if raw.excerpt:
            score += 10
        return "optimized" if score >= 40 else "basic"

    def assess_engagement(self, content: str) -> str:
        content = content or ""
        score = 0
        if "comment" in content:
            score += 10
        if "share" in content:
            score += 10
        if re.search(r"<form", content, re.IGNORECASE):
            score += 15
        if re.search(r"<img", content, re.IGNORECASE):
            score += 10
        if re.search(r"<video", content, re.IGNORECASE):
            score += 20
        if re.search(r"<h[1-6]", content, re.IGNORECASE):
            score += 10
        if LIST_PATTERN.search(content):
            score += 5

        if score >= 40:
            return "high"
        if score >= 20:
            return "medium"
        return "low"

    # ===== summary =====

    def summarize(self, bundles: Iterable[FeatureBundle]) -> ContentSummary:
        """Content summary over many bundles (dashboard view)."""
        summary = ContentSummary()
        total_quality = 0

        for bundle in bundles:
            summary.total_analyzed += 1
            content_type = bundle.content_type or "unknown"
            summary.content_types[content_type] = summary.content_types.get(content_type, 0) + 1

            quality = bundle.quality_score if bundle.quality_score is not None else self._default_quality
            total_quality += quality
            if quality >= self._high_quality_threshold:
                summary.high_quality_count += 1
            if bundle.technical_depth in ("advanced", "expert"):
                summary.technical_count += 1
            if "original_research" in bundle.characteristics or "research" in bundle.characteristics:
                summary.research_count += 1

        if summary.total_analyzed:
            summary.avg_quality_score = round(total_quality / summary.total_analyzed, 1)
        return summary

    # ===== helpers =====

    @staticmethod
    def strip_tags(content: str) -> str:
        if not content:
            return ""
        text = re.sub(r"<script[^>]*>.*?</script>", " ", content, flags=re.DOTALL | re.IGNORECASE)
        text = re.sub(r"<style[^>]*>.*?</style>", " ", text, flags=re.DOTALL | re.IGNORECASE)
        text = re.sub(r"<[^>]+>", " ", text)
        return html_module.unescape(text)

    @classmethod
    def count_words(cls, content: str) -> int:
        return len(WORD_PATTERN.findall(cls.strip_tags(content)))

    def _read_time(self, word_count: int) -> int:
        return int(math.ceil(word_count / self._words_per_minute)) if word_count > 0 else 0

    def _parse_datetime(self, value: Optional[Union[datetime, str]]) -> Optional[datetime]:
        if value is None or value == "":
            return None
        if isinstance(value, datetime):
            return value
        try:
            return dateutil_parser.parse(str(value))
        except (ValueError, TypeError, OverflowError):
            logger.debug("Could not parse publish date: %s", value)
            return None

    @staticmethod
    def _age_days(published_at: Optional[datetime], reference_time: Optional[datetime]) -> Optional[int]:
        if published_at is None or reference_time is None:
            return None
        pub = published_at if published_at.tzinfo else published_at.replace(tzinfo=timezone.utc)
        ref = reference_time if reference_time.tzinfo else reference_time.replace(tzinfo=timezone.utc)
        return max(0, (ref - pub).days)

    def _with_age(self, bundle: FeatureBundle, reference_time: Optional[datetime]) -> FeatureBundle:
        """Copy of the bundle with its age measured against reference_time."""
        return replace(bundle, publish_age_days=self._age_days(bundle.published_at, reference_time))
