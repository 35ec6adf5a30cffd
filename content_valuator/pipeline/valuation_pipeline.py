"""Valuation pipeline - classify, extract, price, record and notify"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from content_valuator.analysis.content_feature_extractor import ContentFeatureExtractor
from content_valuator.classification.signature_classifier import SignatureClassifier
from content_valuator.models.detection import DetectionRecord
from content_valuator.models.features import RawContent
from content_valuator.models.portfolio import PortfolioSummary
from content_valuator.pipeline.sinks import (
    DetectionSink,
    DetectionSinkError,
    NotificationSink,
    NotificationSinkError,
)
from content_valuator.portfolio.portfolio_aggregator import PortfolioAggregator
from content_valuator.pricing.pricing_engine import PricingEngine
from content_valuator.pricing.pricing_policy import PricingPolicy
from content_valuator.registry.rate_tables import RateTables
from content_valuator.registry.signature_registry import SignatureRegistry
from content_valuator.utils.config_manager import ConfigManager
from content_valuator.utils.logger import get_logger

logger = get_logger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive timestamps are taken as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ValuationPipeline:
    """
    Caller-side shell around the four core modules.

    1. classify the identifying string
    2. extract features of the accessed content
    3. price the access
    4. store the detection (bots only, commercial unless configured otherwise)
    5. notify above the threshold, at most once per actor per throttle window

    Core results are always returned; only sink failures raise, as
    DetectionSinkError / NotificationSinkError.

    Usage:
        pipeline = ValuationPipeline(config, detection_sink=InMemoryDetectionSink())
        record = pipeline.evaluate("GPTBot/1.0", "https://site.example/research/x")
    """

    def __init__(
        self,
        config: Optional[ConfigManager] = None,
        classifier: Optional[SignatureClassifier] = None,
        extractor: Optional[ContentFeatureExtractor] = None,
        engine: Optional[PricingEngine] = None,
        aggregator: Optional[PortfolioAggregator] = None,
        detection_sink: Optional[DetectionSink] = None,
        notification_sink: Optional[NotificationSink] = None,
        notification_threshold: Optional[float] = None,
    ) -> None:
        if config:
            classifier = classifier or SignatureClassifier(SignatureRegistry.from_config(config))
            engine = engine or PricingEngine(RateTables.from_config(config), PricingPolicy.from_config(config))
        self._classifier = classifier or SignatureClassifier()
        self._extractor = extractor or ContentFeatureExtractor(config=config)
        self._engine = engine or PricingEngine()
        self._aggregator = aggregator or PortfolioAggregator(config)
        self._detection_sink = detection_sink
        self._notification_sink = notification_sink

        if config:
            default_threshold = float(config.get("pipeline.notification_threshold", 100.0))
            throttle_minutes = int(config.get("pipeline.notification_throttle_minutes", 60))
            self._track_non_commercial = bool(config.get("pipeline.track_non_commercial", False))
        else:
            default_threshold = 100.0
            throttle_minutes = 60
            self._track_non_commercial = False

        self._notification_threshold = (
            notification_threshold if notification_threshold is not None else default_threshold
        )
        self._throttle = timedelta(minutes=throttle_minutes)
        self._last_notified: Dict[str, datetime] = {}

    def evaluate(
        self,
        identifying_string: Optional[str],
        locator: str,
        raw_content: Optional[RawContent] = None,
        source_identifier: str = "",
        observed_at: Optional[datetime] = None,
    ) -> DetectionRecord:
        """
        Classify and value one access.

        Args:
            identifying_string: Requester identity (User-Agent).
            locator: Accessed content URL.
            raw_content: Content, when the caller already has it.
            source_identifier: Requester address or other source id.
            observed_at: Access time (naive = UTC, default now). Also the
                reference time for content age.

        Returns:
            DetectionRecord, stored or not.

        Raises:
            DetectionSinkError: the detection sink failed.
            NotificationSinkError: the notification sink failed.
        """
        observed_at = _as_utc(observed_at) or datetime.now(timezone.utc)

        classification = self._classifier.classify(identifying_string)
        features = self._extractor.extract(locator, raw_content=raw_content, reference_time=observed_at)
        valuation = self._engine.price(classification, features)

        record = DetectionRecord(
            classification=classification,
            features=features,
            valuation=valuation,
            source_identifier=source_identifier,
            observed_at=observed_at,
        )

        if self._should_record(record):
            self._store(record)
            self._maybe_notify(record)

        return record

    def portfolio(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> PortfolioSummary:
        """Portfolio summary of the detections stored within [start, end)."""
        return self._aggregator.aggregate_window(
            self._stored_records(start, end), _as_utc(start), _as_utc(end)
        )

    def export_records(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> List[Dict[str, Any]]:
        """Raw valuation records within [start, end) as dictionaries."""
        return [record.to_dict() for record in self._stored_records(start, end)]

    # ===== internals =====

    def _should_record(self, record: DetectionRecord) -> bool:
        classification = record.classification
        if not classification.is_bot:
            return False
        return classification.is_commercial or self._track_non_commercial

    def _stored_records(self, start: Optional[datetime], end: Optional[datetime]) -> List[DetectionRecord]:
        if self._detection_sink is None:
            return []
        start, end = _as_utc(start), _as_utc(end)
        try:
            return self._detection_sink.between(start, end)
        except NotImplementedError:
            raise
        except Exception as e:
            raise DetectionSinkError(f"Detection sink query failed: {e}") from e

    def _store(self, record: DetectionRecord) -> None:
        if self._detection_sink is None:
            return
        try:
            self._detection_sink.record(record)
        except Exception as e:
            logger.error("Detection sink failed: %s - %s", record.actor_name, e)
            raise DetectionSinkError(f"Detection sink failed: {e}") from e
        logger.debug("Detection stored: %s %.2f", record.actor_name, record.estimated_value)

    def _maybe_notify(self, record: DetectionRecord) -> None:
        if self._notification_sink is None:
            return
        if record.estimated_value < self._notification_threshold:
            return

        actor = record.actor_name
        last = self._last_notified.get(actor)
        if last is not None and record.observed_at - last < self._throttle:
            logger.debug("Notification throttled: %s", actor)
            return

        try:
            self._notification_sink.notify(record)
        except Exception as e:
            logger.error("Notification sink failed: %s - %s", actor, e)
            raise NotificationSinkError(f"Notification sink failed: {e}") from e
        self._last_notified[actor] = record.observed_at
