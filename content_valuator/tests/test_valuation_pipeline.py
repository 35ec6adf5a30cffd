"""ValuationPipeline / sink tests"""

from datetime import datetime, timedelta
from typing import List

import pytest

from content_valuator.analysis.content_feature_extractor import ContentFeatureExtractor
from content_valuator.analysis.content_resolver import MappingContentResolver
from content_valuator.models.detection import DetectionRecord
from content_valuator.models.features import RawContent
from content_valuator.pipeline import (
    DetectionSink,
    DetectionSinkError,
    InMemoryDetectionSink,
    LoggingNotificationSink,
    NotificationSink,
    NotificationSinkError,
    ValuationPipeline,
)

GPTBOT = "Mozilla/5.0 (compatible; GPTBot/1.2; +https://openai.com/gptbot)"
CLAUDEBOT = "ClaudeBot/1.0"
BROWSER = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/120.0 Safari/537.36"
LONG_ARTICLE = "https://site.example/research/llm-eval"


# ─── Fixture ────────────────────────────────────────────

class RecordingNotificationSink(NotificationSink):
    def __init__(self) -> None:
        self.notified: List[DetectionRecord] = []

    def notify(self, record: DetectionRecord) -> None:
        self.notified.append(record)


class BrokenDetectionSink(DetectionSink):
    def record(self, record: DetectionRecord) -> None:
        raise IOError("disk full")


class BrokenNotificationSink(NotificationSink):
    def notify(self, record: DetectionRecord) -> None:
        raise ConnectionError("mail server down")


def _research_body() -> str:
    paragraph = (
        "<p>In our study we analyzed the methodology and results of the evaluation. "
        "The data shows a statistical effect across every benchmark we tried.</p>"
    )
    return "<h2>Abstract</h2>" + paragraph * 250


def _make_pipeline(config_manager, **kwargs) -> ValuationPipeline:
    resolver = MappingContentResolver({
        "/research/llm-eval": RawContent(
            title="Evaluating language models in practice",
            body=_research_body(),
            publish_date="2026-02-20",
        ),
    })
    extractor = ContentFeatureExtractor(resolver=resolver, config=config_manager)
    return ValuationPipeline(config_manager, extractor=extractor, **kwargs)


# ═══════════════════════════════════════════════════════════
# evaluate()
# ═══════════════════════════════════════════════════════════

class TestEvaluate:
    """Single access classification and valuation."""

    def setup_method(self):
        self.sink = InMemoryDetectionSink()

    def test_known_actor_recorded(self, config_manager, reference_time):
        pipeline = _make_pipeline(config_manager, detection_sink=self.sink)
        record = pipeline.evaluate(GPTBOT, LONG_ARTICLE, source_identifier="203.0.113.7",
                                   observed_at=reference_time)

        assert record.classification.actor_name == "OpenAI"
        assert record.features.content_type == "article"
        assert record.features.word_count > 5000
        assert record.features.publish_age_days == 9
        assert record.valuation.estimated_value == 150.0
        assert record.valuation.licensing_potential == "High"
        assert record.source_identifier == "203.0.113.7"
        assert len(self.sink) == 1

    def test_human_visitor_not_recorded(self, config_manager, reference_time):
        pipeline = _make_pipeline(config_manager, detection_sink=self.sink)
        record = pipeline.evaluate(BROWSER, LONG_ARTICLE, observed_at=reference_time)

        assert record.classification.is_bot is False
        assert record.valuation.estimated_value == 0.5
        assert len(self.sink) == 0

    def test_non_commercial_bot_skipped_by_default(self, config_manager, reference_time):
        pipeline = _make_pipeline(config_manager, detection_sink=self.sink)
        pipeline.evaluate("CCBot/2.0", LONG_ARTICLE, observed_at=reference_time)
        assert len(self.sink) == 0

    def test_non_commercial_bot_tracked_when_configured(self, config_manager, reference_time, monkeypatch):
        monkeypatch.setenv("CONTENT_VALUATOR_PIPELINE_TRACK_NON_COMMERCIAL", "true")
        pipeline = _make_pipeline(config_manager, detection_sink=self.sink)
        pipeline.evaluate("CCBot/2.0", LONG_ARTICLE, observed_at=reference_time)
        assert len(self.sink) == 1

    def test_explicit_raw_content(self, config_manager, reference_time):
        pipeline = _make_pipeline(config_manager, detection_sink=self.sink)
        record = pipeline.evaluate(
            GPTBOT, "/blog/short-note", raw_content=RawContent(body="A short note."),
            observed_at=reference_time,
        )
        assert record.features.word_count == 3
        assert record.valuation.estimated_value <= 25.0

    def test_without_sinks(self, config_manager, reference_time):
        pipeline = _make_pipeline(config_manager)
        record = pipeline.evaluate(GPTBOT, "https://site.example/a.png", observed_at=reference_time)
        assert record.valuation.estimated_value == 40.0
        assert pipeline.portfolio().item_count == 0

    def test_deterministic(self, config_manager, reference_time):
        first = _make_pipeline(config_manager).evaluate(GPTBOT, LONG_ARTICLE, observed_at=reference_time)
        second = _make_pipeline(config_manager).evaluate(GPTBOT, LONG_ARTICLE, observed_at=reference_time)
        assert first.to_dict() == second.to_dict()


# ═══════════════════════════════════════════════════════════
# Notifications
# ═══════════════════════════════════════════════════════════

class TestNotifications:
    """Threshold and per-actor throttling."""

    def setup_method(self):
        self.notifications = RecordingNotificationSink()

    def test_above_threshold_notified(self, config_manager, reference_time):
        pipeline = _make_pipeline(config_manager, notification_sink=self.notifications)
        pipeline.evaluate(GPTBOT, LONG_ARTICLE, observed_at=reference_time)
        assert len(self.notifications.notified) == 1

    def test_below_threshold_silent(self, config_manager, reference_time):
        pipeline = _make_pipeline(config_manager, notification_sink=self.notifications)
        pipeline.evaluate(GPTBOT, "https://site.example/a.png", observed_at=reference_time)
        assert self.notifications.notified == []

    def test_caller_threshold(self, config_manager, reference_time):
        pipeline = _make_pipeline(
            config_manager, notification_sink=self.notifications, notification_threshold=30.0,
        )
        pipeline.evaluate(GPTBOT, "https://site.example/a.png", observed_at=reference_time)
        assert len(self.notifications.notified) == 1

    def test_throttled_per_actor(self, config_manager, reference_time):
        pipeline = _make_pipeline(config_manager, notification_sink=self.notifications)
        pipeline.evaluate(GPTBOT, LONG_ARTICLE, observed_at=reference_time)
        pipeline.evaluate(GPTBOT, LONG_ARTICLE, observed_at=reference_time + timedelta(minutes=30))
        pipeline.evaluate(CLAUDEBOT, LONG_ARTICLE, observed_at=reference_time + timedelta(minutes=31))
        pipeline.evaluate(GPTBOT, LONG_ARTICLE, observed_at=reference_time + timedelta(minutes=61))

        actors = [r.actor_name for r in self.notifications.notified]
        assert actors == ["OpenAI", "Anthropic", "OpenAI"]

    def test_logging_sink(self, config_manager, reference_time, caplog):
        pipeline = _make_pipeline(config_manager, notification_sink=LoggingNotificationSink())
        with caplog.at_level("WARNING", logger="content_valuator"):
            pipeline.evaluate(GPTBOT, LONG_ARTICLE, observed_at=reference_time)
        assert "High-value automated access: OpenAI" in caplog.text


# ═══════════════════════════════════════════════════════════
# Sink failures
# ═══════════════════════════════════════════════════════════

class TestSinkFailures:
    """Sink failures surface as their own error kinds."""

    def test_detection_sink_failure(self, config_manager, reference_time):
        pipeline = _make_pipeline(config_manager, detection_sink=BrokenDetectionSink())
        with pytest.raises(DetectionSinkError):
            pipeline.evaluate(GPTBOT, LONG_ARTICLE, observed_at=reference_time)

    def test_notification_sink_failure(self, config_manager, reference_time):
        pipeline = _make_pipeline(config_manager, notification_sink=BrokenNotificationSink())
        with pytest.raises(NotificationSinkError):
            pipeline.evaluate(GPTBOT, LONG_ARTICLE, observed_at=reference_time)

    def test_failure_does_not_affect_valuation(self, config_manager, reference_time):
        broken = _make_pipeline(config_manager, detection_sink=BrokenDetectionSink())
        plain = _make_pipeline(config_manager)
        with pytest.raises(DetectionSinkError):
            broken.evaluate(GPTBOT, LONG_ARTICLE, observed_at=reference_time)
        assert plain.evaluate(GPTBOT, LONG_ARTICLE, observed_at=reference_time).estimated_value == 150.0

    def test_errors_are_runtime_errors(self):
        assert issubclass(DetectionSinkError, RuntimeError)
        assert issubclass(NotificationSinkError, RuntimeError)
        assert not issubclass(DetectionSinkError, NotificationSinkError)

    def test_write_only_sink_cannot_be_queried(self, config_manager):
        pipeline = _make_pipeline(config_manager, detection_sink=BrokenDetectionSink())
        with pytest.raises(NotImplementedError):
            pipeline.portfolio()


# ═══════════════════════════════════════════════════════════
# Portfolio and export
# ═══════════════════════════════════════════════════════════

class TestPortfolio:
    """Reporting over stored detections."""

    def test_portfolio_window(self, config_manager, reference_time):
        sink = InMemoryDetectionSink()
        pipeline = _make_pipeline(config_manager, detection_sink=sink)
        pipeline.evaluate(GPTBOT, LONG_ARTICLE, observed_at=reference_time - timedelta(days=2))
        pipeline.evaluate(CLAUDEBOT, LONG_ARTICLE, observed_at=reference_time)
        pipeline.evaluate(GPTBOT, "https://site.example/a.png", observed_at=reference_time + timedelta(hours=1))

        summary = pipeline.portfolio(reference_time - timedelta(days=1), reference_time + timedelta(days=1))
        assert summary.item_count == 2
        assert summary.top_actors_by_value[0][0] == "Anthropic"

        everything = pipeline.portfolio()
        assert everything.item_count == 3
        assert everything.licensing_candidate_count == 2
        assert len(sink.between(None, None)) == 3

    def test_export_records(self, config_manager, reference_time):
        pipeline = _make_pipeline(config_manager, detection_sink=InMemoryDetectionSink())
        pipeline.evaluate(GPTBOT, LONG_ARTICLE, source_identifier="198.51.100.4", observed_at=reference_time)

        exported = pipeline.export_records()
        assert len(exported) == 1
        assert exported[0]["source_identifier"] == "198.51.100.4"
        assert exported[0]["observed_at"] == reference_time.isoformat()
        assert exported[0]["valuation"]["breakdown"]["content_type"] == "article"
        assert "market_trends" in exported[0]["valuation"]["market_context"]

    def test_default_observed_at_is_utc(self, config_manager):
        pipeline = _make_pipeline(config_manager)
        record = pipeline.evaluate(GPTBOT, "https://site.example/a.png")
        assert record.observed_at.tzinfo is not None
        assert record.observed_at.utcoffset() == timedelta(0)

    def test_naive_and_aware_times_mix(self, config_manager, reference_time):
        sink = InMemoryDetectionSink()
        notifications = RecordingNotificationSink()
        pipeline = _make_pipeline(config_manager, detection_sink=sink, notification_sink=notifications)
        pipeline.evaluate(GPTBOT, LONG_ARTICLE, observed_at=reference_time)
        pipeline.evaluate(GPTBOT, LONG_ARTICLE, observed_at=datetime(2026, 3, 1, 13, 30))

        naive_start = datetime(2026, 3, 1, 13, 0)
        assert pipeline.portfolio(naive_start, datetime(2026, 3, 1, 14, 0)).item_count == 1
        assert pipeline.portfolio(reference_time).item_count == 2
        assert all(r.observed_at.tzinfo is not None for r in sink.all())
        assert len(notifications.notified) == 2

    def test_default_construction(self):
        pipeline = ValuationPipeline()
        record = pipeline.evaluate(GPTBOT, "/img/photo.jpg", observed_at=datetime(2026, 1, 1))
        assert record.features.content_type == "image"
        assert isinstance(pipeline.portfolio().item_count, int)
