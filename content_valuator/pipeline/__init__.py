"""Valuation pipeline: the caller-side shell around the core modules

Modules:
    - sinks: detection and notification sink interfaces and in-process implementations
    - valuation_pipeline: classify -> extract -> price -> record -> notify
"""

from content_valuator.pipeline.sinks import (
    DetectionSink,
    DetectionSinkError,
    InMemoryDetectionSink,
    LoggingNotificationSink,
    NotificationSink,
    NotificationSinkError,
)
from content_valuator.pipeline.valuation_pipeline import ValuationPipeline

__all__ = [
    # Sinks
    "DetectionSink",
    "DetectionSinkError",
    "InMemoryDetectionSink",
    "LoggingNotificationSink",
    "NotificationSink",
    "NotificationSinkError",
    # Pipeline
    "ValuationPipeline",
]
