"""Detection and notification sinks used by the valuation pipeline"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from content_valuator.models.detection import DetectionRecord
from content_valuator.utils.logger import get_logger

logger = get_logger(__name__)


class DetectionSinkError(RuntimeError):
    """A detection record could not be stored."""


class NotificationSinkError(RuntimeError):
    """A high-value notification could not be delivered."""


class DetectionSink(ABC):
    """Durable storage for detection records."""

    @abstractmethod
    def record(self, record: DetectionRecord) -> None:
        ...

    def between(self, start: Optional[datetime], end: Optional[datetime]) -> List[DetectionRecord]:
        """Records observed within [start, end). Optional for write-only sinks."""
        raise NotImplementedError(f"{type(self).__name__} does not support queries")


class NotificationSink(ABC):
    """Callback for valuations above the caller's threshold."""

    @abstractmethod
    def notify(self, record: DetectionRecord) -> None:
        ...


class InMemoryDetectionSink(DetectionSink):
    """
    List-backed detection store, kept in arrival order.

    Usage:
        sink = InMemoryDetectionSink()
        pipeline = ValuationPipeline(detection_sink=sink)
        records = sink.between(start, end)
    """

    def __init__(self) -> None:
        self._records: List[DetectionRecord] = []

    def record(self, record: DetectionRecord) -> None:
        self._records.append(record)

    def between(self, start: Optional[datetime], end: Optional[datetime]) -> List[DetectionRecord]:
        return [
            r for r in self._records
            if (start is None or r.observed_at >= start) and (end is None or r.observed_at < end)
        ]

    def all(self) -> List[DetectionRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)


class LoggingNotificationSink(NotificationSink):
    """Writes high-value detections to the application log."""

    def notify(self, record: DetectionRecord) -> None:
        logger.warning(
            "High-value automated access: %s accessed %s (value %.2f, %s potential)",
            record.actor_name,
            record.features.locator or "-",
            record.estimated_value,
            record.valuation.licensing_potential,
        )
