"""Context-aware logging and provider request metrics for pipeline runs."""

import logging
import uuid
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from .logging_config import setup_logger


def new_run_id() -> str:
    return uuid.uuid4().hex[:8]


@dataclass(frozen=True)
class LogContext:
    """Fields attached to every message logged for one unit of work."""

    run_id: str = field(default_factory=new_run_id)
    operation: str = ""
    component: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def with_metadata(self, **kwargs: Any) -> "LogContext":
        return replace(self, metadata={**self.metadata, **kwargs})

    def prefix(self) -> str:
        parts = [self.run_id] + [p for p in (self.component, self.operation) if p]
        return "[" + "/".join(parts) + "]"


class StructuredLogger:
    """
    Logger that renders a LogContext and keyword fields into the message.

    ``logger.info("Batch done", context, failed=2)`` logs
    ``[1a2b3c4d/batch_processor/process_batch] Batch done (failed=2)``.
    """

    def __init__(self, name: str, level: Optional[str] = None):
        self._logger = setup_logger(name, level=level, format_type="simple")

    @property
    def name(self) -> str:
        return self._logger.name

    def set_level(self, level: int) -> None:
        self._logger.setLevel(level)

    def _log(
        self,
        level: int,
        message: str,
        context: Optional[LogContext] = None,
        **kwargs: Any,
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        fields = {**context.metadata, **kwargs} if context else dict(kwargs)
        if context:
            message = f"{context.prefix()} {message}"
        if fields:
            message = f"{message} ({', '.join(f'{k}={v}' for k, v in fields.items())})"
        self._logger.log(level, message)

    def debug(self, message: str, context: Optional[LogContext] = None, **kwargs: Any):
        self._log(logging.DEBUG, message, context, **kwargs)

    def info(self, message: str, context: Optional[LogContext] = None, **kwargs: Any):
        self._log(logging.INFO, message, context, **kwargs)

    def warning(self, message: str, context: Optional[LogContext] = None, **kwargs: Any):
        self._log(logging.WARNING, message, context, **kwargs)

    def error(self, message: str, context: Optional[LogContext] = None, **kwargs: Any):
        self._log(logging.ERROR, message, context, **kwargs)


@dataclass
class RequestMetric:
    """Timing and result of one provider request attempt."""

    operation: str
    start_time: float
    end_time: float
    success: bool
    status: Optional[int] = None
    error_message: Optional[str] = None
    query: str = ""

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


class MetricsCollector:
    """In-memory collector for provider request metrics of a run."""

    def __init__(self):
        self._metrics: List[RequestMetric] = []

    def record_metric(self, metric: RequestMetric) -> None:
        self._metrics.append(metric)

    def get_metrics(self, operation: Optional[str] = None) -> List[RequestMetric]:
        if operation:
            return [m for m in self._metrics if m.operation == operation]
        return list(self._metrics)

    def get_summary(self, operation: Optional[str] = None) -> Dict[str, Any]:
        """
        Summarize recorded attempts, optionally for one operation.

        Returns an empty dict when nothing was recorded. ``status_counts``
        maps each HTTP status seen to how often it occurred.
        """
        metrics = self.get_metrics(operation)
        if not metrics:
            return {}

        durations = [m.duration for m in metrics]
        successful = sum(1 for m in metrics if m.success)
        return {
            "total_operations": len(metrics),
            "successful_operations": successful,
            "failed_operations": len(metrics) - successful,
            "success_rate": successful / len(metrics),
            "avg_duration": sum(durations) / len(durations),
            "max_duration": max(durations),
            "status_counts": dict(
                Counter(m.status for m in metrics if m.status is not None)
            ),
        }

    def clear_metrics(self) -> None:
        self._metrics.clear()


def create_logger(name: str, level: Optional[str] = None) -> StructuredLogger:
    """Create a structured logger; ``level`` falls back to LOG_LEVEL."""
    return StructuredLogger(name, level)
