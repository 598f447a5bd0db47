"""Context-aware logging and per-region timing metrics."""

import logging
import uuid
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

from .logging_config import setup_logger


@dataclass
class LogContext:
    """Correlation id, operation and metadata rendered into each log line."""

    correlation_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    operation: str = ""
    component: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def with_operation(self, operation: str) -> "LogContext":
        return LogContext(
            correlation_id=self.correlation_id,
            operation=operation,
            component=self.component,
            metadata=self.metadata.copy(),
        )

    def with_metadata(self, **kwargs) -> "LogContext":
        return LogContext(
            correlation_id=self.correlation_id,
            operation=self.operation,
            component=self.component,
            metadata={**self.metadata, **kwargs},
        )


class StructuredLogger:
    """
    Wraps the package logger, prefixing operation and correlation id.

    ``[dispatch] [1a2b3c4d] Dispatching 2 region worker(s) (max_workers=10)``
    """

    def __init__(self, name: str, level: Optional[int] = None):
        self._logger = setup_logger(name)
        if level is not None:
            self._logger.setLevel(level)

    def _render(self, message: str, context: Optional[LogContext], extra: Dict[str, Any]) -> str:
        fields = dict(context.metadata) if context else {}
        fields.update(extra)
        if context:
            message = f"[{context.correlation_id}] {message}"
            if context.operation:
                message = f"[{context.operation}] {message}"
        if fields:
            message += " (" + ", ".join(f"{k}={v}" for k, v in fields.items()) + ")"
        return message

    def _log(self, level: int, message: str, context: Optional[LogContext], **kwargs):
        if self._logger.isEnabledFor(level):
            self._logger.log(level, self._render(message, context, kwargs))

    def debug(self, message: str, context: Optional[LogContext] = None, **kwargs):
        self._log(logging.DEBUG, message, context, **kwargs)

    def info(self, message: str, context: Optional[LogContext] = None, **kwargs):
        self._log(logging.INFO, message, context, **kwargs)

    def warning(self, message: str, context: Optional[LogContext] = None, **kwargs):
        self._log(logging.WARNING, message, context, **kwargs)

    def error(self, message: str, context: Optional[LogContext] = None, **kwargs):
        self._log(logging.ERROR, message, context, **kwargs)


@dataclass
class PerformanceMetrics:
    """Timing of one region's pipeline."""

    operation: str
    start_time: float
    end_time: float
    success: bool
    error_message: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


class MetricsCollector:
    """Collects the metrics recorded by region workers."""

    def __init__(self):
        self._metrics: List[PerformanceMetrics] = []

    def record_metric(self, metric: PerformanceMetrics):
        self._metrics.append(metric)

    def get_metrics(self, operation: Optional[str] = None) -> List[PerformanceMetrics]:
        return [m for m in self._metrics if operation is None or m.operation == operation]

    def get_summary(self, operation: Optional[str] = None) -> Dict[str, Any]:
        """
        Aggregate recorded metrics.

        Returns an empty dict when nothing matches ``operation``.
        """
        metrics = self.get_metrics(operation)
        if not metrics:
            return {}

        durations = [m.duration for m in metrics]
        succeeded = sum(1 for m in metrics if m.success)
        return {
            "total_operations": len(metrics),
            "successful_operations": succeeded,
            "failed_operations": len(metrics) - succeeded,
            "success_rate": succeeded / len(metrics),
            "avg_duration": sum(durations) / len(durations),
            "max_duration": max(durations),
        }


class ObservabilityConfig:
    """Logging level override and metrics switch."""

    def __init__(self, log_level: Optional[int] = None, enable_metrics: bool = True):
        self.log_level = log_level
        self.enable_metrics = enable_metrics


def create_logger(name: str, config: ObservabilityConfig) -> StructuredLogger:
    # No explicit level: LOG_LEVEL from the environment applies.
    return StructuredLogger(name, config.log_level)


def create_metrics_collector(config: ObservabilityConfig) -> Optional[MetricsCollector]:
    return MetricsCollector() if config.enable_metrics else None
