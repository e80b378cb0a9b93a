"""
Centralized logging configuration for the FHEVM client
Includes structured logging, correlation IDs, and metrics integration
"""
import logging
import logging.handlers
import json
import sys
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, TextIO, Tuple

from prometheus_client import CollectorRegistry, Counter, Histogram
from pythonjsonlogger.json import JsonFormatter

from fhevmsdk.config import get_settings

_RESERVED_ATTRS = frozenset([
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs', 'message',
    'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'taskName', 'exc_info', 'exc_text', 'stack_info',
    'correlation_id', 'getMessage'
])


class CorrelationIdFilter(logging.Filter):
    """Add correlation ID to all log records for tracing"""

    def filter(self, record):
        if not hasattr(record, 'correlation_id'):
            record.correlation_id = str(uuid.uuid4())
        return True


class StructuredFormatter(logging.Formatter):
    """Key=value formatter used when JSON output is disabled"""

    def format(self, record):
        log_obj = {
            '@timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'correlation_id': getattr(record, 'correlation_id', 'N/A'),
        }

        if record.exc_info:
            log_obj['exception'] = self.formatException(record.exc_info)

        # Custom fields passed through `extra=`
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_obj[key] = value

        return json.dumps(log_obj, default=str)


class StructuredLogger:
    """Structured logger with correlation tracking"""

    @staticmethod
    def setup_logging(
        service_name: str,
        log_level: str = "INFO",
        log_file: Optional[str] = None,
        enable_json: bool = True,
        stream: Optional[TextIO] = None
    ) -> logging.Logger:
        """Setup structured logging for a logger namespace

        Console records go to ``stream`` (stdout by default).
        """
        logger = logging.getLogger(service_name)
        logger.setLevel(getattr(logging, log_level.upper()))

        # Remove existing handlers
        logger.handlers.clear()

        if enable_json:
            formatter = JsonFormatter(
                '%(asctime)s %(levelname)s %(name)s %(correlation_id)s %(message)s',
                rename_fields={
                    'asctime': '@timestamp',
                    'levelname': 'level',
                    'name': 'logger'
                }
            )
        else:
            formatter = StructuredFormatter()

        console_handler = logging.StreamHandler(stream or sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(CorrelationIdFilter())
        logger.addHandler(console_handler)

        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=100_000_000,  # 100MB
                backupCount=10
            )
            file_handler.setFormatter(formatter)
            file_handler.addFilter(CorrelationIdFilter())
            logger.addHandler(file_handler)

        return logger


class MetricsCollector:
    """Collect client operation metrics in a Prometheus registry"""

    def __init__(
        self,
        service_name: str = "fhevmsdk",
        registry: Optional[CollectorRegistry] = None,
        enabled: bool = True
    ):
        self.service_name = service_name
        self.registry = registry or CollectorRegistry()
        self.enabled = enabled

        self.operations = Counter(
            f'{service_name}_operations_total',
            'Client operations',
            ['operation'],
            registry=self.registry
        )

        self.error_count = Counter(
            f'{service_name}_errors_total',
            'Total errors',
            ['error_type'],
            registry=self.registry
        )

        self.operation_duration = Histogram(
            f'{service_name}_operation_duration_seconds',
            'Operation duration',
            ['operation'],
            buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
            registry=self.registry
        )

    def track_operation(self, operation: str, duration: Optional[float] = None):
        """Count a completed operation and record its duration"""
        if not self.enabled:
            return
        self.operations.labels(operation=operation).inc()
        if duration is not None:
            self.operation_duration.labels(operation=operation).observe(duration)

    def track_error(self, error_type: str):
        """Track error metrics"""
        if self.enabled:
            self.error_count.labels(error_type=error_type).inc()

    def sample(self, name: str, **labels) -> float:
        """Current value of a metric sample, 0.0 when never recorded"""
        value = self.registry.get_sample_value(f'{self.service_name}_{name}', labels)
        return value or 0.0


_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Get or create the process-wide metrics collector"""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector(enabled=get_settings().metrics_enabled)
    return _metrics


def configure_logging(
    service_name: str = "fhevmsdk",
    stream: Optional[TextIO] = None
) -> Tuple[logging.Logger, MetricsCollector]:
    """Configure logging and metrics from settings"""
    config = get_settings()

    logger = StructuredLogger.setup_logging(
        service_name=service_name,
        log_level=config.log_level,
        log_file=config.log_file,
        enable_json=config.log_format.lower() == "json",
        stream=stream
    )
    metrics = get_metrics()

    logger.info(f"{service_name} logging configured", extra={
        'log_level': config.log_level,
        'log_format': config.log_format,
        'metrics_enabled': metrics.enabled
    })

    return logger, metrics


class LoggedOperation:
    """Context manager for logging operations with timing

    Works inside coroutines as well; the timed block may contain awaits.
    """

    def __init__(
        self,
        logger: logging.Logger,
        operation: str,
        metrics: Optional[MetricsCollector] = None,
        **kwargs
    ):
        self.logger = logger
        self.operation = operation
        self.metrics = metrics
        self.extra = kwargs
        self.start_time = None

    def __enter__(self):
        self.start_time = time.monotonic()
        self.logger.debug(f"Starting {self.operation}", extra=self.extra)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.monotonic() - self.start_time

        if exc_type:
            self.logger.error(
                f"{self.operation} failed after {duration:.2f}s: {exc_val}",
                extra={**self.extra, 'duration_seconds': duration}
            )
            if self.metrics:
                self.metrics.track_error(exc_type.__name__)
        else:
            self.logger.info(
                f"Completed {self.operation} in {duration:.2f}s",
                extra={**self.extra, 'duration_seconds': duration}
            )
            if self.metrics:
                self.metrics.track_operation(self.operation, duration)

        return False  # Don't suppress exceptions
