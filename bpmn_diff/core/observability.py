"""
Observability Infrastructure

Provides structured logging, tracing, and metrics collection for bpmn-diff.
Logging is handled by loguru; library modules keep using the standard
``logging`` module and are routed into loguru once the manager is initialized.
Tracing and metrics go through OpenTelemetry.
"""

import contextlib
import functools
import json
import logging
import sys
import time
import traceback
from enum import Enum
from typing import Any, Callable, Dict, Optional, TypeVar, Union

from loguru import logger
from opentelemetry import metrics, trace
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import InMemoryMetricReader
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

F = TypeVar("F", bound=Callable[..., Any])


class LogLevel(str, Enum):
    """Log level enumeration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ObservabilityConfig:
    """Configuration for observability."""

    def __init__(
        self,
        service_name: str = "bpmn-diff",
        log_level: Union[str, LogLevel] = LogLevel.INFO,
        json_logs: bool = False,
        enable_tracing: bool = True,
        console_traces: bool = False,
        enable_metrics: bool = True,
        sink: Any = None,
        configure_logging: bool = True,
    ):
        """Initialize observability configuration."""
        self.service_name = service_name
        self.configure_logging = configure_logging
        self.log_level = log_level if isinstance(log_level, str) else log_level.value
        self.json_logs = json_logs
        self.enable_tracing = enable_tracing
        self.console_traces = console_traces
        self.enable_metrics = enable_metrics
        # Logs go to stderr so that CLI output on stdout stays machine-readable
        self.sink = sink if sink is not None else sys.stderr


class JSONFormatter:
    """Custom JSON formatter for loguru."""

    def __call__(self, record: Dict[str, Any]) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": record["time"].isoformat(),
            "level": record["level"].name,
            "logger": record["name"],
            "module": record["module"],
            "function": record["function"],
            "line": record["line"],
            "message": record["message"],
        }

        if record["extra"]:
            log_data["extra"] = record["extra"]

        if record["exception"]:
            log_data["exception"] = {
                "type": record["exception"].type.__name__,
                "value": str(record["exception"].value),
                "traceback": "".join(
                    traceback.format_exception(
                        record["exception"].type,
                        record["exception"].value,
                        record["exception"].traceback,
                    )
                ),
            }

        # loguru treats the returned string as a markup-aware format template
        serialized = json.dumps(log_data, default=str).replace("<", "\\u003c")
        return serialized.replace("{", "{{").replace("}", "}}") + "\n"


class InterceptHandler(logging.Handler):
    """Route standard library log records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: Union[str, int] = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


class ObservabilityManager:
    """Centralized observability management."""

    _instance: Optional["ObservabilityManager"] = None
    _initialized: bool = False

    def __init__(self, config: ObservabilityConfig):
        """Initialize observability manager."""
        self.config = config
        if config.configure_logging:
            self._setup_logging()

        if config.enable_tracing:
            self._setup_tracing()

        if config.enable_metrics:
            self._setup_metrics()

        logger.debug(
            f"Observability initialized: service={config.service_name}, "
            f"log_level={config.log_level}"
        )

    def _setup_logging(self) -> None:
        """Set up structured logging with loguru."""
        logger.remove()

        log_format = (
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        )

        if self.config.json_logs:
            logger.add(
                self.config.sink,
                format=JSONFormatter(),
                level=self.config.log_level,
                colorize=False,
            )
        else:
            logger.add(
                self.config.sink,
                format=log_format,
                level=self.config.log_level,
                colorize=False,
                backtrace=True,
                diagnose=False,
            )

        logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    def _setup_tracing(self) -> None:
        """Set up OpenTelemetry tracing."""
        resource = Resource(attributes={SERVICE_NAME: self.config.service_name})
        tracer_provider = TracerProvider(resource=resource)

        if self.config.console_traces:
            tracer_provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

        # Private provider: the global one can only be set once per process
        self.tracer = tracer_provider.get_tracer(__name__)
        logger.debug("OpenTelemetry tracing initialized")

    def _setup_metrics(self) -> None:
        """Set up OpenTelemetry metrics."""
        self.metric_reader = InMemoryMetricReader()
        resource = Resource(attributes={SERVICE_NAME: self.config.service_name})

        meter_provider = MeterProvider(resource=resource, metric_readers=[self.metric_reader])
        self.meter = meter_provider.get_meter(__name__)

        self.counter = self.meter.create_counter(
            "bpmn_diff_events_total",
            description="Total number of counted comparison events",
            unit="1",
        )
        self.histogram = self.meter.create_histogram(
            "bpmn_diff_duration_ms",
            description="Operation duration in milliseconds",
            unit="ms",
        )

        logger.debug("OpenTelemetry metrics initialized")

    @classmethod
    def initialize(cls, config: Optional[ObservabilityConfig] = None) -> "ObservabilityManager":
        """Initialize or get singleton instance.

        Only entry points (CLI, API server, tests) should call this: with
        ``configure_logging`` set it replaces the root logging handlers.
        """
        if cls._instance is None or not cls._initialized:
            if config is None:
                config = ObservabilityConfig()
            cls._instance = cls(config)
            cls._initialized = True
        return cls._instance

    @classmethod
    def get_instance(cls) -> "ObservabilityManager":
        """Get singleton instance.

        Without a prior ``initialize`` call this creates a tracing/metrics-only
        manager that leaves logging untouched.
        """
        if cls._instance is None:
            cls._instance = cls(ObservabilityConfig(configure_logging=False))
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton so the next call re-initializes it."""
        cls._instance = None
        cls._initialized = False


@contextlib.contextmanager
def span(name: str, attributes: Optional[Dict[str, Any]] = None):
    """Context manager for creating spans."""
    manager = ObservabilityManager.get_instance()

    if hasattr(manager, "tracer"):
        with manager.tracer.start_as_current_span(name) as span_obj:
            if attributes:
                for key, value in attributes.items():
                    span_obj.set_attribute(key, value)
            yield span_obj
    else:
        yield None


def log_execution(
    level: Union[str, LogLevel] = LogLevel.DEBUG,
    include_args: bool = False,
    include_result: bool = False,
    include_duration: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for logging function execution.

    Args:
        level: Logging level
        include_args: Whether to log function arguments
        include_result: Whether to log function result
        include_duration: Whether to log execution duration
    """
    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            log_level = level if isinstance(level, str) else level.value
            func_name = f"{func.__module__}.{func.__qualname__}"

            log_data: Dict[str, Any] = {"function": func_name}

            if include_args:
                arg_names = func.__code__.co_varnames[: func.__code__.co_argcount]
                log_data["args"] = {k: str(v)[:80] for k, v in zip(arg_names, args)}
                log_data["kwargs"] = {k: str(v)[:80] for k, v in kwargs.items()}

            start_time = time.time()

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                if include_duration:
                    log_data["duration_ms"] = (time.time() - start_time) * 1000
                log_data["error"] = str(e)
                logger.bind(**log_data).warning(f"Function failed: {func_name}")
                raise

            if include_result:
                log_data["result"] = str(result)[:200]

            if include_duration:
                duration_ms = (time.time() - start_time) * 1000
                log_data["duration_ms"] = duration_ms
                record_metric(f"{func.__name__}_duration", duration_ms)

            logger.bind(**log_data).log(log_level, f"Function executed: {func_name}")
            return result

        return wrapper  # type: ignore

    return decorator


def record_metric(
    metric_name: str,
    value: Union[int, float],
    attributes: Optional[Dict[str, str]] = None,
) -> None:
    """
    Record a metric value with OpenTelemetry.

    Integers are added to the event counter, floats are recorded in the
    duration histogram. The metric name travels as the ``metric`` attribute.

    Args:
        metric_name: Name of the metric
        value: Metric value
        attributes: Optional attributes for the metric
    """
    manager = ObservabilityManager.get_instance()
    attrs = {"metric": metric_name, **(attributes or {})}

    if hasattr(manager, "counter") and hasattr(manager, "histogram"):
        if metric_name.endswith("_total") or isinstance(value, int):
            manager.counter.add(value, attributes=attrs)
        else:
            manager.histogram.record(value, attributes=attrs)

    logger.bind(metric=metric_name, value=value).trace(f"Metric recorded: {metric_name}={value}")


class Timer:
    """Context manager for timing operations."""

    def __init__(self, name: str, log: bool = True):
        """Initialize timer."""
        self.name = name
        self.log = log
        self.start_time: float = 0
        self.elapsed: float = 0

    def __enter__(self) -> "Timer":
        """Enter context."""
        self.start_time = time.time()
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context."""
        self.elapsed = time.time() - self.start_time
        if self.log:
            logger.debug(f"Timer '{self.name}': {self.elapsed:.3f}s")
            record_metric(f"{self.name}_duration", self.elapsed * 1000)


__all__ = [
    "InterceptHandler",
    "LogLevel",
    "ObservabilityConfig",
    "ObservabilityManager",
    "span",
    "log_execution",
    "record_metric",
    "Timer",
]
