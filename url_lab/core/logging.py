"""
Structured logging and telemetry for url_lab.

structlog renders through the standard library logger. Every record is
tagged with the component name and the current correlation ID (one per CLI
invocation). OpenTelemetry spans and call counters are only produced once
:func:`configure_telemetry` has run with an endpoint.
"""

import logging
import sys
import time
import uuid
from contextlib import contextmanager
from functools import wraps
from typing import Optional

import structlog
from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from .config import UrlLabSettings, get_settings

_is_configured = False
_logger_context = {}
_tracer = None
_meter = None

# bookkeeping keys kept out of rendered records
_PRIVATE_CONTEXT = ("correlation_id", "operation_start_time")


class CorrelationIDProcessor:
    """Copy the correlation ID and any :func:`log_context` values into the record."""

    def __call__(self, logger, method_name, event_dict):
        event_dict.setdefault(
            "correlation_id", _logger_context.get("correlation_id", "unknown")
        )
        for key, value in _logger_context.items():
            if key not in _PRIVATE_CONTEXT:
                event_dict.setdefault(key, value)
        return event_dict


class ComponentProcessor:
    """Tag the record with the component and logger name."""

    def __call__(self, logger, method_name, event_dict):
        event_dict["component"] = "url_lab"
        if "logger" not in event_dict and hasattr(logger, "name"):
            event_dict["logger"] = logger.name
        return event_dict


def configure_structured_logging(
    settings: Optional[UrlLabSettings] = None, force: bool = False
) -> None:
    """
    Set up structlog and the ``url_lab`` stdlib logger.

    Records go to stderr so command output on stdout stays pipeable.

    Args:
        settings: Configuration settings (uses global settings if None)
        force: Reconfigure even if logging was already set up
    """
    global _is_configured

    if _is_configured and not force:
        return

    if settings is None:
        settings = get_settings()

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.structured_logging
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            CorrelationIDProcessor(),
            ComponentProcessor(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=False,
    )

    level = getattr(logging, settings.log_level_name)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    package_logger = logging.getLogger("url_lab")
    package_logger.setLevel(logging.DEBUG if settings.debug else level)
    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(file_handler)

    _is_configured = True


def configure_telemetry(settings: Optional[UrlLabSettings] = None) -> None:
    """Install OTLP trace and metric exporters when telemetry is enabled."""
    global _tracer, _meter

    if settings is None:
        settings = get_settings()

    if not settings.telemetry_enabled or not settings.telemetry_endpoint:
        return

    from url_lab import __version__

    resource = Resource.create(
        {
            "service.name": "url_lab",
            "service.version": __version__,
            "deployment.environment": "development" if settings.debug else "production",
        }
    )

    trace_provider = TracerProvider(resource=resource)
    trace_provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.telemetry_endpoint))
    )
    trace.set_tracer_provider(trace_provider)

    metric_reader = PeriodicExportingMetricReader(
        exporter=OTLPMetricExporter(endpoint=settings.telemetry_endpoint),
        export_interval_millis=10000,
    )
    metrics.set_meter_provider(
        MeterProvider(resource=resource, metric_readers=[metric_reader])
    )

    _tracer = trace.get_tracer("url_lab")
    _meter = metrics.get_meter("url_lab")
    metrics_collector.bind(_meter)


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, named after the calling module by default."""
    if not _is_configured:
        configure_structured_logging()

    if name is None:
        import inspect

        frame = inspect.currentframe().f_back
        name = frame.f_globals.get("__name__", "unknown")

    return structlog.get_logger(name)


def set_correlation_id(correlation_id: str = None) -> str:
    """
    Set the ID that ties together the records of one invocation.

    A random UUID is used when ``correlation_id`` is None.
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    _logger_context["correlation_id"] = correlation_id
    return correlation_id


def clear_context() -> None:
    """Drop the correlation ID and all context values."""
    _logger_context.clear()


@contextmanager
def log_context(**kwargs):
    """
    Add ``kwargs`` to every record logged inside the block.

    Example:
        with log_context(command="query"):
            logger.info("Encoding payload")
    """
    saved = _logger_context.copy()
    _logger_context.update(kwargs)
    try:
        yield
    finally:
        _logger_context.clear()
        _logger_context.update(saved)


@contextmanager
def performance_context(operation_name: str):
    """
    Log the duration of the block at DEBUG, or an error if it raises.

    Example:
        with performance_context("build_query_string"):
            encode(payload)
    """
    logger = get_logger(__name__)
    start_time = time.time()

    def elapsed_ms():
        return round((time.time() - start_time) * 1000, 2)

    with log_context(operation=operation_name, operation_start_time=start_time):
        logger.debug("Operation started", operation=operation_name)
        try:
            yield
        except Exception as e:
            logger.error(
                "Operation failed",
                operation=operation_name,
                duration_ms=elapsed_ms(),
                status="error",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
        logger.debug(
            "Operation completed",
            operation=operation_name,
            duration_ms=elapsed_ms(),
            status="success",
        )


def traced(operation_name: str = None):
    """
    Run the decorated function inside a span once telemetry is configured.

    Example:
        @traced("url_lab.parse")
        def parse(raw: str):
            ...
    """

    def decorator(func):
        name = operation_name or f"{func.__module__}.{func.__name__}"

        @wraps(func)
        def wrapper(*args, **kwargs):
            if _tracer is None:
                return func(*args, **kwargs)

            with _tracer.start_as_current_span(name) as span:
                span.set_attribute("function.name", func.__name__)
                span.set_attribute("function.module", func.__module__)
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    span.set_attribute("operation.status", "error")
                    span.set_attribute("error.type", type(e).__name__)
                    span.set_attribute("error.message", str(e))
                    raise
                span.set_attribute("operation.status", "success")
                return result

        return wrapper

    return decorator


class MetricsCollector:
    """Counters for function-table calls."""

    def __init__(self):
        self.call_counter = None
        self.failure_counter = None

    def bind(self, meter) -> None:
        self.call_counter = meter.create_counter(
            "url_lab_calls_total", description="Total number of function calls"
        )
        self.failure_counter = meter.create_counter(
            "url_lab_failures_total",
            description="Calls that returned an error or fell back to raw input",
        )

    def record_call(self, function: str, success: bool = True):
        if self.call_counter:
            self.call_counter.add(1, {"function": function})
        if not success and self.failure_counter:
            self.failure_counter.add(1, {"function": function})


metrics_collector = MetricsCollector()


def setup_logging_and_telemetry(settings: Optional[UrlLabSettings] = None) -> None:
    """Configure logging, then telemetry if enabled."""
    if settings is None:
        settings = get_settings()

    configure_structured_logging(settings, force=True)
    if settings.telemetry_enabled:
        configure_telemetry(settings)

    get_logger(__name__).info(
        "Logging and telemetry configured",
        structured_logging=settings.structured_logging,
        telemetry_enabled=settings.telemetry_enabled,
        log_level=settings.log_level_name,
    )


def log_url_operation(
    function: str,
    success: bool = True,
    error: str = None,
    **fields,
):
    """Log a function-table call at DEBUG and count it."""
    logger = get_logger("url_lab.calls")
    metrics_collector.record_call(function, success)

    log_data = {"function": function, "event_type": "url_operation", **fields}
    if error:
        logger.debug("URL operation failed", error=error, **log_data)
    else:
        logger.debug("URL operation completed", **log_data)
