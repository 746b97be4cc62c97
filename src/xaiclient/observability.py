"""Logging and tracing setup for applications using the client.

The client itself only calls ``structlog.get_logger`` and
``opentelemetry.trace.get_tracer``; nothing is configured on import.  An
application that wants JSON logs and exported spans calls
:func:`configure_logging` and :func:`configure_tracing` once at startup.
"""

import structlog
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from xaiclient.config import Settings


def configure_logging(log_level: str = "INFO") -> None:
    """Render structlog events as JSON lines at *log_level* and above."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            structlog.stdlib.NAME_TO_LEVEL.get(log_level.lower(), 20)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_tracing(service_name: str, otlp_endpoint: str) -> TracerProvider:
    """Install a global tracer provider exporting spans over OTLP/HTTP.

    Returns the provider so the caller can ``shutdown()`` it on exit.
    """
    resource = Resource.create({"service.name": service_name})
    tracer_provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(endpoint=f"{otlp_endpoint.rstrip('/')}/v1/traces")
    tracer_provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(tracer_provider)
    return tracer_provider


def configure_from_settings(settings: Settings) -> TracerProvider | None:
    """Apply :func:`configure_logging` and, when an endpoint is set, :func:`configure_tracing`."""
    configure_logging(settings.log_level)
    if settings.otel_exporter_otlp_endpoint is None:
        return None
    return configure_tracing(settings.otel_service_name, settings.otel_exporter_otlp_endpoint)
