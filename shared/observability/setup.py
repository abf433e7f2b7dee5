import logging
import structlog
from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

# OpenTelemetry
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource, SERVICE_NAME
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from shared.config import settings

# 1. Structlog Processor: Injects Trace/Span IDs into every log line
def add_otel_ids(logger, log_method, event_dict):
    span = trace.get_current_span()
    if span.is_recording():
        ctx = span.get_span_context()
        event_dict["trace_id"] = trace.format_trace_id(ctx.trace_id)
        event_dict["span_id"] = trace.format_span_id(ctx.span_id)
    return event_dict

# 2. Configure Structlog for JSON output
def configure_logging():
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_otel_ids,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(settings.LOG_LEVEL)
        ),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

# 3. Configure OpenTelemetry Tracing
_provider: TracerProvider | None = None

def configure_tracing(app: FastAPI, service_name: str):
    global _provider
    # One provider per process; every mounted sub-app shares it
    if _provider is None:
        resource = Resource.create({SERVICE_NAME: service_name})
        _provider = TracerProvider(resource=resource)
        trace.set_tracer_provider(_provider)

        # Export to Jaeger via OTLP gRPC (defaults to localhost:4317)
        exporter = OTLPSpanExporter(endpoint=settings.OTLP_ENDPOINT, insecure=True)
        _provider.add_span_processor(BatchSpanProcessor(exporter))

    # Auto-instrument FastAPI (creates spans for all incoming requests)
    FastAPIInstrumentor.instrument_app(app)

# 4. Configure Prometheus Metrics
def configure_metrics(app: FastAPI):
    # Tracks HTTP request latency, status codes, etc. and exposes /metrics
    Instrumentator().instrument(app).expose(app)

# --- THE MASTER SETUP FUNCTION ---
def setup_observability(app: FastAPI, service_name: str, metrics: bool = False):
    """
    Bootstraps Logging, Tracing, and (optionally) Metrics for a FastAPI app.

    Mounted sub-apps leave `metrics` off: the root cluster app instruments
    every request once and owns the single /metrics endpoint.
    """
    configure_logging()
    if settings.OTEL_ENABLED:
        configure_tracing(app, service_name)
    if metrics:
        configure_metrics(app)
