"""OpenTelemetry trace export pipeline.

Spans are created through the opentelemetry API everywhere; they are no-ops
until `install_export_pipeline` installs an SDK provider (OTEL_ENABLED=true).
`instrument_clients` adds a span per Redis command and per SQL statement.
"""

from collections.abc import Callable
import logging

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator
from sqlalchemy.ext.asyncio import AsyncEngine

from user_lookup.settings import Settings

logger = logging.getLogger("uvicorn.error")


def build_tracer_provider(settings: Settings, exporter: SpanExporter | None = None) -> TracerProvider:
    """Build an SDK tracer provider batching spans to the OTLP collector.

    Args:
        settings: Application settings (service name, collector endpoint).
        exporter: Exporter override; defaults to insecure OTLP over gRPC.
    """
    resource = Resource.create(
        {
            SERVICE_NAME: settings.otel_service_name,
            SERVICE_VERSION: settings.app_version,
        }
    )
    if exporter is None:
        exporter = OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint, insecure=True)

    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(exporter))
    return provider


def install_export_pipeline(settings: Settings) -> Callable[[], None]:
    """Install the global tracer provider and W3C propagator.

    Returns:
        Shutdown callable flushing pending spans.
    """
    provider = build_tracer_provider(settings)
    trace.set_tracer_provider(provider)
    set_global_textmap(TraceContextTextMapPropagator())
    logger.info(f"Tracing enabled: exporting to {settings.otel_exporter_otlp_endpoint}")
    return provider.shutdown


def instrument_clients(engine: AsyncEngine, tracer_provider: trace.TracerProvider | None = None) -> Callable[[], None]:
    """Trace Redis commands and SQL statements issued by the lookup clients.

    Redis instrumentation patches the client classes, so it covers clients
    created before or after this call. SQLAlchemy hooks the engine's sync core.

    Returns:
        Callable removing the instrumentation.
    """
    redis_instrumentor = RedisInstrumentor()
    if not redis_instrumentor.is_instrumented_by_opentelemetry:
        redis_instrumentor.instrument(tracer_provider=tracer_provider)

    sqlalchemy_instrumentor = SQLAlchemyInstrumentor()
    if not sqlalchemy_instrumentor.is_instrumented_by_opentelemetry:
        sqlalchemy_instrumentor.instrument(engine=engine.sync_engine, tracer_provider=tracer_provider)

    def uninstrument() -> None:
        sqlalchemy_instrumentor.uninstrument()
        redis_instrumentor.uninstrument()

    return uninstrument
