"""
Tracer initialization and configuration for OpenTelemetry.

Provides setup functions for tracing record transformations with an OTLP
exporter and an optional console exporter for debugging.
"""

import logging
import os

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

logger = logging.getLogger(__name__)

# Global tracer instance
_tracer: trace.Tracer | None = None
_provider: TracerProvider | None = None
_is_initialized = False


def initialize_tracing(
    service_name: str = "kafka-record-transforms",
    otlp_endpoint: str | None = None,
    console_export: bool = False,
) -> trace.Tracer:
    """
    Initialize tracing with OpenTelemetry.

    Args:
        service_name: Name of the service for identification
        otlp_endpoint: OTLP collector endpoint (e.g., "localhost:4317").
            Falls back to the OTLP_ENDPOINT environment variable; when neither
            is set no OTLP exporter is configured.
        console_export: If True, also export spans to the console

    Returns:
        Configured tracer instance
    """
    global _tracer, _provider, _is_initialized

    if _is_initialized:
        logger.warning("Tracing already initialized, returning existing tracer")
        return _tracer

    resource = Resource(attributes={
        SERVICE_NAME: service_name
    })
    provider = TracerProvider(resource=resource)

    exporters = []

    if otlp_endpoint is None:
        otlp_endpoint = os.getenv("OTLP_ENDPOINT")

    if otlp_endpoint:
        try:
            otlp_exporter = OTLPSpanExporter(
                endpoint=otlp_endpoint,
                insecure=True
            )
            provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
            exporters.append("OTLP")
            logger.info(f"OTLP exporter configured: {otlp_endpoint}")
        except Exception as e:
            logger.warning(f"Failed to configure OTLP exporter: {e}")

    if console_export or os.getenv("TRACE_CONSOLE", "").lower() == "true":
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        exporters.append("Console")
        logger.info("Console exporter configured")

    if not exporters:
        logger.info("No trace exporters configured, spans will not be exported")

    # Not installed as the global tracer provider; the host pipeline owns that.
    _provider = provider
    _tracer = provider.get_tracer(service_name)
    _is_initialized = True

    logger.info(
        f"Tracing initialized: {service_name} "
        f"(exporters: {', '.join(exporters) or 'none'})"
    )

    return _tracer


def get_tracer() -> trace.Tracer:
    """
    Get the tracer instance.

    Initializes tracing with defaults if not already initialized.
    """
    global _tracer

    if _tracer is None:
        logger.debug("Tracer not initialized, initializing with defaults")
        _tracer = initialize_tracing()

    return _tracer


def shutdown_tracing() -> None:
    """
    Shutdown tracing and flush pending spans.

    Should be called before application exit.
    """
    global _tracer, _provider, _is_initialized

    if _is_initialized:
        try:
            _provider.shutdown()
            logger.info("Tracing shutdown complete")
        except Exception as e:
            logger.error(f"Error during tracing shutdown: {e}")
        finally:
            _tracer = None
            _provider = None
            _is_initialized = False
