"""
Tracing of record transformations using OpenTelemetry.

Usage:
    from utils.tracing import initialize_tracing, trace_record

    initialize_tracing(service_name="log-router", otlp_endpoint="localhost:4317")

    with trace_record(record.topic, record.kafka_partition, len(chain)):
        chain.apply(record)
"""

from .context import record_step, set_record_outcome, trace_record
from .tracer import get_tracer, initialize_tracing, shutdown_tracing

__all__ = [
    "initialize_tracing",
    "get_tracer",
    "shutdown_tracing",
    "trace_record",
    "record_step",
    "set_record_outcome",
]
