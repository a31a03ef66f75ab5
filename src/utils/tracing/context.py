"""
Span helpers for records passing through a transformation chain.

One span covers one record. Each transformation the record passes through
adds a step event, and the span ends with the overall outcome of the record
(modified, unchanged, dropped or error).
"""

from contextlib import contextmanager

from opentelemetry import trace

from .tracer import get_tracer

TOPIC_ATTRIBUTE = "record.topic"
PARTITION_ATTRIBUTE = "record.partition"
TRANSFORMATION_COUNT_ATTRIBUTE = "record.transformation_count"
OUTCOME_ATTRIBUTE = "record.outcome"
DROPPED_BY_ATTRIBUTE = "record.dropped_by"
STEP_EVENT = "transformation.applied"


@contextmanager
def trace_record(
    topic: str,
    partition: int | None,
    transformation_count: int,
    operation_name: str = "transform_record",
):
    """
    Trace one record through a chain of transformations.

    Args:
        topic: Topic the record came from
        partition: Partition of the record, if known
        transformation_count: Number of transformations in the chain
        operation_name: Span name

    Yields:
        The record span

    Example:
        >>> with trace_record(record.topic, record.kafka_partition, len(chain)):
        ...     record_step("FieldRouter", "modified")
        ...     set_record_outcome("modified")
    """
    attributes = {
        TOPIC_ATTRIBUTE: topic,
        TRANSFORMATION_COUNT_ATTRIBUTE: transformation_count,
    }
    if partition is not None:
        attributes[PARTITION_ATTRIBUTE] = partition

    with get_tracer().start_as_current_span(
        operation_name,
        kind=trace.SpanKind.INTERNAL,
        attributes=attributes,
        record_exception=False,
    ) as span:
        try:
            yield span
        except Exception as e:
            span.set_attribute("error", True)
            span.set_attribute(OUTCOME_ATTRIBUTE, "error")
            span.set_attribute("error.type", type(e).__name__)
            span.record_exception(e)
            raise


def record_step(transformation: str, outcome: str) -> None:
    """
    Add a step event for one transformation to the current record span.

    A "dropped" step also marks the span with the dropping transformation.
    """
    span = trace.get_current_span()
    if not span.is_recording():
        return

    span.add_event(STEP_EVENT, attributes={"transformation": transformation, "outcome": outcome})
    if outcome == "dropped":
        span.set_attribute(DROPPED_BY_ATTRIBUTE, transformation)


def set_record_outcome(outcome: str) -> None:
    """Set the overall outcome on the current record span."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attribute(OUTCOME_ATTRIBUTE, outcome)
