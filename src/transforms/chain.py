"""
Ordered composition of transformations.

Mirrors how a connector applies its configured transformations: each
record passes through every transformation in turn, and processing of
that record stops as soon as one of them drops it.
"""

import logging
from collections.abc import Iterable

from utils.tracing import record_step, set_record_outcome, trace_record

from .base import Transformation
from .record import Record

logger = logging.getLogger(__name__)


class TransformationChain:
    """
    Apply several transformations to each record, in order.

    Example:
        >>> chain = TransformationChain([
        ...     AdmissionFilter({"headerKey": "skip"}),
        ...     FieldRouter({"sourceKey": "app", "toMetadata": True}),
        ... ])
        >>> chain.apply(record)
    """

    def __init__(self, transformations: Iterable[Transformation] | None = None):
        self.transformations: list[Transformation] = list(transformations or [])

    def add(self, transformation: Transformation) -> "TransformationChain":
        """Append a configured transformation."""
        self.transformations.append(transformation)

        logger.debug(
            f"Added {transformation.get_type()} at position {len(self.transformations)}"
        )
        return self

    def apply(self, record: Record) -> Record | None:
        """
        Transform one record.

        Args:
            record: Record to transform

        Returns:
            The transformed record, or None if a transformation dropped it
        """
        with trace_record(record.topic, record.kafka_partition, len(self.transformations)):
            current = record
            for transformation in self.transformations:
                previous = current
                current = transformation.apply(previous)

                if current is None:
                    record_step(transformation.get_type(), "dropped")
                    set_record_outcome("dropped")
                    logger.debug(
                        f"Record dropped by {transformation.get_type()}",
                        extra={"topic": record.topic, "transformation": transformation.get_type()},
                    )
                    return None

                record_step(transformation.get_type(), "unchanged" if current is previous else "modified")

            set_record_outcome("unchanged" if current is record else "modified")
            return current

    def apply_all(self, records: Iterable[Record]) -> list[Record]:
        """Transform several records, leaving out the dropped ones."""
        results = []
        for record in records:
            transformed = self.apply(record)
            if transformed is not None:
                results.append(transformed)
        return results

    def close(self) -> None:
        """Close every transformation in the chain."""
        for transformation in self.transformations:
            transformation.close()

    def __len__(self) -> int:
        return len(self.transformations)
