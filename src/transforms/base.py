"""
Base transformation class and shared metrics.

A transformation is configured once from a flat property set and then
applied to records one at a time. apply() returns the record to pass on
(the same instance or a modified copy) or None to drop it.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from prometheus_client import Counter, Histogram

from utils.metrics import get_or_create_metric

from .config import ConfigDef
from .record import Record

logger = logging.getLogger(__name__)


# Metrics
RECORDS_TRANSFORMED = get_or_create_metric(
    lambda: Counter(
        "records_transformed_total",
        "Total records handled by a transformation",
        ["transformation", "outcome"],
    ),
    "records_transformed_total",
)

TRANSFORMATION_TIME = get_or_create_metric(
    lambda: Histogram(
        "transformation_seconds",
        "Time to apply a transformation to one record",
        ["transformation"],
        buckets=[0.00001, 0.00005, 0.0001, 0.0005, 0.001, 0.005, 0.01],
    ),
    "transformation_seconds",
)

TRANSFORMATION_ERRORS = get_or_create_metric(
    lambda: Counter(
        "transformation_errors_total",
        "Transformation errors",
        ["transformation", "error_type"],
    ),
    "transformation_errors_total",
)


class Transformation(ABC):
    """Base class for single-record transformations."""

    OVERVIEW_DOC = ""
    CONFIG_DEF = ConfigDef()

    def __init__(self, props: Mapping[str, Any] | None = None):
        """
        Initialize the transformation.

        Args:
            props: Optional property set; when given, configure() is called
        """
        if props is not None:
            self.configure(props)

    @abstractmethod
    def configure(self, props: Mapping[str, Any]) -> None:
        """
        Validate a property set and freeze the resulting configuration.

        Raises:
            ConfigError: If the configuration is invalid
        """
        pass

    @abstractmethod
    def apply(self, record: Record) -> Record | None:
        """
        Apply the transformation to one record.

        Returns:
            The record to pass downstream, or None to drop it
        """
        pass

    def config(self) -> ConfigDef:
        """Get the option definitions this transformation accepts."""
        return self.CONFIG_DEF

    def close(self) -> None:
        pass

    def get_type(self) -> str:
        """Get transformation type for metrics."""
        return self.__class__.__name__

    def _record_outcome(self, outcome: str) -> None:
        RECORDS_TRANSFORMED.labels(transformation=self.get_type(), outcome=outcome).inc()

    def _record_error(self, error: Exception) -> None:
        TRANSFORMATION_ERRORS.labels(
            transformation=self.get_type(),
            error_type=type(error).__name__,
        ).inc()

    def _log_context(self, record: Record, outcome: str) -> dict[str, Any]:
        """Per-record fields passed to log calls through ``extra``."""
        return {
            "topic": record.topic,
            "partition": record.kafka_partition,
            "transformation": self.get_type(),
            "outcome": outcome,
        }
