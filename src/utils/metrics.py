"""
Prometheus metric helpers.

Usage:
    from utils.metrics import get_or_create_metric

    RECORDS_TOTAL = get_or_create_metric(
        lambda: Counter("records_total", "Total records", ["transformation"]),
        "records_total",
    )
"""

import logging
from collections.abc import Callable
from typing import TypeVar

from prometheus_client import REGISTRY, CollectorRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_or_create_metric(
    metric_factory: Callable[[], T],
    metric_name: str,
    registry: CollectorRegistry = REGISTRY,
) -> T:
    """
    Create a metric, or return the existing one if already registered.

    Module reloads (and test runners importing a module twice) would
    otherwise fail with a duplicate timeseries error.

    Args:
        metric_factory: Callable that creates the metric (e.g., lambda: Counter(...))
        metric_name: Name of the metric for lookup if already registered
        registry: Prometheus registry to use (default: global REGISTRY)

    Returns:
        The metric instance (either newly created or existing)
    """
    try:
        return metric_factory()
    except ValueError:
        existing = registry._names_to_collectors.get(metric_name)
        if existing is not None:
            logger.debug(f"Reusing registered metric {metric_name}")
            return existing
        raise
