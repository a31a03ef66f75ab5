"""
Pytest configuration and fixtures for record transformation tests.
Provides shared record builders and environment setup.
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from transforms import Headers, Record

SOURCE_FIELD_NAME = "sourceField"
SOURCE_FIELD_VALUE = "sourceField value"
DEST_FIELD_NAME = "destField"
SOURCE_FIELD_PARENT_OBJECT = "nested"
NESTED_SOURCE_FIELD_NAME = f"{SOURCE_FIELD_PARENT_OBJECT}.{SOURCE_FIELD_NAME}"


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "property: mark test as property-based test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


def new_record(value, headers: Headers | None = None) -> Record:
    """Build a record the way a sink task would hand it over."""
    return Record(
        topic="topic",
        kafka_partition=1,
        key=None,
        value=value,
        timestamp=1,
        headers=headers if headers is not None else Headers(),
    )


def create_value_map(field_name: str = SOURCE_FIELD_NAME, field_value=SOURCE_FIELD_VALUE) -> dict:
    return {field_name: field_value}


def create_nested_value_map(field_name: str = SOURCE_FIELD_NAME, field_value=SOURCE_FIELD_VALUE) -> dict:
    return {SOURCE_FIELD_PARENT_OBJECT: {field_name: field_value}}


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def no_trace_export(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests from exporting spans to a collector."""
    monkeypatch.delenv("OTLP_ENDPOINT", raising=False)
    monkeypatch.delenv("TRACE_CONSOLE", raising=False)


@pytest.fixture
def span_exporter():
    """Collect record spans in memory instead of exporting them."""
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))

    with patch("utils.tracing.context.get_tracer", return_value=provider.get_tracer("test")):
        yield exporter

    provider.shutdown()
