"""
In-process record model.

A Record mirrors a Kafka Connect record: routing information (topic,
partition), key and value with optional schemas, a timestamp, and an
ordered collection of headers. The value (the body) is a tree of
string-keyed mappings with scalar leaves.

Transformations never modify a record in place. They return either the
same record or a new one built with Record.new_record().
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from typing import Any

STRING_SCHEMA = "string"


@dataclass(frozen=True)
class Header:
    """A single out-of-band name/value attribute."""

    name: str
    value: Any
    schema: str | None = None


class Headers:
    """
    Ordered multimap of record headers.

    Several headers may share a name; insertion order is preserved.
    Mutating methods return self so calls can be chained.
    """

    def __init__(self, headers: Iterable[Header] | None = None):
        self._headers: list[Header] = list(headers or [])

    @classmethod
    def of(cls, **values: Any) -> "Headers":
        """Build headers from keyword arguments, one header per name."""
        return cls(Header(name, value) for name, value in values.items())

    def all_with_name(self, name: str) -> list[Header]:
        return [header for header in self._headers if header.name == name]

    def last_with_name(self, name: str) -> Header | None:
        for header in reversed(self._headers):
            if header.name == name:
                return header
        return None

    def has(self, name: str) -> bool:
        return any(header.name == name for header in self._headers)

    def add(self, name: str, value: Any, schema: str | None = None) -> "Headers":
        self._headers.append(Header(name, value, schema))
        return self

    def remove(self, name: str) -> "Headers":
        """Remove every header with the given name."""
        self._headers = [header for header in self._headers if header.name != name]
        return self

    def copy(self) -> "Headers":
        return Headers(self._headers)

    def __iter__(self) -> Iterator[Header]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return self._headers == other._headers

    def __repr__(self) -> str:
        return f"Headers({self._headers!r})"


@dataclass(frozen=True)
class Record:
    """A single pipeline record."""

    topic: str
    kafka_partition: int | None
    key: Any
    value: Any
    key_schema: Any = None
    value_schema: Any = None
    timestamp: int | None = None
    headers: Headers = field(default_factory=Headers)

    def new_record(self, **changes: Any) -> "Record":
        """
        Create a copy of this record with selected attributes replaced.

        Args:
            **changes: Attributes to replace (value, headers, topic, ...)

        Returns:
            New Record; unspecified attributes are carried over unchanged
        """
        return replace(self, **changes)
