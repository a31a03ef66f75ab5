"""
Exceptions raised by record transformations.

Configuration problems are fatal and surface when a transformation is
configured. Per-record outcomes (missing fields, non-matching values) are
never exceptions.
"""

from typing import Any


class TransformationError(Exception):
    """Base exception for record transformation errors."""

    pass


class ConfigError(TransformationError, ValueError):
    """
    Raised when a transformation is given an invalid configuration.

    Attributes:
        name: Name of the offending option, if known
        value: Value supplied for the option
    """

    def __init__(self, message: str, name: str | None = None, value: Any = None):
        self.name = name
        self.value = value
        self.message = message

        if name is not None:
            message = f"Invalid value {value!r} for configuration {name}: {message}"

        super().__init__(message)
