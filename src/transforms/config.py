"""
Option definitions for transformation configuration.

A transformation is configured from a flat, string-keyed property set
(as found in a connector config). ConfigDef declares the options a
transformation understands and resolves a property set into typed values
once, at configuration time.

Usage:
    CONFIG_DEF = (
        ConfigDef()
        .define("headerKey", str, doc="Header to look for")
        .define("isNegate", bool, default=False, doc="Negate the condition")
    )

    values = CONFIG_DEF.parse({"headerKey": "trace-id", "isNegate": "true"})
"""

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from .errors import ConfigError

logger = logging.getLogger(__name__)


class _NoDefault:
    """Marker for options that must be supplied."""

    def __repr__(self) -> str:
        return "NO_DEFAULT"


NO_DEFAULT = _NoDefault()

_TRUE_STRINGS = ("true",)
_FALSE_STRINGS = ("false",)


@dataclass(frozen=True)
class ConfigOption:
    """A single configuration option."""

    name: str
    type: type
    default: Any = NO_DEFAULT
    doc: str = ""
    aliases: tuple[str, ...] = ()
    validator: Callable[[str, Any], None] | None = None

    @property
    def required(self) -> bool:
        return self.default is NO_DEFAULT

    def lookup(self, props: Mapping[str, Any]) -> Any:
        """Return the raw value for this option, or None if not supplied."""
        for key in (self.name, *self.aliases):
            if props.get(key) is not None:
                return props[key]
        return None

    def convert(self, value: Any) -> Any:
        """Convert a raw property value to the option's type."""
        if self.type is bool:
            if isinstance(value, bool):
                return value
            if isinstance(value, str):
                normalized = value.strip().lower()
                if normalized in _TRUE_STRINGS:
                    return True
                if normalized in _FALSE_STRINGS:
                    return False
            raise ConfigError("Expected value to be either true or false", self.name, value)

        if self.type is str:
            if isinstance(value, str):
                return value.strip()
            raise ConfigError("Expected value to be a string", self.name, value)

        raise ConfigError(f"Unsupported option type {self.type.__name__}", self.name, value)


class ConfigDef:
    """
    Ordered collection of option definitions.

    Options are resolved by name first, then by any alias. A value of None
    is treated the same as a missing option.
    """

    def __init__(self):
        self._options: dict[str, ConfigOption] = {}

    def define(
        self,
        name: str,
        type_: type,
        default: Any = NO_DEFAULT,
        doc: str = "",
        aliases: tuple[str, ...] = (),
        validator: Callable[[str, Any], None] | None = None,
    ) -> "ConfigDef":
        """
        Register an option.

        Args:
            name: Option name
            type_: Option type (str or bool)
            default: Default value; NO_DEFAULT makes the option required
            doc: Human-readable description
            aliases: Alternative names accepted for the option
            validator: Callable(name, value) raising ConfigError on bad values

        Returns:
            This ConfigDef, for chaining

        Raises:
            ValueError: If the option is already defined
        """
        if name in self._options:
            raise ValueError(f"Configuration {name} is defined twice")

        self._options[name] = ConfigOption(
            name=name,
            type=type_,
            default=default,
            doc=doc,
            aliases=tuple(aliases),
            validator=validator,
        )
        return self

    def parse(self, props: Mapping[str, Any] | None) -> dict[str, Any]:
        """
        Resolve a property set into typed option values.

        Args:
            props: Flat property mapping; unknown keys are ignored

        Returns:
            Dictionary of option name -> resolved value

        Raises:
            ConfigError: If a required option is missing or a value is invalid
        """
        props = props or {}
        values: dict[str, Any] = {}

        for option in self._options.values():
            raw = option.lookup(props)

            if raw is None:
                if option.required:
                    raise ConfigError(
                        f'Missing required configuration "{option.name}" which has no default value'
                    )
                value = option.default
            else:
                value = option.convert(raw)

            if option.validator is not None and value is not None:
                option.validator(option.name, value)

            values[option.name] = value

        return values

    def get(self, name: str) -> ConfigOption:
        return self._options[name]

    def names(self) -> list[str]:
        """Get list of defined option names."""
        return list(self._options.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._options

    def __iter__(self) -> Iterator[ConfigOption]:
        return iter(self._options.values())

    def __len__(self) -> int:
        return len(self._options)
