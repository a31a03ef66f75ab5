"""
Field relocation and rewriting.

FieldRouter reads a (possibly nested) field from a record body, optionally
rewrites its value with a regular expression, and routes the value to:

- the same field (in place),
- a renamed top-level body field (destKey), optionally keeping the original,
- a header (toMetadata), optionally renamed via destKey.

Fields that cannot be found, that hold a nested object, or whose value does
not match the pattern (with no default configured) are left untouched and
the record is returned as is.

The input record is never modified. Only the mappings on the path from the
body root to the source field are copied, so the cost per record is
proportional to the nesting depth.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .base import TRANSFORMATION_TIME, Transformation
from .config import ConfigDef
from .errors import ConfigError
from .record import STRING_SCHEMA, Record
from .regex import RegexRewrite

logger = logging.getLogger(__name__)

KEY_DELIMITER = "."

SOURCE_KEY_CONFIG = "sourceKey"
DESTINATION_KEY_CONFIG = "destKey"
TO_METADATA_CONFIG = "toMetadata"
REGEX_PATTERN_CONFIG = "regexPattern"
REGEX_FORMAT_CONFIG = "regexFormat"
REGEX_DEFAULT_VALUE_CONFIG = "regexDefaultValue"
PRESERVE_CONFIG = "preserveKeyInBody"


def split_key(dotted_key: str) -> tuple[str, ...]:
    """Split a dotted key into its path segments."""
    return tuple(dotted_key.split(KEY_DELIMITER))


def resolve_context(body: Mapping[str, Any], path: tuple[str, ...]) -> Mapping[str, Any] | None:
    """
    Find the mapping that holds the leaf of a key path.

    Args:
        body: Record body
        path: Key segments; all but the last name nested mappings

    Returns:
        The mapping containing the leaf, or None if an intermediate segment
        is missing or does not hold a mapping
    """
    context = body
    for segment in path[:-1]:
        value = context.get(segment)
        if not isinstance(value, Mapping):
            return None
        context = value
    return context


def copy_path(body: Mapping[str, Any], path: tuple[str, ...]) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Shallow-copy the mappings along a key path.

    Args:
        body: Record body; every intermediate segment must hold a mapping
        path: Key segments

    Returns:
        (new body, copied mapping that holds the leaf)
    """
    root = dict(body)
    context = root
    for segment in path[:-1]:
        nested = dict(context[segment])
        context[segment] = nested
        context = nested
    return root, context


@dataclass(frozen=True)
class RouterConfig:
    """Validated FieldRouter configuration."""

    source_key: str
    source_path: tuple[str, ...]
    dest_key: str | None = None
    to_metadata: bool = False
    preserve_in_body: bool = False
    rewrite: RegexRewrite | None = None

    @property
    def leaf_key(self) -> str:
        return self.source_path[-1]

    @classmethod
    def from_values(cls, values: Mapping[str, Any]) -> "RouterConfig":
        """
        Build a configuration from parsed option values.

        Raises:
            ConfigError: If the options contradict each other
        """
        source_key = values[SOURCE_KEY_CONFIG]
        if not source_key:
            raise ConfigError(
                f'"{SOURCE_KEY_CONFIG}" configuration cannot be neither null nor empty',
                SOURCE_KEY_CONFIG,
                source_key,
            )

        dest_key = values[DESTINATION_KEY_CONFIG] or None
        pattern = values[REGEX_PATTERN_CONFIG]
        fmt = values[REGEX_FORMAT_CONFIG]
        default = values[REGEX_DEFAULT_VALUE_CONFIG]
        preserve = values[PRESERVE_CONFIG]

        if pattern is None and fmt is not None:
            raise ConfigError(
                f'"{REGEX_FORMAT_CONFIG}" is configured but "{REGEX_PATTERN_CONFIG}" is missing',
                REGEX_FORMAT_CONFIG,
                fmt,
            )

        if fmt is None and pattern is not None:
            raise ConfigError(
                f'"{REGEX_PATTERN_CONFIG}" is configured but "{REGEX_FORMAT_CONFIG}" is missing',
                REGEX_PATTERN_CONFIG,
                pattern,
            )

        if default is not None and pattern is None:
            raise ConfigError(
                f'"{REGEX_DEFAULT_VALUE_CONFIG}" is configured but "{REGEX_PATTERN_CONFIG}" is missing',
                REGEX_DEFAULT_VALUE_CONFIG,
                default,
            )

        if preserve and dest_key is None:
            raise ConfigError(
                f'"{PRESERVE_CONFIG}" is only applicable if "{DESTINATION_KEY_CONFIG}" is specified',
                PRESERVE_CONFIG,
                preserve,
            )

        if source_key == dest_key:
            raise ConfigError(
                f'"{SOURCE_KEY_CONFIG}" and "{DESTINATION_KEY_CONFIG}" cannot point to the same field',
                DESTINATION_KEY_CONFIG,
                dest_key,
            )

        rewrite = None
        if pattern is not None:
            rewrite = RegexRewrite.compile(pattern, fmt, default)

        return cls(
            source_key=source_key,
            source_path=split_key(source_key),
            dest_key=dest_key,
            to_metadata=values[TO_METADATA_CONFIG],
            preserve_in_body=preserve,
            rewrite=rewrite,
        )


class FieldRouter(Transformation):
    """
    Move, rename, rewrite or lift a body field into a header.

    Example:
        >>> router = FieldRouter({
        ...     "sourceKey": "kubernetes.namespace",
        ...     "destKey": "index",
        ...     "toMetadata": "true",
        ... })
        >>> routed = router.apply(record)
        >>> routed.headers.last_with_name("index").value
        'logging'
    """

    OVERVIEW_DOC = "Relocate and rewrite a record body field"

    CONFIG_DEF = (
        ConfigDef()
        .define(SOURCE_KEY_CONFIG, str, doc="Dotted path of the source field")
        .define(DESTINATION_KEY_CONFIG, str, default=None, doc="Top-level destination field or header name")
        .define(TO_METADATA_CONFIG, bool, default=False, aliases=("isMetadata",),
                doc="Move the value into a header")
        .define(REGEX_PATTERN_CONFIG, str, default=None, aliases=("regex.pattern",),
                doc="Pattern the whole value must match")
        .define(REGEX_FORMAT_CONFIG, str, default=None, aliases=("regex.format",),
                doc="Replacement format ($1, ${name})")
        .define(REGEX_DEFAULT_VALUE_CONFIG, str, default=None, aliases=("regex.defaultValue",),
                doc="Value used when the pattern does not match")
        .define(PRESERVE_CONFIG, bool, default=False, doc="Keep the source field in the body")
    )

    _config: RouterConfig | None = None

    def configure(self, props: Mapping[str, Any]) -> None:
        logger.info(f"Getting configuration for {self.get_type()} transformation...")

        try:
            self._config = RouterConfig.from_values(self.CONFIG_DEF.parse(props))
        except ConfigError as e:
            self._record_error(e)
            raise

        logger.info(f"{self.get_type()} transformation has been successfully configured.")

    @property
    def settings(self) -> RouterConfig:
        if self._config is None:
            raise ConfigError(f"{self.get_type()} transformation has not been configured")
        return self._config

    def apply(self, record: Record) -> Record:
        config = self.settings

        with TRANSFORMATION_TIME.labels(transformation=self.get_type()).time():
            try:
                result = self._route(config, record)
            except Exception as e:
                self._record_error(e)
                logger.warning(
                    f"Field routing failed for {config.source_key}: {e}",
                    extra=self._log_context(record, "error"),
                )
                self._record_outcome("error")
                return record

        self._record_outcome("unchanged" if result is record else "modified")
        return result

    def _route(self, config: RouterConfig, record: Record) -> Record:
        body = record.value

        if not isinstance(body, Mapping) or not body:
            logger.debug("The record has been returned unchanged since it is empty.")
            return record

        context = resolve_context(body, config.source_path)
        if context is None:
            logger.debug("The record has been returned unchanged. Nested object is not found.")
            return record

        leaf_key = config.leaf_key
        if leaf_key not in context:
            logger.debug("The record has been returned unchanged. Source key field is not found.")
            return record

        original = context[leaf_key]
        if isinstance(original, Mapping):
            logger.debug("The record has been returned unchanged. Source key field points to an object.")
            return record

        value = original
        if config.rewrite is not None:
            value = config.rewrite.rewrite(original)
            if value is None:
                logger.debug(
                    "The record has been returned unchanged because the pattern does not match "
                    "and there is no default value specified."
                )
                return record

        if config.dest_key is None and not config.to_metadata and value == original:
            logger.debug("The record has been returned unchanged. Value is identical.")
            return record

        new_body, context = copy_path(body, config.source_path)

        if config.dest_key is not None:
            new_body[config.dest_key] = value
            if not config.preserve_in_body:
                context.pop(leaf_key, None)
            active_key, active_container = config.dest_key, new_body
        else:
            context[leaf_key] = value
            active_key, active_container = leaf_key, context

        if not config.to_metadata:
            logger.debug("The record has been modified.", extra=self._log_context(record, "modified"))
            return record.new_record(value=new_body)

        headers = record.headers.copy()
        headers.remove(active_key)
        headers.add(active_key, value, STRING_SCHEMA if isinstance(value, str) else None)
        active_container.pop(active_key, None)

        logger.debug("The record has been modified.", extra=self._log_context(record, "modified"))
        return record.new_record(value=new_body, headers=headers)
