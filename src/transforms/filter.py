"""
Header-based admission filter.

Discards a record when a named header is present, or, with the condition
negated, when it is absent.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .base import TRANSFORMATION_TIME, Transformation
from .config import ConfigDef
from .errors import ConfigError
from .record import Record

logger = logging.getLogger(__name__)

HEADER_KEY_CONFIG = "headerKey"
NEGATE_CONFIG = "isNegate"


@dataclass(frozen=True)
class FilterConfig:
    header_name: str
    negate: bool = False


class AdmissionFilter(Transformation):
    """
    Drop records by header presence.

    Example:
        >>> f = AdmissionFilter({"headerKey": "skip"})
        >>> f.apply(record_with_skip_header) is None
        True
    """

    OVERVIEW_DOC = "Filter transformation to discard a record if the header field exists"

    CONFIG_DEF = (
        ConfigDef()
        .define(HEADER_KEY_CONFIG, str, doc="Name of the header to look for")
        .define(NEGATE_CONFIG, bool, default=False, doc="Negate the condition")
    )

    _config: FilterConfig | None = None

    def configure(self, props: Mapping[str, Any]) -> None:
        logger.info(f"Getting configuration for {self.get_type()} transformation...")

        try:
            self._config = self._parse(props)
        except ConfigError as e:
            self._record_error(e)
            raise

        logger.info(f"{self.get_type()} transformation has been successfully configured.")

    def _parse(self, props: Mapping[str, Any]) -> FilterConfig:
        values = self.CONFIG_DEF.parse(props)

        header_name = values[HEADER_KEY_CONFIG]
        if not header_name:
            raise ConfigError(
                f'"{HEADER_KEY_CONFIG}" configuration cannot be neither null nor empty',
                HEADER_KEY_CONFIG,
                header_name,
            )

        return FilterConfig(header_name=header_name, negate=values[NEGATE_CONFIG])

    @property
    def settings(self) -> FilterConfig:
        if self._config is None:
            raise ConfigError(f"{self.get_type()} transformation has not been configured")
        return self._config

    def apply(self, record: Record) -> Record | None:
        config = self.settings

        with TRANSFORMATION_TIME.labels(transformation=self.get_type()).time():
            present = record.headers.has(config.header_name)

            if present != config.negate:
                logger.debug("The record has been discarded.", extra=self._log_context(record, "dropped"))
                self._record_outcome("dropped")
                return None

            logger.debug("The record has not been discarded.", extra=self._log_context(record, "passed"))
            self._record_outcome("passed")
            return record
