"""
Single-record transformations for a streaming pipeline.

Provides a header-based admission filter and a field router that moves,
renames, rewrites or lifts body fields into headers.
"""

from .base import Transformation
from .chain import TransformationChain
from .config import NO_DEFAULT, ConfigDef, ConfigOption
from .errors import ConfigError, TransformationError
from .filter import AdmissionFilter, FilterConfig
from .record import STRING_SCHEMA, Header, Headers, Record
from .regex import RegexRewrite
from .router import FieldRouter, RouterConfig

__version__ = "1.0.0"

__all__ = [
    "Transformation",
    "TransformationChain",
    "AdmissionFilter",
    "FilterConfig",
    "FieldRouter",
    "RouterConfig",
    "RegexRewrite",
    "ConfigDef",
    "ConfigOption",
    "NO_DEFAULT",
    "ConfigError",
    "TransformationError",
    "Record",
    "Header",
    "Headers",
    "STRING_SCHEMA",
]
