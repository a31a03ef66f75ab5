"""
Regular expression rewriting of field values.

A rewrite is configured with a pattern, a replacement format and an
optional default. A value that fully matches the pattern is replaced by
the format expanded against the match. The format uses connector-style
group references:

    $1, $12      numbered group
    ${name}      named group
    \\x           literal character x (e.g. \\$ for a dollar sign)

Groups that did not take part in the match expand to an empty string.
Only the syntax of the format is checked up front; a reference to a group
the pattern lacks fails when a value actually matches.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any

from .errors import ConfigError

logger = logging.getLogger(__name__)

_GROUP_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True)
class GroupName:
    """Reference to a named group the pattern does not define."""

    name: str


# Parsed format: literal text or a group reference
FormatPart = str | int | GroupName


def parse_format(fmt: str, pattern: re.Pattern, option: str = "regexFormat") -> tuple[FormatPart, ...]:
    """
    Parse a replacement format into literal and group reference parts.

    Numbered references are greedy while the resulting group number exists
    in the pattern, so "$12" reads as group 1 followed by "2" when the
    pattern has fewer than 12 groups. The first digit is always taken, even
    past the pattern's group count.

    Args:
        fmt: Replacement format
        pattern: Compiled pattern the format is applied to
        option: Option name reported in errors

    Returns:
        Tuple of parts; str parts are literal, int parts are group numbers,
        GroupName parts are names unknown to the pattern

    Raises:
        ConfigError: If the format is malformed
    """
    parts: list[FormatPart] = []
    literal: list[str] = []
    i = 0

    def flush() -> None:
        if literal:
            parts.append("".join(literal))
            literal.clear()

    while i < len(fmt):
        char = fmt[i]

        if char == "\\":
            i += 1
            if i >= len(fmt):
                raise ConfigError("Character to be escaped is missing", option, fmt)
            literal.append(fmt[i])
            i += 1
            continue

        if char != "$":
            literal.append(char)
            i += 1
            continue

        i += 1
        if i >= len(fmt):
            raise ConfigError("Illegal group reference: group index is missing", option, fmt)

        if fmt[i] == "{":
            end = fmt.find("}", i)
            if end == -1:
                raise ConfigError("Named capturing group is missing trailing '}'", option, fmt)
            name = fmt[i + 1:end]
            if not _GROUP_NAME.fullmatch(name):
                raise ConfigError(f"Invalid group name {name!r}", option, fmt)
            flush()
            parts.append(pattern.groupindex.get(name, GroupName(name)))
            i = end + 1
            continue

        if not fmt[i].isdigit():
            raise ConfigError("Illegal group reference", option, fmt)

        group = int(fmt[i])
        i += 1
        while i < len(fmt) and fmt[i].isdigit():
            candidate = group * 10 + int(fmt[i])
            if candidate > pattern.groups:
                break
            group = candidate
            i += 1

        flush()
        parts.append(group)

    flush()
    return tuple(parts)


def expand_format(match: re.Match, parts: tuple[FormatPart, ...]) -> str:
    """
    Build the replacement text for a match from parsed format parts.

    Raises:
        IndexError: If a part references a group the pattern does not have
    """
    pieces = []
    for part in parts:
        if isinstance(part, GroupName):
            raise IndexError(f"No group with name {{{part.name}}}")
        if isinstance(part, int):
            if part > match.re.groups:
                raise IndexError(f"No group {part}")
            pieces.append(match.group(part) or "")
        else:
            pieces.append(part)
    return "".join(pieces)


def stringify(value: Any) -> str:
    """Render a scalar body value as text, using JSON spelling for null and booleans."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class RegexRewrite:
    """Compiled pattern, parsed format and optional default value."""

    pattern: re.Pattern
    format_parts: tuple[FormatPart, ...]
    default: str | None = None

    @classmethod
    def compile(
        cls,
        pattern: str,
        fmt: str,
        default: str | None = None,
    ) -> "RegexRewrite":
        """
        Compile a rewrite.

        Raises:
            ConfigError: If the pattern does not compile or the format is invalid
        """
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            raise ConfigError(f"Regex pattern is not in the correct form: {e}", "regexPattern", pattern) from e

        return cls(
            pattern=compiled,
            format_parts=parse_format(fmt, compiled),
            default=default,
        )

    def rewrite(self, value: Any) -> str | None:
        """
        Rewrite a value.

        Returns:
            The expanded format on a full match, the default when there is no
            match and a default is configured, otherwise None
        """
        text = stringify(value)
        match = self.pattern.fullmatch(text)

        if match is not None:
            return expand_format(match, self.format_parts)

        if self.default is not None:
            logger.debug("Value does not match the pattern, using the default value")
            return self.default

        return None
