"""Field extraction — resolve JSONPath expressions and coerce the result."""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Any

import jsonpath_ng.ext as jsonpath
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError

NUMBER_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)

RFC3339_PATTERN = re.compile(
    r"(\d{4}-\d{2}-\d{2})[Tt](\d{2}:\d{2}:\d{2})(\.\d+)?"
    r"([Zz]|[+-](?:[01]\d|2[0-3]):[0-5]\d)",
    re.ASCII,
)


class ConfigError(Exception):
    """Raised when the run configuration is invalid."""


class ExtractionError(Exception):
    """Base class for a field that could not be extracted from a record."""

    def __init__(self, field: str, path: str, reason: str, line_number: int | None = None):
        self.field = field
        self.path = path
        self.reason = reason
        self.line_number = line_number
        super().__init__(str(self))

    def __str__(self) -> str:
        where = f"line {self.line_number}: " if self.line_number is not None else ""
        return f"{where}{self.field} ({self.path}): {self.reason}"


class PathNotFound(ExtractionError):
    """The field path did not resolve to anything in the document."""


class TypeMismatch(ExtractionError):
    """The resolved value has the wrong type or cannot be parsed."""


class FieldPath:
    """A compiled JSONPath expression bound to a semantic field name."""

    def __init__(self, field: str, expression: str):
        self.field = field
        self.expression = expression
        try:
            self._compiled = jsonpath.parse(expression)
        except (JsonPathLexerError, JsonPathParserError) as e:
            raise ConfigError(f"Invalid path for {field}: {expression!r} ({e})") from e

    def __repr__(self) -> str:
        return f"FieldPath({self.field!r}, {self.expression!r})"

    def resolve(self, document: Any) -> Any:
        """Return the value selected by this path.

        A single match returns its value; several matches return a list of
        values. Raises PathNotFound when nothing matches or there is no
        document at all.
        """
        if document is None:
            raise PathNotFound(self.field, self.expression, "no JSON object decoded")

        try:
            matches = self._compiled.find(document)
        except (TypeError, KeyError, AttributeError, IndexError) as e:
            raise PathNotFound(
                self.field, self.expression, f"path does not fit record ({e})"
            ) from e
        if not matches:
            raise PathNotFound(self.field, self.expression, "path not found")
        if len(matches) == 1:
            return matches[0].value
        return [m.value for m in matches]

    def type_mismatch(self, value: Any, expected: str) -> TypeMismatch:
        return TypeMismatch(
            self.field,
            self.expression,
            f"expected {expected}, got {type(value).__name__} {value!r}",
        )


def extract_number(path: FieldPath, document: Any) -> float:
    """Resolve *path* to a finite float.

    Native JSON numbers are used directly; strings are parsed as decimal
    numbers. Booleans are not numbers.
    """
    value = path.resolve(document)

    if isinstance(value, bool):
        raise path.type_mismatch(value, "number")
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            raise path.type_mismatch(value, "finite number") from None
    elif isinstance(value, str) and NUMBER_PATTERN.fullmatch(value):
        number = float(value)
    else:
        raise path.type_mismatch(value, "number or numeric string")

    if not math.isfinite(number):
        raise path.type_mismatch(value, "finite number")
    return number


def extract_string(path: FieldPath, document: Any) -> str:
    """Resolve *path* to a string. No coercion from other types."""
    value = path.resolve(document)
    if not isinstance(value, str):
        raise path.type_mismatch(value, "string")
    return value


def parse_rfc3339(value: str) -> datetime | None:
    """Parse an RFC 3339 timestamp into an aware datetime, or None.

    Fractional seconds beyond microsecond precision are truncated. The
    timestamp's own UTC offset is kept.
    """
    match = RFC3339_PATTERN.fullmatch(value)
    if not match:
        return None

    date_part, time_part, fraction, offset = match.groups()
    # fromisoformat wants exactly 6 fraction digits and no "Z" before 3.11
    micros = "." + fraction[1:7].ljust(6, "0") if fraction else ""
    if offset in ("Z", "z"):
        offset = "+00:00"

    try:
        return datetime.fromisoformat(f"{date_part}T{time_part}{micros}{offset}")
    except ValueError:
        return None


def extract_timestamp(path: FieldPath, document: Any) -> datetime:
    """Resolve *path* to a string and parse it as an RFC 3339 instant."""
    value = path.resolve(document)
    if not isinstance(value, str):
        raise path.type_mismatch(value, "RFC 3339 timestamp string")

    parsed = parse_rfc3339(value)
    if parsed is None:
        raise path.type_mismatch(value, "RFC 3339 timestamp")
    return parsed
