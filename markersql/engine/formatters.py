"""
Marker formatters: one rule per marker type.

Each formatter takes a single argument plus the string escaping collaborator
and returns SQL text, or raises ``InvalidArgumentTypeError``. ``FORMATTERS``
maps ``MarkerType`` to its formatter and is read-only.
"""

import math
import re
from collections.abc import Callable, Mapping
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any

from markersql.engine.errors import InvalidArgumentTypeError, UnknownMarkerError

Escaper = Callable[[str], str]
Formatter = Callable[[Any, Escaper], str]

SQL_NULL = "NULL"

# Numeric strings: optional sign, digits with optional fraction, optional exponent.
_NUMERIC_RE = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$")


class MarkerType(str, Enum):
    """Marker variants keyed by their (lower-case) suffix after ``?``."""

    ANY = ""
    INT = "d"
    FLOAT = "f"
    ARRAY = "a"
    IDENTIFIER = "#"

    @property
    def token(self) -> str:
        return f"?{self.value}"

    @classmethod
    def from_token(cls, token: str, position: int | None = None) -> "MarkerType":
        """Resolve ``?``, ``?d``, ``?F`` ... to a marker type (suffix is case-insensitive)."""
        if not token.startswith("?"):
            raise UnknownMarkerError(token, position)
        try:
            return cls(token[1:].lower())
        except ValueError as e:
            raise UnknownMarkerError(token, position) from e


def _is_numeric_string(value: Any) -> bool:
    return isinstance(value, str) and _NUMERIC_RE.match(value) is not None


def format_int(value: Any, escape: Escaper | None = None) -> str:
    """
    ``?d``: integer text. None -> NULL, bool -> 1/0.
    Floats, Decimals and numeric strings are accepted only when integral.
    """
    if value is None:
        return SQL_NULL
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        if not _is_numeric_string(value):
            raise InvalidArgumentTypeError(
                "?d", value, f"could not convert string {value!r} to int"
            )
        number = Decimal(value.strip())
    elif isinstance(value, (float, Decimal)):
        number = Decimal(value)
    else:
        raise InvalidArgumentTypeError(
            "?d", value, f"unsupported type {type(value).__name__}"
        )
    if not number.is_finite():
        raise InvalidArgumentTypeError("?d", value, f"non-finite value {value!r}")
    if number != number.to_integral_value():
        raise InvalidArgumentTypeError(
            "?d", value, f"fractional value {value!r} is not acceptable"
        )
    return str(int(number))


def format_float(value: Any, escape: Escaper | None = None) -> str:
    """``?f``: fixed-point text with six decimals. None -> NULL."""
    if value is None:
        return SQL_NULL
    if not isinstance(value, (bool, int, float, Decimal)) and not _is_numeric_string(
        value
    ):
        raise InvalidArgumentTypeError(
            "?f", value, f"could not convert {value!r} to float"
        )
    try:
        number = float(value)
    except OverflowError as e:
        raise InvalidArgumentTypeError("?f", value, "value out of float range") from e
    if not math.isfinite(number):
        raise InvalidArgumentTypeError("?f", value, f"non-finite value {value!r}")
    return "%f" % number


def quote_identifier(name: str) -> str:
    """Backtick-quote a column or table name; embedded backticks are doubled."""
    return "`" + name.replace("`", "``") + "`"


def format_identifier(value: Any, escape: Escaper | None = None) -> str:
    """``?#``: one name or a list of names, backtick-quoted and comma-joined."""
    names = [value] if isinstance(value, str) else value
    if not isinstance(names, (list, tuple)) or not all(
        isinstance(n, str) for n in names
    ):
        raise InvalidArgumentTypeError(
            "?#", value, "expected a name or a list of names"
        )
    return ", ".join(quote_identifier(n) for n in names)


def format_any(value: Any, escape: Escaper) -> str:
    """
    ``?``: pick the rule from the runtime type.
    str -> quoted via *escape*; int -> ``?d``; float/Decimal -> ``?f``;
    bool -> 1/0; None -> NULL.
    """
    if value is None:
        return SQL_NULL
    if isinstance(value, str):
        return f"'{escape(value)}'"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return format_int(value)
    if isinstance(value, (float, Decimal)):
        return format_float(value)
    raise InvalidArgumentTypeError(
        "?", value, f"unsupported type {type(value).__name__}"
    )


def format_array(value: Any, escape: Escaper) -> str:
    """
    ``?a``: a list renders as ``v1, v2``; a mapping renders as
    ```k1` = v1, `k2` = v2`` in insertion order. Values go through ``?``.
    """
    if isinstance(value, Mapping):
        parts = []
        for column, item in value.items():
            if not isinstance(column, str):
                raise InvalidArgumentTypeError(
                    "?a", value, f"column name {column!r} is not a string"
                )
            parts.append(f"{quote_identifier(column)} = {format_any(item, escape)}")
        return ", ".join(parts)
    if isinstance(value, (list, tuple)):
        return ", ".join(format_any(item, escape) for item in value)
    raise InvalidArgumentTypeError(
        "?a", value, f"expected a list or a mapping, got {type(value).__name__}"
    )


FORMATTERS: Mapping[MarkerType, Formatter] = MappingProxyType(
    {
        MarkerType.ANY: format_any,
        MarkerType.INT: format_int,
        MarkerType.FLOAT: format_float,
        MarkerType.ARRAY: format_array,
        MarkerType.IDENTIFIER: format_identifier,
    }
)
