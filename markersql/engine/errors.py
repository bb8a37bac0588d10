"""
Errors raised while building a query from a marker template.

Every error aborts the whole ``build_query`` call. The skip outcome of a
conditional block is not an error; only a skip consumed by a top-level
marker surfaces here, as ``UnexpectedSkipError``.
"""

from __future__ import annotations

from typing import Any


class QueryBuildError(ValueError):
    """Base class for all query building failures."""

    pass


class UnknownMarkerError(QueryBuildError):
    """Raised when a scanned marker token has no formatter."""

    def __init__(self, token: str, position: int | None = None) -> None:
        self.token = token
        self.position = position
        where = f" at position {position}" if position is not None else ""
        super().__init__(f"Unknown marker {token!r}{where}")


class ArgumentsExhaustedError(QueryBuildError):
    """Raised when a marker needs an argument but none are left."""

    def __init__(self, position: int) -> None:
        self.position = position
        super().__init__(
            f"Not enough arguments: marker #{position + 1} has no argument"
        )


class UnexpectedSkipError(QueryBuildError):
    """Raised when the skip sentinel is consumed outside a conditional block."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(
            f"skip() consumed by top-level marker {token!r}; "
            "it is only allowed inside a {...} block"
        )


class InvalidArgumentTypeError(QueryBuildError, TypeError):
    """Raised when an argument cannot be formatted by its marker."""

    def __init__(self, marker: str, value: Any, reason: str) -> None:
        self.marker = marker
        self.value = value
        super().__init__(f"`{marker}`: {reason}")
