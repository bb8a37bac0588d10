"""
markersql: build SQL text from templates with typed placeholder markers.

    >>> build_query("SELECT * FROM t WHERE id = ?d {AND name = ?}", [5, skip()])
    'SELECT * FROM t WHERE id = 5 '
"""

from markersql.engine import (
    ArgumentsExhaustedError,
    Database,
    InvalidArgumentTypeError,
    QueryBuildError,
    QueryBuilder,
    UnexpectedSkipError,
    UnknownMarkerError,
    build_query,
    check_template,
    parse_markers,
    skip,
)

__all__ = [
    "QueryBuilder",
    "build_query",
    "skip",
    "parse_markers",
    "check_template",
    "Database",
    "QueryBuildError",
    "UnknownMarkerError",
    "ArgumentsExhaustedError",
    "UnexpectedSkipError",
    "InvalidArgumentTypeError",
]
