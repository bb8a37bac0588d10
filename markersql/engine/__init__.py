"""
Marker template engine: typed ``?`` placeholders and ``{...}`` conditional blocks.

Exports: QueryBuilder, build_query, skip, parse_markers, check_template, Database.
"""

from markersql.engine.builder import QueryBuilder, build_query
from markersql.engine.cursor import SKIP, Skip, skip
from markersql.engine.errors import (
    ArgumentsExhaustedError,
    InvalidArgumentTypeError,
    QueryBuildError,
    UnexpectedSkipError,
    UnknownMarkerError,
)
from markersql.engine.database import Database
from markersql.engine.parser import parse_markers
from markersql.engine.safety import check_template

__all__ = [
    "QueryBuilder",
    "build_query",
    "skip",
    "Skip",
    "SKIP",
    "parse_markers",
    "check_template",
    "Database",
    "QueryBuildError",
    "UnknownMarkerError",
    "ArgumentsExhaustedError",
    "UnexpectedSkipError",
    "InvalidArgumentTypeError",
]
