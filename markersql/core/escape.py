"""
String escaping collaborators: ``escape(raw) -> escaped``.

The returned text is the *inside* of a SQL string literal; the query builder
adds the surrounding single quotes.

- ``standard``: ANSI rule, ``'`` becomes ``''``. No connection needed.
- ``mysql``: MySQL backslash rules via ``pymysql.converters.escape_string``.
- ``escape_for_connection``: bound to a live connection so the server's
  settings (SQL mode, client encoding) are honoured.
"""

from collections.abc import Callable
from typing import Any

import pymysql.converters
from psycopg import pq

from markersql.core.config import ProductTypeEnum, settings

Escaper = Callable[[str], str]

_SQL_QUOTE_ESCAPE = str.maketrans({"'": "''"})


def escape_standard(raw: str) -> str:
    return raw.translate(_SQL_QUOTE_ESCAPE)


def escape_mysql(raw: str) -> str:
    return pymysql.converters.escape_string(raw)


ESCAPERS: dict[str, Escaper] = {
    "standard": escape_standard,
    "mysql": escape_mysql,
}


def get_escaper(name: str | None = None) -> Escaper:
    """Return a connection-free escaper by name (default: ``settings.DEFAULT_ESCAPER``)."""
    key = (name or settings.DEFAULT_ESCAPER).lower()
    try:
        return ESCAPERS[key]
    except KeyError:
        raise ValueError(
            f"Unknown escaper: {key!r}. Available: {sorted(ESCAPERS)}"
        ) from None


def escape_for_connection(conn: Any, product_type: ProductTypeEnum | str) -> Escaper:
    """
    Return an escaper bound to *conn*.

    - MySQL (pymysql): ``Connection.escape_string`` (respects NO_BACKSLASH_ESCAPES).
    - PostgreSQL (psycopg): libpq ``PQescapeStringConn`` via ``psycopg.pq.Escaping``.
    """
    pt = ProductTypeEnum(product_type)
    if pt == ProductTypeEnum.MYSQL:
        return conn.escape_string
    if pt == ProductTypeEnum.POSTGRES:
        esc = pq.Escaping(conn.pgconn)
        encoding = conn.info.encoding

        def escape_postgres(raw: str) -> str:
            return esc.escape_string(raw.encode(encoding)).decode(encoding)

        return escape_postgres
    raise ValueError(f"Unsupported product_type: {pt}")
