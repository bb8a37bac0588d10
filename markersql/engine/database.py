"""
Database: a QueryBuilder bound to a live connection.

String literals are escaped with the connection's own escaping routine, so
the server's SQL mode and client encoding are honoured. The connection is
only used for escaping; running the built SQL is up to the caller.
"""

from collections.abc import Iterable
from typing import Any

from markersql.core.config import ProductTypeEnum
from markersql.core.escape import escape_for_connection
from markersql.engine.builder import QueryBuilder
from markersql.engine.cursor import SKIP, Skip


class Database:
    """
    Database(conn, product_type).build_query(template, args) -> str
    """

    def __init__(self, conn: Any, product_type: ProductTypeEnum | str) -> None:
        self.conn = conn
        self.product_type = ProductTypeEnum(product_type)
        self._builder = QueryBuilder(escape_for_connection(conn, self.product_type))

    def build_query(self, template: str, args: Iterable[Any] = ()) -> str:
        return self._builder.build_query(template, args)

    def skip(self) -> Skip:
        return SKIP
