"""
Query builder: substitute markers and conditional blocks in one pass.

Arguments are consumed strictly in marker discovery order, whether a marker
sits at top level or inside a ``{...}`` block. A block whose markers consume
``skip()`` renders as empty text; a top-level marker that consumes it fails
the call.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from markersql.core.escape import get_escaper
from markersql.engine.cursor import SKIP, ArgumentCursor, Skip, is_skip
from markersql.engine.errors import UnexpectedSkipError
from markersql.engine.formatters import FORMATTERS, Escaper
from markersql.engine.scanner import Block, Literal, Marker, compile_template

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockResult:
    """Outcome of one conditional block: its text, or ``skipped``."""

    text: str
    skipped: bool = False


SKIPPED = BlockResult("", skipped=True)


class QueryBuilder:
    """Builds final SQL from marker templates with a fixed escaping collaborator."""

    def __init__(self, escape: Escaper | None = None) -> None:
        self._escape = escape or get_escaper()

    def build_query(self, template: str, args: Iterable[Any] = ()) -> str:
        """Return *template* with every block and marker substituted from *args*."""
        compiled = compile_template(template)
        cursor = ArgumentCursor(args)
        out: list[str] = []
        for seg in compiled.segments:
            if isinstance(seg, Literal):
                out.append(seg.text)
            elif isinstance(seg, Block):
                out.append(self._evaluate_block(seg, cursor).text)
            else:
                value = cursor.next()
                if is_skip(value):
                    raise UnexpectedSkipError(seg.token)
                out.append(self._format(seg, value))
        return "".join(out)

    def skip(self) -> Skip:
        return SKIP

    def _evaluate_block(self, block: Block, cursor: ArgumentCursor) -> BlockResult:
        out: list[str] = []
        for seg in block.segments:
            if isinstance(seg, Literal):
                out.append(seg.text)
                continue
            value = cursor.next()
            if is_skip(value):
                _log.debug("Conditional block at %d skipped", block.position)
                return SKIPPED
            out.append(self._format(seg, value))
        return BlockResult("".join(out))

    def _format(self, marker: Marker, value: Any) -> str:
        return FORMATTERS[marker.type](value, self._escape)


def build_query(
    template: str, args: Iterable[Any] = (), *, escape: Escaper | None = None
) -> str:
    """Build a query with a one-off ``QueryBuilder``."""
    return QueryBuilder(escape).build_query(template, args)
