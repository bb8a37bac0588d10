"""
Marker scanner and template compiler.

Pass 1 (``scan``): regular-expression scan yielding non-overlapping spans,
left to right. A marker token is ``?`` plus everything up to ``)``,
whitespace or end of text, and only counts when it starts the scanned text
or follows ``(``, ``=`` or whitespace, so a literal ``?`` elsewhere is left
alone. A conditional block is the shortest ``{...}`` run.

Pass 2 (``compile_template``): turn the spans into an immutable segment tree
(literal text, markers, blocks). A marker keeps its raw token; its type is
resolved when it is formatted, after its argument has been taken. Compiled
templates are kept in a bounded LRU keyed by the template source hash.
"""

import hashlib
import logging
import re
import threading
from collections import OrderedDict
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from markersql.core.config import settings
from markersql.engine.formatters import MarkerType

_log = logging.getLogger(__name__)

MARKER_PATTERN = r"(?:(?<=[(=\s])|^)\?[^\s)]*"
BLOCK_PATTERN = r"\{(?P<body>.+?)\}"

_MARKER_RE = re.compile(MARKER_PATTERN)
_TOP_LEVEL_RE = re.compile(
    rf"(?P<block>{BLOCK_PATTERN})|(?P<marker>{MARKER_PATTERN})", re.DOTALL
)


class SpanKind(str, Enum):
    MARKER = "marker"
    BLOCK = "block"


@dataclass(frozen=True)
class Span:
    """One match in the scanned text. ``body`` and ``body_start`` are set for blocks only."""

    kind: SpanKind
    start: int
    end: int
    text: str
    body: str | None = None
    body_start: int | None = None


def scan(template: str, *, blocks: bool = True) -> Iterator[Span]:
    """Yield marker (and, if *blocks*, conditional block) spans in order."""
    if not blocks:
        for m in _MARKER_RE.finditer(template):
            yield Span(SpanKind.MARKER, m.start(), m.end(), m.group(0))
        return
    for m in _TOP_LEVEL_RE.finditer(template):
        if m.group("block") is not None:
            yield Span(
                SpanKind.BLOCK,
                m.start(),
                m.end(),
                m.group(0),
                body=m.group("body"),
                body_start=m.start("body"),
            )
        else:
            yield Span(SpanKind.MARKER, m.start(), m.end(), m.group(0))


# ---------------------------------------------------------------------------
# Compiled segments
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Marker:
    token: str
    position: int

    @property
    def type(self) -> MarkerType:
        """Resolve the suffix; raises ``UnknownMarkerError`` if it has no formatter."""
        return MarkerType.from_token(self.token, self.position)


@dataclass(frozen=True)
class Block:
    segments: tuple["Literal | Marker", ...]
    position: int


Segment = Literal | Marker | Block


@dataclass(frozen=True)
class CompiledTemplate:
    source: str
    segments: tuple[Segment, ...]

    def markers(self) -> Iterator[Marker]:
        """Markers in argument consumption order, including those inside blocks."""
        for seg in self.segments:
            if isinstance(seg, Marker):
                yield seg
            elif isinstance(seg, Block):
                for inner in seg.segments:
                    if isinstance(inner, Marker):
                        yield inner


def _split(text: str, spans: Iterator[Span], offset: int = 0) -> list[Segment]:
    segments: list[Segment] = []
    pos = 0
    for span in spans:
        if span.start > pos:
            segments.append(Literal(text[pos : span.start]))
        if span.kind is SpanKind.BLOCK:
            inner = _split(
                span.body, scan(span.body, blocks=False), offset + span.body_start
            )
            segments.append(Block(tuple(inner), offset + span.start))
        else:
            segments.append(Marker(span.text, offset + span.start))
        pos = span.end
    if pos < len(text):
        segments.append(Literal(text[pos:]))
    return segments


def _compile(template: str) -> CompiledTemplate:
    return CompiledTemplate(template, tuple(_split(template, scan(template))))


_template_cache: OrderedDict[str, CompiledTemplate] = OrderedDict()
_cache_lock = threading.Lock()


def compile_template(template: str) -> CompiledTemplate:
    """Return the compiled form of *template*, from cache when possible."""
    max_size = settings.TEMPLATE_CACHE_SIZE
    if max_size <= 0:
        return _compile(template)
    key = hashlib.md5(template.encode(), usedforsecurity=False).hexdigest()
    with _cache_lock:
        compiled = _template_cache.get(key)
        if compiled is not None and compiled.source == template:
            _template_cache.move_to_end(key)
            return compiled
    _log.debug("Compiling template (%d chars)", len(template))
    compiled = _compile(template)
    with _cache_lock:
        _template_cache[key] = compiled
        while len(_template_cache) > max_size:
            _template_cache.popitem(last=False)
    return compiled


def clear_template_cache() -> None:
    with _cache_lock:
        _template_cache.clear()
