"""
Static checks for marker templates.

Flags things that are legal to write but probably not what the author meant:

* a marker with an unknown suffix (``?x``, or ``?d,`` where the comma is
  glued to the token) which would fail at build time;
* a ``?`` the scanner will not treat as a marker because of the character
  before it (e.g. ``VALUES (1,?)``), so it ends up in the SQL verbatim;
* a ``{`` inside a conditional block, which is not supported.

Usage::

    warnings = check_template("SELECT * FROM t WHERE id IN (?d,?d)")
    # [{"token": "?d,?d", "line": 1, "message": "Unknown marker ..."}]
"""

import re
from typing import Any

from markersql.engine.errors import UnknownMarkerError
from markersql.engine.formatters import MarkerType
from markersql.engine.scanner import SpanKind, scan

_QUESTION_RE = re.compile(r"\?[^\s)]*")


def _line_of(template: str, pos: int) -> int:
    return template.count("\n", 0, pos) + 1


def _warning(template: str, pos: int, token: str, message: str) -> dict[str, Any]:
    return {"token": token, "line": _line_of(template, pos), "message": message}


def check_template(template: str) -> list[dict[str, Any]]:
    """Return warnings (``token``, ``line``, ``message``) in template order.

    An empty list means no issues detected.
    """
    warnings: list[dict[str, Any]] = []
    marker_starts: set[int] = set()

    for span in scan(template):
        if span.kind is SpanKind.BLOCK:
            if "{" in span.body:
                warnings.append(
                    _warning(
                        template,
                        span.start,
                        span.text,
                        "Nested '{' inside a conditional block is not supported; "
                        "the block ends at the first '}'.",
                    )
                )
            inner = [
                (span.body_start + s.start, s.text)
                for s in scan(span.body, blocks=False)
            ]
        else:
            inner = [(span.start, span.text)]
        for pos, token in inner:
            marker_starts.add(pos)
            try:
                MarkerType.from_token(token)
            except UnknownMarkerError:
                warnings.append(
                    _warning(
                        template,
                        pos,
                        token,
                        f"Unknown marker {token!r}; building this template will fail. "
                        "Markers must end with ')', whitespace or end of text.",
                    )
                )

    for m in _QUESTION_RE.finditer(template):
        if m.start() in marker_starts:
            continue
        warnings.append(
            _warning(
                template,
                m.start(),
                m.group(0),
                f"{m.group(0)!r} is not preceded by '(', '=' or whitespace "
                "and will be left in the query as literal text.",
            )
        )

    warnings.sort(key=lambda w: w["line"])
    return warnings
