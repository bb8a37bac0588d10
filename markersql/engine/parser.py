"""
List the markers of a template in argument consumption order.
"""

from markersql.engine.scanner import compile_template


def parse_markers(template: str) -> list[str]:
    """
    Return marker tokens (``?``, ``?d``, ``?a`` ..., lower-cased) in the order they consume
    arguments; markers inside ``{...}`` blocks are included in place.

    ``len(parse_markers(t))`` is the number of arguments ``t`` needs.
    Raises ``UnknownMarkerError`` for a marker with an unrecognised suffix.
    """
    return [m.type.token for m in compile_template(template).markers()]
