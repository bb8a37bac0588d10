"""
Argument cursor and the skip sentinel.

The cursor hands out arguments in call order, one per marker, as markers are
discovered left to right. Arguments are reversed once so each ``next()`` is a
``list.pop()`` from the back.
"""

from collections.abc import Iterable
from typing import Any

from markersql.engine.errors import ArgumentsExhaustedError


class Skip:
    """Sentinel placed in the argument list to drop the enclosing ``{...}`` block."""

    _instance: "Skip | None" = None

    def __new__(cls) -> "Skip":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SKIP"

    def __reduce__(self) -> str:
        return "SKIP"


SKIP = Skip()


def skip() -> Skip:
    """Return the skip sentinel."""
    return SKIP


def is_skip(value: Any) -> bool:
    return isinstance(value, Skip)


class ArgumentCursor:
    """Per-call FIFO over the argument list."""

    def __init__(self, args: Iterable[Any] = ()) -> None:
        self._stack = list(args)
        self._stack.reverse()
        self._consumed = 0

    def next(self) -> Any:
        """Consume and return the next argument (may be ``SKIP``)."""
        if not self._stack:
            raise ArgumentsExhaustedError(self._consumed)
        self._consumed += 1
        return self._stack.pop()

    @property
    def remaining(self) -> int:
        return len(self._stack)

    @property
    def consumed(self) -> int:
        return self._consumed
