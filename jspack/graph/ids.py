"""Build-scoped module id allocation."""

from __future__ import annotations


class IdAllocator:
    """Hands out contiguous module ids starting at zero."""

    def __init__(self) -> None:
        self._next = 0

    def next(self) -> int:
        value = self._next
        self._next += 1
        return value


__all__ = ["IdAllocator"]
