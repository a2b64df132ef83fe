"""
Placeholder id allocation

Objects not yet known to the server get negative ids. The counter is
process-wide; every allocation is a locked decrement so ids stay unique
across threads.
"""

import threading
from typing import Optional


class IdAllocator:
    """Hands out unique negative ids: -1, -2, -3, ..."""

    def __init__(self, start: int = 0):
        self._lock = threading.Lock()
        self._value = self._check_start(start)

    @staticmethod
    def _check_start(start: int) -> int:
        if isinstance(start, bool) or not isinstance(start, int):
            raise TypeError("start must be an integer")
        if start > 0:
            raise ValueError(f"start must not be positive, got {start}")
        return start

    def next_id(self) -> int:
        """Decrement the counter and return the new value"""
        with self._lock:
            self._value -= 1
            return self._value

    def reset(self, start: int = 0) -> None:
        """Restart the counter; the next id will be start - 1"""
        start = self._check_start(start)
        with self._lock:
            self._value = start

    @property
    def current(self) -> int:
        """Last id handed out (or the start value)"""
        return self._value


_default_allocator = IdAllocator()


def get_allocator() -> IdAllocator:
    """Get the process-wide allocator"""
    return _default_allocator


def set_allocator(allocator: Optional[IdAllocator]) -> IdAllocator:
    """
    Replace the process-wide allocator, return the previous one.

    Passing None installs a fresh allocator starting at 0.
    """
    global _default_allocator
    previous = _default_allocator
    _default_allocator = allocator if allocator is not None else IdAllocator()
    return previous


def next_id() -> int:
    return _default_allocator.next_id()
