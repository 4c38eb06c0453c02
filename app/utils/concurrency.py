"""
Concurrency utilities.

Provides a `synchronized` decorator that holds an instance's `_lock` for the
duration of a method call.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])


def synchronized(func: F) -> F:
    """Run the method under `self._lock`, or unlocked if the instance has none.

    The lock should be re-entrant when synchronized methods call each other.
    """

    @wraps(func)
    def _wrapped(self, *args, **kwargs):
        lock = getattr(self, "_lock", None)
        if lock is None:
            return func(self, *args, **kwargs)
        with lock:
            return func(self, *args, **kwargs)

    return _wrapped  # type: ignore[return-value]
