"""
Result type for operations that report failure instead of raising.

Ports that cross the network (e.g. fetching the latest reading) return a
``Result`` so the polling loop can branch on success without try/except at
every call site.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of an operation: either ``value`` or ``error`` is meaningful."""

    value: T | None = None
    error: Exception | None = None

    @classmethod
    def ok(cls, value: T | None = None) -> Result[T]:
        return cls(value=value)

    @classmethod
    def fail(cls, error: Exception) -> Result[T]:
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None
