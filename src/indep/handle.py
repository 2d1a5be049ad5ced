"""Shared capability handles with runtime-checked exclusive access.

A SharedHandle is the unit of ownership passed around by the container:
the pool, the owning provider and every slot the provider was bound into
all hold the same handle. Access goes through two context managers:

    with handle.borrow() as service:       # shared, any number at once
        service.do1()

    with handle.borrow_mut() as service:   # exclusive
        service.reconfigure()

A borrow that conflicts with a live one raises ExclusiveAccessError
immediately. Nothing ever waits for a borrow to be released.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Generic, Iterator, Optional, TypeVar

from indep.errors import ExclusiveAccessError

T = TypeVar("T")


class SharedHandle(Generic[T]):
    """Reference to a shared object with reader/writer borrow tracking."""

    def __init__(self, value: T, label: Optional[str] = None):
        """Initialize the handle.

        Args:
            value: Object to share
            label: Display name (default: the object's type name)
        """
        self._value = value
        self._label = label or type(value).__name__
        self._lock = threading.Lock()
        self._readers = 0
        self._writer = False

    @property
    def label(self) -> str:
        """Display name of the shared object."""
        return self._label

    @property
    def is_borrowed(self) -> bool:
        """Check if any borrow (shared or exclusive) is live."""
        return self._writer or self._readers > 0

    @property
    def is_mutably_borrowed(self) -> bool:
        """Check if an exclusive borrow is live."""
        return self._writer

    @contextmanager
    def borrow(self) -> Iterator[T]:
        """Borrow the object for reading.

        Raises:
            ExclusiveAccessError: If the object is mutably borrowed
        """
        with self._lock:
            if self._writer:
                raise ExclusiveAccessError(
                    f"{self._label} is already mutably borrowed"
                )
            self._readers += 1
        try:
            yield self._value
        finally:
            with self._lock:
                self._readers -= 1

    @contextmanager
    def borrow_mut(self) -> Iterator[T]:
        """Borrow the object exclusively.

        Raises:
            ExclusiveAccessError: If any other borrow is live
        """
        with self._lock:
            if self._writer:
                raise ExclusiveAccessError(
                    f"{self._label} is already mutably borrowed"
                )
            if self._readers:
                raise ExclusiveAccessError(
                    f"{self._label} is borrowed by {self._readers} reader(s)"
                )
            self._writer = True
        try:
            yield self._value
        finally:
            with self._lock:
                self._writer = False

    def shares_target(self, other: "SharedHandle") -> bool:
        """Check whether two handles point at the same object."""
        return self._value is other._value

    def __repr__(self) -> str:
        state = "mut" if self._writer else (f"{self._readers} readers" if self._readers else "free")
        return f"SharedHandle({self._label}, {state})"


__all__ = ["SharedHandle"]
