"""Copy-on-write cell used as the storage substrate of mapped names.

A :class:`CowBox` shares one reference-counted handle between any number of
copies.  Reading goes through :meth:`CowBox.view_const` and never copies;
writing goes through :meth:`CowBox.view_mut`, which clones the wrapped value
first when the handle is shared.  There is no other path that copies the value,
so every statement that may trigger a clone is visible at the call site.

Python assignment (``b = a``) only aliases the box itself.  Sharing is
requested explicitly with :meth:`CowBox.copy` (or :func:`copy.copy`), which is
what the reference count tracks.
"""

from __future__ import annotations

import copy as _copy
import logging
import threading
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)

_MISSING = object()


class _Handle(Generic[T]):
    """Shared slot holding the wrapped value and its reference count."""

    __slots__ = ("value", "_refs", "_lock")

    def __init__(self, value: T) -> None:
        self.value = value
        self._refs = 1
        self._lock = threading.Lock()

    @property
    def refs(self) -> int:
        with self._lock:
            return self._refs

    def acquire(self) -> None:
        with self._lock:
            self._refs += 1

    def release(self) -> int:
        with self._lock:
            self._refs -= 1
            return self._refs


class CowBox(Generic[T]):
    """Reference-counted copy-on-write wrapper around a value of type ``T``."""

    __slots__ = ("_handle", "_factory", "_clone")

    def __init__(
        self,
        value: Any = _MISSING,
        *,
        factory: Callable[..., T] = bytearray,
        clone: Callable[[T], T] = _copy.deepcopy,
    ) -> None:
        self._factory = factory
        self._clone = clone
        self._handle: _Handle[T] | None = _Handle(factory() if value is _MISSING else value)

    @classmethod
    def make(
        cls,
        *args: Any,
        factory: Callable[..., T] = bytearray,
        clone: Callable[[T], T] = _copy.deepcopy,
    ) -> "CowBox[T]":
        """Allocate a fresh value by calling ``factory(*args)``."""

        return cls(factory(*args), factory=factory, clone=clone)

    def copy(self) -> "CowBox[T]":
        """Return a box sharing this box's handle."""

        cls = type(self)
        other = cls.__new__(cls)
        other._factory = self._factory
        other._clone = self._clone
        handle = self._live_handle()
        handle.acquire()
        other._handle = handle
        return other

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> "CowBox[T]":
        return CowBox(self._clone(self.view_const()), factory=self._factory, clone=self._clone)

    def _live_handle(self) -> _Handle[T]:
        handle = self._handle
        if handle is None:
            raise RuntimeError("CowBox handle has been released")
        return handle

    @property
    def ref_count(self) -> int:
        return self._live_handle().refs

    def is_unshared(self) -> bool:
        return self._live_handle().refs == 1

    def view_const(self) -> T:
        """Return the wrapped value for reading.  Never copies."""

        return self._live_handle().value

    def ensure_unshared(self) -> None:
        handle = self._live_handle()
        if handle.refs == 1:
            return
        self._handle = _Handle(self._clone(handle.value))
        remaining = handle.release()
        logger.debug("CowBox cloned shared value (%d holders remain)", remaining)

    def view_mut(self) -> T:
        """Return the wrapped value for writing, cloning it first if shared."""

        self.ensure_unshared()
        return self._live_handle().value

    def assign(self, value: T) -> None:
        """Replace the wrapped value with a freshly allocated one."""

        previous = self._handle
        self._handle = _Handle(value)
        if previous is not None:
            previous.release()

    def _release(self) -> None:
        handle = self._handle
        self._handle = None
        if handle is not None:
            handle.release()

    def __del__(self) -> None:
        # __slots__ attributes may be unset if __init__ failed.
        if getattr(self, "_handle", None) is not None:
            self._release()

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        handle = self._handle
        if handle is None:
            return "CowBox(<released>)"
        return f"CowBox({handle.value!r}, refs={handle.refs})"


__all__ = ["CowBox"]
