"""
At-most-once lazily computed values.

Auxiliary statistics (reference corpus, inclusion, domain, temporal) are
expensive and only some features need them, so each is wrapped in a Lazy
cell and computed the first time a feature asks for it.
"""

import threading
from typing import Callable, Generic, Optional, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class Lazy(Generic[T]):
    """
    A value computed by ``factory`` on first access, at most once.

    Concurrent first callers block until the value is published; later callers
    read it without taking the lock. If the factory raises, the exception is
    kept and raised again on every access; the factory is never retried.

    Examples:
        >>> cell = Lazy(lambda: expensive(), name="reference")
        >>> cell.get() is cell.get()
        True
    """

    def __init__(self, factory: Callable[[], T], name: str = "value"):
        self._factory = factory
        self.name = name
        self._lock = threading.Lock()
        self._done = False
        self._value: Optional[T] = None
        self._error: Optional[BaseException] = None

    @classmethod
    def of(cls, value: T, name: str = "value") -> "Lazy[T]":
        """An already-computed cell."""
        cell = cls(lambda: value, name=name)
        cell._value = value
        cell._done = True
        return cell

    @property
    def computed(self) -> bool:
        """True once the factory has run (successfully or not)."""
        return self._done

    def get(self) -> T:
        """
        Return the value, computing it on first access.

        Raises:
            Exception: Whatever the factory raised on its single run
        """
        if not self._done:
            with self._lock:
                if not self._done:
                    try:
                        self._value = self._factory()
                        logger.debug("lazy_value_computed", name=self.name)
                    except Exception as e:
                        self._error = e
                        logger.warning("lazy_value_failed", name=self.name, error=str(e))
                    self._done = True

        if self._error is not None:
            raise self._error
        return self._value
