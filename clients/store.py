"""
Shared key-value store contract and its lazily-opened handle.

Every service reads and writes through the same store. The handle opens it
on first use; concurrent first calls from several services must not open it
twice.
"""

import logging
import threading
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """String / string-list store with no transactions across keys."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> bool: ...

    def get_list(self, key: str) -> list[str] | None: ...

    def set_list(self, key: str, values: list[str]) -> None: ...


class StoreHandle:
    """
    One-time opener for the shared store.

    Usage:
        handle = StoreHandle(lambda: ValkeyClient(url, namespace="invoice_app:"))
        store = handle.open()  # opens on first call, returns same instance after
    """

    def __init__(self, factory: Callable[[], KeyValueStore]):
        self._factory = factory
        self._store: KeyValueStore | None = None
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._store is not None

    def open(self) -> KeyValueStore:
        """
        Return the shared store, opening it on the first call.

        Raises whatever the factory raises; a failed open can be retried.
        """
        if self._store is None:
            with self._lock:
                if self._store is None:
                    self._store = self._factory()
                    logger.info("Store opened")
        return self._store

    def close(self) -> None:
        """Close the store if it was opened and supports closing."""
        with self._lock:
            if self._store is None:
                return
            close = getattr(self._store, "close", None)
            if close is not None:
                close()
            self._store = None
