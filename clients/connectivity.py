"""
Connectivity observer.

Push-based: the host application reports transitions via set_status() and
subscribers are called with the new status. Subscribers run on the caller's
thread, outside the monitor's lock. Subscriber errors are logged but never
propagate back to whoever reported the transition.
"""

import logging
import threading
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class ConnectivityStatus(str, Enum):
    """Network reachability as reported by the host."""

    ONLINE = "online"
    OFFLINE = "offline"


class ConnectivityMonitor:
    """
    Holds the current connectivity status and fans out transitions.

    Usage:
        monitor = ConnectivityMonitor()
        unsubscribe = monitor.subscribe(lambda status: print(status))
        monitor.set_status(ConnectivityStatus.OFFLINE)
        unsubscribe()
    """

    def __init__(self, status: ConnectivityStatus = ConnectivityStatus.ONLINE):
        self._status = status
        self._subscribers: list[Callable[[ConnectivityStatus], None]] = []
        self._lock = threading.Lock()

    @property
    def status(self) -> ConnectivityStatus:
        return self._status

    @property
    def is_online(self) -> bool:
        return self._status == ConnectivityStatus.ONLINE

    def subscribe(self, callback: Callable[[ConnectivityStatus], None]) -> Callable[[], None]:
        """
        Register a callback for status transitions.

        Returns:
            A function that removes the subscription.
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def set_status(self, status: ConnectivityStatus) -> None:
        """
        Report the current status.

        Subscribers are only called when the status actually changes.
        """
        with self._lock:
            if status == self._status:
                return
            self._status = status
            subscribers = list(self._subscribers)

        logger.info("Connectivity changed: %s", status.value)
        for callback in subscribers:
            try:
                callback(status)
            except Exception:
                logger.exception("Connectivity subscriber %r failed", callback)

    def set_online(self, online: bool) -> None:
        self.set_status(ConnectivityStatus.ONLINE if online else ConnectivityStatus.OFFLINE)
