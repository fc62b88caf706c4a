"""A small publish/subscribe bus keyed by event name."""

from __future__ import annotations

import threading
from collections import defaultdict
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class Bus(Generic[T]):
    """Delivers published data to every listener subscribed under a name."""

    def __init__(self) -> None:
        self._listeners: defaultdict[str, list[Callable[[T], object]]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, name: str, listener: Callable[[T], object]) -> None:
        """Register ``listener`` to be called for data published under ``name``."""
        with self._lock:
            self._listeners[name].append(listener)

    def publish(self, name: str, data: T) -> None:
        """Call every listener registered under ``name``, in subscription order."""
        with self._lock:
            listeners = list(self._listeners.get(name, ()))
        for listener in listeners:
            listener(data)