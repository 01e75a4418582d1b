"""
Base Service - Minimal signal support for the launch index services.

Services declare the signals they emit in __signals__. Listeners connect a
callback which receives the emitting service followed by the signal
arguments, GObject-style:

    history.connect("changed", lambda service: panel.refresh())
"""

import itertools
import threading
from typing import Callable

from loguru import logger


class Service:
    """Base class for signal-emitting services."""

    __signals__: tuple[str, ...] = ()

    def __init__(self):
        self._handlers: dict[int, tuple[str, Callable]] = {}
        self._handler_ids = itertools.count(1)
        self._handlers_lock = threading.Lock()

    def connect(self, signal: str, callback: Callable) -> int:
        """
        Connect a callback to a signal.

        Returns:
            Handler ID usable with disconnect()

        Raises:
            ValueError: If the service does not declare the signal
        """
        if signal not in self.__signals__:
            raise ValueError(f"{type(self).__name__} has no signal '{signal}'")
        with self._handlers_lock:
            handler_id = next(self._handler_ids)
            self._handlers[handler_id] = (signal, callback)
        return handler_id

    def disconnect(self, handler_id: int) -> None:
        with self._handlers_lock:
            self._handlers.pop(handler_id, None)

    def emit(self, signal: str, *args) -> None:
        """Invoke every handler of signal. A failing handler is logged and skipped."""
        with self._handlers_lock:
            callbacks = [cb for name, cb in self._handlers.values() if name == signal]

        for callback in callbacks:
            try:
                callback(self, *args)
            except Exception:
                logger.exception(f"{type(self).__name__} '{signal}' handler failed")
