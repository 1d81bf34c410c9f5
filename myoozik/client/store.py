# ============================================================================
# FILE: myoozik/client/store.py
# ============================================================================
import logging
from typing import Callable, List

logger = logging.getLogger(__name__)

Listener = Callable[["Store"], None]


class Store:
    """
    Observable state holder for the client stores.

    State lives in plain attributes; `_set` applies a batch of changes at
    once and then notifies listeners, so no listener ever sees a partially
    applied update.
    """

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns the matching unsubscribe function"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, **changes):
        for name, value in changes.items():
            setattr(self, name, value)
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"{type(self).__name__} listener failed: {e}")
