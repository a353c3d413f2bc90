import logging
from typing import Callable, List

logger = logging.getLogger(__name__)


class ChangeNotifier:
    """Keeps a list of callbacks and calls each one with the notifier on change."""

    def __init__(self):
        self._listeners: List[Callable] = []

    def add_listener(self, listener: Callable):
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable):
        self._listeners.remove(listener)

    def notify_listeners(self):
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("listener %r failed", listener)
