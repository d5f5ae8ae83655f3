import logging
from typing import Any, Iterator

logger = logging.getLogger(__name__)


class ObserverRegistry:
    def __init__(self):
        self._observers: list[Any] = []

    def add(self, observer):
        if observer is None:
            return
        if observer in self._observers:
            return
        self._observers.append(observer)

    def remove(self, observer):
        if observer in self._observers:
            self._observers.remove(observer)

    def clear(self):
        self._observers.clear()

    def notify(self, event: str, *payload):
        """
        Call the ``event`` handler on every observer implementing it.

        Iterates over a snapshot, so a handler may add or remove observers
        without affecting who is called in this pass.

        Args:
            event (str): Name of the observer method to call.
            *payload: Arguments passed to the handler.
        """
        for observer in list(self._observers):
            handler = getattr(observer, event, None)
            if not callable(handler):
                continue
            try:
                handler(*payload)
            except Exception:
                logger.exception(f"Observer {observer!r} failed handling {event}")

    def __contains__(self, observer) -> bool:
        return observer in self._observers

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._observers))

    def __len__(self) -> int:
        return len(self._observers)
