import logging
from typing import Callable, Generic, List, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
Listener = Callable[[T], None]


class Observable(Generic[T]):
    """Minimal publish/subscribe hook used by the persisted repositories.

    Views and the persistence layer subscribe to state changes; the
    repositories never know who is listening.
    """

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, value: T) -> None:
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                logger.exception(f"State listener {listener!r} failed")
