import asyncio
from typing import Callable, Optional


class Debouncer:
    """Runs ``callback`` once, ``delay_s`` after the most recent ``trigger()``.

    Must be triggered from inside a running event loop.
    """

    def __init__(self, delay_s: float, callback: Callable[[], None]):
        self.delay_s = delay_s
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        loop = asyncio.get_running_loop()
        self.cancel()
        self._handle = loop.call_later(self.delay_s, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> None:
        """Run the pending callback immediately, if any."""
        if self._handle is not None:
            self.cancel()
            self._callback()

    def _fire(self) -> None:
        self._handle = None
        self._callback()
