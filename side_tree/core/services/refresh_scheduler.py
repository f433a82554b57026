from __future__ import annotations

"""Single-slot debounced task used for live side tree updates.

A :class:`DebouncedRefresh` owns at most one pending timer. Scheduling while
a timer is pending does not create a second one: the request is coalesced
into the pending run, which reads the document state only when it fires.
Timers come from a Tk-like scheduler (``widget.after`` / ``widget.after_cancel``)
so the task runs on the UI event loop and never concurrently with itself.
"""

import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

__all__ = ["DebouncedRefresh"]


class DebouncedRefresh:
    """Coalescing single-shot timer around a callback.

    Parameters
    ----------
    callback : Callable[[], None]
        Work to run once the quiet period elapses.
    delay_ms : int
        Debounce window in milliseconds.
    after : Callable[[int, Callable[[], None]], object]
        Tk-like scheduler returning a cancellable handle.
    after_cancel : Callable[[object], None]
        Cancels a handle returned by ``after``.
    name : str, optional
        Label used in log messages.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        *,
        delay_ms: int,
        after: Callable[[int, Callable[[], None]], Any],
        after_cancel: Callable[[Any], None],
        name: str = "refresh",
    ) -> None:
        self._callback = callback
        self._delay_ms = max(0, int(delay_ms))
        self._after = after
        self._after_cancel = after_cancel
        self._handle: Optional[Any] = None
        self.name = name
        self.coalesced: int = 0
        self.runs: int = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    def schedule(self) -> bool:
        """Arm the timer. Returns False when the request was coalesced."""
        if self._handle is not None:
            self.coalesced += 1
            return False
        self._handle = self._after(self._delay_ms, self._fire)
        logger.debug("Scheduled %s in %d ms", self.name, self._delay_ms)
        return True

    def cancel(self) -> bool:
        """Drop the pending run, if any. Returns True when one was cancelled."""
        handle, self._handle = self._handle, None
        if handle is None:
            return False
        self._after_cancel(handle)
        logger.debug("Cancelled %s", self.name)
        return True

    def _fire(self) -> None:
        self._handle = None
        self._run()

    def _run(self) -> None:
        self.runs += 1
        coalesced, self.coalesced = self.coalesced, 0
        logger.debug("Running %s (%d coalesced requests)", self.name, coalesced)
        self._callback()
