# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Single-slot cancellable timer used for deferred re-evaluation."""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

TimerFactory = Callable[..., threading.Timer]
Dispatch = Callable[[Callable[[], None]], None]


def call_directly(callback: Callable[[], None]) -> None:
    callback()


class DeferredCall:
    """Runs a callback once after a delay; at most one call is ever pending.

    Arming always cancels the previous timer first. A timer cancelled while
    its thread was already waking up is ignored through a generation count,
    so a stale timer never runs the callback.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        timer_factory: TimerFactory = threading.Timer,
        dispatch: Optional[Dispatch] = None,
    ):
        """Initialize the deferred call.

        Args:
            callback: Function run when the timer elapses.
            timer_factory: threading.Timer compatible factory (for testing).
            dispatch: Hands the callback to the owning event loop. Default
                      runs it on the timer thread.
        """
        self._callback = callback
        self._timer_factory = timer_factory
        self._dispatch = dispatch or call_directly
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._interval: Optional[float] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    @property
    def interval(self) -> Optional[float]:
        """Delay of the pending timer in seconds, or None."""
        with self._lock:
            return self._interval

    def arm(self, interval: float) -> None:
        """Cancel any pending timer and start a new one.

        Args:
            interval: Seconds to wait before running the callback.
        """
        with self._lock:
            self._cancel_locked()
            self._generation += 1
            timer = self._timer_factory(interval, self._fire, args=(self._generation,))
            timer.daemon = True  # Don't prevent process exit
            self._timer = timer
            self._interval = interval
            timer.start()
        logger.debug(f"Deferred call armed for {interval:.0f}s")

    def cancel(self) -> None:
        """Cancel the pending timer. No-op when nothing is pending."""
        with self._lock:
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            # Don't join here - it could block if timer is executing
            self._timer.cancel()
            self._timer = None
            self._interval = None
            self._generation += 1

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug("Ignoring stale deferred call")
                return
            self._timer = None
            self._interval = None
        self._dispatch(self._callback)
