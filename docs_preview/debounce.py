"""Coalesce bursts of file events into single, serialized actions.

Editors and ``git checkout`` produce many filesystem events at once; running a
rebuild for each one would be wasteful. :class:`Debouncer` waits for a quiet
window after the last event, then runs its action once with the arguments of
the most recent event.

Each debouncer is a single-slot queue:

* an event while the timer is pending cancels and reschedules it;
* an event while the action runs records one re-run (keeping the latest
  arguments) that starts as soon as the current run returns.

Debouncers created with the same ``lock`` never run their actions at the
same time, so a source extraction and a site rebuild cannot overlap.

Examples
--------
>>> import threading
>>> done = threading.Event()
>>> debounced = Debouncer(lambda path: done.set(), delay=0.01)
>>> debounced("docs/index.adoc")
>>> done.wait(1)
True
"""

from __future__ import annotations

import logging
import threading
import typing as typ

from ._constants import DEBOUNCE_SECONDS

logger = logging.getLogger(__name__)


class Debouncer:
    """Run ``action`` once per burst of calls, never concurrently."""

    def __init__(
        self,
        action: typ.Callable[..., object],
        delay: float = DEBOUNCE_SECONDS,
        *,
        lock: threading.Lock | None = None,
        name: str | None = None,
    ) -> None:
        self._action = action
        self.delay = delay
        self.name = name or getattr(action, "__name__", "action")
        self._run_lock = lock or threading.Lock()
        self._state = threading.Lock()
        self._timer: threading.Timer | None = None
        self._running = False
        self._rerun_args: tuple[object, ...] | None = None

    @property
    def pending(self) -> bool:
        with self._state:
            return self._timer is not None or self._rerun_args is not None

    @property
    def running(self) -> bool:
        with self._state:
            return self._running

    def __call__(self, *args: object) -> None:
        with self._state:
            if self._running:
                self._rerun_args = args
                return
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(self.delay, self._fire, args=args)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        """Drop any scheduled or queued run; an in-flight run is left to finish."""
        with self._state:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._rerun_args = None

    def _fire(self, *args: object) -> None:
        with self._state:
            # A newer call replaced this timer after it had already expired.
            if self._timer is not threading.current_thread():
                return
            self._timer = None
            self._running = True

        while True:
            with self._run_lock:
                try:
                    self._action(*args)
                except Exception:
                    logger.exception("%s failed", self.name)
            with self._state:
                if self._rerun_args is None:
                    self._running = False
                    return
                args, self._rerun_args = self._rerun_args, None


__all__ = ["Debouncer"]
