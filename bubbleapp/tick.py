"""A shared timer that calls registered listeners at their own intervals."""

from __future__ import annotations

import functools
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

MIN_TICK_INTERVAL = 0.012
_TIMER_MARGIN = 0.005


def gcd_slice(durations: Iterable[int]) -> int:
    """Greatest common divisor of integer durations; 0 for none."""
    values = list(durations)
    if not values:
        return 0
    return functools.reduce(math.gcd, values)


def compute_tick_interval(intervals: Iterable[float]) -> float:
    """Internal tick period in seconds for listener intervals given in seconds.

    Intervals are truncated to whole milliseconds; the result is their greatest
    common divisor, never below 12 ms. With no intervals the result is 0.
    """
    millis = [int(round(interval * 1_000_000)) // 1000 for interval in intervals]
    if not millis:
        return 0.0
    return max(12, gcd_slice(millis)) / 1000


@dataclass
class _Listener:
    interval: float
    id: str
    callback: Optional[Callable[[], None]]


class TickScheduler:
    """Runs one background timer at the common divisor of all listener intervals."""

    def __init__(self) -> None:
        self._listeners: list[_Listener] = []
        self._last_tick: dict[str, float] = {}
        self._lock = threading.Lock()
        self._done: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None
        self._interval = 0.0

    @property
    def running(self) -> bool:
        return self._done is not None

    @property
    def interval(self) -> float:
        """Period of the running timer in seconds, 0 when stopped."""
        return self._interval

    def reset(self) -> None:
        """Forget the listeners; a render pass registers them again."""
        with self._lock:
            self._listeners = []

    def register(self, interval: float, listener_id: str,
                 callback: Optional[Callable[[], None]]) -> None:
        """Call ``callback`` every ``interval`` seconds on behalf of ``listener_id``."""
        with self._lock:
            self._listeners.append(_Listener(interval, listener_id, callback))

    def unregister(self, listener_id: str) -> None:
        """Drop every listener of ``listener_id``; stop the timer if none remain."""
        with self._lock:
            remaining = [l for l in self._listeners if l.id != listener_id]
            if len(remaining) == len(self._listeners):
                return
            self._listeners = remaining
            self._last_tick.pop(listener_id, None)
            now_empty = not remaining
        if now_empty:
            self.stop()

    def fire(self, now: Optional[float] = None) -> list[str]:
        """Call the listeners that are due at ``now`` and return their ids."""
        if now is None:
            now = time.monotonic()
        due: list[_Listener] = []
        with self._lock:
            for listener in self._listeners:
                last = self._last_tick.get(listener.id)
                if last is None or now - last >= listener.interval:
                    due.append(listener)
                    self._last_tick[listener.id] = now
        for listener in due:
            if listener.callback is not None:
                listener.callback()
        return [listener.id for listener in due]

    def start(self) -> None:
        """Start or adjust the timer to match the registered listeners."""
        with self._lock:
            if not self._listeners:
                self._stop_locked()
                return
            interval = compute_tick_interval(l.interval for l in self._listeners)
            if self._done is not None and self._interval == interval:
                return
            self._stop_locked()
            done = threading.Event()
            self._done = done
            self._interval = interval
            self._thread = threading.Thread(
                target=self._run, args=(done, interval), daemon=True
            )
            self._thread.start()

    def stop(self) -> None:
        """Stop the timer; listeners stay registered."""
        with self._lock:
            self._stop_locked()

    def _stop_locked(self) -> None:
        if self._done is not None:
            self._done.set()
        self._done = None
        self._thread = None
        self._interval = 0.0

    def _run(self, done: threading.Event, interval: float) -> None:
        delay = interval - _TIMER_MARGIN
        while not done.wait(delay):
            self.fire()
            delay = interval