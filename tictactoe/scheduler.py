"""
Scheduling hooks for AI moves.

GameSession never waits on its own. When the computer is to move it hands
the move to a scheduler, which decides when (and on which thread) it runs.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, List


logger = logging.getLogger(__name__)


class Scheduler(ABC):
    """Runs a callback after a delay in seconds."""

    @abstractmethod
    def enqueue(self, delay: float, callback: Callable[[], None]):
        ...


class ImmediateScheduler(Scheduler):
    """Runs the callback right away, ignoring the delay. Used in tests."""

    def enqueue(self, delay, callback):
        callback()


class DelayedScheduler(Scheduler):
    """Sleeps for the delay, then runs the callback on the calling thread."""

    def __init__(self, sleep: Callable[[float], None] = time.sleep):
        self._sleep = sleep

    def enqueue(self, delay, callback):
        if delay > 0:
            self._sleep(delay)
        callback()


class TimerScheduler(Scheduler):
    """
    Runs the callback on a background timer thread.

    For event-loop front ends that must not block. The game session is not
    thread-safe, so the front end has to serialize access to it.
    """

    def __init__(self):
        self._timers: List[threading.Timer] = []
        self._lock = threading.Lock()

    def enqueue(self, delay, callback):
        timer = threading.Timer(max(delay, 0.0), callback)
        timer.daemon = True
        with self._lock:
            # Drop timers that already fired
            self._timers = [t for t in self._timers if t.is_alive()]
            self._timers.append(timer)
        timer.start()

    def cancel_all(self):
        """Cancel every timer that has not fired yet."""
        with self._lock:
            timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()
        if timers:
            logger.debug("Cancelled %d pending timer(s)", len(timers))

    def join(self, timeout: float = None):
        """Wait for all pending timers to finish."""
        with self._lock:
            timers = list(self._timers)
        for timer in timers:
            timer.join(timeout)
