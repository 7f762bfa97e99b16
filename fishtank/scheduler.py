"""
Fixed-period tick scheduler.

Runs AquariumSimulation.tick() on a daemon thread once per period. Deadlines
are computed from the start time, so a slow tick shortens the next wait
instead of shifting every later tick.
"""

import threading
import time
from typing import Optional

from .constants import TICK_PERIOD_SECONDS


class TickScheduler:
    """Drives a simulation at a fixed wall-clock period until stopped"""

    def __init__(self, simulation, period: float = TICK_PERIOD_SECONDS, max_ticks: Optional[int] = None):
        if period <= 0:
            raise ValueError("period must be positive")
        self.simulation = simulation
        self.period = period
        self.max_ticks = max_ticks
        self.ticks_run = 0
        self.last_error: Optional[Exception] = None

        self._thread: Optional[threading.Thread] = None
        self._stop_requested = threading.Event()
        self._running = threading.Event()

    @property
    def running(self) -> bool:
        return self._running.is_set()

    def start(self):
        if self._running.is_set():
            return
        self._stop_requested.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="fishtank-ticker", daemon=True)
        self._thread.start()
        print(f"[OK] Scheduler started (period={self.period:.3f}s)")

    def stop(self, timeout: float = 5.0):
        self._stop_requested.set()
        if self._thread is not None and self._thread.is_alive() \
                and self._thread is not threading.current_thread():
            self._thread.join(timeout)
        self._running.clear()
        if self._thread is not None:
            print(f"[OK] Scheduler stopped after {self.ticks_run} ticks")

    def join(self, timeout: Optional[float] = None):
        """Wait for the loop to end (max_ticks reached or stop())"""
        if self._thread is not None:
            self._thread.join(timeout)

    def _run_loop(self):
        next_deadline = time.monotonic() + self.period
        try:
            while not self._stop_requested.wait(max(0.0, next_deadline - time.monotonic())):
                self.simulation.tick()
                self.ticks_run += 1
                if self.max_ticks is not None and self.ticks_run >= self.max_ticks:
                    break
                next_deadline += self.period
                # Fell more than a period behind: resync instead of bursting
                if next_deadline < time.monotonic() - self.period:
                    next_deadline = time.monotonic() + self.period
        except Exception as e:
            self.last_error = e
            print(f"[FAIL] Tick loop stopped: {e}")
            raise
        finally:
            self._running.clear()
