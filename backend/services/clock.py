"""
Simulation clocks.

A clock owns at most one repeating tick. Re-arming it (new period or a
restart) cancels whatever tick was armed before. Ticks that are late are
delayed, never batched.
"""

import logging
import time
from typing import Callable, Optional

import schedule


logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class SimulationClock:
    """
    Base class/interface for tick sources.
    """

    def __init__(self):
        self._on_tick: Optional[TickCallback] = None
        self.period_ms: Optional[int] = None

    @property
    def is_running(self) -> bool:
        return self.period_ms is not None

    def start(self, period_ms: int, on_tick: TickCallback) -> None:
        """Arm a repeating tick, replacing any tick already armed."""
        if period_ms <= 0:
            raise ValueError(f"Tick period must be positive, got {period_ms}ms")
        self.stop()
        self._on_tick = on_tick
        self.period_ms = period_ms
        self._arm(period_ms)

    def reschedule(self, period_ms: int) -> None:
        """Re-arm with the current callback at a new period."""
        if self._on_tick is None:
            raise RuntimeError("Clock was never started; nothing to reschedule")
        self.start(period_ms, self._on_tick)

    def stop(self) -> None:
        if self.is_running:
            self._disarm()
        self.period_ms = None

    def _arm(self, period_ms: int) -> None:
        raise NotImplementedError

    def _disarm(self) -> None:
        raise NotImplementedError


class ScheduleClock(SimulationClock):
    """
    Real-time clock backed by a private `schedule.Scheduler`.

    Nothing fires on its own: the owner calls run_pending() or run_until()
    from its loop, so every tick runs on the caller's thread.
    """

    def __init__(self, scheduler: Optional[schedule.Scheduler] = None):
        super().__init__()
        self.scheduler = scheduler or schedule.Scheduler()
        self._job: Optional[schedule.Job] = None

    def _arm(self, period_ms: int) -> None:
        self._job = self.scheduler.every(period_ms / 1000).seconds.do(self._fire)
        logger.debug("Clock armed at %dms", period_ms)

    def _disarm(self) -> None:
        if self._job is not None:
            self.scheduler.cancel_job(self._job)
            self._job = None
            logger.debug("Clock disarmed")

    def _fire(self) -> None:
        if self._on_tick is not None:
            self._on_tick()

    def run_pending(self) -> None:
        self.scheduler.run_pending()

    def run_until(self, done: Callable[[], bool], max_sleep: float = 0.05) -> None:
        """Drive the scheduler until `done()` is true or the clock is stopped."""
        while not done() and self.is_running:
            self.scheduler.run_pending()
            idle = self.scheduler.idle_seconds
            if idle is None:
                break
            if idle > 0:
                time.sleep(min(idle, max_sleep))


class ManualClock(SimulationClock):
    """
    A clock that only ticks when fire() is called.

    Used for headless runs, where ticks are driven as fast as the caller
    likes, and in tests.
    """

    def __init__(self):
        super().__init__()
        self.arm_count = 0

    def _arm(self, period_ms: int) -> None:
        self.arm_count += 1

    def _disarm(self) -> None:
        pass

    def fire(self) -> bool:
        """Run one tick if armed. Returns False when the clock is stopped."""
        if not self.is_running or self._on_tick is None:
            return False
        self._on_tick()
        return True
