"""
Game clock.

Counts whole seconds from the first move of a game and, while running,
calls a tick callback once per second so a display can refresh.
"""
import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)

TICK_INTERVAL = 1.0


class GameClock:
    """
    One-second game clock.

    In threaded mode a chain of daemon timers fires ``tick`` every
    ``interval`` seconds. Unthreaded clocks never schedule anything; the
    elapsed time is still read from ``time_func`` on demand and ``tick``
    can be driven by hand.
    """

    def __init__(
        self,
        on_tick: Optional[Callable[[int], None]] = None,
        interval: float = TICK_INTERVAL,
        time_func: Callable[[], float] = time.monotonic,
        threaded: bool = True,
    ) -> None:
        """
        Initialize the clock.

        Args:
            on_tick: Called with the elapsed seconds on every tick.
            interval: Seconds between ticks.
            time_func: Monotonic time source.
            threaded: Whether to schedule ticks on a background timer.
        """
        self.on_tick = on_tick
        self.interval = interval
        self.time_func = time_func
        self.threaded = threaded

        self._lock = threading.RLock()
        self._timer: Optional[threading.Timer] = None
        self._start_time: Optional[float] = None
        self._elapsed = 0
        self._running = False
        self._generation = 0

    # ========================================================================
    # Control
    # ========================================================================

    def start(self) -> None:
        """Start counting from zero. No-op if already running."""
        with self._lock:
            if self._running:
                return
            self._start_time = self.time_func()
            self._elapsed = 0
            self._running = True
            self._generation += 1
            if self.threaded:
                self._schedule(self._generation)

    def stop(self) -> None:
        """Stop the clock and freeze the elapsed time."""
        with self._lock:
            if self._running:
                self._elapsed = self._measure()
            self._running = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def reset(self) -> None:
        """Stop the clock and zero the elapsed time."""
        with self._lock:
            self.stop()
            self._start_time = None
            self._elapsed = 0

    def tick(self) -> int:
        """
        Refresh the elapsed time and notify the tick callback.

        Returns:
            Elapsed whole seconds.
        """
        with self._lock:
            if not self._running:
                return self._elapsed
            self._elapsed = self._measure()
            elapsed = self._elapsed

        if self.on_tick is not None:
            try:
                self.on_tick(elapsed)
            except Exception:
                logger.warning("Tick callback failed", exc_info=True)
        return elapsed

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def is_running(self) -> bool:
        """Check if the clock is counting."""
        return self._running

    @property
    def start_time(self) -> Optional[float]:
        """Time source reading when the clock was started."""
        return self._start_time

    @property
    def elapsed_seconds(self) -> int:
        """Whole seconds since start, frozen once stopped."""
        with self._lock:
            if self._running:
                self._elapsed = max(self._elapsed, self._measure())
            return self._elapsed

    # ========================================================================
    # Internals
    # ========================================================================

    def _measure(self) -> int:
        return int(self.time_func() - self._start_time)

    def _schedule(self, generation: int) -> None:
        self._timer = threading.Timer(self.interval, self._run, args=(generation,))
        self._timer.daemon = True
        self._timer.start()

    def _run(self, generation: int) -> None:
        # A chain whose generation is stale belongs to an earlier start and dies here.
        with self._lock:
            if not self._running or generation != self._generation:
                return
        self.tick()
        with self._lock:
            if self._running and generation == self._generation:
                self._schedule(generation)
