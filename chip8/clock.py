import logging

from .config import CPU_HZ, MAX_BACKLOG, REFRESH_HZ, TIMER_HZ

logger = logging.getLogger(__name__)

EPSILON = 1e-9     # float slack so that n periods worth of elapsed time always yield n ticks


class Scheduler:
    """
    drive a Chip8 from the host loop keeping three independent clocks:
    the instruction clock (cpu_hz, None means as many cycles as the host asks for),
    the 60Hz timer clock and the display refresh clock.
    Each clock owns an elapsed time accumulator so timers keep their cadence whatever the cycle speed is.
    """

    def __init__(self, chip, cpu_hz=CPU_HZ, timer_hz=TIMER_HZ, refresh_hz=REFRESH_HZ, max_backlog=MAX_BACKLOG):
        self.chip = chip
        self.cpu_period = 1.0 / cpu_hz if cpu_hz else None
        self.timer_period = 1.0 / timer_hz
        self.refresh_period = 1.0 / refresh_hz
        self.max_backlog = max_backlog
        self.cpu_acc = 0.0
        self.timer_acc = 0.0
        self.refresh_acc = 0.0
        self.cycles = 0
        self.ticks = 0

    def advance(self, elapsed, cycles=None):
        """
        account for `elapsed` seconds of host time, run the cycles and timer ticks owed for it
        and return True when a frame is due and the framebuffer changed since the last one.
        `cycles` is only used when the instruction clock is unlimited.
        Fatal machine errors propagate, the machine is left halted.
        """
        if elapsed > self.max_backlog:
            logger.debug(f"Host stalled for {elapsed:.3f}s, dropping everything past {self.max_backlog}s")
        elapsed = min(max(elapsed, 0.0), self.max_backlog)
        self.timer_acc += elapsed
        self.refresh_acc += elapsed
        if self.cpu_period is None:
            owed = cycles or 1
        else:
            self.cpu_acc += elapsed
            owed = int(self.cpu_acc / self.cpu_period + EPSILON)
            self.cpu_acc -= owed * self.cpu_period
        for _ in range(owed):
            self.chip.cycle()
            self.cycles += 1
        while self.timer_acc + EPSILON >= self.timer_period:
            self.timer_acc -= self.timer_period
            self.chip.tick_timers()
            self.ticks += 1
        if self.refresh_acc + EPSILON < self.refresh_period:
            return False
        self.refresh_acc = max(0.0, self.refresh_acc - self.refresh_period) % self.refresh_period
        return self.chip.screen.consume()
