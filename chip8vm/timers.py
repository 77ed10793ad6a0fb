#!/usr/bin/env python3

"""
Timer Driver

Counts the delay and sound timers down at 60Hz of real time, however fast or
slow the CPU happens to be running.  The host tells us how much time has
passed; we never look at a clock ourselves.

Elapsed time is accumulated in units of timer periods.  Each whole period
decrements both timers once, and the remainder is carried over, so calling
'tick' many times within one period can never fire it twice.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import TIMER_FREQ

PERIOD_TOLERANCE = 1e-9


class TimerError(Exception):
    pass


class TimerDriver:
    def __init__(self, registers, frequency=TIMER_FREQ):
        if frequency <= 0:
            raise TimerError("Timer frequency must be positive")

        self.registers = registers
        self.frequency = frequency
        self.reset()

    def reset(self):
        self.pending = 0.0  # Fraction of a period not yet acted on

    def tick(self, elapsed):
        if elapsed < 0:
            raise TimerError("Elapsed time cannot be negative")

        pending = self.pending + elapsed * self.frequency
        # Float error can leave a sum of small ticks a hair short of a whole period
        periods = int(pending + PERIOD_TOLERANCE)
        self.pending = max(pending - periods, 0.0)

        # Both timers are 8-bit, so after 255 decrements there is nothing left to do
        for _ in range(min(periods, 0xFF)):
            self.registers.decrement_timers()

        return periods
