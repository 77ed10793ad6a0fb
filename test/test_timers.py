#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from chip8vm.registers import Registers
from chip8vm.timers import TimerDriver, TimerError


class TestTimerDriver(unittest.TestCase):
    def setUp(self):
        self.registers = Registers()
        self.registers.dt = 100
        self.registers.st = 100
        self.timers = TimerDriver(self.registers)

    def test_timers_one_period(self):
        self.assertEqual(1, self.timers.tick(0.017))
        self.assertEqual(99, self.registers.dt)
        self.assertEqual(99, self.registers.st)

    def test_timers_small_ticks(self):
        # 16ms is less than one 60Hz period, however it is split up
        for _ in range(16):
            self.assertEqual(0, self.timers.tick(0.001))

        self.assertEqual(100, self.registers.dt)
        self.assertEqual(1, self.timers.tick(0.001))
        self.assertEqual(99, self.registers.dt)

    def test_timers_tenth_period_ticks(self):
        # Ten 1/600s ticks sum to a float just under one period
        self.assertEqual(1, sum(self.timers.tick(1 / 600.0) for _ in range(10)))
        self.assertEqual(99, self.registers.dt)
        self.assertEqual(99, self.registers.st)

        for _ in range(9):
            self.timers.tick(1 / 600.0)

        self.assertEqual(99, self.registers.dt)

    def test_timers_remainder_carried(self):
        # 1/128s is 0.46875 of a period, so 64 of them make exactly 30
        for _ in range(64):
            self.timers.tick(1 / 128.0)

        self.assertEqual(70, self.registers.dt)

    def test_timers_zero_elapsed(self):
        for _ in range(1000):
            self.timers.tick(0)

        self.assertEqual(100, self.registers.dt)

    def test_timers_catch_up(self):
        self.assertEqual(30, self.timers.tick(0.5))
        self.assertEqual(70, self.registers.dt)

    def test_timers_floor_at_zero(self):
        self.registers.dt = 0
        self.registers.st = 1
        self.timers.tick(0.05)
        self.assertEqual(0, self.registers.dt)
        self.assertEqual(0, self.registers.st)

    def test_timers_long_pause(self):
        self.registers.dt = 0xFF
        self.assertEqual(600, self.timers.tick(10.0))
        self.assertEqual(0, self.registers.dt)
        self.assertEqual(0, self.registers.st)

    def test_timers_reset(self):
        self.timers.tick(0.01)
        self.timers.reset()
        self.timers.tick(0.01)
        self.assertEqual(100, self.registers.dt)

    def test_timers_negative(self):
        self.assertRaises(TimerError, self.timers.tick, -0.1)

    def test_timers_bad_frequency(self):
        self.assertRaises(TimerError, TimerDriver, self.registers, 0)
