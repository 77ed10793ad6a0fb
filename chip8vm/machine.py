#!/usr/bin/env python3

"""
Machine

Owns one of everything the emulated computer is made of (RAM, registers,
framebuffer, keypad, CPU and timers) and wires them together.  Nothing is kept
in module-level state, so any number of machines can exist side by side.

'run' is the host loop.  Each pass it:
    * samples inputs and redraws the display, at most 60 times a second
    * lets the timers catch up with real time
    * runs one CPU instruction
    * waits for the next instruction slot, if the clock speed is capped

The loop is single-threaded.  A key-wait instruction never blocks it; the CPU
just keeps re-running that instruction, so timers, display and inputs all
carry on being serviced while the program waits.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter
from .constants import APP_NAME, DEFAULT_CLOCK_SPEED, DISPLAY_FREQ, SYSTEM_FONT, UNKNOWN_POLICY_SKIP
from .cpu import CPU
from .framebuffer import Framebuffer
from .keypad import Keypad
from .ram import RAM
from .registers import Registers
from .timers import TimerDriver

DISPLAY_INTERVAL = 1.0 / DISPLAY_FREQ


class Machine:
    def __init__(self, random_source=None, debugger=None, unknown_policy=UNKNOWN_POLICY_SKIP):
        self.ram = RAM()
        self.registers = Registers()
        self.framebuffer = Framebuffer()
        self.keypad = Keypad()
        self.debugger = debugger
        self.cpu = CPU(
            self.ram, self.registers, self.framebuffer, self.keypad, random_source=random_source, debugger=debugger,
            unknown_policy=unknown_policy
        )
        self.timers = TimerDriver(self.registers)

        # Performance-related vars
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0

    def load(self, program):
        # Power-on state, then the program at 0x200.  May raise ProgramTooLarge, leaving the machine reset.
        self.registers.reset()
        self.framebuffer.clear()
        self.keypad.release_all()
        self.timers.reset()
        self.cpu.reset()
        # A previous program may have written anywhere, the font included
        self.ram.clear()
        self.ram.load_font(SYSTEM_FONT)
        self.ram.load_program(program)

    def step(self):
        return self.cpu.step()

    def tick(self, elapsed):
        return self.timers.tick(elapsed)

    def refresh_display(self, renderer):
        # Render the framebuffer, but only if a sprite or clear has happened since the last frame
        framebuffer = self.framebuffer

        if framebuffer.changed:
            for y, row in enumerate(framebuffer.rows()):
                for x, pixel in enumerate(row):
                    renderer.set_pixel(x, y, int(pixel))

            framebuffer.changed = False
            renderer.refresh_display(True)
        else:
            renderer.refresh_display()

    def report_perf(self, renderer, fps=0, ops=0):
        renderer.set_title("{} - {} FPS, {} OPS".format(APP_NAME, fps, ops))

    def run(self, renderer, inputs, clock_speed=DEFAULT_CLOCK_SPEED):
        # Returns when the inputs say so.  Fatal CPU errors propagate to the caller.
        core_interval = None if clock_speed is None or clock_speed <= 0 else 1.0 / clock_speed
        renderer.set_resolution(*self.framebuffer.get_vid_size())
        self.report_perf(renderer)
        next_display_update_time = 0
        next_perf_report_time = 0
        last_time = perf_counter()

        while True:
            this_time = perf_counter()  # Do this first for maximum precision

            # Performance counters
            if this_time >= next_perf_report_time:
                next_perf_report_time = int(this_time) + 1.0
                # Reporting the performance should be done before a refresh, as refreshing will likely show the report
                self.report_perf(renderer, self.perf_counter_fps, self.perf_counter_ops)
                self.perf_counter_ops = 0
                self.perf_counter_fps = 0

            # Prevent unnecessary display rendering in excess of host frame rate
            if this_time >= next_display_update_time:
                if inputs.process_messages():  # Process inputs at 60Hz too, to avoid slowdown
                    self.refresh_display(renderer)
                    return

                next_display_update_time = this_time + DISPLAY_INTERVAL
                self.refresh_display(renderer)
                self.perf_counter_fps += 1

            # Timers follow real time, not the number of instructions run
            self.tick(this_time - last_time)
            last_time = this_time

            self.step()

            if core_interval is not None:
                # Wait for next CPU instruction.  Do this last for maximum precision (takes into account time spent on
                # this instruction)
                next_time = this_time + core_interval

                while perf_counter() < next_time:  # Unfortunately we have to do this to get the timing right
                    pass

            self.perf_counter_ops += 1
