#!/usr/bin/env python3

"""
Register File

Holds all CPU state that isn't memory or the display:
    * V0 - VF  - 16 general-purpose 8-bit registers (VF doubles as a flag)
    * I        - 16-bit index register
    * PC       - program counter (12 bits are meaningful)
    * Stack    - return addresses, up to 16 levels
    * DT / ST  - delay and sound timers, 8 bits each

Everything is stored at its hardware width, so writing 256 into a timer leaves
0 there, exactly as an 8-bit register would.  Timers are only counted down by
the Timer Driver, never by the CPU.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import NUM_REGISTERS, STACK_DEPTH, PROGRAM_START, ADDRESS_MASK
from .stack import Stack


class Registers:
    def __init__(self, stack_depth=STACK_DEPTH):
        # Bytearrays are mutable and 8-bit, so register stores truncate for free
        self.v = memoryview(bytearray(NUM_REGISTERS))
        self.stack = Stack(stack_depth)
        self.reset()

    def reset(self):
        self.v[:] = bytes(NUM_REGISTERS)
        self.stack.clear()
        self._i = 0
        self._pc = PROGRAM_START
        self._dt = 0
        self._st = 0

    @property
    def i(self):
        return self._i

    @i.setter
    def i(self, value):
        self._i = value & 0xFFFF

    @property
    def pc(self):
        return self._pc

    @pc.setter
    def pc(self, value):
        self._pc = value & ADDRESS_MASK

    @property
    def dt(self):
        return self._dt

    @dt.setter
    def dt(self, value):
        self._dt = value & 0xFF

    @property
    def st(self):
        return self._st

    @st.setter
    def st(self, value):
        self._st = value & 0xFF

    def inc_pc(self):
        self._pc = (self._pc + 2) & ADDRESS_MASK

    def dec_pc(self):
        # Only used to re-run instructions (e.g. keypress wait)
        self._pc = (self._pc - 2) & ADDRESS_MASK

    def push(self, address):
        self.stack.push(address)

    def pop(self):
        return self.stack.pop()

    def decrement_timers(self):
        if self._dt:
            self._dt -= 1

        if self._st:
            self._st -= 1
