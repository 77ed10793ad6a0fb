#!/usr/bin/env python3

"""
RAM Emulator

The whole CHIP-8 address space is 4KB.  The first 512 bytes (0x000 - 0x1FF)
originally held the interpreter itself.  Here they only hold the hexadecimal
system font, which is written at 0x050 when the RAM is created and again
whenever a machine loads a new program.

Programs are copied in at 0x200, and may fill the remainder of the address
space.  There is no ROM header; a program is just raw bytes.

Reads and writes outside the address space are rejected rather than wrapped.
Wrapping is the CPU's job, since original hardware only ever put 12 bits of
any computed address on the bus.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import MEMORY_SIZE, FONT_LOCATION, PROGRAM_START, SYSTEM_FONT


class RAMError(Exception):
    pass


class AddressOutOfRange(RAMError):
    pass


class ProgramTooLarge(RAMError):
    pass


class RAM:
    def __init__(self, mem_size=MEMORY_SIZE, font=SYSTEM_FONT):
        self.resize(mem_size)

        if font:
            self.load_font(font)

    def resize(self, mem_size):
        self.mem = memoryview(bytearray(mem_size))
        self.mem_top = mem_size - 1
        self.mem_size = mem_size

    def read(self, location):
        self.check_overflow(location)
        return self.mem[location]

    def read_block(self, location, size=1):
        self.check_overflow(location)
        self.check_overflow(location + max(size, 1) - 1)
        return self.mem[location:location + size]

    def write(self, location, byte):
        self.check_overflow(location)
        self.mem[location] = byte & 0xFF

    def write_block(self, location, block):
        block_size = len(block)
        block_top = location + block_size

        if block_size:
            self.check_overflow(location)
            self.check_overflow(block_top - 1)

        self.mem[location:block_top] = block

    def check_overflow(self, location):
        if location < 0 or location > self.mem_top:
            raise AddressOutOfRange("Address 0x{:x} is outside memory (0x000 - 0x{:03x})".format(location, self.mem_top))

    def load_font(self, glyphs):
        self.write_block(FONT_LOCATION, glyphs)

    def load_program(self, data, location=PROGRAM_START):
        capacity = self.mem_size - location

        if len(data) > capacity:
            raise ProgramTooLarge(
                "Program is {} bytes, but only {} bytes are available from 0x{:03x}".format(len(data), capacity, location)
            )

        # Anything left over from a previous program is wiped
        self.zero_block(location, capacity)
        self.write_block(location, data)

    def zero_block(self, offset, size):
        block_top = offset + size

        if size:
            self.check_overflow(offset)
            self.check_overflow(block_top - 1)

        self.mem[offset:block_top] = bytes(size)

    def clear(self):
        self.zero_block(0, self.mem_size)
