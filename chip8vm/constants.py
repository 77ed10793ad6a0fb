#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

# App identification
APP_NAME = "Chip8VM"
APP_VERSION = "1.0.0"
APP_COPYRIGHT = "Licensed under GNU Affero General Public License v3.0"
APP_INTRO = "{} V{} -- ".format(APP_NAME, APP_VERSION)

# Address space
MEMORY_SIZE = 0x1000
ADDRESS_MASK = 0xFFF
FONT_LOCATION = 0x50
PROGRAM_START = 0x200
PROGRAM_MAX_SIZE = MEMORY_SIZE - PROGRAM_START  # 3584 bytes

# CPU
NUM_REGISTERS = 0x10
STACK_DEPTH = 16
TIMER_FREQ = 60.0           # Delay and sound timers count down at 60Hz
DEFAULT_CLOCK_SPEED = 700   # Instructions per second, roughly a COSMAC VIP running typical programs

# Display
DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
DISPLAY_FREQ = 60.0

# Input
NUM_KEYS = 0x10

# Default mappings for keys 0-F, later populated into a dictionary.  Keys 1234/QWER/ASDF/ZXCV form the 4x4 keypad.
# Note that the keyscans (on a UK QWERTY keyboard) and ASCII characters for these are the same code
DEFAULT_KEYMAP = "120,49,50,51,113,119,101,97,115,100,122,99,52,114,102,118"

# What to do with instruction words that cannot be decoded or executed
UNKNOWN_POLICY_SKIP = "skip"  # Report, then carry on at the next instruction
UNKNOWN_POLICY_HALT = "halt"  # Treat as a fatal error
UNKNOWN_POLICIES = [UNKNOWN_POLICY_SKIP, UNKNOWN_POLICY_HALT]

# Hexadecimal digit sprites 0-F, 5 rows each, stored in the interpreter area
SYSTEM_FONT = bytes((
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
))
FONT_GLYPH_SIZE = 5
