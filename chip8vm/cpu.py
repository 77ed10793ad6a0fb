#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8)

Like a real computer, this is where most of the processing happens.  Each call
to 'step' runs exactly one instruction: fetch the word at the program counter,
move the program counter on, decode, and execute.  The host decides how often
to call it.

Behaviour follows the original COSMAC VIP interpreter wherever later
interpreters disagree (the so-called quirks):
    * SHR/SHL shift Vy into Vx, rather than shifting Vx in place.
    * OR/AND/XOR reset VF to 0.
    * LD [I], Vx and LD Vx, [I] leave I pointing past the last register.
    * JP V0, addr always uses V0.
    * Sprites wrap around the edges of the screen.

Whenever VF is both an operand and the flag, the flag is written last.

Instruction words which cannot be decoded (or SYS calls to native code, which
can never be honoured) are either skipped with a warning or treated as fatal,
depending on the policy chosen by the host.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging
from random import randint
from .constants import ADDRESS_MASK, FONT_LOCATION, FONT_GLYPH_SIZE, UNKNOWN_POLICY_SKIP, UNKNOWN_POLICIES
from .decoder import (
    ALL_KINDS, SYS, CLS, RET, JP, CALL, SE_BYTE, SNE_BYTE, SE_REG, LD_BYTE, ADD_BYTE, LD_REG, OR, AND, XOR, ADD_REG,
    SUB, SHR, SUBN, SHL, SNE_REG, LD_I, JP_V0, RND, DRW, SKP, SKNP, LD_VX_DT, LD_VX_K, LD_DT_VX, LD_ST_VX, ADD_I, LD_F,
    LD_B, LD_MEM_VX, LD_VX_MEM, UNKNOWN, decode, disassemble
)
from .ram import RAMError
from .stack import StackError

CPU_ENDIAN = "big"  # CHIP-8 is big-endian

logger = logging.getLogger(__name__)


class CPUError(Exception):
    pass


class UnknownInstruction(CPUError):
    pass


class CPUHalted(CPUError):
    pass


# Errors which stop the CPU for good
FATAL_ERRORS = (RAMError, StackError, CPUError)


def default_random_source():
    return randint(0, 0xFF)


class CPU:
    def __init__(self, ram, registers, framebuffer, keypad, random_source=None, debugger=None,
                 unknown_policy=UNKNOWN_POLICY_SKIP):

        if unknown_policy not in UNKNOWN_POLICIES:
            raise CPUError("Unknown instruction policy must be one of: {}".format(", ".join(UNKNOWN_POLICIES)))

        self.ram = ram
        self.registers = registers
        self.framebuffer = framebuffer
        self.keypad = keypad
        self.random_source = default_random_source if random_source is None else random_source
        self.debugger = debugger
        self.live_debug = debugger is not None and debugger.is_live()
        self.unknown_policy = unknown_policy

        # Define instruction pointers, one per decoded instruction type
        self.instructions = {
            SYS:       self._0nnn,
            CLS:       self._00E0,
            RET:       self._00EE,
            JP:        self._1nnn,
            CALL:      self._2nnn,
            SE_BYTE:   self._3xkk,
            SNE_BYTE:  self._4xkk,
            SE_REG:    self._5xy0,
            LD_BYTE:   self._6xkk,
            ADD_BYTE:  self._7xkk,
            LD_REG:    self._8xy0,
            OR:        self._8xy1,
            AND:       self._8xy2,
            XOR:       self._8xy3,
            ADD_REG:   self._8xy4,
            SUB:       self._8xy5,
            SHR:       self._8xy6,
            SUBN:      self._8xy7,
            SHL:       self._8xyE,
            SNE_REG:   self._9xy0,
            LD_I:      self._Annn,
            JP_V0:     self._Bnnn,
            RND:       self._Cxkk,
            DRW:       self._Dxyn,
            SKP:       self._Ex9E,
            SKNP:      self._ExA1,
            LD_VX_DT:  self._Fx07,
            LD_VX_K:   self._Fx0A,
            LD_DT_VX:  self._Fx15,
            LD_ST_VX:  self._Fx18,
            ADD_I:     self._Fx1E,
            LD_F:      self._Fx29,
            LD_B:      self._Fx33,
            LD_MEM_VX: self._Fx55,
            LD_VX_MEM: self._Fx65,
            UNKNOWN:   self._unknown
        }

        missing = ALL_KINDS.difference(self.instructions)

        if missing:
            raise CPUError("No handler for instruction(s): {}".format(", ".join(sorted(missing))))

        self.reset()

    def reset(self):
        # Current opcode, where it was fetched from, and any error that has stopped the CPU
        self.opcode = 0
        self.debug_pc = self.registers.pc
        self.operation = None
        self.fault = None
        self.unknown_count = 0

    def step(self):
        if self.fault is not None:
            raise CPUHalted("CPU halted by earlier error: {}".format(self.fault))

        registers = self.registers

        try:
            # Keep track of the program counter before altering it in any way for debugging purposes
            self.debug_pc = registers.pc
            self.opcode = self.fetch()
            registers.inc_pc()  # Program counter updates after fetch, but before execute
            operation = decode(self.opcode)
            self.operation = operation

            if self.live_debug:
                self.debugger.output(self, disassemble(operation))

            self.instructions[operation.kind](operation)
        except FATAL_ERRORS as error:
            self.fault = error
            raise

        return operation

    def fetch(self):
        pc = self.registers.pc
        return int.from_bytes(
            bytes((self.ram.read(pc), self.ram.read((pc + 1) & ADDRESS_MASK))), CPU_ENDIAN, signed=False
        )

    def is_halted(self):
        return self.fault is not None

    def _opcode_unsupported(self, operation):
        message = "Opcode 0x{:04x} at address 0x{:03x} is not supported".format(operation.word, self.debug_pc)

        if self.unknown_policy != UNKNOWN_POLICY_SKIP:
            raise UnknownInstruction(message)

        # The program counter has already moved past it, so there is nothing more to do
        self.unknown_count += 1
        logger.warning("%s, skipping", message)

    def _skip(self):
        self.registers.inc_pc()

    def _unknown(self, operation):
        self._opcode_unsupported(operation)

    def _0nnn(self, operation):  # SYS addr
        # Native COSMAC 1802 subroutines can't be run, so these are treated like any other bad opcode
        self._opcode_unsupported(operation)

    def _00E0(self, _):  # CLS
        self.framebuffer.clear()

    def _00EE(self, _):  # RET
        self.registers.pc = self.registers.pop()

    def _1nnn(self, operation):  # JP addr
        self.registers.pc = operation.nnn

    def _2nnn(self, operation):  # CALL addr
        registers = self.registers
        registers.push(registers.pc)
        registers.pc = operation.nnn

    def _3xkk(self, operation):  # SE Vx, byte
        if self.registers.v[operation.x] == operation.kk:
            self._skip()

    def _4xkk(self, operation):  # SNE Vx, byte
        if self.registers.v[operation.x] != operation.kk:
            self._skip()

    def _5xy0(self, operation):  # SE Vx, Vy
        v = self.registers.v

        if v[operation.x] == v[operation.y]:
            self._skip()

    def _6xkk(self, operation):  # LD Vx, byte
        self.registers.v[operation.x] = operation.kk

    def _7xkk(self, operation):  # ADD Vx, byte
        # No carry flag for this one
        v = self.registers.v
        v[operation.x] = (v[operation.x] + operation.kk) & 0xFF

    def _8xy0(self, operation):  # LD Vx, Vy
        v = self.registers.v
        v[operation.x] = v[operation.y]

    # The original interpreter left VF at 0 after these, as a side effect of how they were implemented
    def _8xy1(self, operation):  # OR Vx, Vy
        v = self.registers.v
        v[operation.x] |= v[operation.y]
        v[0xF] = 0

    def _8xy2(self, operation):  # AND Vx, Vy
        v = self.registers.v
        v[operation.x] &= v[operation.y]
        v[0xF] = 0

    def _8xy3(self, operation):  # XOR Vx, Vy
        v = self.registers.v
        v[operation.x] ^= v[operation.y]
        v[0xF] = 0

    def _8xy4(self, operation):  # ADD Vx, Vy
        v = self.registers.v
        val = v[operation.x] + v[operation.y]
        v[operation.x] = val & 0xFF
        v[0xF] = int(val > 0xFF)  # Vf is set when carrying

    def _post_8xy5_8xy7(self, operation, val):  # Post-SUB/SUBN
        v = self.registers.v
        v[operation.x] = val & 0xFF
        # Vf is set when NOT borrowing, and this should happen AFTER Vx is set, as sometimes VF is specified in the
        # parameters.
        v[0xF] = int(val >= 0)

    def _8xy5(self, operation):  # SUB Vx, Vy
        v = self.registers.v
        self._post_8xy5_8xy7(operation, v[operation.x] - v[operation.y])

    def _8xy6(self, operation):  # SHR Vx, Vy
        v = self.registers.v
        val = v[operation.y]
        v[operation.x] = val >> 1
        v[0xF] = val & 1  # The whole byte gets set just for the flag

    def _8xy7(self, operation):  # SUBN Vx, Vy
        v = self.registers.v
        self._post_8xy5_8xy7(operation, v[operation.y] - v[operation.x])

    def _8xyE(self, operation):  # SHL Vx, Vy
        v = self.registers.v
        val = v[operation.y]
        v[operation.x] = (val << 1) & 0xFF
        v[0xF] = val >> 7

    def _9xy0(self, operation):  # SNE Vx, Vy
        v = self.registers.v

        if v[operation.x] != v[operation.y]:
            self._skip()

    def _Annn(self, operation):  # LD I, addr
        self.registers.i = operation.nnn

    def _Bnnn(self, operation):  # JP V0, addr
        registers = self.registers
        registers.pc = (registers.v[0x0] + operation.nnn) & ADDRESS_MASK

    def _Cxkk(self, operation):  # RND Vx, byte
        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.registers.v[operation.x] = self.random_source() & operation.kk

    def _Dxyn(self, operation):  # DRW Vx, Vy, nibble
        registers = self.registers
        v = registers.v
        i = registers.i
        sprite = bytes(self.ram.read((i + row) & ADDRESS_MASK) for row in range(operation.n))

        # The sprite's start position always wraps, and so does anything that runs off the edge
        vid_width, vid_height = self.framebuffer.get_vid_size()
        collided = self.framebuffer.draw_sprite(v[operation.x] % vid_width, v[operation.y] % vid_height, sprite)
        v[0xF] = int(collided)

    def _Ex9E(self, operation):  # SKP Vx
        if self.keypad.is_pressed(self.registers.v[operation.x] & 0xF):
            self._skip()

    def _ExA1(self, operation):  # SKNP Vx
        if not self.keypad.is_pressed(self.registers.v[operation.x] & 0xF):
            self._skip()

    def _Fx07(self, operation):  # LD Vx, DT
        registers = self.registers
        registers.v[operation.x] = registers.dt

    def _Fx0A(self, operation):  # LD Vx, K
        # This opcode waits for a keypress, but since the sound and delay timers still need to expire correctly, and
        # the display and inputs still need servicing, we'll return control to the host and simply decrement the
        # incremented program counter.  The host will run this instruction again on the next step.
        key = self.keypad.take_keypress()

        if key is None:
            self.registers.dec_pc()
        else:
            self.registers.v[operation.x] = key

    def _Fx15(self, operation):  # LD DT, Vx
        registers = self.registers
        registers.dt = registers.v[operation.x]

    def _Fx18(self, operation):  # LD ST, Vx
        registers = self.registers
        registers.st = registers.v[operation.x]

    def _Fx1E(self, operation):  # ADD I, Vx
        registers = self.registers
        registers.i = registers.i + registers.v[operation.x]

    def _Fx29(self, operation):  # LD F, Vx
        # Only the low nibble picks a glyph; there are 16 of them
        registers = self.registers
        registers.i = FONT_LOCATION + FONT_GLYPH_SIZE * (registers.v[operation.x] & 0xF)

    def _Fx33(self, operation):  # LD B, Vx
        registers = self.registers
        val = registers.v[operation.x]
        i = registers.i
        self.ram.write(i & ADDRESS_MASK, val // 100)               # Most-significant digit
        self.ram.write((i + 1) & ADDRESS_MASK, (val // 10) % 10)   # Middle digit
        self.ram.write((i + 2) & ADDRESS_MASK, val % 10)           # Least-significant digit

    def _Fx55(self, operation):  # LD [I], Vx
        registers = self.registers
        i = registers.i

        # Ensure with +1s that the final register is copied
        for reg in range(operation.x + 1):
            self.ram.write((i + reg) & ADDRESS_MASK, registers.v[reg])

        registers.i = i + operation.x + 1

    def _Fx65(self, operation):  # LD Vx, [I]
        registers = self.registers
        i = registers.i

        for reg in range(operation.x + 1):
            registers.v[reg] = self.ram.read((i + reg) & ADDRESS_MASK)

        registers.i = i + operation.x + 1
