#!/usr/bin/env python3

"""
Instruction Decoder

Turns a raw 16-bit instruction word into an Operation: a tag naming the
instruction plus every operand field the word could carry.  Field positions
are the same across the whole instruction set, so they are always extracted:

    x   = bits 8-11   (register)
    y   = bits 4-7    (register)
    n   = bits 0-3    (nibble)
    kk  = bits 0-7    (byte)
    nnn = bits 0-11   (address)

The first nibble picks a group of instructions.  Groups holding more than one
instruction are told apart by masking off the operand bits and looking the
remainder up in a table.  Anything left over is UNKNOWN, apart from 0nnn words
which are SYS calls into native COSMAC code.  Decoding never fails.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple

Operation = namedtuple("Operation", ["kind", "word", "x", "y", "n", "kk", "nnn"])

SYS = "SYS"                  # 0nnn
CLS = "CLS"                  # 00E0
RET = "RET"                  # 00EE
JP = "JP"                    # 1nnn
CALL = "CALL"                # 2nnn
SE_BYTE = "SE_BYTE"          # 3xkk
SNE_BYTE = "SNE_BYTE"        # 4xkk
SE_REG = "SE_REG"            # 5xy0
LD_BYTE = "LD_BYTE"          # 6xkk
ADD_BYTE = "ADD_BYTE"        # 7xkk
LD_REG = "LD_REG"            # 8xy0
OR = "OR"                    # 8xy1
AND = "AND"                  # 8xy2
XOR = "XOR"                  # 8xy3
ADD_REG = "ADD_REG"          # 8xy4
SUB = "SUB"                  # 8xy5
SHR = "SHR"                  # 8xy6
SUBN = "SUBN"                # 8xy7
SHL = "SHL"                  # 8xyE
SNE_REG = "SNE_REG"          # 9xy0
LD_I = "LD_I"                # Annn
JP_V0 = "JP_V0"              # Bnnn
RND = "RND"                  # Cxkk
DRW = "DRW"                  # Dxyn
SKP = "SKP"                  # Ex9E
SKNP = "SKNP"                # ExA1
LD_VX_DT = "LD_VX_DT"        # Fx07
LD_VX_K = "LD_VX_K"          # Fx0A
LD_DT_VX = "LD_DT_VX"        # Fx15
LD_ST_VX = "LD_ST_VX"        # Fx18
ADD_I = "ADD_I"              # Fx1E
LD_F = "LD_F"                # Fx29
LD_B = "LD_B"                # Fx33
LD_MEM_VX = "LD_MEM_VX"      # Fx55
LD_VX_MEM = "LD_VX_MEM"      # Fx65
UNKNOWN = "UNKNOWN"

# Bits to keep when identifying an instruction, keyed by first nibble
GROUP_MASKS = {
    0x0: 0xFFFF,
    0x5: 0xF00F,
    0x8: 0xF00F,
    0x9: 0xF00F,
    0xE: 0xF0FF,
    0xF: 0xF0FF
}
DEFAULT_GROUP_MASK = 0xF000

OPCODES = {
    0x00E0: CLS,
    0x00EE: RET,
    0x1000: JP,
    0x2000: CALL,
    0x3000: SE_BYTE,
    0x4000: SNE_BYTE,
    0x5000: SE_REG,
    0x6000: LD_BYTE,
    0x7000: ADD_BYTE,
    0x8000: LD_REG,
    0x8001: OR,
    0x8002: AND,
    0x8003: XOR,
    0x8004: ADD_REG,
    0x8005: SUB,
    0x8006: SHR,
    0x8007: SUBN,
    0x800E: SHL,
    0x9000: SNE_REG,
    0xA000: LD_I,
    0xB000: JP_V0,
    0xC000: RND,
    0xD000: DRW,
    0xE09E: SKP,
    0xE0A1: SKNP,
    0xF007: LD_VX_DT,
    0xF00A: LD_VX_K,
    0xF015: LD_DT_VX,
    0xF018: LD_ST_VX,
    0xF01E: ADD_I,
    0xF029: LD_F,
    0xF033: LD_B,
    0xF055: LD_MEM_VX,
    0xF065: LD_VX_MEM
}

ALL_KINDS = frozenset(list(OPCODES.values()) + [SYS, UNKNOWN])

# Conventional (Cowgod-style) assembly for each instruction, used in debug output
MNEMONICS = {
    SYS:       "SYS 0x{nnn:03x}",
    CLS:       "CLS",
    RET:       "RET",
    JP:        "JP 0x{nnn:03x}",
    CALL:      "CALL 0x{nnn:03x}",
    SE_BYTE:   "SE V{x:01x}, 0x{kk:02x}",
    SNE_BYTE:  "SNE V{x:01x}, 0x{kk:02x}",
    SE_REG:    "SE V{x:01x}, V{y:01x}",
    LD_BYTE:   "LD V{x:01x}, 0x{kk:02x}",
    ADD_BYTE:  "ADD V{x:01x}, 0x{kk:02x}",
    LD_REG:    "LD V{x:01x}, V{y:01x}",
    OR:        "OR V{x:01x}, V{y:01x}",
    AND:       "AND V{x:01x}, V{y:01x}",
    XOR:       "XOR V{x:01x}, V{y:01x}",
    ADD_REG:   "ADD V{x:01x}, V{y:01x}",
    SUB:       "SUB V{x:01x}, V{y:01x}",
    SHR:       "SHR V{x:01x}, V{y:01x}",
    SUBN:      "SUBN V{x:01x}, V{y:01x}",
    SHL:       "SHL V{x:01x}, V{y:01x}",
    SNE_REG:   "SNE V{x:01x}, V{y:01x}",
    LD_I:      "LD I, 0x{nnn:03x}",
    JP_V0:     "JP V0, 0x{nnn:03x}",
    RND:       "RND V{x:01x}, 0x{kk:02x}",
    DRW:       "DRW V{x:01x}, V{y:01x}, 0x{n:01x}",
    SKP:       "SKP V{x:01x}",
    SKNP:      "SKNP V{x:01x}",
    LD_VX_DT:  "LD V{x:01x}, DT",
    LD_VX_K:   "LD V{x:01x}, K",
    LD_DT_VX:  "LD DT, V{x:01x}",
    LD_ST_VX:  "LD ST, V{x:01x}",
    ADD_I:     "ADD I, V{x:01x}",
    LD_F:      "LD F, V{x:01x}",
    LD_B:      "LD B, V{x:01x}",
    LD_MEM_VX: "LD [I], V{x:01x}",
    LD_VX_MEM: "LD V{x:01x}, [I]",
    UNKNOWN:   "??? 0x{word:04x}"
}


def decode(word):
    word &= 0xFFFF
    group = word >> 12
    kind = OPCODES.get(word & GROUP_MASKS.get(group, DEFAULT_GROUP_MASK))

    if kind is None:
        kind = SYS if group == 0x0 else UNKNOWN

    return Operation(kind, word, (word & 0xF00) >> 8, (word & 0xF0) >> 4, word & 0xF, word & 0xFF, word & 0xFFF)


def disassemble(operation):
    return MNEMONICS[operation.kind].format(**operation._asdict())
