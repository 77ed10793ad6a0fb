#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here, and are only drawn to the actual display (the host
rendering system) once per frame.  The host reads this buffer; nothing here
knows how pixels end up on screen, what colour they are, or how big.

Unlike other computers, programs for this system cannot write directly into
video RAM.  Instead, sprites are drawn to the screen using an XOR method: each
set bit of a sprite row flips the pixel beneath it.  The screen is only ever
changed by a sprite draw or by clearing it.

Sprites are 8 pixels wide and 1-15 rows tall.  Coordinates wrap around, so a
sprite running off the right-hand edge reappears on the left.

Collisions (where any pixel was set, but was unset by an XOR) are reported.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import DISPLAY_WIDTH, DISPLAY_HEIGHT
from .ram import RAM


class FramebufferError(Exception):
    pass


class Framebuffer:
    def __init__(self, vid_width=DISPLAY_WIDTH, vid_height=DISPLAY_HEIGHT):
        if vid_width <= 0 or vid_height <= 0:
            raise FramebufferError("Display must be at least 1x1 pixels")

        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.plane = RAM(self.vid_size, font=None)  # One byte per pixel, 0x00 or 0xFF
        self.changed = True  # Force the first frame to render

    def clear(self):
        self.plane.clear()
        self.changed = True

    def xor_pixel(self, x, y):
        # Returns True if a set pixel was erased
        vram_loc = (y % self.vid_height) * self.vid_width + (x % self.vid_width)
        pixel = self.plane.read(vram_loc)
        self.plane.write(vram_loc, pixel ^ 0xFF)
        return pixel != 0

    def draw_sprite(self, x, y, sprite_bytes):
        collided = False

        for row, spr_data in enumerate(sprite_bytes):
            for col in range(8):
                if spr_data & (0x80 >> col) and self.xor_pixel(x + col, y + row):
                    # Don't stop drawing.  Set the flag, and never unset it for this sprite.
                    collided = True

        if sprite_bytes:
            self.changed = True

        return collided

    def pixel(self, x, y):
        if not (0 <= x < self.vid_width and 0 <= y < self.vid_height):
            raise FramebufferError("Pixel ({}, {}) is outside the {}x{} display".format(
                x, y, self.vid_width, self.vid_height
            ))

        return self.plane.mem[y * self.vid_width + x] != 0

    def rows(self):
        # Whole screen as rows of booleans, top to bottom
        width = self.vid_width
        mem = self.plane.mem
        return [[mem[y * width + x] != 0 for x in range(width)] for y in range(self.vid_height)]

    def get_vid_size(self):
        return self.vid_width, self.vid_height
