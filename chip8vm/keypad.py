#!/usr/bin/env python3

"""
Keypad (Input Latch)

The original machine had a 16-key hexadecimal keypad.  The host writes key
states here, normally once per input pass via 'sample', and the CPU reads them
between instructions.  The CPU never writes here, except to consume a latched
keypress.

Besides the held/released state of each key, the most recent press (a key
going from released to held) is latched.  The key-wait instruction consumes
this latch, so a key which was already held when the wait began does not
satisfy it.  Each sampling pass replaces the latch, so a press is never older
than one input pass by the time the CPU sees it.

The CPU reads 'is_pressed' for the key-skip instructions and 'take_keypress'
for key-wait.  'any_pressed' and 'get_keypress' only look, without consuming
anything, and are there for the host and for inspecting a machine's state.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import NUM_KEYS


class KeypadError(Exception):
    pass


class Keypad:
    def __init__(self):
        self.key_down = [False] * NUM_KEYS
        self.last_keypress = None

    def _check_key(self, index):
        if not 0 <= index < NUM_KEYS:
            raise KeypadError("Key 0x{:x} does not exist".format(index))

    def set_key(self, index, pressed):
        self._check_key(index)
        pressed = bool(pressed)

        if pressed and not self.key_down[index]:
            self.last_keypress = index

        self.key_down[index] = pressed

    def sample(self, states, keypress=None):
        # Apply a full snapshot of all 16 keys from one input pass.  'keypress' covers a key which was pressed and
        # released again within the pass, so doesn't show up as held.
        if len(states) != NUM_KEYS:
            raise KeypadError("Exactly {} key states are required".format(NUM_KEYS))

        self.last_keypress = None

        for index, pressed in enumerate(states):
            self.set_key(index, pressed)

        if keypress is not None:
            self._check_key(keypress)
            self.last_keypress = keypress

    def is_pressed(self, index):
        self._check_key(index)
        return self.key_down[index]

    def any_pressed(self):
        for index, pressed in enumerate(self.key_down):
            if pressed:
                return index

        return None

    def get_keypress(self):
        return self.last_keypress

    def take_keypress(self):
        key = self.last_keypress
        self.last_keypress = None
        return key

    def release_all(self):
        self.key_down = [False] * NUM_KEYS
        self.last_keypress = None
