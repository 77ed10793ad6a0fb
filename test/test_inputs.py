#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from chip8vm.constants import DEFAULT_KEYMAP
from chip8vm.inputs.i_null import Inputs, InputsError
from chip8vm.keypad import Keypad
from chip8vm.renderers.r_null import Renderer


class TestInputs(unittest.TestCase):
    def setUp(self):
        self.keypad = Keypad()
        self.renderer = Renderer()

    def test_inputs_default_keymap(self):
        inputs = Inputs(DEFAULT_KEYMAP, self.renderer, self.keypad)
        self.assertEqual(16, len(inputs.keymap_dict))
        self.assertEqual(0x0, inputs.keymap_dict[ord("x")])
        self.assertEqual(0x1, inputs.keymap_dict[ord("1")])
        self.assertEqual(0xC, inputs.keymap_dict[ord("4")])
        self.assertEqual(0xF, inputs.keymap_dict[ord("v")])

    def test_inputs_lowercase(self):
        keymap = ",".join(str(ord(char)) for char in "X123QWEASDZC4RFV")
        inputs = Inputs(keymap, self.renderer, self.keypad, force_lowercase=True)
        self.assertEqual(0x0, inputs.keymap_dict[ord("x")])

    def test_inputs_bad_keymaps(self):
        self.assertRaises(InputsError, Inputs, "1,2,3", self.renderer, self.keypad)
        self.assertRaises(InputsError, Inputs, ",".join(["a"] * 16), self.renderer, self.keypad)
        self.assertRaises(InputsError, Inputs, ",".join(["49"] * 16), self.renderer, self.keypad)

    def test_inputs_process_messages(self):
        inputs = Inputs(DEFAULT_KEYMAP, self.renderer, self.keypad)
        self.keypad.set_key(0x7, True)
        self.assertFalse(inputs.process_messages())
        self.assertIsNone(self.keypad.any_pressed())
        self.assertIsNone(self.keypad.get_keypress())

    def test_inputs_latched_press(self):
        inputs = Inputs(DEFAULT_KEYMAP, self.renderer, self.keypad)
        inputs.last_keypress = 0x6
        inputs.process_messages()
        self.assertEqual(0x6, self.keypad.get_keypress())
        self.assertIsNone(inputs.last_keypress)
