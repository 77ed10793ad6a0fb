#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from chip8vm.constants import APP_NAME, DEFAULT_KEYMAP, SYSTEM_FONT
from chip8vm.inputs.i_null import Inputs
from chip8vm.machine import Machine
from chip8vm.ram import ProgramTooLarge
from chip8vm.renderers.r_null import Renderer
from chip8vm.stack import StackUnderflow


class RecordingRenderer(Renderer):
    def __init__(self):
        self.pixels = {}
        self.refreshes = []
        super().__init__()

    def set_pixel(self, x, y, colour):
        self.pixels[(x, y)] = colour

    def refresh_display(self, content_changed=False):
        self.refreshes.append(content_changed)


class QuittingInputs(Inputs):
    # Asks to quit on the given input pass
    def __init__(self, keypad, passes):
        self.passes = passes
        super().__init__(DEFAULT_KEYMAP, None, keypad)

    def process_messages(self):
        super().process_messages()
        self.passes -= 1
        return self.passes <= 0


class TestMachine(unittest.TestCase):
    def setUp(self):
        self.machine = Machine(random_source=lambda: 0x5A)
        self.renderer = RecordingRenderer()

    def test_machine_load(self):
        self.machine.load(b"\x00\xE0\x12\x00")
        self.assertEqual(0x200, self.machine.registers.pc)
        self.assertEqual(b"\x00\xE0", bytes(self.machine.ram.read_block(0x200, 2)))

    def test_machine_load_largest(self):
        self.machine.load(bytes(3584))
        self.assertEqual(0x200, self.machine.registers.pc)

    def test_machine_load_too_large(self):
        self.assertRaises(ProgramTooLarge, self.machine.load, bytes(3585))

    def test_machine_load_resets(self):
        machine = self.machine
        machine.load(b"\x60\x42\x22\x00")
        machine.step()
        machine.step()
        machine.framebuffer.draw_sprite(0, 0, b"\xFF")
        machine.keypad.set_key(0x3, True)
        machine.load(b"\x00\xE0")
        self.assertEqual(0, machine.registers.v[0])
        self.assertEqual(0, len(machine.registers.stack))
        self.assertEqual(0x200, machine.registers.pc)
        self.assertFalse(machine.framebuffer.pixel(0, 0))
        self.assertIsNone(machine.keypad.any_pressed())
        self.assertIsNone(machine.cpu.fault)

    def test_machine_load_restores_font(self):
        machine = self.machine
        # LD V0, 0xAA; LD I, 0x050; LD [I], V0 overwrites the first font byte
        machine.load(b"\x60\xAA\xA0\x50\xF0\x55\x00\x00\x77")

        for _ in range(3):
            machine.step()

        self.assertEqual(0xAA, machine.ram.read(0x50))
        machine.load(b"\x12\x00")
        self.assertEqual(SYSTEM_FONT, bytes(machine.ram.read_block(0x50, len(SYSTEM_FONT))))
        self.assertEqual(0, machine.ram.read(0x208))

    def test_machine_load_too_large_resets(self):
        self.machine.load(b"\x12\x00\x34")
        self.machine.ram.write(0x10, 0x99)
        self.assertRaises(ProgramTooLarge, self.machine.load, bytes(3585))
        self.assertEqual(0, self.machine.ram.read(0x10))
        self.assertEqual(b"\x00\x00\x00", bytes(self.machine.ram.read_block(0x200, 3)))
        self.assertEqual(SYSTEM_FONT[0], self.machine.ram.read(0x50))

    def test_machine_step_and_tick(self):
        # LD V0, 0x3C; LD DT, V0; JP 0x204
        self.machine.load(b"\x60\x3C\xF0\x15\x12\x04")

        for _ in range(3):
            self.machine.step()

        self.assertEqual(0x3C, self.machine.registers.dt)
        self.machine.tick(0.5)
        self.assertEqual(0x3C - 30, self.machine.registers.dt)

    def test_machine_random(self):
        self.machine.load(b"\xC1\xF0")
        self.machine.step()
        self.assertEqual(0x50, self.machine.registers.v[1])

    def test_machine_key_wait(self):
        self.machine.load(b"\xF5\x0A")

        for _ in range(5):
            self.machine.step()

        self.assertEqual(0x200, self.machine.registers.pc)
        self.machine.keypad.set_key(0xD, True)
        self.machine.step()
        self.assertEqual(0x202, self.machine.registers.pc)
        self.assertEqual(0xD, self.machine.registers.v[5])

    def test_machine_refresh_display(self):
        self.machine.framebuffer.draw_sprite(2, 3, b"\x80")
        self.machine.refresh_display(self.renderer)
        self.assertEqual([True], self.renderer.refreshes)
        self.assertEqual(64 * 32, len(self.renderer.pixels))
        self.assertEqual(1, self.renderer.pixels[(2, 3)])
        self.assertEqual(0, self.renderer.pixels[(3, 3)])

        # Nothing changed since
        self.machine.refresh_display(self.renderer)
        self.assertEqual([True, False], self.renderer.refreshes)

    def test_machine_run(self):
        self.machine.load(b"\x12\x00")
        inputs = QuittingInputs(self.machine.keypad, 2)
        self.machine.run(self.renderer, inputs, clock_speed=0)
        self.assertEqual(0, inputs.passes)
        self.assertEqual(0x200, self.machine.registers.pc)
        self.assertEqual((64, 32), (self.renderer.width, self.renderer.height))
        self.assertTrue(self.renderer.title.startswith(APP_NAME))
        self.assertIn(True, self.renderer.refreshes)

    def test_machine_run_samples_inputs(self):
        self.machine.load(b"\x12\x00")
        self.machine.keypad.set_key(0x4, True)
        self.machine.run(self.renderer, QuittingInputs(self.machine.keypad, 1), clock_speed=0)
        # The null inputs report every key as released
        self.assertIsNone(self.machine.keypad.any_pressed())

    def test_machine_run_fatal(self):
        self.machine.load(b"\x00\xEE")
        inputs = QuittingInputs(self.machine.keypad, 1000)
        self.assertRaises(StackUnderflow, self.machine.run, self.renderer, inputs, 0)
        self.assertTrue(self.machine.cpu.is_halted())
        self.assertEqual(0x200, self.machine.cpu.debug_pc)
