#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock
from chip8vm import main, StartupError
from chip8vm.constants import DEFAULT_CLOCK_SPEED, DEFAULT_KEYMAP, UNKNOWN_POLICY_SKIP
from chip8vm.stack import StackUnderflow
from playchip8 import parse_args


class TestStartup(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp_dir.cleanup)

    def _write_rom(self, data):
        filename = os.path.join(self.tmp_dir.name, "test.ch8")

        with open(filename, "wb") as f:
            f.write(data)

        return filename

    def _args(self, filename, **kwargs):
        args = vars(parse_args([filename, "-r", "null"]))
        args.update(kwargs)
        return args

    def _main(self, args):
        with redirect_stdout(io.StringIO()) as output:
            main(args)

        return output.getvalue()

    def test_startup_parse_args(self):
        args = vars(parse_args(["game.ch8"]))
        self.assertEqual("game.ch8", args["filename"])
        self.assertIsNone(args["clock_speed"])
        self.assertIsNone(args["renderer"])
        self.assertEqual(DEFAULT_KEYMAP, args["keymap"])
        self.assertEqual(UNKNOWN_POLICY_SKIP, args["unknown_opcodes"])
        self.assertFalse(args["debug"])

    def test_startup_missing_rom(self):
        self.assertRaises(StartupError, self._main, self._args(os.path.join(self.tmp_dir.name, "none.ch8")))

    def test_startup_rom_too_large(self):
        self.assertRaises(StartupError, self._main, self._args(self._write_rom(bytes(3585))))

    def test_startup_bad_keymap(self):
        args = self._args(self._write_rom(b"\x12\x00"), keymap="1,2,3")
        self.assertRaises(StartupError, self._main, args)

    def test_startup_runs(self):
        with mock.patch("chip8vm.Machine.run") as run:
            self._main(self._args(self._write_rom(b"\x12\x00")))

        self.assertEqual(1, run.call_count)
        self.assertEqual(DEFAULT_CLOCK_SPEED, run.call_args[0][2])

    def test_startup_crash_report(self):
        with mock.patch("chip8vm.Machine.run", side_effect=StackUnderflow("Stack underflow")):
            output = io.StringIO()

            with redirect_stdout(output):
                self.assertRaises(StackUnderflow, main, self._args(self._write_rom(b"\x00\xEE")))

        self.assertIn("Emulation halted.", output.getvalue())
