#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the emulator, replacing args with a dictionary
of options.  This can be done via the Terminal or GUI.

All options must be supplied.  Defaults can be specified with a 'None'.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging
from .constants import APP_INTRO, APP_COPYRIGHT, DEFAULT_CLOCK_SPEED, DEFAULT_KEYMAP, UNKNOWN_POLICY_SKIP
from .cpu import FATAL_ERRORS
from .debugger import Debugger
from .hostio import Loader
from .inputs.i_null import InputsError
from .machine import Machine
from .ram import ProgramTooLarge
from .renderers.r_null import RendererError

logger = logging.getLogger(__name__)


class StartupError(Exception):
    pass


def select_plugins(opt_renderer):
    # Returns the (Inputs, Renderer) classes for the requested system.  If necessary, try PyGame first, then Curses.
    auto_select_renderer = opt_renderer is None

    # flake8: noqa: F401
    if auto_select_renderer or opt_renderer == "pygame":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import pygame
        except ImportError:
            if auto_select_renderer:
                opt_renderer = "curses"
            else:
                raise StartupError(
                    "PyGame does not appear to be installed."
                )
        else:
            from .inputs.i_pygame import Inputs
            from .renderers.r_pygame import Renderer
            return Inputs, Renderer

    if opt_renderer == "curses":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import curses
        except ImportError:
            if auto_select_renderer:
                raise StartupError(
                    "Neither PyGame nor Curses (or Windows-Curses) appear to be installed."
                )

            raise StartupError(
                "Curses (or Windows-Curses) does not appear to be installed."
            )
        else:
            from .inputs.i_curses import Inputs
            from .renderers.r_curses import Renderer
            return Inputs, Renderer

    if opt_renderer == "null":
        # pylint: disable=import-outside-toplevel
        from .inputs.i_null import Inputs
        from .renderers.r_null import Renderer
        return Inputs, Renderer

    raise StartupError("Unknown renderer '{}'".format(opt_renderer))


def main(args):
    print("".join((APP_INTRO, APP_COPYRIGHT)))

    # Set up debugger and live output if necessary
    debugger = Debugger()
    debugger.set_live(bool(args["debug"]))

    unknown_policy = args["unknown_opcodes"] or UNKNOWN_POLICY_SKIP
    machine = Machine(debugger=debugger, unknown_policy=unknown_policy)

    # Read ROM binary and write it into RAM.  Both of these are reported, and the emulator refuses to start.
    try:
        machine.load(Loader().load_binary(args["filename"]))
    except OSError as error:
        raise StartupError("Could not read ROM: {}".format(error)) from error
    except ProgramTooLarge as error:
        raise StartupError(str(error)) from error

    Inputs, Renderer = select_plugins(args["renderer"])

    # Set up a new rendering system, and host inputs linked to it in case it provides inputs too
    try:
        renderer = Renderer(
            scale=args["scale"],
            pygame_palette=args["pygame_palette"],
            curses_cursor_mode=args["curses_cursor_mode"] or 0
        )
    except RendererError as error:
        raise StartupError(str(error)) from error

    crash_report = None

    try:
        try:
            inputs = Inputs(args["keymap"] or DEFAULT_KEYMAP, renderer, machine.keypad)
        except InputsError as error:
            raise StartupError(str(error)) from error

        try:
            clock_speed = args["clock_speed"]
            machine.run(renderer, inputs, DEFAULT_CLOCK_SPEED if clock_speed is None else clock_speed)
        except FATAL_ERRORS:
            crash_report = debugger.crash_report(machine.cpu)
            raise
        finally:
            inputs.shutdown()
    finally:
        # The CPU has quit, so shut down the rendering framework.  __del__ cannot be relied upon when using PyPy
        renderer.shutdown()

        # Only print once the display has been handed back to the terminal
        if crash_report is not None:
            print(crash_report)

    if machine.cpu.unknown_count:
        logger.warning("%d unsupported instruction(s) were skipped", machine.cpu.unknown_count)
