#!/usr/bin/env python3

__author__ = "Gregory Maynard-Hoare"
__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"
__version__ = "1.0.0"

import logging
import sys
from argparse import ArgumentParser
from chip8vm import main, StartupError
from chip8vm.constants import DEFAULT_CLOCK_SPEED, DEFAULT_KEYMAP, UNKNOWN_POLICIES, UNKNOWN_POLICY_SKIP


def parse_args(argv=None):
    parser = ArgumentParser()
    parser.add_argument("filename", help="ROM to execute (normally ending in .ch8 or .c8)")
    parser.add_argument(
        "-c", "--clock_speed", type=int,
        help="set the CPU speed in operations/second (default {}, 0 = uncapped)".format(DEFAULT_CLOCK_SPEED)
    )
    parser.add_argument(
        "-r", "--renderer", choices=["pygame", "curses", "null"],
        help="set the rendering and input systems (pygame by default if available, otherwise curses)"
    )
    parser.add_argument(
        "-s", "--scale", type=int,
        help="set the window width in PyGame mode (default 512), and scale in Curses mode (default 2)"
    )
    parser.add_argument(
        "-k", "--keymap", default=DEFAULT_KEYMAP,
        help="redefine the 16 keyscan codes (PyGame) or character numbers (Curses).  Separate each decimal with a comma"
    )
    parser.add_argument(
        "-u", "--unknown_opcodes", choices=UNKNOWN_POLICIES, default=UNKNOWN_POLICY_SKIP,
        help="skip unsupported instructions with a warning (default), or halt emulation"
    )
    parser.add_argument(
        "--curses_cursor_mode", type=int, choices=[0, 1, 2], default=0,
        help="control cursor visibility in the Curses renderer"
    )
    parser.add_argument(
        "--pygame_palette",
        help="redefine the background and foreground colours for the PyGame renderer in hex, e.g. 000000,33FF66"
    )
    parser.add_argument(
        "-d", "--debug", action="store_true", default=False,
        help="enable live debug output.  Slows CPU execution"
    )
    return parser.parse_args(argv)  # Can call sys.exit(2) if args are incorrect


def cli():
    args = vars(parse_args())
    logging.basicConfig(
        level=logging.DEBUG if args["debug"] else logging.WARNING, format="[%(levelname)s] %(name)s: %(message)s"
    )

    try:
        # It is possible to start the emulator from a GUI by calling main with a dictionary
        main(args)
    except StartupError as error:
        print("Unable to start: {}".format(error), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    cli()
