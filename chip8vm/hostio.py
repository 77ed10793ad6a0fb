#!/usr/bin/env python3

"""
Host I/O Functionality

Handles loading ROM binaries for later writing into RAM.  A CHIP-8 ROM has no
header or metadata; the file is simply the program's bytes, which are placed
at 0x200.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging

logger = logging.getLogger(__name__)


class Loader:
    def load_binary(self, filename):
        with open(filename, "rb") as f:
            data = f.read()

        logger.debug("Loaded %d bytes from %s", len(data), filename)
        return data
