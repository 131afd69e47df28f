# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/duts/echo_ram/__init__.py

"""echo_ram: a 256-slot circular buffer that echoes each request back.

To run:
    dv --design=echo_ram --test=test_echo_ram
    dv-regress --file=src/dutcheck/duts/echo_ram/dv/dv_regress.yaml
"""

from .echo_ram_model import DEPTH, EchoRamModel

__all__ = ["DEPTH", "EchoRamModel"]
