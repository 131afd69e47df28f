# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/__init__.py

"""dutcheck: stimulus/response conformance harness for cocotb + pyuvm.

The harness drives a device under test with seeded stimulus, captures its
responses, and reconciles them in order against an independently computed
expected-value model.

Packages:

core:
    Simulator-free reconciliation core: Transaction, StimulusGenerator,
    StimulusProfile, ExpectedQueue and the Scoreboard state machine.

dv:
    UVM-style base components (driver, monitor, sequence, scoreboard,
    coverage, env, test) that connect the core to a simulated DUT.

duts:
    Reference DUTs with their RTL and bench. echo_ram is the shipped one.

tools:
    dv (single test runner) and dv-regress (YAML regressions).
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

try:
    __version__ = pkg_version("dutcheck")
except PackageNotFoundError:
    __version__ = "0+local"
