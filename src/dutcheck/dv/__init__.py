# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/dv/__init__.py

"""UVM-style bench infrastructure on cocotb + pyuvm.

Benches subclass these and register the subclasses as factory overrides in
their test. The reconciliation logic itself lives in dutcheck.core; these
components put it on the simulation clock.

Base Classes:
- BaseTest: entry point; config, overrides, run control
- BaseEnv: agent, scoreboard, coverage, stimulus generator
- BaseAgent: driver, sequencer and response monitor
- BaseDriver: request-side driver, one transaction per tick
- BaseMonitor: response-side monitor with subscriber callbacks
- BaseSequencer: sequencer between sequence and driver
- BaseSequence: plays generator output through the sequencer
- BaseItem: sequence item carrying a Transaction
- BaseRefModel: predictor used by the scoreboard
- BaseSb: core Scoreboard on the simulation clock
- BaseCoverage: fire-and-forget coverage sink

Clock and Reset:
- BaseClockDriver: cocotb Clock starter
- BaseClockMixin: clock config and edge alignment
- BaseResetDriver: reset pulse and reset_done event

Utilities:
- utils_dv: config_db, signal and logger helpers
- utils_cli: settings resolution and factory overrides from plusargs
"""

from __future__ import annotations

from dutcheck import __version__

from . import utils_cli, utils_dv
from .base_agent import BaseAgent
from .base_clock_driver import BaseClockDriver
from .base_clock_mixin import BaseClockMixin
from .base_coverage import BaseCoverage
from .base_driver import BaseDriver
from .base_env import BaseEnv
from .base_item import BaseItem
from .base_monitor import BaseMonitor
from .base_ref_model import BaseRefModel
from .base_reset_driver import BaseResetDriver
from .base_sb import BaseSb
from .base_sequence import BaseSequence
from .base_sequencer import BaseSequencer
from .base_test import BaseTest

__all__ = (
    "BaseAgent",
    "BaseClockDriver",
    "BaseClockMixin",
    "BaseCoverage",
    "BaseDriver",
    "BaseEnv",
    "BaseItem",
    "BaseMonitor",
    "BaseRefModel",
    "BaseResetDriver",
    "BaseSb",
    "BaseSequence",
    "BaseSequencer",
    "BaseTest",
    "utils_dv",
    "utils_cli",
    "__version__",
)
