# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/duts/echo_ram/dv/echo_ram_monitor.py

"""Response monitor for echo_ram."""

from __future__ import annotations

from typing import Any

from dutcheck.core import Transaction
from dutcheck.dv import BaseMonitor


class EchoRamMonitor(BaseMonitor):  # pylint: disable=too-many-ancestors
    """Emits one observed Transaction per tick with response_valid high.

    An unresolvable response_valid counts as "no response". X/Z on
    response_data while valid is an error; the value is captured as 0 so
    the scoreboard reports it as a data mismatch.
    """

    def sample_dut(self, dut: Any) -> Transaction | None:
        valid = self._get_val(dut.response_valid.value)
        if valid != 1:
            return None
        data = self._get_val(dut.response_data.value)
        if data is None:
            self.logger.error(
                "response_data has X/Z with response_valid=1 at tick %d; capturing 0",
                self.tick,
            )
            data = 0
        tr = Transaction.observed(self.ids.next(), data, self.tick)
        self.logger.debug("observed #%d data=0x%08X @%d", tr.id, data, self.tick)
        return tr
