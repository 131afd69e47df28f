# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/duts/echo_ram/dv/echo_ram_driver.py

"""Request driver for echo_ram."""

from __future__ import annotations

from typing import Any

import pyuvm

from dutcheck.core import Transaction
from dutcheck.dv import BaseDriver, BaseItem


class EchoRamDriver(BaseDriver[BaseItem]):  # pylint: disable=too-many-ancestors
    """Drives request_valid/request_data on the falling edge."""

    def __init__(self, name: str, parent: pyuvm.uvm_component | None) -> None:
        super().__init__(name, parent)
        self.idle_dut_input_values = {"request_valid": 0, "request_data": 0}

    def present(self, dut: Any, tr: Transaction) -> None:
        dut.request_valid.value = int(tr.request_valid)
        dut.request_data.value = tr.request_data
        self.logger.debug(
            "drive #%d valid=%d data=0x%08X",
            tr.id,
            int(tr.request_valid),
            tr.request_data,
        )
