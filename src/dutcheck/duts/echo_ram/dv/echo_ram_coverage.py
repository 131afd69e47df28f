# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/duts/echo_ram/dv/echo_ram_coverage.py

"""Coverage."""

from __future__ import annotations

import pyuvm
from cocotb_coverage.coverage import CoverCross, CoverPoint

from dutcheck.core import Transaction
from dutcheck.dv import BaseCoverage


def _data(tr: Transaction) -> int:
    return tr.response_data or 0


class EchoRamCoverage(BaseCoverage):
    """Response counters plus cover points on the returned data."""

    def __init__(self, name: str, parent: pyuvm.uvm_component | None) -> None:
        super().__init__(name, parent)
        self.total: int = 0
        self.zeros: int = 0
        self.msb_set: int = 0

    @CoverPoint(
        "echo_ram.resp.quartile",
        xf=lambda tr: _data(tr) >> 30,
        bins=[0, 1, 2, 3],
    )
    @CoverPoint(
        "echo_ram.resp.msb",
        xf=lambda tr: _data(tr) >> 31,
        bins=[0, 1],
    )
    @CoverPoint(
        "echo_ram.resp.zero",
        xf=lambda tr: _data(tr) == 0,
        bins=[True, False],
    )
    @CoverCross(
        "echo_ram.resp.quartile_x_zero",
        items=["echo_ram.resp.quartile", "echo_ram.resp.zero"],
    )
    def sample(self, tr: Transaction) -> None:
        self.total += 1
        data = _data(tr)
        if data == 0:
            self.zeros += 1
        if data >> 31:
            self.msb_set += 1

    def report_phase(self) -> None:
        self.logger.debug("report_phase begin")
        super().report_phase()
        self.logger.info(
            "EchoRamCoverage summary: total=%d zeros=%d msb_set=%d",
            self.total,
            self.zeros,
            self.msb_set,
        )
        self.logger.debug("report_phase end")
