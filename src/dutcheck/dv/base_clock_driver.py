# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/dv/base_clock_driver.py

"""Free-running clock for the DUT."""

from __future__ import annotations

from typing import cast

import cocotb
import pyuvm
from cocotb.clock import Clock
from cocotb.handle import LogicObject
from cocotb.task import Task
from cocotb.triggers import Timer

from . import utils_dv
from .base_clock_mixin import BaseClockMixin


class BaseClockDriver(BaseClockMixin, pyuvm.uvm_component):
    """Starts a cocotb Clock on the configured DUT clock.

    Configuration (config_db):
        clock_enable (bool): drive the clock from Python (default True);
            False means the HDL drives it
        clock_name, clock_period_ps: see BaseClockMixin
        clock_start_high (bool): first half period high (default False)
        clock_init_delay_ps (int): delay before the first edge (default 0)

    The clock starts in start_of_simulation_phase so it is already running
    when run_phase components begin counting ticks.
    """

    def __init__(self, name: str, parent: pyuvm.uvm_component | None) -> None:
        super().__init__(name, parent)
        utils_dv.configure_component_logger(self)
        self._clock_init_defaults()
        self.clock_enable: bool = True
        self.clock_start_high: bool = False
        self.clock_init_delay_ps: int = 0
        self._starter: Task | None = None
        self._task: Task | None = None

    def end_of_elaboration_phase(self) -> None:
        self.logger.debug("end_of_elaboration_phase begin")
        super().end_of_elaboration_phase()
        self._clock_pull_config()
        self.clock_enable = utils_dv.uvm_config_db_get_typed(
            self, "clock_enable", bool, self.clock_enable
        )
        self.clock_start_high = utils_dv.uvm_config_db_get_typed(
            self, "clock_start_high", bool, self.clock_start_high
        )
        self.clock_init_delay_ps = utils_dv.uvm_config_db_get_typed(
            self, "clock_init_delay_ps", int, self.clock_init_delay_ps
        )
        if self.clock_init_delay_ps < 0:
            raise ValueError(
                f"clock_init_delay_ps must be >= 0, got {self.clock_init_delay_ps}"
            )
        self._clock_bind_handles()
        self.logger.debug("end_of_elaboration_phase end")

    def start_of_simulation_phase(self) -> None:
        self.logger.debug("start_of_simulation_phase begin")
        super().start_of_simulation_phase()
        if not self.clock_enable:
            self.logger.debug("Clock '%s' left to the HDL", self.clock_name)
        elif self.clock_init_delay_ps > 0:
            self._starter = cocotb.start_soon(self._delayed_start())
        else:
            self._start_clock()
        self.logger.debug("start_of_simulation_phase end")

    def final_phase(self) -> None:
        self.logger.debug("final_phase begin")
        for task in (self._starter, self._task):
            if task is not None:
                task.cancel()
        self._starter = None
        self._task = None
        super().final_phase()
        self.logger.debug("final_phase end")

    async def _delayed_start(self) -> None:
        try:
            await Timer(self.clock_init_delay_ps, unit="ps")
            if self._task is None:
                self._start_clock()
        finally:
            self._starter = None

    def _start_clock(self) -> None:
        assert self._clk is not None, "_start_clock before _clock_bind_handles"
        clk = cast(LogicObject, self._clk)
        self._task = cocotb.start_soon(
            Clock(clk, self.clock_period_ps, unit="ps").start(
                start_high=self.clock_start_high
            )
        )
        self.logger.debug(
            "Started clock dut.%s period=%d ps start_high=%s",
            self.clock_name,
            self.clock_period_ps,
            self.clock_start_high,
        )
