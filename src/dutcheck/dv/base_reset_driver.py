# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/dv/base_reset_driver.py

"""Synchronous reset pulse at the start of the run."""

from __future__ import annotations

import pyuvm
from cocotb.triggers import Event, NextTimeStep, ReadWrite

from . import utils_dv
from .base_clock_mixin import BaseClockMixin

RESET_DONE_KEY = "reset_done"


class BaseResetDriver(BaseClockMixin, pyuvm.uvm_component):
    """Pulses the DUT reset and announces when it is released.

    Sequence:
        1. Assert at time 0 (non-blocking style write, then one delta)
        2. Hold for reset_cycles drive edges
        3. Deassert on a drive edge
        4. Wait reset_settle_cycles drive edges, then set reset_done

    Configuration (config_db):
        reset_enable (bool): default True; False means the HDL handles reset
            and reset_done is set immediately
        reset_name (str): default "rst_n"
        reset_active_low (bool): default True
        reset_cycles (int): default 10
        reset_settle_cycles (int): default 10

    reset_done is a cocotb Event published under config_db key
    "reset_done" for every component; drivers wait on it before applying
    stimulus.

    Reference:
        https://github.com/advanced-uvm/second_edition/blob/master/recipes/3.rst_drv.sv
    """

    def __init__(self, name: str, parent: pyuvm.uvm_component | None) -> None:
        super().__init__(name, parent)
        utils_dv.configure_component_logger(self)
        self._clock_init_defaults()
        self.reset_enable: bool = True
        self.reset_name: str = "rst_n"
        self.reset_active_low: bool = True
        self.reset_cycles: int = 10
        self.reset_settle_cycles: int = 10
        self.reset_done: Event = Event()

    def build_phase(self) -> None:
        self.logger.debug("build_phase begin")
        super().build_phase()
        utils_dv.uvm_config_db_set(None, "*", RESET_DONE_KEY, self.reset_done)
        self.logger.debug("build_phase end")

    def end_of_elaboration_phase(self) -> None:
        self.logger.debug("end_of_elaboration_phase begin")
        super().end_of_elaboration_phase()
        self._clock_pull_config()
        self._clock_bind_handles()
        self.clock_compute_skew()
        self._reset_pull_config()
        self.logger.debug("end_of_elaboration_phase end")

    def _reset_pull_config(self) -> None:
        self.logger.debug("_reset_pull_config begin")
        get = utils_dv.uvm_config_db_get_typed
        self.reset_enable = get(self, "reset_enable", bool, self.reset_enable)
        name = get(self, "reset_name", str, self.reset_name)
        self.reset_name = name or self.reset_name
        self.reset_active_low = get(self, "reset_active_low", bool, self.reset_active_low)
        self.reset_cycles = get(self, "reset_cycles", int, self.reset_cycles)
        self.reset_settle_cycles = get(
            self, "reset_settle_cycles", int, self.reset_settle_cycles
        )
        if self.reset_enable:
            if self.reset_cycles < 0:
                raise ValueError("reset_cycles must be >= 0")
            if self.reset_settle_cycles < 0:
                raise ValueError("reset_settle_cycles must be >= 0")
            utils_dv.get_signal(self._dut, self.reset_name)
        self.logger.debug("_reset_pull_config end")

    async def run_phase(self) -> None:
        self.logger.debug("run_phase begin")
        if self.reset_enable:
            await self.pulse_reset()
        else:
            self.logger.debug("Reset '%s' left to the HDL", self.reset_name)
        self.reset_done.set()
        self.logger.debug("run_phase end")

    async def pulse_reset(self) -> None:
        """Assert, hold, release and settle on the drive cadence."""
        self.logger.debug("pulse_reset begin")
        rst = utils_dv.get_signal(self._dut, self.reset_name)
        active = 0 if self.reset_active_low else 1

        rst.value = active
        await ReadWrite()
        await NextTimeStep()

        for _ in range(self.reset_cycles):
            await self.clock_drive_edge()
        rst.value = 1 - active
        for _ in range(self.reset_settle_cycles):
            await self.clock_drive_edge()
        self.logger.debug("pulse_reset end")
