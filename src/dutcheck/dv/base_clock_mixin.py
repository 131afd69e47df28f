# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/dv/base_clock_mixin.py

"""Clock config, handle binding and edge alignment shared by clocked components."""

from __future__ import annotations

from typing import Any, cast

import pyuvm
from cocotb.handle import SimHandleBase
from cocotb.triggers import ReadOnly, Timer

from . import utils_dv


class BaseClockMixin:
    """Mixin giving drivers, monitors and the scoreboard a common view of the clock.

    Configuration (config_db):
        clock_name (str): clock signal on the DUT (default "clk")
        clock_period_ps (int): period in ps (default 1000)

    Drive timing:
        drive_falling_edge=True drives on the falling edge, half a period
        away from the DUT's rising-edge sampling. With False, drives land
        drive_frac_after * period after the rising edge.

    Sample timing:
        clock_sample_edge() waits for a rising edge and then for the
        ReadOnly region just before the next one (SystemVerilog #1step
        style), so sampled outputs are the values registered on that edge.

    Reference:
        C.E. Cummings, "Applying Stimulus & Sampling Outputs - UVM Verification
        Testing Techniques," SNUG 2016 (Austin)
    """

    def _clock_init_defaults(
        self,
        *,
        name: str = "clk",
        period_ps: int = 1_000,
        falling: bool = True,
        frac_after: float = 0.20,
        pre_ps: int = 1,
    ) -> None:
        """Set defaults in the consumer's __init__."""
        self.clock_name: str = name
        self.clock_period_ps: int = period_ps
        self.drive_falling_edge: bool = falling
        self.drive_frac_after: float = frac_after
        self.pre_ps: int = pre_ps
        self._dut: Any | None = None
        self._clk: SimHandleBase | None = None
        self._postedge_delay_ps: int = 0
        self._preedge_delay_ps: int = 0

    def _as_comp(self) -> pyuvm.uvm_component:
        return cast(pyuvm.uvm_component, self)

    def _clock_pull_config(self) -> None:
        """Read per-instance clock config (end_of_elaboration)."""
        comp = self._as_comp()
        comp.logger.debug("_clock_pull_config begin")
        v = utils_dv.uvm_config_db_get_try(comp, "clock_name")
        if isinstance(v, str) and v:
            self.clock_name = v
        self.clock_period_ps = utils_dv.uvm_config_db_get_typed(
            comp, "clock_period_ps", int, self.clock_period_ps
        )
        if self.clock_period_ps <= 0:
            raise ValueError(f"clock_period_ps must be > 0, got {self.clock_period_ps}")
        comp.logger.debug("_clock_pull_config end")

    def _clock_bind_handles(self) -> None:
        """Bind dut and clock handles (end_of_elaboration)."""
        comp = self._as_comp()
        comp.logger.debug("_clock_bind_handles begin")
        self._dut = utils_dv.uvm_config_db_get(comp, "dut")
        self._clk = utils_dv.get_signal(self._dut, self.clock_name)
        comp.logger.debug("_clock_bind_handles end")

    def clock_compute_skew(self) -> None:
        """Derive drive and sample offsets from the period (end_of_elaboration)."""
        comp = self._as_comp()
        comp.logger.debug("clock_compute_skew begin")
        if not self.drive_falling_edge:
            if not 0.0 <= self.drive_frac_after <= 1.0:
                raise ValueError(
                    f"drive_frac_after must be in [0.0, 1.0], got {self.drive_frac_after}"
                )
            self._postedge_delay_ps = int(self.clock_period_ps * self.drive_frac_after)
        if not 0 <= self.pre_ps < self.clock_period_ps:
            raise ValueError(
                f"pre_ps={self.pre_ps} must be in [0, clock_period_ps={self.clock_period_ps})"
            )
        self._preedge_delay_ps = self.clock_period_ps - self.pre_ps
        comp.logger.debug("clock_compute_skew end")

    async def clock_rising_edge(self) -> None:
        assert self._clk is not None, "clock_rising_edge before _clock_bind_handles"
        await self._clk.rising_edge

    async def clock_drive_edge(self) -> None:
        """Align to the next drive point."""
        assert self._clk is not None, "clock_drive_edge before _clock_bind_handles"
        if self.drive_falling_edge:
            await self._clk.falling_edge
        else:
            await self._clk.rising_edge
            if self._postedge_delay_ps > 0:
                await Timer(self._postedge_delay_ps, unit="ps")

    async def clock_sample_edge(self) -> None:
        """Rising edge, then the ReadOnly region just before the next one."""
        await self.clock_rising_edge()
        if self._preedge_delay_ps > 0:
            await Timer(self._preedge_delay_ps, unit="ps")
        await ReadOnly()
