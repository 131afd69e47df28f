# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/dv/base_driver.py

"""Request-side driver: one transaction per DUT tick."""

from __future__ import annotations

from typing import Any, Generic, Iterable, TypeVar

import pyuvm
from cocotb.triggers import Event, NextTimeStep, ReadWrite

from dutcheck.core import Transaction

from . import utils_dv
from .base_clock_mixin import BaseClockMixin
from .base_item import BaseItem
from .base_reset_driver import RESET_DONE_KEY

T = TypeVar("T", bound=BaseItem)


class BaseDriver(BaseClockMixin, pyuvm.uvm_driver, Generic[T]):
    """Applies transactions to the DUT request interface.

    Timing contract:
        run_phase aligns to a drive edge once. Each drive_transaction()
        then presents its values immediately, waits exactly one drive edge
        (the DUT samples on the rising edge in between) and returns the
        interface to its idle values. When the next item is already waiting
        it is presented in the same timestep, overriding the idle values, so
        back-to-back stimulus runs at one request per tick and request n+1
        is never presented before n was sampled.

    The driver holds off until the reset driver's reset_done event fires.

    Subclasses implement:
        present(dut, tr): put one transaction's values on the DUT pins
        idle_dut_input_values: pin values between transactions (also
            applied at time 0)
    """

    def __init__(self, name: str, parent: pyuvm.uvm_component | None) -> None:
        super().__init__(name, parent)
        utils_dv.configure_component_logger(self)
        self._clock_init_defaults()
        self.idle_dut_input_values: dict[str, int] = {}
        self.item_count: int = 0
        self._reset_done: Event | None = None

    def end_of_elaboration_phase(self) -> None:
        self.logger.debug("end_of_elaboration_phase begin")
        super().end_of_elaboration_phase()
        self._clock_pull_config()
        self._clock_bind_handles()
        self.clock_compute_skew()
        ev = utils_dv.uvm_config_db_get_try(self, RESET_DONE_KEY)
        self._reset_done = ev if isinstance(ev, Event) else None
        self.logger.debug("end_of_elaboration_phase end")

    async def run_phase(self) -> None:
        self.logger.debug("run_phase begin")
        await self.apply_idle_dut_inputs()
        await self.wait_for_reset_done()
        await self.clock_drive_edge()
        while True:
            item: T = await self.seq_item_port.get_next_item()
            await self.drive_item(self._dut, item)
            self.seq_item_port.item_done()

    async def apply_idle_dut_inputs(self) -> None:
        """Drive idle values at time 0, then step past the write."""
        self.logger.debug("apply_idle_dut_inputs begin")
        self._set_idle(self._dut)
        await ReadWrite()
        await NextTimeStep()
        self.logger.debug("apply_idle_dut_inputs end")

    async def wait_for_reset_done(self) -> None:
        self.logger.debug("wait_for_reset_done begin")
        if self._reset_done is None:
            self.logger.warning("No reset_done event published; driving immediately")
        else:
            await self._reset_done.wait()
        self.logger.debug("wait_for_reset_done end")

    async def drive_item(self, dut: Any, item: T) -> None:
        await self.drive_transaction(dut, item.transaction())

    async def drive_transaction(self, dut: Any, tr: Transaction) -> None:
        """Present tr, hold it across one sampling edge, then go idle."""
        self.present(dut, tr)
        await self.clock_drive_edge()
        self._set_idle(dut)
        self.item_count += 1

    async def drive(self, transactions: Iterable[Transaction]) -> None:
        """Drive a list directly, bypassing the sequencer (caller is aligned)."""
        for tr in transactions:
            await self.drive_transaction(self._dut, tr)

    def _set_idle(self, dut: Any) -> None:
        for sig_name, val in self.idle_dut_input_values.items():
            utils_dv.get_signal(dut, sig_name).value = val

    def present(self, dut: Any, tr: Transaction) -> None:
        raise NotImplementedError("Implement DUT pin driving here")
