# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/dv/base_monitor.py

"""Response-side monitor with explicit subscriber callbacks."""

from __future__ import annotations

from typing import Any, Callable

import pyuvm

from dutcheck.core import Transaction, TransactionIdSequence

from . import utils_dv
from .base_clock_mixin import BaseClockMixin

Subscriber = Callable[[Transaction], None]


class BaseMonitor(BaseClockMixin, pyuvm.uvm_monitor):
    """Polls the DUT response interface once per tick.

    Every rising edge advances the tick counter; the interface is sampled
    in the ReadOnly region just before the following edge, so the values
    seen are those registered on that tick. When sample_dut() returns a
    Transaction it is handed to every subscriber synchronously, in
    registration order. Ticks without a response emit nothing.

    Subscribers are plain callables (scoreboard, coverage), registered with
    subscribe() in the env's connect_phase. The monitor does not catch
    subscriber exceptions: a broken harness contract stops the run.

    Subclasses implement:
        sample_dut(dut): return an observed Transaction, or None
    """

    def __init__(self, name: str, parent: pyuvm.uvm_component | None) -> None:
        super().__init__(name, parent)
        utils_dv.configure_component_logger(self)
        self._clock_init_defaults()
        self.tick: int = 0
        self.item_count: int = 0
        self.ids = TransactionIdSequence()
        self._subscribers: list[Subscriber] = []
        self._get_val = utils_dv.get_signal_value_int

    def subscribe(self, callback: Subscriber) -> None:
        self._subscribers.append(callback)

    def end_of_elaboration_phase(self) -> None:
        self.logger.debug("end_of_elaboration_phase begin")
        super().end_of_elaboration_phase()
        self._clock_pull_config()
        self._clock_bind_handles()
        self.clock_compute_skew()
        self.logger.debug("end_of_elaboration_phase end")

    async def run_phase(self) -> None:
        self.logger.debug("run_phase begin")
        while True:
            await self.clock_sample_edge()
            self.tick += 1
            tr = self.sample_dut(self._dut)
            if tr is not None:
                self.item_count += 1
                self.emit(tr)

    def emit(self, tr: Transaction) -> None:
        for cb in self._subscribers:
            cb(tr)

    def sample_dut(self, dut: Any) -> Transaction | None:
        raise NotImplementedError("Implement sample_dut here")
