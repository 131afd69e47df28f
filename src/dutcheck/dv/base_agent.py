# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/dv/base_agent.py

"""Agent wiring sequencer, driver and response monitor (factory-friendly)."""

from __future__ import annotations

import pyuvm

from . import utils_dv
from .base_driver import BaseDriver
from .base_monitor import BaseMonitor
from .base_sequencer import BaseSequencer


class BaseAgent(pyuvm.uvm_agent):
    """Driver + sequencer on the request side, monitor on the response side.

    The expected side never goes through the DUT, so there is no input
    monitor: the scoreboard hears about requests from the generator.
    A passive agent builds only the monitor.

    Components:
        drv: BaseDriver (active only)
        sqr: BaseSequencer (active only)
        mon: BaseMonitor

    Reference:
        https://github.com/paradigm-works/uvmtb_template/blob/main/tb_agent.svh
    """

    def __init__(self, name: str, parent: pyuvm.uvm_component | None) -> None:
        super().__init__(name, parent)
        utils_dv.configure_component_logger(self)
        self.drv: BaseDriver
        self.sqr: BaseSequencer
        self.mon: BaseMonitor

    def build_phase(self) -> None:
        self.logger.debug("build_phase begin")
        super().build_phase()
        create = pyuvm.uvm_factory().create_component_by_type
        parent_inst_path = self.get_full_name()
        if self.active:
            self.drv = create(
                BaseDriver, parent_inst_path=parent_inst_path, name="drv", parent=self
            )
            self.sqr = create(
                BaseSequencer, parent_inst_path=parent_inst_path, name="sqr", parent=self
            )
        self.mon = create(
            BaseMonitor, parent_inst_path=parent_inst_path, name="mon", parent=self
        )
        self.logger.debug("build_phase end")

    def connect_phase(self) -> None:
        self.logger.debug("connect_phase begin")
        super().connect_phase()
        if self.active:
            self.drv.seq_item_port.connect(self.sqr.seq_item_export)
        self.logger.debug("connect_phase end")

    @property
    def active(self) -> bool:
        return self.is_active == pyuvm.uvm_active_passive_enum.UVM_ACTIVE
