# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/dv/base_coverage.py

"""Fire-and-forget coverage sink (cocotb-coverage + pyuvm)."""

from __future__ import annotations

import os

import pyuvm
from cocotb_coverage.coverage import coverage_db

from dutcheck.core import Transaction

from . import utils_dv


class BaseCoverage(pyuvm.uvm_component):
    """Coverage sink fed by monitor callbacks.

    record(t) never blocks and never raises into the run: a sampler
    failure is logged, counted in sample_errors, and the run goes on.
    Coverage never influences pass/fail.

    Usage:
        Subclass, override sample(), and decorate it with cocotb-coverage
        CoverPoint / CoverCross decorators.

    Configuration (config_db):
        coverage_en (bool): default True; False turns record() into a no-op

    Environment:
        COV_YAML: when set, the coverage database is exported there in
            report_phase

    Example:
        >>> from cocotb_coverage.coverage import CoverPoint
        >>>
        >>> class MyCoverage(BaseCoverage):
        ...     @CoverPoint("top.msb", xf=lambda tr: tr.response_data >> 31,
        ...                 bins=[0, 1])
        ...     def sample(self, tr):
        ...         pass
    """

    def __init__(self, name: str, parent: pyuvm.uvm_component | None) -> None:
        super().__init__(name, parent)
        utils_dv.configure_component_logger(self)
        self.yaml_path: str | None = os.getenv("COV_YAML")
        self.coverage_en: bool = True
        self.recorded: int = 0
        self.sample_errors: int = 0

    def end_of_elaboration_phase(self) -> None:
        self.logger.debug("end_of_elaboration_phase begin")
        super().end_of_elaboration_phase()
        self.coverage_en = utils_dv.uvm_config_db_get_typed(
            self, "coverage_en", bool, self.coverage_en
        )
        self.logger.debug("end_of_elaboration_phase end")

    def record(self, tr: Transaction) -> None:
        if not self.coverage_en:
            return
        self.recorded += 1
        try:
            self.sample(tr)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self.sample_errors += 1
            self.logger.warning("coverage sample failed for %r: %s", tr, exc)

    def sample(self, tr: Transaction) -> None:  # pragma: no cover - abstract hook
        raise NotImplementedError("Override in subclass and decorate with coverpoints")

    def report_phase(self) -> None:
        self.logger.debug("report_phase begin")
        super().report_phase()
        if not self.coverage_en:
            return
        coverage_db.report_coverage(self.logger.debug)
        if self.yaml_path:
            coverage_db.export_to_yaml(self.yaml_path)
            self.logger.debug("Coverage YAML written to %s", self.yaml_path)
        if self.sample_errors:
            self.logger.warning("%d coverage sample(s) failed", self.sample_errors)
        self.logger.debug("report_phase end")
