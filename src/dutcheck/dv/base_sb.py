# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/dv/base_sb.py

"""Bench scoreboard: puts the core Scoreboard on the simulation clock."""

from __future__ import annotations

import pyuvm
from cocotb.triggers import Event

from dutcheck.core import (
    ProtocolViolation,
    Scoreboard,
    ScoreboardReport,
    Transaction,
)
from dutcheck.core.scoreboard import DEFAULT_RESPONSE_LATENCY_TICKS

from . import utils_dv
from .base_clock_mixin import BaseClockMixin
from .base_ref_model import BaseRefModel


class BaseSb(BaseClockMixin, pyuvm.uvm_scoreboard):
    """Owns the core Scoreboard and the bench's logical clock.

    The scoreboard counts rising edges from the start of run_phase; that
    count is the tick used to stamp expected entries (issued_at), to start
    the drain and to enforce the drain timeout. Monitors count the same
    edges, so observed timestamps line up.

    Wiring (done by the env):
        generator.on_issue     -> on_expected
        generator.on_exhausted -> on_exhausted
        monitor.subscribe      -> on_observed

    Configuration (config_db):
        response_latency_ticks (int): nominal request->response latency;
            sets the default drain timeout (default 1)
        drain_timeout_ticks (int): explicit drain timeout
        response_window_ticks (int): enable response-window expiry
        sb_fail_on_error (bool): raise in final_phase when the verdict
            failed (default True)

    closed is a cocotb Event set when the core scoreboard closes; the test
    waits on it instead of a fixed drain time.

    Reference:
        C.E. Cummings, "OVM/UVM Scoreboards - Fundamental Architectures,"
        SNUG 2013 (Silicon Valley)
    """

    def __init__(self, name: str, parent: pyuvm.uvm_component | None) -> None:
        super().__init__(name, parent)
        utils_dv.configure_component_logger(self)
        self._clock_init_defaults()
        self.ref_model: BaseRefModel
        self.core: Scoreboard
        self.tick: int = 0
        self.fail_on_error: bool = True
        self.late_responses: int = 0
        self.closed: Event = Event()
        self._report: ScoreboardReport | None = None

    def build_phase(self) -> None:
        self.logger.debug("build_phase begin")
        super().build_phase()
        self.ref_model = pyuvm.uvm_factory().create_object_by_type(
            BaseRefModel, name="ref_model"
        )
        get = utils_dv.uvm_config_db_get_typed
        latency = get(
            self, "response_latency_ticks", int, DEFAULT_RESPONSE_LATENCY_TICKS
        )
        timeout = utils_dv.uvm_config_db_get_try(self, "drain_timeout_ticks")
        window = utils_dv.uvm_config_db_get_try(self, "response_window_ticks")
        self.fail_on_error = get(self, "sb_fail_on_error", bool, True)
        self.core = Scoreboard(
            self.ref_model,
            response_latency_ticks=latency,
            drain_timeout_ticks=timeout if isinstance(timeout, int) else None,
            response_window_ticks=window if isinstance(window, int) else None,
            name=self.get_full_name(),
        )
        self.core.on_close(self._on_core_closed)
        self.logger.debug(
            "build_phase end: latency=%d drain_timeout=%d window=%s",
            latency,
            self.core.drain_timeout_ticks,
            self.core.response_window_ticks,
        )

    def end_of_elaboration_phase(self) -> None:
        self.logger.debug("end_of_elaboration_phase begin")
        super().end_of_elaboration_phase()
        self._clock_pull_config()
        self._clock_bind_handles()
        self.logger.debug("end_of_elaboration_phase end")

    async def run_phase(self) -> None:
        self.logger.debug("run_phase begin")
        while not self.core.closed:
            await self.clock_rising_edge()
            self.tick += 1
            if not self.core.closed:
                self.core.advance(self.tick)
        self.logger.debug("run_phase end: closed at tick %d", self.tick)

    # Callbacks

    def on_expected(self, tr: Transaction) -> None:
        try:
            self.core.on_expected(tr, issued_at=self.tick)
        except ProtocolViolation as exc:
            self.abort(f"expected-side contract broken: {exc}")
            raise

    def on_observed(self, tr: Transaction) -> None:
        if self.core.closed:
            self.late_responses += 1
            self.logger.warning("Response after close ignored: %r", tr)
            return
        try:
            self.core.on_observed(tr)
        except ProtocolViolation as exc:
            self.abort(f"observed-side contract broken: {exc}")
            raise

    def on_exhausted(self) -> None:
        self.logger.debug("stimulus exhausted at tick %d", self.tick)
        if self.core.closed:
            return
        self.core.begin_drain(self.tick)

    def abort(self, reason: str) -> None:
        if not self.core.closed:
            self.core.abort(reason)

    def close(self) -> ScoreboardReport:
        return self.core.close()

    def _on_core_closed(self, report: ScoreboardReport) -> None:
        self._report = report
        if not report.passed:
            self.logger.error("ref model state: %s", self.ref_model.snapshot_state())
        self.closed.set()

    # Reporting

    def report(self) -> ScoreboardReport:
        return self._report if self._report is not None else self.core.report()

    def check_phase(self) -> None:
        self.logger.debug("check_phase begin")
        super().check_phase()
        if not self.core.closed:
            self.logger.warning("Scoreboard still %s at check_phase", self.core.state.name)
            self.core.close()
        self.logger.debug("check_phase end")

    def report_phase(self) -> None:
        self.logger.debug("report_phase begin")
        super().report_phase()
        rep = self.report()
        for line in rep.render().splitlines():
            (self.logger.info if rep.passed else self.logger.error)(line)
        if self.late_responses:
            self.logger.warning("%d response(s) arrived after close", self.late_responses)
        if rep.passed:
            self.logger.info(
                "*** TEST PASSED - %d expected, %d matched ***", rep.expected, rep.matched
            )
        else:
            self.logger.error(
                "*** TEST FAILED - %d expected, %d matched, %d mismatch record(s) ***",
                rep.expected,
                rep.matched,
                len(rep.records),
            )
        self.logger.debug("report_phase end")

    def final_phase(self) -> None:
        self.logger.debug("final_phase begin")
        rep = self.report()
        if self.fail_on_error and not rep.passed:
            raise AssertionError(
                f"Scoreboard recorded {len(rep.records)} mismatch(es); "
                "sb_fail_on_error is enabled"
            )
        self.logger.debug("final_phase end")
