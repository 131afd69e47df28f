# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/dv/base_test.py

"""Base test: configuration, factory overrides, env creation and run control."""

from __future__ import annotations

import logging
import os

import cocotb
import pyuvm
from cocotb.triggers import First, Timer
from pyuvm import ConfigDB

from dutcheck.core import ProtocolViolation, StimulusProfile

from . import utils_cli, utils_dv
from .base_clock_driver import BaseClockDriver
from .base_env import PROFILE_KEY, BaseEnv
from .base_reset_driver import BaseResetDriver
from .base_sequence import BaseSequence


class BaseTest(pyuvm.uvm_test):
    """One harness entry point; variants come from the stimulus profile.

    UVM phases:
        build_phase: publish the DUT, apply factory overrides (code, then
            plusargs), push config, create clock/reset drivers and the env
        end_of_elaboration_phase: apply the log level across the hierarchy
        start_of_simulation_phase: dump config/factory at debug, log the seed
        run_phase: run the stimulus sequence, then wait for the scoreboard
            to close (bounded by MAX_DRAIN_TIME_PS)

    Subclasses implement:
        set_factory_overrides(): bench-specific type overrides

    Settings (env > plusargs > defaults):
        Clock: CLOCK_ENABLE, CLOCK_NAME, CLOCK_PERIOD_PS, CLOCK_START_HIGH,
               CLOCK_INIT_DELAY_PS
        Reset: RESET_ENABLE, RESET_NAME, RESET_ACTIVE_LOW, RESET_CYCLES,
               RESET_SETTLE_CYCLES
        Env: CHECK_EN, COVERAGE_EN, SB_FAIL_ON_ERROR
        Scoreboard: RESPONSE_LATENCY_TICKS, DRAIN_TIMEOUT_TICKS,
               RESPONSE_WINDOW_TICKS
        Stimulus: STIM_PROFILE, STIM_COUNT, STIM_SEED, STIM_VALID_PROB,
               STIM_DATA_MODE, STIM_DATA_BASE, STIM_DATA_STRIDE
        Test: MAX_DRAIN_TIME_PS

    A ProtocolViolation raised anywhere in the stimulus path aborts the
    scoreboard and is re-raised so cocotb fails the test.
    """

    response_latency_ticks: int = 1

    def __init__(self, name: str, parent: pyuvm.uvm_component | None) -> None:
        super().__init__(name, parent)
        utils_dv.configure_component_logger(self)
        self.clock_driver: BaseClockDriver
        self.reset_driver: BaseResetDriver
        self.env: BaseEnv
        self.profile: StimulusProfile

    def build_phase(self) -> None:
        self.logger.debug("build_phase begin")
        self.publish_dut()
        self.set_factory_overrides()
        utils_cli.apply_factory_overrides_from_plusargs(self.logger)
        super().build_phase()
        self.build_config()
        self.build_clocks()
        self.build_resets()
        self.build_envs()
        self.logger.debug("build_phase end")

    def end_of_elaboration_phase(self) -> None:
        self.logger.debug("end_of_elaboration_phase begin")
        super().end_of_elaboration_phase()
        self.set_logging_level_hier(utils_dv.desired_log_level())
        self.logger.debug("end_of_elaboration_phase end")

    def start_of_simulation_phase(self) -> None:
        self.logger.debug("start_of_simulation_phase begin")
        super().start_of_simulation_phase()
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("printing uvm_config_db")
            print(ConfigDB())
            self.logger.debug("printing factory")
            pyuvm.uvm_factory().print(debug_level=1)
        self._log_run_seed()
        self.logger.info("%s", self.profile)
        self.logger.debug("start_of_simulation_phase end")

    async def run_phase(self) -> None:
        self.logger.debug("run_phase begin")
        self.raise_objection()
        seq = pyuvm.uvm_factory().create_object_by_type(BaseSequence, name="seq")
        try:
            await seq.start(self.env.agent.sqr)
        except ProtocolViolation as exc:
            if self.env.sb is not None:
                self.env.sb.abort(str(exc))
            raise
        await self.drain()
        self.drop_objection()
        self.logger.debug("run_phase end")

    def publish_dut(self) -> None:
        utils_dv.uvm_config_db_set(self, "*", "dut", cocotb.top)

    def set_factory_overrides(self) -> None:
        raise NotImplementedError("Implement set_factory_overrides here")

    def build_config(self) -> None:
        """Stimulus profile, scoreboard timing and drain bound."""
        self.profile = StimulusProfile.from_settings()
        utils_dv.uvm_config_db_set(self, "*", PROFILE_KEY, self.profile)

        latency = utils_cli.get_int_setting(
            "RESPONSE_LATENCY_TICKS", self.response_latency_ticks
        )
        utils_dv.uvm_config_db_set(self, "*", "response_latency_ticks", latency)
        timeout = (
            utils_cli.get_optional_int_setting("DRAIN_TIMEOUT_TICKS")
            or self.profile.drain_timeout_ticks
        )
        if timeout is not None:
            utils_dv.uvm_config_db_set(self, "*", "drain_timeout_ticks", timeout)
        window = utils_cli.get_optional_int_setting("RESPONSE_WINDOW_TICKS")
        if window is not None:
            utils_dv.uvm_config_db_set(self, "*", "response_window_ticks", window)

        max_drain_ps = utils_cli.get_int_setting("MAX_DRAIN_TIME_PS", 1_000_000)
        utils_dv.uvm_config_db_set(self, "", "max_drain_time_ps", max_drain_ps)

    def build_clocks(self) -> None:
        """Single clock from settings; override for multi-clock benches."""
        set_ = utils_dv.uvm_config_db_set
        set_(self, "*", "clock_enable", utils_cli.get_bool_setting("CLOCK_ENABLE", True))
        set_(self, "*", "clock_name", utils_cli.get_str_setting("CLOCK_NAME", "clk"))
        set_(
            self, "*", "clock_period_ps", utils_cli.get_int_setting("CLOCK_PERIOD_PS", 1_000)
        )
        set_(
            self,
            "*",
            "clock_start_high",
            utils_cli.get_bool_setting("CLOCK_START_HIGH", False),
        )
        set_(
            self,
            "*",
            "clock_init_delay_ps",
            utils_cli.get_int_setting("CLOCK_INIT_DELAY_PS", 0),
        )
        self.clock_driver = pyuvm.uvm_factory().create_component_by_type(
            BaseClockDriver,
            parent_inst_path=self.get_full_name(),
            name="clock_driver",
            parent=self,
        )

    def build_resets(self) -> None:
        """Single reset from settings."""
        set_ = utils_dv.uvm_config_db_set
        set_(self, "*", "reset_enable", utils_cli.get_bool_setting("RESET_ENABLE", True))
        set_(self, "*", "reset_name", utils_cli.get_str_setting("RESET_NAME", "rst_n"))
        set_(
            self,
            "*",
            "reset_active_low",
            utils_cli.get_bool_setting("RESET_ACTIVE_LOW", True),
        )
        set_(self, "*", "reset_cycles", utils_cli.get_int_setting("RESET_CYCLES", 10))
        set_(
            self,
            "*",
            "reset_settle_cycles",
            utils_cli.get_int_setting("RESET_SETTLE_CYCLES", 10),
        )
        self.reset_driver = pyuvm.uvm_factory().create_component_by_type(
            BaseResetDriver,
            parent_inst_path=self.get_full_name(),
            name="reset_driver",
            parent=self,
        )

    def build_envs(self) -> None:
        set_ = utils_dv.uvm_config_db_set
        set_(self, "env*", "check_en", utils_cli.get_bool_setting("CHECK_EN", True))
        set_(self, "env*", "coverage_en", utils_cli.get_bool_setting("COVERAGE_EN", True))
        set_(
            self,
            "env*",
            "sb_fail_on_error",
            utils_cli.get_bool_setting("SB_FAIL_ON_ERROR", True),
        )
        self.env = pyuvm.uvm_factory().create_component_by_type(
            BaseEnv, parent_inst_path=self.get_full_name(), name="env", parent=self
        )

    def _log_run_seed(self) -> None:
        seed = os.getenv("COCOTB_RANDOM_SEED") or os.getenv("RANDOM_SEED")
        self.logger.debug("Run seed: %s", seed or "(unset)")

    async def drain(self) -> None:
        """Wait for the scoreboard to close, bounded by max_drain_time_ps.

        pyuvm has no set_drain_time(); the scoreboard's own drain timeout
        normally ends the run, and the time bound only guards a stalled
        clock or a missing scoreboard.
        """
        self.logger.debug("drain begin")
        max_ps = utils_dv.uvm_config_db_get_typed(self, "max_drain_time_ps", int, 0)
        sb = self.env.sb
        if sb is None:
            await Timer(max(1, max_ps), unit="ps")
        elif max_ps > 0:
            await First(sb.closed.wait(), Timer(max_ps, unit="ps"))
            if not sb.closed.is_set():
                self.logger.error("Scoreboard did not close within %d ps", max_ps)
                sb.close()
        else:
            await sb.closed.wait()
        self.logger.debug("drain end")
