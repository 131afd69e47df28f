# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/dv/base_env.py

"""Environment: agent, scoreboard, coverage and the stimulus generator."""

from __future__ import annotations

import pyuvm

from dutcheck.core import StimulusGenerator, StimulusProfile

from . import utils_dv
from .base_agent import BaseAgent
from .base_coverage import BaseCoverage
from .base_sb import BaseSb
from .base_sequence import GENERATOR_KEY

PROFILE_KEY = "stimulus_profile"


class BaseEnv(pyuvm.uvm_env):
    """Builds every verification component and wires the data flow.

    Data flow:
        generator --issue/exhausted--> sb (expected side)
        agent.mon --subscribe--------> sb (observed side)
        agent.mon --subscribe--------> coverage

    The generator is built from the StimulusProfile under config_db key
    "stimulus_profile" (default profile when absent) and published under
    "stimulus_generator" for the sequence.

    Configuration (config_db):
        coverage_en (bool): build coverage (default True)
        check_en (bool): build the scoreboard (default True)
    """

    def __init__(self, name: str, parent: pyuvm.uvm_component | None) -> None:
        super().__init__(name, parent)
        utils_dv.configure_component_logger(self)
        self.agent: BaseAgent
        self.generator: StimulusGenerator
        self.cov: BaseCoverage | None = None
        self.sb: BaseSb | None = None

    def build_phase(self) -> None:
        self.logger.debug("build_phase begin")
        super().build_phase()
        create = pyuvm.uvm_factory().create_component_by_type
        parent_inst_path = self.get_full_name()

        profile = utils_dv.uvm_config_db_get_try(self, PROFILE_KEY)
        if not isinstance(profile, StimulusProfile):
            profile = StimulusProfile()
        self.generator = StimulusGenerator(profile)
        utils_dv.uvm_config_db_set(self, "*", GENERATOR_KEY, self.generator)

        self.agent = create(
            BaseAgent, parent_inst_path=parent_inst_path, name="agent", parent=self
        )
        if utils_dv.uvm_config_db_get_typed(self, "coverage_en", bool, True):
            self.cov = create(
                BaseCoverage, parent_inst_path=parent_inst_path, name="coverage", parent=self
            )
        if utils_dv.uvm_config_db_get_typed(self, "check_en", bool, True):
            self.sb = create(BaseSb, parent_inst_path=parent_inst_path, name="sb", parent=self)
        self.logger.debug("build_phase end")

    def connect_phase(self) -> None:
        self.logger.debug("connect_phase begin")
        super().connect_phase()
        if self.sb is not None:
            self.generator.on_issue(self.sb.on_expected)
            self.generator.on_exhausted(self.sb.on_exhausted)
            self.agent.mon.subscribe(self.sb.on_observed)
        if self.cov is not None:
            self.agent.mon.subscribe(self.cov.record)
        self.logger.debug("connect_phase end")
