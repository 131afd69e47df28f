# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/dv/base_sequencer.py

"""Sequencer between the stimulus sequence and the driver."""

from __future__ import annotations

import pyuvm

from . import utils_dv


class BaseSequencer(pyuvm.uvm_sequencer):
    """Plain uvm_sequencer with the bench's logging level applied."""

    def __init__(self, name: str, parent: pyuvm.uvm_component | None) -> None:
        super().__init__(name, parent)
        utils_dv.configure_component_logger(self)
