# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/dv/base_ref_model.py

"""Reference model: predicts the response for each accepted request."""

from __future__ import annotations

import logging
from typing import Any

import pyuvm

from dutcheck.core import Transaction

from . import utils_dv


class BaseRefModel(pyuvm.uvm_object):
    """Golden model handed to the core Scoreboard as its predictor.

    predict(tr) is called once per valid request, in issue order, and may
    update internal state. The default is identity echo. Subclasses that
    keep state override reset() and snapshot_state() as well.

    Example:
        >>> class InvertModel(BaseRefModel):
        ...     def predict(self, tr):
        ...         return ~tr.request_data & 0xFFFF_FFFF
    """

    def __init__(self, name: str = "ref_model") -> None:
        super().__init__(name)
        self._logger: logging.Logger = logging.getLogger(f"uvm.obj.{name}")
        utils_dv.configure_non_component_logger(self._logger)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def __call__(self, tr: Transaction) -> int:
        return self.predict(tr)

    def predict(self, tr: Transaction) -> int:
        return tr.request_data

    def reset(self) -> None:
        self.logger.debug("reset")

    def snapshot_state(self) -> dict[str, Any]:
        return {}
