# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/duts/echo_ram/dv/echo_ram_ref_model.py

"""echo_ram reference model."""

from __future__ import annotations

from typing import Any

from dutcheck.core import Transaction
from dutcheck.dv import BaseRefModel

from ..echo_ram_model import EchoRamModel


class EchoRamRefModel(BaseRefModel):
    """Predicts each response by replaying the request into EchoRamModel."""

    def __init__(self, name: str = "echo_ram_ref_model") -> None:
        super().__init__(name)
        self.model = EchoRamModel()

    def reset(self) -> None:
        super().reset()
        self.model.reset()

    def predict(self, tr: Transaction) -> int:
        return self.model.accept(tr.request_data)

    def snapshot_state(self) -> dict[str, Any]:
        return self.model.snapshot_state()
