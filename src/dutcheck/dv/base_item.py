# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/dv/base_item.py

"""Sequence item carrying one core Transaction from sequencer to driver."""

from __future__ import annotations

import json
from typing import Self

import pyuvm

from dutcheck.core import Transaction


class BaseItem(pyuvm.uvm_sequence_item):
    """pyuvm envelope around a Transaction.

    The Transaction itself is immutable, so clones share it; only the
    envelope is copied.

    Example:
        >>> item = BaseItem("tr0")
        >>> item.tr = Transaction(0, True, 0x10)
    """

    def __init__(self, name: str = "item") -> None:
        super().__init__(name)
        self.tr: Transaction | None = None

    def transaction(self) -> Transaction:
        if self.tr is None:
            raise ValueError(f"{self.get_name()}: no transaction attached")
        return self.tr

    def clone(self) -> Self:
        other = type(self)(self.get_name())
        other.copy_from(self)
        return other

    def copy_from(self, other: Self) -> None:
        if type(self) is not type(other):
            raise TypeError(
                f"copy_from: {type(other).__name__} -> {type(self).__name__}"
            )
        self.tr = other.tr

    def to_dict(self) -> dict[str, object]:
        return {} if self.tr is None else self.tr.to_dict()

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)

