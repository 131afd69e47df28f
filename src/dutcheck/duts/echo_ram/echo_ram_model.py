# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/duts/echo_ram/echo_ram_model.py

"""Cycle-free model of the echo_ram storage."""

from __future__ import annotations

from typing import Any

from dutcheck.core import DATA_MASK

DEPTH = 256


class EchoRamModel:
    """256 x 32-bit circular buffer with a wrapping write pointer.

    Each accepted request writes the slot under the pointer and advances
    it. The DUT reads back the slot it just wrote one tick later, before the
    next write can land there, so accept() returns the value at that slot
    after the write.
    """

    def __init__(self, depth: int = DEPTH) -> None:
        if depth <= 0 or depth & (depth - 1):
            raise ValueError(f"depth must be a power of two, got {depth}")
        self.depth = depth
        self.mem: list[int] = [0] * depth
        self.wr_ptr = 0
        self.writes = 0

    def reset(self) -> None:
        self.mem = [0] * self.depth
        self.wr_ptr = 0
        self.writes = 0

    def accept(self, data: int) -> int:
        """Write data at the pointer and return the read-back response."""
        slot = self.wr_ptr
        self.mem[slot] = data & DATA_MASK
        self.wr_ptr = (slot + 1) % self.depth
        self.writes += 1
        return self.mem[slot]

    @property
    def occupancy(self) -> int:
        return min(self.writes, self.depth)

    def snapshot_state(self, last: int = 4) -> dict[str, Any]:
        """Pointer, occupancy and the most recently written slots."""
        n = min(last, self.occupancy)
        slots = [(self.wr_ptr - 1 - i) % self.depth for i in range(n)]
        return {
            "wr_ptr": self.wr_ptr,
            "occupancy": self.occupancy,
            "writes": self.writes,
            "last_slots": {s: f"0x{self.mem[s]:08X}" for s in slots},
        }
