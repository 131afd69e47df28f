# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/core/expected_queue.py

"""Strict FIFO of expected entries, owned by the scoreboard."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from typing import Iterator

from .transaction import Transaction


@dataclass(frozen=True)
class ExpectedEntry:
    """A pending request and the response the reference model predicts."""

    transaction: Transaction
    expected_response: int
    issued_at: int | None = None


class ExpectedQueue:
    """Append at tail, remove at head. Every mutation holds the lock.

    The scoreboard holds its own lock around multi-step operations; this
    lock keeps the queue itself consistent for direct users (tests, tools).
    """

    def __init__(self) -> None:
        self._items: deque[ExpectedEntry] = deque()
        self._lock = threading.Lock()

    def push(self, entry: ExpectedEntry) -> None:
        with self._lock:
            self._items.append(entry)

    def pop_head(self) -> ExpectedEntry | None:
        with self._lock:
            return self._items.popleft() if self._items else None

    def peek_head(self) -> ExpectedEntry | None:
        with self._lock:
            return self._items[0] if self._items else None

    def drain_all(self) -> list[ExpectedEntry]:
        """Remove and return every pending entry, head first."""
        with self._lock:
            out = list(self._items)
            self._items.clear()
            return out

    def snapshot(self) -> list[ExpectedEntry]:
        with self._lock:
            return list(self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __bool__(self) -> bool:
        return len(self) > 0

    def __iter__(self) -> Iterator[ExpectedEntry]:
        return iter(self.snapshot())
