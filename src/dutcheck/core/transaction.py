# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/core/transaction.py

"""Transaction value object.

A Transaction describes one request and, once the monitor has seen it, the
response that came back. Request fields are fixed at construction; the
response may be filled in exactly once with fill_response(). Any other
write raises InvalidStateError.

The generator owns the canonical (expected) copy of each request. The
monitor builds its own observed copy per response event via
Transaction.observed(). The two are compared by value, never by identity.
"""

from __future__ import annotations

import itertools
import threading
from typing import Any

from .errors import InvalidStateError

DATA_WIDTH = 32
DATA_MASK = (1 << DATA_WIDTH) - 1


def _check_data(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidStateError(f"{name} must be an int, got {type(value).__name__}")
    if not 0 <= value <= DATA_MASK:
        raise InvalidStateError(
            f"{name}=0x{value:X} does not fit in {DATA_WIDTH} bits"
        )
    return value


class TransactionIdSequence:
    """Monotonic id source. Each stream (generator, monitor) owns one."""

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError(f"start must be >= 0, got {start}")
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            return next(self._counter)


class Transaction:
    """One request and its (optional, write-once) response."""

    __slots__ = (
        "id",
        "request_valid",
        "request_data",
        "response_data",
        "response_observed_at",
    )

    id: int
    request_valid: bool
    request_data: int
    response_data: int | None
    response_observed_at: int | None

    def __init__(
        self, tid: int, request_valid: bool = True, request_data: int = 0
    ) -> None:
        if isinstance(tid, bool) or not isinstance(tid, int) or tid < 0:
            raise InvalidStateError(f"transaction id must be a non-negative int, got {tid!r}")
        object.__setattr__(self, "id", tid)
        object.__setattr__(self, "request_valid", bool(request_valid))
        object.__setattr__(
            self, "request_data", _check_data("request_data", request_data)
        )
        object.__setattr__(self, "response_data", None)
        object.__setattr__(self, "response_observed_at", None)

    @classmethod
    def observed(cls, tid: int, data: int, observed_at: int) -> Transaction:
        """Build a monitor-side copy with only the response filled in."""
        t = cls(tid, request_valid=False, request_data=0)
        t.fill_response(data, observed_at)
        return t

    def __setattr__(self, name: str, value: Any) -> None:
        raise InvalidStateError(
            f"Transaction #{self.id} is immutable; cannot set {name!r}"
        )

    def __delattr__(self, name: str) -> None:
        raise InvalidStateError(
            f"Transaction #{self.id} is immutable; cannot delete {name!r}"
        )

    @property
    def has_response(self) -> bool:
        return self.response_data is not None

    def fill_response(self, data: int, observed_at: int) -> None:
        """Attach the observed response. Permitted exactly once."""
        if self.response_data is not None:
            raise InvalidStateError(
                f"Transaction #{self.id} already has a response "
                f"(0x{self.response_data:08X} @ {self.response_observed_at})"
            )
        if observed_at < 0:
            raise InvalidStateError(f"observed_at must be >= 0, got {observed_at}")
        object.__setattr__(self, "response_data", _check_data("response_data", data))
        object.__setattr__(self, "response_observed_at", int(observed_at))

    def same_request(self, other: Transaction) -> bool:
        """Value comparison on the request side only."""
        return (
            self.request_valid == other.request_valid
            and self.request_data == other.request_data
        )

    def _key(self) -> tuple[Any, ...]:
        return (
            self.id,
            self.request_valid,
            self.request_data,
            self.response_data,
            self.response_observed_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transaction):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key()[:3])

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "request_valid": self.request_valid,
            "request_data": self.request_data,
            "response_data": self.response_data,
            "response_observed_at": self.response_observed_at,
        }

    def __repr__(self) -> str:
        resp = (
            "-"
            if self.response_data is None
            else f"0x{self.response_data:08X}@{self.response_observed_at}"
        )
        return (
            f"Transaction(#{self.id} valid={int(self.request_valid)} "
            f"req=0x{self.request_data:08X} resp={resp})"
        )
