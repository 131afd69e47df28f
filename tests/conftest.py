# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: tests/conftest.py

"""Shared fixtures: a tick-level echo stub and a loop that drives it.

The loop mirrors the bench ordering: at each tick, responses due at that
tick are observed first, then the next request is issued.
"""

from __future__ import annotations

from collections import defaultdict

import pytest

from dutcheck.core import (
    DATA_MASK,
    Scoreboard,
    StimulusGenerator,
    Transaction,
    TransactionIdSequence,
)

CORRUPT_MASK = 0xDEAD_BEEF

_SETTINGS_ENV = (
    "PLUSARGS",
    "COCOTB_PLUSARGS",
    "DUTCHECK_PLUSARGS",
    "STIM_PROFILE",
    "STIM_COUNT",
    "STIM_SEED",
    "STIM_DATA_MODE",
    "STIM_DATA_BASE",
    "STIM_DATA_STRIDE",
    "STIM_VALID_PROB",
)


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's environment from leaking into settings lookups."""
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(f"DUTCHECK_{name}", raising=False)


class EchoDut:
    """Echoes each valid request after a fixed latency.

    bug=1 drops the 2nd response, bug=2 XORs it with 0xDEAD_BEEF.
    """

    def __init__(self, latency: int = 1, bug: int = 0) -> None:
        self.latency = latency
        self.bug = bug
        self.accepted = 0
        self._due: dict[int, list[int]] = defaultdict(list)

    def apply(self, t: Transaction, tick: int) -> None:
        if not t.request_valid:
            return
        nth = self.accepted
        self.accepted += 1
        data = t.request_data
        if nth == 1 and self.bug == 1:
            return
        if nth == 1 and self.bug == 2:
            data ^= CORRUPT_MASK
        self._due[tick + self.latency].append(data & DATA_MASK)

    def pop_responses(self, tick: int) -> list[int]:
        return self._due.pop(tick, [])


class TickLoop:
    """Drives transactions through a DUT stub into a scoreboard."""

    def __init__(self, sb: Scoreboard, dut: EchoDut) -> None:
        self.sb = sb
        self.dut = dut
        self.tick = 0
        self.ids = TransactionIdSequence()

    def collect(self) -> None:
        for data in self.dut.pop_responses(self.tick):
            self.sb.on_observed(Transaction.observed(self.ids.next(), data, self.tick))

    def run(self, transactions: list[Transaction], max_drain: int = 1000) -> None:
        for t in transactions:
            self.collect()
            self.sb.on_expected(t, issued_at=self.tick)
            self.dut.apply(t, self.tick)
            self.tick += 1
            self.sb.advance(self.tick)
        self.sb.begin_drain(self.tick)
        for _ in range(max_drain):
            if self.sb.closed:
                return
            self.collect()
            if self.sb.closed:
                return
            self.tick += 1
            self.sb.advance(self.tick)
        raise AssertionError("scoreboard never closed")

    def run_generator(self, gen: StimulusGenerator, **produce_kw: int) -> None:
        """Same as run(), but through the generator's issue/finish callbacks."""
        gen.on_issue(lambda t: self.sb.on_expected(t, issued_at=self.tick))
        gen.on_exhausted(lambda: self.sb.begin_drain(self.tick))
        for t in gen.produce(**produce_kw):
            self.collect()
            gen.issue(t)
            self.dut.apply(t, self.tick)
            self.tick += 1
            self.sb.advance(self.tick)
        gen.finish()
        while not self.sb.closed:
            self.collect()
            if self.sb.closed:
                break
            self.tick += 1
            self.sb.advance(self.tick)


@pytest.fixture
def echo_dut() -> EchoDut:
    return EchoDut()


@pytest.fixture
def make_loop():
    def _make(sb: Scoreboard | None = None, dut: EchoDut | None = None) -> TickLoop:
        return TickLoop(sb or Scoreboard(), dut or EchoDut())

    return _make


def valid_requests(*data: int) -> list[Transaction]:
    return [Transaction(i, request_data=d) for i, d in enumerate(data)]
