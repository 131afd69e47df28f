# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/core/generator.py

"""Seeded stimulus generator.

produce(count, seed) is a pure function of its arguments: the same pair
always yields the same transactions, ids included. Randomness comes from a
private random.Random, never from the global generator.

Per-field distributions:
    request_valid: Bernoulli(valid_probability)
    request_data:  uniform over [0, 2**32), or
                   ramp: (data_base + i * data_stride) mod 2**32

The generator also keeps the issued-request log. Whoever applies stimulus
calls issue(t) as each transaction goes out and finish() once the stream is
exhausted; registered callbacks (typically the scoreboard) hear about both.
"""

from __future__ import annotations

import logging
import random
from typing import Callable

from .errors import InvalidStateError
from .profile import StimulusProfile
from .transaction import DATA_MASK, Transaction, TransactionIdSequence

IssueCallback = Callable[[Transaction], None]
ExhaustedCallback = Callable[[], None]

logger = logging.getLogger(__name__)


class StimulusGenerator:
    """Produces transactions from a StimulusProfile and logs what was issued."""

    def __init__(self, profile: StimulusProfile | None = None) -> None:
        self.profile = profile or StimulusProfile()
        self.issued: list[Transaction] = []
        self.exhausted = False
        self._on_issue: list[IssueCallback] = []
        self._on_exhausted: list[ExhaustedCallback] = []

    def on_issue(self, callback: IssueCallback) -> None:
        self._on_issue.append(callback)

    def on_exhausted(self, callback: ExhaustedCallback) -> None:
        self._on_exhausted.append(callback)

    def produce(self, count: int | None = None, seed: int | None = None) -> list[Transaction]:
        """Return count transactions for seed (profile defaults when omitted)."""
        count = self.profile.count if count is None else count
        seed = self.profile.seed if seed is None else seed
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")

        rng = random.Random(seed)
        ids = TransactionIdSequence()
        p = self.profile
        out: list[Transaction] = []
        for i in range(count):
            # Draw both fields every step so the data stream does not depend
            # on valid_probability.
            valid = rng.random() < p.valid_probability
            rand_data = rng.getrandbits(32)
            if p.data_mode == "ramp":
                data = (p.data_base + i * p.data_stride) & DATA_MASK
            else:
                data = rand_data
            out.append(Transaction(ids.next(), request_valid=valid, request_data=data))
        logger.debug(
            "produce(count=%d, seed=%d) mode=%s valid_p=%.3f",
            count,
            seed,
            p.data_mode,
            p.valid_probability,
        )
        return out

    def issue(self, t: Transaction) -> None:
        """Record t as applied to the DUT and notify subscribers."""
        if self.exhausted:
            raise InvalidStateError(f"issue(#{t.id}) after finish()")
        self.issued.append(t)
        for cb in self._on_issue:
            cb(t)

    def finish(self) -> None:
        """Mark the stream exhausted. Subsequent calls are ignored."""
        if self.exhausted:
            return
        self.exhausted = True
        logger.debug("stimulus exhausted after %d transaction(s)", len(self.issued))
        for cb in self._on_exhausted:
            cb()
