# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/core/__init__.py

"""Simulator-free stimulus/response reconciliation core."""

from .errors import HarnessError, InvalidStateError, ProtocolViolation
from .expected_queue import ExpectedEntry, ExpectedQueue
from .generator import StimulusGenerator
from .profile import StimulusProfile
from .scoreboard import (
    CloseReason,
    MismatchReason,
    MismatchRecord,
    Scoreboard,
    ScoreboardReport,
    ScoreboardState,
)
from .transaction import DATA_MASK, DATA_WIDTH, Transaction, TransactionIdSequence

__all__ = [
    "CloseReason",
    "DATA_MASK",
    "DATA_WIDTH",
    "ExpectedEntry",
    "ExpectedQueue",
    "HarnessError",
    "InvalidStateError",
    "MismatchReason",
    "MismatchRecord",
    "ProtocolViolation",
    "Scoreboard",
    "ScoreboardReport",
    "ScoreboardState",
    "StimulusGenerator",
    "StimulusProfile",
    "Transaction",
    "TransactionIdSequence",
]
