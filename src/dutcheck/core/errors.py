# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/core/errors.py

"""Exception hierarchy for the reconciliation core.

DUT findings are never raised: they are recorded as MismatchRecord objects
by the scoreboard. Exceptions here signal a broken harness contract.
"""

from __future__ import annotations


class HarnessError(Exception):
    """Base class for all harness errors."""


class ProtocolViolation(HarnessError):
    """A transaction or scoreboard contract was broken (fatal)."""


class InvalidStateError(ProtocolViolation):
    """Illegal mutation, or an operation attempted in the wrong state."""
