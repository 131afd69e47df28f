# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/core/scoreboard.py

"""In-order scoreboard with an explicit Running/Draining/Closed lifecycle.

Expected side:
    Every request the generator issues is handed to on_expected(). Valid
    requests are run through the predictor (reference model) and appended
    to the expected queue; idle requests are only counted.

Observed side:
    Every response the monitor captures is handed to on_observed(). It is
    always paired with the head of the expected queue, never with any
    other entry:

        empty queue              -> UNEXPECTED_RESPONSE
        data != predicted        -> DATA_MISMATCH
        otherwise                -> matched

    When response_window_ticks is set, head entries that are older than
    the window when a response arrives are retired first as
    MISSING_RESPONSE. That lets a dropped response show up as exactly one
    missing entry instead of shifting every following pair.

Lifecycle:

    RUNNING --begin_drain()--> DRAINING --(queue empty)--------> CLOSED
       |                          |     --(advance() timeout)--> CLOSED
       +------abort()/close()-----+-----abort()/close()------> CLOSED

    Pending entries at close become MISSING_RESPONSE. Any input after
    CLOSED raises InvalidStateError.

Mismatches are findings, not exceptions: they are collected as
MismatchRecord objects and the run continues. report() yields the verdict,
which passes iff there are zero records.

All state transitions hold a single threading.Lock.
"""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable

from .errors import InvalidStateError, ProtocolViolation
from .expected_queue import ExpectedEntry, ExpectedQueue
from .transaction import Transaction

DRAIN_LATENCY_MULTIPLE = 4
DEFAULT_RESPONSE_LATENCY_TICKS = 1

Predictor = Callable[[Transaction], int]
CloseCallback = Callable[["ScoreboardReport"], None]

logger = logging.getLogger(__name__)


class ScoreboardState(enum.Enum):
    RUNNING = "running"
    DRAINING = "draining"
    CLOSED = "closed"


class CloseReason(enum.Enum):
    QUEUE_EMPTY = "queue_empty"
    TIMEOUT_EXCEEDED = "timeout_exceeded"
    ABORTED = "aborted"


class MismatchReason(enum.Enum):
    DATA_MISMATCH = "data_mismatch"
    UNEXPECTED_RESPONSE = "unexpected_response"
    MISSING_RESPONSE = "missing_response"


@dataclass(frozen=True)
class MismatchRecord:
    """One permanent finding. Never retried, never mutated."""

    reason: MismatchReason
    expected: Transaction | None = None
    actual: Transaction | None = None
    expected_response: int | None = None

    def describe(self) -> str:
        exp = "-" if self.expected is None else f"#{self.expected.id}"
        exp_data = (
            "-" if self.expected_response is None else f"0x{self.expected_response:08X}"
        )
        act = "-"
        if self.actual is not None and self.actual.response_data is not None:
            act = (
                f"0x{self.actual.response_data:08X}"
                f"@{self.actual.response_observed_at}"
            )
        return f"{self.reason.name}: expected {exp} {exp_data}, actual {act}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "reason": self.reason.name,
            "expected": None if self.expected is None else self.expected.to_dict(),
            "actual": None if self.actual is None else self.actual.to_dict(),
            "expected_response": self.expected_response,
        }


@dataclass(frozen=True)
class ScoreboardReport:
    """Snapshot of the scoreboard verdict."""

    state: ScoreboardState
    close_reason: CloseReason | None
    expected: int
    observed: int
    matched: int
    idle: int
    pending: int
    records: tuple[MismatchRecord, ...] = field(default_factory=tuple)
    abort_reason: str | None = None

    @property
    def passed(self) -> bool:
        return not self.records

    def count(self, reason: MismatchReason) -> int:
        return sum(1 for r in self.records if r.reason is reason)

    def render(self) -> str:
        verdict = "PASSED" if self.passed else "FAILED"
        lines = [
            f"Scoreboard {verdict}",
            f"  state        : {self.state.name}",
            "  close_reason : "
            + (self.close_reason.name if self.close_reason else "-"),
            f"  expected     : {self.expected}",
            f"  observed     : {self.observed}",
            f"  matched      : {self.matched}",
            f"  idle         : {self.idle}",
            f"  pending      : {self.pending}",
        ]
        if self.abort_reason:
            lines.append(f"  abort_reason : {self.abort_reason}")
        for reason in MismatchReason:
            lines.append(f"  {reason.name.lower():<20}: {self.count(reason)}")
        for rec in self.records:
            lines.append(f"    {rec.describe()}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "state": self.state.name,
            "close_reason": self.close_reason.name if self.close_reason else None,
            "abort_reason": self.abort_reason,
            "expected": self.expected,
            "observed": self.observed,
            "matched": self.matched,
            "idle": self.idle,
            "pending": self.pending,
            "records": [r.to_dict() for r in self.records],
        }


def identity_echo(t: Transaction) -> int:
    """Default predictor: the response equals the request data."""
    return t.request_data


class Scoreboard:
    """Pairs observed responses against the expected queue in strict FIFO order."""

    def __init__(
        self,
        predictor: Predictor | None = None,
        *,
        response_latency_ticks: int = DEFAULT_RESPONSE_LATENCY_TICKS,
        drain_timeout_ticks: int | None = None,
        response_window_ticks: int | None = None,
        name: str = "scoreboard",
    ) -> None:
        if response_latency_ticks < 0:
            raise ValueError(
                f"response_latency_ticks must be >= 0, got {response_latency_ticks}"
            )
        if drain_timeout_ticks is not None and drain_timeout_ticks <= 0:
            raise ValueError(
                f"drain_timeout_ticks must be > 0, got {drain_timeout_ticks}"
            )
        if response_window_ticks is not None and response_window_ticks < 0:
            raise ValueError(
                f"response_window_ticks must be >= 0, got {response_window_ticks}"
            )

        self.name = name
        self.predictor: Predictor = predictor or identity_echo
        self.response_latency_ticks = response_latency_ticks
        self.drain_timeout_ticks: int = (
            drain_timeout_ticks
            if drain_timeout_ticks is not None
            else max(1, DRAIN_LATENCY_MULTIPLE * response_latency_ticks)
        )
        self.response_window_ticks = response_window_ticks

        self._lock = threading.Lock()
        self._queue = ExpectedQueue()
        self._state = ScoreboardState.RUNNING
        self._close_reason: CloseReason | None = None
        self._abort_reason: str | None = None
        self._drain_started_at: int | None = None
        self._last_expected_id: int | None = None
        self._records: list[MismatchRecord] = []
        self._on_close: list[CloseCallback] = []

        self.expected_cnt = 0
        self.observed_cnt = 0
        self.matched_cnt = 0
        self.idle_cnt = 0

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> ScoreboardState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is ScoreboardState.CLOSED

    @property
    def close_reason(self) -> CloseReason | None:
        return self._close_reason

    @property
    def pending(self) -> int:
        return len(self._queue)

    @property
    def records(self) -> tuple[MismatchRecord, ...]:
        with self._lock:
            return tuple(self._records)

    def on_close(self, callback: CloseCallback) -> None:
        """Register a callback invoked once with the final report."""
        self._on_close.append(callback)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def on_expected(self, t: Transaction, issued_at: int | None = None) -> None:
        """Accept one issued request from the generator."""
        with self._lock:
            if self._state is not ScoreboardState.RUNNING:
                raise InvalidStateError(
                    f"{self.name}: on_expected(#{t.id}) while {self._state.name}"
                )
            if self._last_expected_id is not None and t.id <= self._last_expected_id:
                raise ProtocolViolation(
                    f"{self.name}: transaction ids must increase; "
                    f"got #{t.id} after #{self._last_expected_id}"
                )
            self._last_expected_id = t.id

            if not t.request_valid:
                self.idle_cnt += 1
                logger.debug("%s: idle request #%d", self.name, t.id)
                return

            predicted = self.predictor(t)
            self._queue.push(ExpectedEntry(t, predicted, issued_at))
            self.expected_cnt += 1
            logger.debug(
                "%s: expect #%d req=0x%08X pred=0x%08X pending=%d",
                self.name,
                t.id,
                t.request_data,
                predicted,
                len(self._queue),
            )

    def on_observed(self, t: Transaction) -> None:
        """Accept one response captured by the monitor."""
        report: ScoreboardReport | None = None
        with self._lock:
            if self._state is ScoreboardState.CLOSED:
                raise InvalidStateError(
                    f"{self.name}: on_observed({t!r}) after close"
                )
            if t.response_data is None:
                raise ProtocolViolation(
                    f"{self.name}: observed transaction #{t.id} has no response"
                )
            self.observed_cnt += 1

            if self.response_window_ticks is not None:
                self._expire_stale(t.response_observed_at)

            entry = self._queue.pop_head()
            if entry is None:
                self._record(MismatchRecord(MismatchReason.UNEXPECTED_RESPONSE, actual=t))
            elif t.response_data != entry.expected_response:
                self._record(
                    MismatchRecord(
                        MismatchReason.DATA_MISMATCH,
                        expected=entry.transaction,
                        actual=t,
                        expected_response=entry.expected_response,
                    )
                )
            else:
                self.matched_cnt += 1
                logger.debug(
                    "%s: match #%d data=0x%08X @%s",
                    self.name,
                    entry.transaction.id,
                    t.response_data,
                    t.response_observed_at,
                )

            if self._state is ScoreboardState.DRAINING and not self._queue:
                report = self._close_locked(CloseReason.QUEUE_EMPTY)
        self._notify(report)

    def begin_drain(self, now: int) -> None:
        """Stimulus is exhausted; wait for trailing responses."""
        report: ScoreboardReport | None = None
        with self._lock:
            if self._state is not ScoreboardState.RUNNING:
                raise InvalidStateError(
                    f"{self.name}: begin_drain while {self._state.name}"
                )
            self._state = ScoreboardState.DRAINING
            self._drain_started_at = now
            logger.debug(
                "%s: draining at %d, pending=%d, timeout=%d",
                self.name,
                now,
                len(self._queue),
                self.drain_timeout_ticks,
            )
            if not self._queue:
                report = self._close_locked(CloseReason.QUEUE_EMPTY)
        self._notify(report)

    def advance(self, now: int) -> None:
        """Move logical time forward; enforces the drain timeout."""
        report: ScoreboardReport | None = None
        with self._lock:
            if self._state is ScoreboardState.CLOSED:
                raise InvalidStateError(f"{self.name}: advance({now}) after close")
            if self._state is not ScoreboardState.DRAINING:
                return
            assert self._drain_started_at is not None
            if now - self._drain_started_at >= self.drain_timeout_ticks:
                logger.warning(
                    "%s: drain timeout after %d ticks with %d pending",
                    self.name,
                    now - self._drain_started_at,
                    len(self._queue),
                )
                report = self._close_locked(CloseReason.TIMEOUT_EXCEEDED)
        self._notify(report)

    def abort(self, reason: str = "") -> None:
        """Cancel the run; pending entries become MISSING_RESPONSE."""
        with self._lock:
            if self._state is ScoreboardState.CLOSED:
                raise InvalidStateError(f"{self.name}: abort after close")
            self._abort_reason = reason or None
            logger.error("%s: aborted (%s)", self.name, reason or "no reason given")
            report = self._close_locked(CloseReason.ABORTED)
        self._notify(report)

    def close(self) -> ScoreboardReport:
        """End of test. Idempotent; pending entries become MISSING_RESPONSE."""
        report: ScoreboardReport | None = None
        with self._lock:
            if self._state is not ScoreboardState.CLOSED:
                reason = (
                    CloseReason.QUEUE_EMPTY
                    if not self._queue
                    else CloseReason.TIMEOUT_EXCEEDED
                )
                report = self._close_locked(reason)
        self._notify(report)
        return self.report()

    def report(self) -> ScoreboardReport:
        with self._lock:
            return self._report_locked()

    # ------------------------------------------------------------------
    # Internals (caller holds the lock)
    # ------------------------------------------------------------------

    def _expire_stale(self, observed_at: int | None) -> None:
        assert self.response_window_ticks is not None
        if observed_at is None:
            return
        while True:
            head = self._queue.peek_head()
            if head is None or head.issued_at is None:
                return
            if head.issued_at + self.response_window_ticks >= observed_at:
                return
            self._queue.pop_head()
            self._record(
                MismatchRecord(
                    MismatchReason.MISSING_RESPONSE,
                    expected=head.transaction,
                    expected_response=head.expected_response,
                )
            )

    def _record(self, rec: MismatchRecord) -> None:
        self._records.append(rec)
        logger.error("%s: %s", self.name, rec.describe())

    def _close_locked(self, reason: CloseReason) -> ScoreboardReport:
        for entry in self._queue.drain_all():
            self._record(
                MismatchRecord(
                    MismatchReason.MISSING_RESPONSE,
                    expected=entry.transaction,
                    expected_response=entry.expected_response,
                )
            )
        self._state = ScoreboardState.CLOSED
        self._close_reason = reason
        report = self._report_locked()
        if report.passed:
            logger.info(
                "%s: closed (%s), %d matched", self.name, reason.name, self.matched_cnt
            )
        else:
            logger.error(
                "%s: closed (%s), %d matched, %d mismatch record(s)",
                self.name,
                reason.name,
                self.matched_cnt,
                len(self._records),
            )
        return report

    def _report_locked(self) -> ScoreboardReport:
        return ScoreboardReport(
            state=self._state,
            close_reason=self._close_reason,
            expected=self.expected_cnt,
            observed=self.observed_cnt,
            matched=self.matched_cnt,
            idle=self.idle_cnt,
            pending=len(self._queue),
            records=tuple(self._records),
            abort_reason=self._abort_reason,
        )

    def _notify(self, report: ScoreboardReport | None) -> None:
        # Callbacks run outside the lock so they may query the scoreboard.
        if report is None:
            return
        for cb in self._on_close:
            cb(report)
