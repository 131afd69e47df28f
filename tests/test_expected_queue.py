# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: tests/test_expected_queue.py

import dataclasses
import threading

import pytest

from dutcheck.core import ExpectedEntry, ExpectedQueue, Transaction


def entry(i, data=0):
    return ExpectedEntry(Transaction(i, request_data=data), data, issued_at=i)


def test_fifo_order():
    q = ExpectedQueue()
    assert not q
    assert q.pop_head() is None
    assert q.peek_head() is None
    for i in range(3):
        q.push(entry(i))
    assert len(q) == 3
    assert q.peek_head().transaction.id == 0
    assert [q.pop_head().transaction.id for _ in range(3)] == [0, 1, 2]
    assert not q


def test_snapshot_and_iter_do_not_consume():
    q = ExpectedQueue()
    q.push(entry(0))
    q.push(entry(1))
    assert [e.transaction.id for e in q] == [0, 1]
    assert [e.transaction.id for e in q.snapshot()] == [0, 1]
    assert len(q) == 2


def test_drain_all_empties_head_first():
    q = ExpectedQueue()
    for i in range(4):
        q.push(entry(i))
    assert [e.transaction.id for e in q.drain_all()] == [0, 1, 2, 3]
    assert len(q) == 0


def test_entries_are_frozen():
    e = entry(0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        e.expected_response = 1


def test_concurrent_push_pop():
    q = ExpectedQueue()
    n = 1000
    popped = []
    lock = threading.Lock()

    def producer(base):
        for i in range(n):
            q.push(entry(base + i))

    def consumer():
        got = 0
        while got < n:
            e = q.pop_head()
            if e is not None:
                with lock:
                    popped.append(e.transaction.id)
                got += 1

    threads = [
        threading.Thread(target=producer, args=(0,)),
        threading.Thread(target=producer, args=(n,)),
        threading.Thread(target=consumer),
        threading.Thread(target=consumer),
    ]
    for th in threads:
        th.start()
    for th in threads:
        th.join()
    assert sorted(popped) == list(range(2 * n))
    assert len(q) == 0
