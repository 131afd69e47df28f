# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: tests/test_echo_ram_model.py

import pytest

from dutcheck.duts.echo_ram import DEPTH, EchoRamModel


def test_accept_echoes_and_advances_pointer():
    m = EchoRamModel()
    assert m.accept(0x1234) == 0x1234
    assert m.wr_ptr == 1
    assert m.mem[0] == 0x1234
    assert m.occupancy == 1


def test_pointer_wraps():
    m = EchoRamModel()
    for i in range(DEPTH + 2):
        assert m.accept(i) == i
    assert m.wr_ptr == 2
    assert m.occupancy == DEPTH
    assert m.writes == DEPTH + 2
    assert m.mem[0] == DEPTH
    assert m.mem[2] == 2


def test_data_is_masked_to_32_bits():
    assert EchoRamModel().accept(0x1_0000_0005) == 5


def test_reset():
    m = EchoRamModel(depth=4)
    m.accept(9)
    m.reset()
    assert (m.wr_ptr, m.writes, m.mem) == (0, 0, [0, 0, 0, 0])


@pytest.mark.parametrize("depth", [0, 3, -8])
def test_depth_must_be_power_of_two(depth):
    with pytest.raises(ValueError):
        EchoRamModel(depth=depth)


def test_snapshot_state_lists_latest_slots():
    m = EchoRamModel(depth=8)
    for v in (0xA, 0xB, 0xC):
        m.accept(v)
    snap = m.snapshot_state(last=2)
    assert snap["wr_ptr"] == 3
    assert snap["occupancy"] == 3
    assert snap["last_slots"] == {2: "0x0000000C", 1: "0x0000000B"}
