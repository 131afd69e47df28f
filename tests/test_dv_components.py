# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: tests/test_dv_components.py

"""Bench components that can be exercised without a simulator."""

import itertools

import pytest

pytest.importorskip("pyuvm")
pytest.importorskip("cocotb_coverage")

# pylint: disable=wrong-import-position
from dutcheck.core import Transaction  # noqa: E402
from dutcheck.duts.echo_ram.dv.echo_ram_coverage import EchoRamCoverage  # noqa: E402
from dutcheck.dv import BaseCoverage, BaseMonitor, utils_dv  # noqa: E402

_names = itertools.count()


def unique(stem):
    """Components hang off uvm_root, so names must not repeat."""
    return f"{stem}_{next(_names)}"


class ExplodingCoverage(BaseCoverage):
    def sample(self, tr):
        raise RuntimeError("sampler bug")


class SilentMonitor(BaseMonitor):
    def sample_dut(self, dut):
        return None


def test_sampler_failure_is_counted_not_raised():
    cov = ExplodingCoverage(unique("cov"), None)
    cov.record(Transaction.observed(0, 1, 1))
    assert cov.recorded == 1
    assert cov.sample_errors == 1


def test_disabled_coverage_records_nothing():
    cov = ExplodingCoverage(unique("cov"), None)
    utils_dv.uvm_config_db_set(cov, "", "coverage_en", False)
    cov.end_of_elaboration_phase()
    cov.record(Transaction.observed(0, 1, 1))
    assert cov.recorded == 0
    assert cov.sample_errors == 0


def test_echo_ram_coverage_counts_responses():
    cov = EchoRamCoverage(unique("echo_cov"), None)
    cov.record(Transaction.observed(0, 0x8000_0001, 3))
    cov.record(Transaction.observed(1, 0, 4))
    assert cov.sample_errors == 0
    assert cov.total == 2
    assert cov.msb_set == 1
    assert cov.zeros == 1


def test_monitor_emits_to_subscribers_in_order():
    mon = SilentMonitor(unique("mon"), None)
    seen = []
    mon.subscribe(lambda tr: seen.append(("a", tr)))
    mon.subscribe(lambda tr: seen.append(("b", tr)))
    tr = Transaction.observed(0, 5, 1)
    mon.emit(tr)
    assert [tag for tag, _ in seen] == ["a", "b"]
    assert all(got is tr for _, got in seen)


def test_monitor_subscriber_errors_propagate():
    mon = SilentMonitor(unique("mon"), None)

    def broken(tr):
        raise ValueError("harness contract")

    mon.subscribe(broken)
    with pytest.raises(ValueError):
        mon.emit(Transaction.observed(0, 5, 1))


def test_config_db_get_try_missing_key_is_none():
    mon = SilentMonitor(unique("mon"), None)
    assert utils_dv.uvm_config_db_get_try(mon, "never_set_anywhere") is None
    assert utils_dv.uvm_config_db_get_typed(mon, "never_set_anywhere", int, 7) == 7


def test_config_db_get_missing_key_names_the_key():
    mon = SilentMonitor(unique("mon"), None)
    with pytest.raises(utils_dv.ConfigKeyError, match="never_set_anywhere"):
        utils_dv.uvm_config_db_get(mon, "never_set_anywhere")
