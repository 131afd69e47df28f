# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: tests/test_dv_regress.py

import logging
import subprocess
from types import SimpleNamespace

import pytest

from dutcheck.tools import dv_regress
from dutcheck.utils import get_package_root

SHIPPED = get_package_root() / "duts" / "echo_ram" / "dv" / "dv_regress.yaml"


@pytest.fixture(autouse=True)
def restore_root_logger():
    """dv-regress reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def write(tmp_path, text):
    p = tmp_path / "dv_regress.yaml"
    p.write_text(text)
    return p


def test_shipped_regression_parses():
    defaults, jobs = dv_regress._load_config(SHIPPED)
    assert "--design=echo_ram" in defaults
    names = [j.name for j in jobs]
    assert "random_default" in names
    expect_fail = [j.name for j in jobs if "--expect=FAIL" in j.args]
    assert "bug_drop_second_response" in expect_fail
    assert "bug_corrupt_second_response" in expect_fail


def test_string_args_are_shell_split(tmp_path):
    p = write(
        tmp_path,
        "defaults:\n  args: \"--sim=icarus --waves=0\"\n"
        "jobs:\n  - name: a\n    args: \"--design=echo_ram --plusarg='+X=1'\"\n"
        "  - args: [\"--nseeds=2\"]\n",
    )
    defaults, jobs = dv_regress._load_config(p)
    assert defaults == ["--sim=icarus", "--waves=0"]
    assert jobs[0].args == ["--design=echo_ram", "--plusarg=+X=1"]
    assert jobs[1].name == "job1"


@pytest.mark.parametrize(
    "text",
    [
        "- just\n- a list\n",
        "jobs: []\n",
        "defaults: {}\n",
        "jobs:\n  - 3\n",
        "defaults: [1]\njobs:\n  - name: a\n",
        "jobs:\n  - name: a\n  - name: a\n",
    ],
)
def test_bad_config(tmp_path, text):
    with pytest.raises(ValueError):
        dv_regress._load_config(write(tmp_path, text))


def test_job_command_puts_job_args_after_defaults():
    job = dv_regress.Job(name="j", args=["--sim=verilator"])
    cmd = dv_regress.job_command(job, ["--sim=icarus"], "out")
    assert cmd == ["dv", "--sim=icarus", "--sim=verilator", "--outdir=out"]


def test_missing_file_fails(tmp_path):
    assert dv_regress.main(["--file", str(tmp_path / "nope.yaml")]) == 1


def test_run_regress_summarizes(tmp_path, monkeypatch, capsys):
    p = write(
        tmp_path,
        "jobs:\n  - name: good\n    args: [\"--test=ok\"]\n"
        "  - name: bad\n    args: [\"--test=broken\"]\n",
    )
    calls = []

    def fake_run(cmd, check):
        calls.append(cmd)
        return SimpleNamespace(returncode=1 if "--test=broken" in cmd else 0)

    monkeypatch.setattr(subprocess, "run", fake_run)
    log_file = tmp_path / "regress.log"
    rc = dv_regress.main(
        ["--file", str(p), "--outdir", str(tmp_path / "out"), "--log-file", str(log_file)]
    )

    assert rc == 1
    assert len(calls) == 2
    out = capsys.readouterr().out
    assert "PASS" in out and "--test=ok" in out
    assert "SUMMARY" in out
    assert "job: bad" in log_file.read_text()
    assert "\033[" not in log_file.read_text()
