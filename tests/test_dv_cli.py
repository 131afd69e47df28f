# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: tests/test_dv_cli.py

"""dv argument handling and run plans, without a simulator."""

import pytest

pytest.importorskip("cocotb_tools.runner")

from dutcheck.tools import dv  # noqa: E402  pylint: disable=wrong-import-position


def plan_for(*extra):
    args = dv.parse_args(["--design=echo_ram", "--test=test_echo_ram", *extra])
    dv.validate_args(args)
    return dv.plan_from_args(args)


def test_parse_args_defaults():
    args = dv.parse_args(["--design=echo_ram", "--test=test_echo_ram"])
    assert args.bug == 0
    assert args.profile is None
    assert args.plusargs == []
    assert args.expect == "PASS"
    assert args.cmd == "both"


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["--design=echo_ram"],
        ["--design=nope", "--test=t"],
        ["--design=echo_ram", "--test=t", "--bug=-1"],
        ["--design=echo_ram", "--test=t", "--plusarg=NOPLUS=1"],
        ["--design=echo_ram", "--test=t", "--profile=/no/such/profile.yaml"],
    ],
)
def test_validate_args_rejects(argv):
    with pytest.raises(SystemExit):
        dv.validate_args(dv.parse_args(argv))


def test_build_only_needs_no_test():
    args = dv.parse_args(["--design=echo_ram", "--cmd=build"])
    dv.validate_args(args)
    plan = dv.plan_from_args(args)
    assert plan.do_build and not plan.do_test


def test_replay_command_pins_one_seed():
    argv = ["--design=x", "--seeds", "1", "2", "--nseeds", "3", "--seeds=4", "--nseeds=5", "--waves=0"]
    assert dv.replay_command(argv, 9) == ["dv", "--design=x", "--waves=0", "--seeds", "9"]


def test_plan_plusargs(tmp_path):
    profile = tmp_path / "p.yaml"
    profile.write_text("count: 3\n")
    plan = plan_for(
        "--bug=2",
        f"--profile={profile}",
        "--plusarg=+RESPONSE_WINDOW_TICKS=2",
        "--coverage-en=0",
    )
    assert plan.plusargs == (
        "+CHECK_EN=1",
        "+COVERAGE_EN=0",
        f"+STIM_PROFILE={profile.resolve()}",
        "+ECHO_RAM_BUG=2",
        "+RESPONSE_WINDOW_TICKS=2",
    )


def test_no_bug_plusarg_by_default():
    assert not any(p.startswith("+ECHO_RAM_BUG") for p in plan_for().plusargs)


def test_build_dir_depends_on_simulator_and_waves(tmp_path):
    plan = plan_for(f"--outdir={tmp_path}")
    assert plan.build_dir == tmp_path.resolve() / "builds" / "echo_ram.icarus"
    assert plan_for(f"--outdir={tmp_path}", "--sim=verilator").build_dir.name == "echo_ram.verilator"
    assert plan_for(f"--outdir={tmp_path}", "--waves=1").build_dir.name == "echo_ram.icarus.waves"
    # Runtime-only knobs share the build.
    assert plan_for(f"--outdir={tmp_path}", "--bug=1").build_dir == plan.build_dir


def test_simulator_env_exports_seed_and_plusargs(tmp_path):
    plan = plan_for(f"--outdir={tmp_path}", "--bug=1")
    env = plan.simulator_env(77)
    assert plan.test_module == "dutcheck.duts.echo_ram.dv.test_echo_ram"
    assert env["STIM_SEED"] == "77"
    assert env["COCOTB_RANDOM_SEED"] == "77"
    assert "+ECHO_RAM_BUG=1" in env["COCOTB_PLUSARGS"]
    assert plan.run_dir(77) == tmp_path.resolve() / "tests" / "echo_ram.test_echo_ram.icarus.77"


def test_verilator_build_args_are_non_fatal_on_warnings(tmp_path):
    args = plan_for(f"--outdir={tmp_path}", "--sim=verilator").simulator_build_args()
    assert "-Wno-fatal" in args
    srclist = args[args.index("-f") + 1]
    assert srclist.endswith("srclist.abs.f")


def test_icarus_build_args_have_no_verilator_switches(tmp_path):
    args = plan_for(f"--outdir={tmp_path}").simulator_build_args()
    assert "--timing" not in args


@pytest.mark.parametrize(
    "extra, expected",
    [
        ([], [dv.DEFAULT_SEED]),
        (["--seeds", "3", "0x10"], [3, 16]),
    ],
)
def test_choose_seeds(extra, expected):
    args = dv.parse_args(["--design=echo_ram", "--test=test_echo_ram", *extra])
    assert dv.choose_seeds(args) == expected


def test_nseeds_are_reproducible():
    args = dv.parse_args(["--design=echo_ram", "--test=test_echo_ram", "--nseeds=4"])
    seeds = dv.choose_seeds(args)
    assert len(seeds) == 4
    assert seeds == dv.choose_seeds(args)


def test_framework_without_plan_refuses_to_run(monkeypatch):
    monkeypatch.setattr(dv, "_ACTIVE", dv._Active())
    with pytest.raises(RuntimeError):
        dv.test_framework()
