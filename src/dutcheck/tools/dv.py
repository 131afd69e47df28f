# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/tools/dv.py

"""Run one dutcheck bench test under the cocotb runner, once per seed.

Each seed is one pytest session around test_framework(), so the cocotb
verdict becomes the pytest exit status. The DUT is compiled on the first
seed; later seeds reuse the build. Every seed leaves a manifest.json in its
run directory with the status, the expectation and a replay command.

Bench knobs travel as plusargs:
    --profile=<yaml>  -> +STIM_PROFILE=<absolute path>
    --bug=<mode>      -> +ECHO_RAM_BUG=<mode>
    --plusarg=+X=Y    -> passed verbatim (repeatable)
The seed is exported as STIM_SEED (and the cocotb seed variables).

Typical usage:
    dv --design=echo_ram --test=test_echo_ram
    dv --design=echo_ram --test=test_echo_ram --nseeds=5
    dv --design=echo_ram --test=test_echo_ram --bug=1 --expect=FAIL
"""

from __future__ import annotations

import argparse
import json
import os
import random
import shlex
import sys
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Final, Sequence

import pytest
from cocotb_tools.runner import get_runner

# If executed as a script (path mode), __package__ is empty/None and __spec__ is None.
if (__package__ in (None, "")) and (__spec__ is None):
    print("[dv] ERROR: Please run as 'dv'", file=sys.stderr)
    raise SystemExit(2)

from dutcheck import utils  # isort:skip pylint: disable=wrong-import-position

PKG_ROOT: Final[Path] = utils.get_package_root()
FRAMEWORK_NODE = f"{Path(__file__).resolve()}::test_framework"
PYTEST_OPTS: tuple[str, ...] = ("-vv", "-s", "-ra", "-x")
DEFAULT_OUT_DIR = "out_dv"
DEFAULT_SEED = 42
SEED_FLAGS = ("--seeds", "--nseeds")


@dataclass(frozen=True)
class RunPlan:  # pylint: disable=too-many-instance-attributes
    """Everything one dv invocation needs, minus the seed."""

    design: str
    test: str
    sim: str
    outdir: Path
    verbosity: str
    waves: bool
    expect: str
    plusargs: tuple[str, ...]
    build_args: tuple[str, ...] = ()
    build_force: bool = False
    do_build: bool = True
    do_test: bool = True

    @property
    def build_dir(self) -> Path:
        leaf = f"{self.design}.{self.sim}" + (".waves" if self.waves else "")
        return self.outdir / "builds" / leaf

    @property
    def test_module(self) -> str:
        return f"dutcheck.duts.{self.design}.dv.{self.test}"

    def run_dir(self, seed: int) -> Path:
        return self.outdir / "tests" / f"{self.design}.{self.test}.{self.sim}.{seed}"

    def simulator_build_args(self) -> list[str]:
        args: list[str] = []
        if self.sim == "verilator":
            args += ["--timing", "-Wno-fatal"]
            if self.waves:
                args.append("--trace-fst")
        srclist = PKG_ROOT / "duts" / self.design / "rtl" / "srclist.f"
        self.build_dir.mkdir(parents=True, exist_ok=True)
        args += ["-f", str(utils.absolutize_srclist(srclist, PKG_ROOT, self.build_dir))]
        return args + list(self.build_args)

    def simulator_env(self, seed: int) -> dict[str, str]:
        env = {
            "STIM_SEED": str(seed),
            "RANDOM_SEED": str(seed),
            "COCOTB_RANDOM_SEED": str(seed),
            "COCOTB_LOG_LEVEL": self.verbosity.upper(),
        }
        if self.plusargs:
            env["COCOTB_PLUSARGS"] = " ".join(self.plusargs)
        return env


@dataclass
class _Active:
    plan: RunPlan | None = None
    seed: int = DEFAULT_SEED


_ACTIVE = _Active()


# === CLI ===


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description="Run a dutcheck bench test via cocotb, pyuvm and pytest",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument("--design", default="", help="DUT under dutcheck/duts/")
    ap.add_argument("--test", default="", help="test module under duts/<design>/dv/")
    ap.add_argument(
        "--cmd", choices=["build", "test", "both"], default="both", help="what to run"
    )
    ap.add_argument(
        "--sim",
        choices=["icarus", "verilator"],
        default=os.getenv("SIM", "icarus"),
        help="simulator",
    )
    ap.add_argument("--outdir", default=DEFAULT_OUT_DIR, help="output directory")
    ap.add_argument(
        "--verbosity",
        choices=["critical", "error", "warning", "info", "debug"],
        default=os.getenv("VERBOSITY", "info"),
        help="log level for dv and the bench",
    )
    ap.add_argument("--waves", choices=["0", "1"], default="0", help="dump waveforms")
    ap.add_argument("--build-force", action="store_true", help="always rebuild")
    ap.add_argument(
        "--build-arg",
        dest="build_args",
        action="append",
        default=[],
        help="extra simulator build arg (repeatable)",
    )
    ap.add_argument(
        "--expect", choices=["PASS", "FAIL"], default="PASS", help="expected verdict"
    )
    ap.add_argument(
        "--seeds", nargs="+", metavar="SEED", help="explicit seeds (decimal or 0x...)"
    )
    ap.add_argument("--nseeds", type=int, default=0, help="draw N random seeds")
    ap.add_argument(
        "--seed-base", type=int, default=1999, help="base for drawing random seeds"
    )
    ap.add_argument("--check-en", choices=["0", "1"], default="1", help="scoreboard")
    ap.add_argument("--coverage-en", choices=["0", "1"], default="1", help="coverage")
    ap.add_argument(
        "--profile", type=Path, default=None, help="YAML stimulus profile"
    )
    ap.add_argument(
        "--bug",
        type=int,
        default=0,
        help="DUT fault injection (0 none, 1 drop 2nd response, 2 corrupt it)",
    )
    ap.add_argument(
        "--plusarg",
        dest="plusargs",
        action="append",
        default=[],
        help="extra bench plusarg (repeatable), e.g. +RESPONSE_WINDOW_TICKS=2",
    )
    return ap.parse_args(argv)


def validate_args(args: argparse.Namespace) -> None:
    """Exit with a message on anything dv cannot run."""
    if not args.design:
        raise SystemExit("[dv]: error: argument --design required")
    if not (PKG_ROOT / "duts" / args.design / "rtl" / "srclist.f").is_file():
        raise SystemExit(f"[dv]: error: unknown design {args.design!r}")
    if args.cmd != "build" and not args.test:
        raise SystemExit(f"[dv]: error: argument --test required for --cmd={args.cmd}")
    if args.profile is not None and not args.profile.is_file():
        raise SystemExit(f"[dv]: error: profile not found: {args.profile}")
    if args.bug < 0:
        raise SystemExit(f"[dv]: error: --bug must be >= 0, got {args.bug}")
    bad = [p for p in args.plusargs if not p.startswith("+")]
    if bad:
        raise SystemExit(f"[dv]: error: plusargs must start with '+': {bad}")


def plan_from_args(args: argparse.Namespace) -> RunPlan:
    plusargs = [
        f"+CHECK_EN={args.check_en}",
        f"+COVERAGE_EN={args.coverage_en}",
    ]
    if args.profile is not None:
        plusargs.append(f"+STIM_PROFILE={args.profile.resolve()}")
    if args.bug:
        plusargs.append(f"+ECHO_RAM_BUG={args.bug}")
    plusargs += args.plusargs
    return RunPlan(
        design=args.design,
        test=args.test,
        sim=args.sim,
        outdir=Path(args.outdir).resolve(),
        verbosity=args.verbosity,
        waves=args.waves == "1",
        expect=args.expect,
        plusargs=tuple(plusargs),
        build_args=tuple(args.build_args),
        build_force=args.build_force,
        do_build=args.cmd in {"build", "both"},
        do_test=args.cmd in {"test", "both"},
    )


def choose_seeds(args: argparse.Namespace) -> list[int]:
    rng = random.Random(args.seed_base & 0xFFFF_FFFF)
    if args.seeds:
        return [utils.normalize_seed(rng, s) for s in args.seeds]
    if args.nseeds > 0:
        return [utils.normalize_seed(rng, "random") for _ in range(args.nseeds)]
    return [DEFAULT_SEED]


def replay_command(argv: Sequence[str], seed: int) -> list[str]:
    """The original command pinned to one seed."""
    kept: list[str] = []
    dropping = False
    for tok in argv:
        if tok.split("=", 1)[0] in SEED_FLAGS:
            dropping = "=" not in tok
            continue
        if dropping and not tok.startswith("-"):
            continue
        dropping = False
        kept.append(tok)
    return ["dv", *kept, "--seeds", str(seed)]


# === Simulator steps ===


def build(plan: RunPlan) -> None:
    print(f"\n[dv] building {plan.design} with {plan.sim} -> {plan.build_dir}\n")
    get_runner(plan.sim).build(
        hdl_toplevel=plan.design,
        timescale=("1ns", "1ps"),
        waves=plan.waves,
        build_dir=plan.build_dir,
        build_args=plan.simulator_build_args(),
        log_file=str(plan.build_dir / "build.log"),
        always=plan.build_force,
    )


def simulate(plan: RunPlan, seed: int) -> None:
    run_dir = plan.run_dir(seed)
    run_dir.mkdir(parents=True, exist_ok=True)
    print(f"\n[dv] running {plan.test_module} seed={seed} -> {run_dir}")
    if plan.plusargs:
        print(f"[dv] plusargs: {' '.join(plan.plusargs)}\n")
    # The runner writes its own results file when driven from pytest.
    results_xml = None
    if os.getenv("PYTEST_CURRENT_TEST") is None:
        results_xml = str(run_dir / "results.xml")
    get_runner(plan.sim).test(
        hdl_toplevel_lang="verilog",
        hdl_toplevel=plan.design,
        waves=plan.waves,
        build_dir=str(plan.build_dir),
        test_module=plan.test_module,
        test_dir=str(run_dir),
        log_file=str(run_dir / "test.log"),
        plusargs=list(plan.plusargs),
        extra_env=plan.simulator_env(seed),
        results_xml=results_xml,
    )


def test_framework() -> None:
    """Pytest entrypoint: build and/or simulate the active plan."""
    plan = _ACTIVE.plan
    if plan is None:
        raise RuntimeError("[dv] no active run plan; run through 'dv'")
    if plan.do_build:
        build(plan)
    elif not plan.build_dir.is_dir():
        raise RuntimeError(f"[dv] no build at {plan.build_dir}; run --cmd=build first")
    if plan.do_test:
        simulate(plan, _ACTIVE.seed)


# === Orchestration ===


def run_seed(plan: RunPlan, seed: int, argv: Sequence[str]) -> bool:
    """One pytest session for one seed. True when the verdict matches --expect."""
    _ACTIVE.plan = plan
    _ACTIVE.seed = seed
    # pytest imports this file by path; make that resolve to this module.
    sys.modules.setdefault("dutcheck.tools.dv", sys.modules[__name__])

    started = time.time()
    rc = pytest.main([*PYTEST_OPTS, FRAMEWORK_NODE])
    elapsed = time.time() - started

    status = "PASS" if rc == 0 else "FAIL"
    replay = " ".join(shlex.quote(t) for t in replay_command(argv, seed))
    run_dir = plan.run_dir(seed)
    run_dir.mkdir(parents=True, exist_ok=True)
    manifest = {
        "status": status,
        "expect": plan.expect,
        "seed": seed,
        "duration_s": round(elapsed, 3),
        "finished_at": utils.iso_utc(),
        "design": plan.design,
        "test": plan.test,
        "sim": plan.sim,
        "plusargs": list(plan.plusargs),
        "build_dir": str(plan.build_dir),
        "replay_cmd": replay,
    }
    (run_dir / "manifest.json").write_text(json.dumps(manifest, indent=2), encoding="utf-8")

    ok = status == plan.expect
    paint = utils.green if ok else utils.red
    tag = "EXPECTED" if ok else "UNEXPECTED"
    print(f"\n[dv] seed {seed}: {elapsed:.2f}s")
    print(f"{paint(f'{status} ({tag})')}: {replay}")
    return ok


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for `dv`. Returns 0 when every seed met its expectation."""
    argv = list(sys.argv[1:] if argv is None else argv)
    args = parse_args(argv)
    validate_args(args)
    utils.configure_logger(args.verbosity)
    plan = plan_from_args(args)

    if not plan.do_test:
        return 0 if run_seed(plan, 0, argv) else 1

    seeds = choose_seeds(args)
    print(f"[dv] seeds: {seeds}")
    failures = 0
    for idx, seed in enumerate(seeds):
        # Compile once; later seeds reuse the build.
        per_seed = plan if idx == 0 else replace(plan, do_build=False)
        if not run_seed(per_seed, seed, argv):
            failures += 1
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
