# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/tools/dv_regress.py

"""YAML-driven regression runner for dv.

All test parameters live in the YAML file. The command line only names the
file, the output directory, and how chatty the runner is.

YAML Schema:
    defaults:
      args: ["--sim=icarus", "--waves=0"]  # Optional global defaults

    jobs:
      - name: <job_name>
        args: ["--design=...", "--test=...", "--nseeds=2", ...]
      - name: <job_name2>
        args: "--design=... --test=... --bug=1 --expect=FAIL"

Job args follow the defaults, so a job can override any default flag.
Jobs that expect FAIL count as passing when the bench reports the failure.

Usage:
    dv-regress --file=src/dutcheck/duts/echo_ram/dv/dv_regress.yaml
"""

from __future__ import annotations

import argparse
import shlex
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from dutcheck import utils

DEFAULT_OUT_DIR = "out_dv"


@dataclass(frozen=True)
class Job:
    """A single regression job."""

    name: str
    args: list[str]


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description="dutcheck YAML regression (strict, YAML-only)",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument("--file", type=Path, required=True, help="Path to dv_regress.yaml")
    ap.add_argument("--outdir", default=DEFAULT_OUT_DIR, help="output directory")
    ap.add_argument(
        "--verbosity",
        choices=["critical", "error", "warning", "info", "debug"],
        default="info",
        help="runner log level",
    )
    ap.add_argument(
        "--log-file", type=Path, default=None, help="also log to this file"
    )
    return ap.parse_args(argv)


def _as_str_list(x: Any) -> list[str]:
    """Convert a YAML args value (None, str or list) to a list of strings."""
    if x is None:
        return []
    if isinstance(x, str):
        # allow a single string with spaces or a YAML list
        return shlex.split(x)
    return [str(t) for t in list(x)]


def _load_config(path: Path) -> tuple[list[str], list[Job]]:
    """Load the regression YAML.

    Returns:
        (default_args, jobs)

    Raises:
        ValueError: If the YAML structure is invalid or the job list is empty.
    """
    data = utils.load_yaml_mapping(path)

    defaults = data.get("defaults") or {}
    if not isinstance(defaults, dict):
        raise ValueError("'defaults' must be a mapping")
    default_args = _as_str_list(defaults.get("args"))

    jobs_raw = data.get("jobs")
    if not isinstance(jobs_raw, list) or not jobs_raw:
        raise ValueError("'jobs' must be a non-empty list")

    jobs: list[Job] = []
    names: set[str] = set()
    for idx, j in enumerate(jobs_raw):
        if not isinstance(j, dict):
            raise ValueError(f"jobs[{idx}] must be a mapping")
        name = str(j.get("name") or f"job{idx}")
        if name in names:
            raise ValueError(f"duplicate job name: {name!r}")
        names.add(name)
        jobs.append(Job(name=name, args=_as_str_list(j.get("args"))))

    return default_args, jobs


def _pretty_cmd(cmd: Sequence[str]) -> str:
    return " ".join(shlex.quote(x) for x in cmd)


def job_command(job: Job, default_args: Sequence[str], outdir: str) -> list[str]:
    """The dv command line for one job."""
    return ["dv", *default_args, *job.args, f"--outdir={outdir}"]


def run_regress(args: argparse.Namespace) -> int:
    """Run every job in order and print a PASS/FAIL report.

    Returns:
        0 if all jobs pass, 1 if any job fails or the file is missing.
    """
    log = utils.configure_logger(args.verbosity, args.log_file)

    yaml_path = args.file.resolve()
    if not yaml_path.is_file():
        log.error("No file found at %s", yaml_path)
        return 1
    log.info("file: %s", yaml_path)

    default_args, jobs = _load_config(yaml_path)

    passes: list[str] = []
    fails: list[str] = []

    for job in jobs:
        cmd = job_command(job, default_args, args.outdir)
        cmd_str = _pretty_cmd(cmd)
        log.info("job: %s", job.name)
        log.info("cmd: %s", cmd_str)
        job_rc = subprocess.run(cmd, check=False).returncode
        if job_rc == 0:
            passes.append(cmd_str)
        else:
            log.error("job %s failed (rc=%d)", job.name, job_rc)
            fails.append(cmd_str)

    print("\n[dv_regress] JOBS REPORT\n")
    for c in passes:
        print(f"{utils.green('PASS')}: {c}")
    for c in fails:
        print(f"{utils.red('FAIL')}: {c}")

    manifests = f"{args.outdir}/tests/*/manifest.json"
    print(f"\n[dv_regress] per-seed results: {utils.yellow(manifests)}")

    if fails:
        print(f"\n[dv_regress] SUMMARY: {utils.red('FAIL')}")
        return 1
    print(f"\n[dv_regress] SUMMARY: {utils.green('PASS')}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    return run_regress(args)


if __name__ == "__main__":
    sys.exit(main())
