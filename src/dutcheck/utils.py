# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/utils.py

"""Helpers shared by the dv and dv-regress command-line tools."""

from __future__ import annotations

import logging
import random
import re
import time
from pathlib import Path
from typing import Any

import yaml

RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
RESET = "\033[0m"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class NoColorFormatter(logging.Formatter):
    """Drops ANSI color sequences so log files stay plain text."""

    ANSI_ESCAPE = re.compile(r"\033\[[0-9;]*m")

    def format(self, record: logging.LogRecord) -> str:
        return self.ANSI_ESCAPE.sub("", super().format(record))


def configure_logger(
    verbosity: str = "info", log_file: Path | None = None
) -> logging.Logger:
    """Set up the root logger for a CLI run and return the tools logger.

    Console output keeps colors; the optional log file gets them stripped.
    Existing root handlers are replaced so repeated calls do not duplicate
    output.
    """
    level = verbosity.upper()
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    root.addHandler(console)

    if log_file:
        fh = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(NoColorFormatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
        root.addHandler(fh)

    return logging.getLogger("dutcheck.tools")


def absolutize_srclist(infile: Path, base_dir: Path, out_dir: Path) -> Path:
    """Write a copy of a simulator file list with every path made absolute.

    Relative entries resolve against base_dir. Nested "-f other.f" lists are
    inlined. Other +/- options pass through untouched. Returns the path of
    the written copy (out_dir/srclist.abs.f).
    """
    out = out_dir / "srclist.abs.f"
    lines_out: list[str] = []

    def expand(path: Path) -> None:
        for raw in path.read_text().splitlines():
            line = raw.strip()
            if not line or line.startswith("//"):
                continue
            if line.startswith("+incdir+"):
                inc = (base_dir / line[len("+incdir+") :]).resolve()
                lines_out.append(f"+incdir+{inc}")
            elif line.startswith("-f "):
                nested = (base_dir / line[3:].strip()).resolve()
                if nested.exists():
                    expand(nested)
                else:
                    # Left as-is so the simulator reports the missing file
                    lines_out.append(line)
            elif line.startswith(("-", "+")):
                lines_out.append(line)
            else:
                lines_out.append(str((base_dir / line).resolve()))

    expand(infile)
    out.write_text("\n".join(lines_out) + "\n")
    return out


def get_package_root() -> Path:
    """Return the installed dutcheck package directory."""
    return Path(__file__).resolve().parent


def load_yaml_mapping(path: Path) -> dict[str, Any]:
    """Load a YAML file that must contain a mapping at the top level."""
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top-level YAML must be a mapping")
    return data


def iso_utc() -> str:
    """Current time as ISO8601 with a Z suffix."""
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


def normalize_seed(rng: random.Random, s: str) -> int:
    """Turn a CLI seed string into a 32-bit int.

    Accepts decimal, 0x-prefixed hex, or rand/random/auto for a fresh seed
    drawn from rng. Exits with a message on anything else.
    """
    low = s.strip().lower()
    if low in {"rand", "random", "auto"}:
        return rng.getrandbits(32)
    try:
        return int(low, 0) & 0xFFFF_FFFF
    except ValueError as exc:
        raise SystemExit(
            f"[dv] Invalid seed '{s}'. Use decimal, 0x..., or 'random'."
        ) from exc


def green(s: str) -> str:
    return f"{GREEN}{s}{RESET}"


def red(s: str) -> str:
    return f"{RED}{s}{RESET}"


def yellow(s: str) -> str:
    return f"{YELLOW}{s}{RESET}"
