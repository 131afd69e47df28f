# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/settings.py

"""Settings from the environment and simulator plusargs.

Resolution order for every setting:
    1. Environment variable NAME, then DUTCHECK_NAME
    2. Plusarg +NAME=value (a bare +NAME means "1")
    3. The caller's default

Plusargs are read from the first non-empty of PLUSARGS, COCOTB_PLUSARGS
and DUTCHECK_PLUSARGS (space separated). Values that do not parse fall
through to the next source.

This module has no simulator dependencies so the core and the CLI tools
can use it outside a cocotb run.
"""

from __future__ import annotations

import os
from typing import Callable, Iterable, Tuple, TypeVar

ENV_PREFIX = "DUTCHECK_"
PLUSARG_ENV_VARS: Tuple[str, ...] = ("PLUSARGS", "COCOTB_PLUSARGS", "DUTCHECK_PLUSARGS")

_TRUE_SET = {"1", "true", "yes", "y", "on"}
_FALSE_SET = {"0", "false", "no", "n", "off"}

V = TypeVar("V")


def parse_bool(s: str) -> bool | None:
    v = s.strip().lower()
    if v in _TRUE_SET:
        return True
    if v in _FALSE_SET:
        return False
    return None


def _parse_int(s: str) -> int | None:
    try:
        return int(s.strip(), 0)
    except ValueError:
        return None


def _parse_float(s: str) -> float | None:
    try:
        return float(s.strip())
    except ValueError:
        return None


def iter_plusargs() -> Iterable[str]:
    """Tokens of the first populated plusarg variable."""
    for var in PLUSARG_ENV_VARS:
        s = os.environ.get(var, "")
        if s:
            return s.split()
    return []


def get_plusarg(name: str) -> str | None:
    """Value of +NAME=val, "1" for a bare +NAME, else None."""
    prefix = f"+{name}="
    for tok in iter_plusargs():
        if tok.startswith(prefix):
            return tok[len(prefix) :]
        if tok == f"+{name}":
            return "1"
    return None


def _resolve(name: str, default: V, parse: Callable[[str], V | None]) -> V:
    for key in (name, f"{ENV_PREFIX}{name}"):
        raw = os.environ.get(key)
        if raw is not None:
            parsed = parse(raw)
            if parsed is not None:
                return parsed
    raw = get_plusarg(name)
    if raw is not None:
        parsed = parse(raw)
        if parsed is not None:
            return parsed
    return default


def get_bool_setting(name: str, default: bool) -> bool:
    return _resolve(name, default, parse_bool)


def get_str_setting(name: str, default: str) -> str:
    return _resolve(name, default, lambda s: s)


def get_int_setting(name: str, default: int) -> int:
    """Decimal or 0x-prefixed hex."""
    return _resolve(name, default, _parse_int)


def get_float_setting(name: str, default: float) -> float:
    return _resolve(name, default, _parse_float)


def get_optional_int_setting(name: str) -> int | None:
    """Like get_int_setting, but None when absent or <= 0."""
    v = _resolve(name, 0, _parse_int)
    return v if v > 0 else None
