# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/dv/utils_cli.py

"""Command-line configuration for benches: settings plus factory overrides.

The get_*_setting resolvers live in dutcheck.settings (env > plusargs >
default) and are re-exported here so bench code has one import.

Factory overrides follow the uvm_cmdline_processor spelling:
    +uvm_set_type_override=<requested>,<override>[,<replace>]
    +uvm_set_inst_override=<requested>,<override>,<path>

Reference:
    UVM Class Reference Manual - uvm_cmdline_processor
    https://www.accellera.org/images/downloads/standards/uvm/UVM_Class_Reference_Manual_1.2.pdf

Example:
    >>> period = get_int_setting("CLOCK_PERIOD_PS", 1000)
    >>> apply_factory_overrides_from_plusargs(logger)
"""

from __future__ import annotations

import logging
from typing import Tuple

import pyuvm

from dutcheck.settings import (
    get_bool_setting,
    get_float_setting,
    get_int_setting,
    get_optional_int_setting,
    get_plusarg,
    get_str_setting,
    iter_plusargs,
)

__all__ = [
    "apply_factory_overrides_from_plusargs",
    "get_bool_setting",
    "get_float_setting",
    "get_int_setting",
    "get_optional_int_setting",
    "get_plusarg",
    "get_str_setting",
    "iter_plusargs",
]

# pyuvm raises lookup/value/type errors on bad override names
_FACTORY_EXC: Tuple[type[BaseException], ...] = (KeyError, ValueError, TypeError)


def apply_factory_overrides_from_plusargs(logger: logging.Logger | None = None) -> None:
    """Apply +uvm_set_type_override / +uvm_set_inst_override plusargs.

    Malformed tokens and unknown type names are logged and skipped.
    Safe to call more than once.
    """
    log = logger or logging.getLogger("dutcheck.utils_cli.factory")
    f = pyuvm.uvm_factory()

    for tok in iter_plusargs():
        if tok.startswith("+uvm_set_type_override="):
            parts = [p.strip() for p in tok.split("=", 1)[1].split(",")]
            if len(parts) not in (2, 3):
                log.warning("Bad +uvm_set_type_override: %s", tok)
                continue
            req, over = parts[0], parts[1]
            replace = len(parts) == 2 or parts[2] != "0"
            try:
                f.set_type_override_by_name(req, over, replace=replace)
                log.debug("Factory: type override %s -> %s (replace=%s)", req, over, replace)
            except _FACTORY_EXC as e:  # pragma: no cover
                log.warning("Override failed (%s): %s", tok, e)

        elif tok.startswith("+uvm_set_inst_override="):
            parts = [p.strip() for p in tok.split("=", 1)[1].split(",")]
            if len(parts) != 3:
                log.warning("Bad +uvm_set_inst_override: %s", tok)
                continue
            req, over, path = parts
            try:
                f.set_inst_override_by_name(req, over, path)
                log.debug("Factory: inst override %s @ %s -> %s", req, path, over)
            except _FACTORY_EXC as e:  # pragma: no cover
                log.warning("Override failed (%s): %s", tok, e)
