# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/dv/utils_dv.py

"""Glue between pyuvm's config_db, cocotb signal handles and logging.

Config DB:
    uvm_config_db(): cached ConfigDB instance
    uvm_config_db_get_try(): value or None when the key is missing
    uvm_config_db_get(): value or ConfigKeyError
    uvm_config_db_get_typed(): value of an expected type, else a default
    uvm_config_db_set(): set a value

Signals:
    get_signal(): handle for dut.<name>, with a readable error when missing
    get_signal_value_int(): int from Logic/LogicArray, None on X/Z

Logging:
    desired_log_level(): level from COCOTB_LOG_LEVEL
    configure_component_logger(): set a component's level
    configure_non_component_logger(): set a plain logger's level

Example:
    >>> dut = uvm_config_db_get(self, "dut")
    >>> valid = get_signal(dut, "response_valid")
    >>> if get_signal_value_int(valid.value) == 1:
    ...     ...
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Any, TypeVar, Union, cast

import pyuvm
from cocotb.handle import SimHandleBase
from cocotb.types import Logic, LogicArray
from pyuvm import UVMConfigItemNotFound

T = TypeVar("T")


class ConfigKeyError(KeyError):
    """A required config_db key was never set."""


def desired_log_level(default: int = logging.INFO) -> int:
    """Map COCOTB_LOG_LEVEL (e.g. DEBUG) to a logging level."""
    name = (os.getenv("COCOTB_LOG_LEVEL") or "INFO").upper()
    level = getattr(logging, name, default)
    return level if isinstance(level, int) else default


def configure_component_logger(comp: pyuvm.uvm_component) -> None:
    comp.set_logging_level(desired_log_level())


def configure_non_component_logger(logger: logging.Logger) -> None:
    """Set the level and let records reach the cocotb root handlers."""
    logger.setLevel(desired_log_level())
    logger.propagate = True


@lru_cache(maxsize=1)
def uvm_config_db() -> Any:
    """Return pyuvm's ConfigDB singleton."""
    if callable(getattr(pyuvm, "ConfigDB", None)):
        return getattr(pyuvm, "ConfigDB")()
    return getattr(pyuvm, "uvm_config_db")()


def uvm_config_db_get_try(
    comp: pyuvm.uvm_component, key: str, inst: str = ""
) -> Any | None:
    """Return the value for key, or None when nothing matches.

    pyuvm accepts wildcards in set() only, so "*" is treated as "".
    """
    if inst == "*":
        inst = ""
    try:
        return cast(Any, uvm_config_db().get(comp, inst, key))
    except UVMConfigItemNotFound:
        return None


def uvm_config_db_get(comp: pyuvm.uvm_component, key: str) -> Any:
    """Like uvm_config_db_get_try but a missing key is an error."""
    val = uvm_config_db_get_try(comp, key)
    if val is not None:
        return val
    raise ConfigKeyError(
        f"config_db[{key!r}] missing for component '{comp.get_full_name()}'. "
        "Was it set in the test's build_phase?"
    )


def uvm_config_db_get_typed(
    comp: pyuvm.uvm_component, key: str, kind: type[T], default: T
) -> T:
    """Return the value when it is an instance of kind, else default.

    bool is a subclass of int, so an int lookup never accepts a bool.
    """
    val = uvm_config_db_get_try(comp, key)
    if isinstance(val, kind) and not (kind is int and isinstance(val, bool)):
        return val
    return default


def uvm_config_db_set(
    ctx: pyuvm.uvm_component | None, inst_name: str, key: str, value: Any
) -> None:
    uvm_config_db().set(ctx, inst_name, key, value)


def get_signal(dut: Any, signal_name: str) -> SimHandleBase:
    """Return dut.<signal_name>.

    Raises RuntimeError when the DUT has no such signal and TypeError when
    the handle is not a value-carrying signal.
    """
    signal = getattr(dut, signal_name, None)
    if signal is None:
        raise RuntimeError(f"Signal '{signal_name}' not found on DUT")
    if not hasattr(signal, "value"):
        raise TypeError(f"Signal '{signal_name}' has no .value property")
    return cast(SimHandleBase, signal)


def get_signal_value_int(sig: Union[Logic, LogicArray]) -> int | None:
    """Integer value of a sampled signal, or None if any bit is X/Z."""
    if isinstance(sig, Logic):
        return int(sig) if sig.is_resolvable else None
    return sig.to_unsigned() if sig.is_resolvable else None
