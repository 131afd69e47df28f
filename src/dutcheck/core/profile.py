# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/core/profile.py

"""Stimulus profile: the one configuration object a run is built from.

Test variants are profiles, not subclasses. A profile can come from a YAML
file, from env/plusarg settings, or be built directly in Python.

YAML example::

    count: 200
    seed: 7
    valid_probability: 0.8
    data_mode: ramp
    data_base: 0x10
    data_stride: 0x10
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Literal, Self, cast

import yaml
from pydantic import BaseModel, Field, NonNegativeInt, PositiveInt, field_validator

from dutcheck import settings

from .transaction import DATA_MASK

logger = logging.getLogger(__name__)

DataMode = Literal["uniform", "ramp"]


class StimulusProfile(BaseModel):
    """Count, seed and per-field distributions for one run."""

    count: PositiveInt = 100
    seed: int = 1
    valid_probability: float = Field(default=1.0, ge=0.0, le=1.0)
    data_mode: DataMode = "uniform"
    data_base: NonNegativeInt = 0
    data_stride: NonNegativeInt = 1
    drain_timeout_ticks: PositiveInt | None = None

    @field_validator("data_base", "data_stride")
    @classmethod
    def _fits_data_width(cls, v: int) -> int:
        if v > DATA_MASK:
            raise ValueError(f"0x{v:X} does not fit in 32 bits")
        return v

    def __str__(self) -> str:
        return f"{self.__class__.__name__}:\n" + json.dumps(self.model_dump(), indent=2)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Load and validate a profile from a YAML mapping."""
        p = Path(path)
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{p}: expected a mapping, got {type(data).__name__}")
        logger.debug("Loaded stimulus profile from %s", p)
        return cls.model_validate(data)

    @classmethod
    def from_settings(cls, base: StimulusProfile | None = None) -> Self:
        """Resolve a profile from env/plusargs on top of a base profile.

        STIM_PROFILE names a YAML file that replaces the base; the individual
        STIM_* settings then override single fields.
        """
        path = settings.get_str_setting("STIM_PROFILE", "")
        if path:
            start: StimulusProfile = cls.from_yaml(path)
        else:
            start = base if base is not None else cls()

        data: dict[str, Any] = start.model_dump()
        data["count"] = settings.get_int_setting("STIM_COUNT", start.count)
        data["seed"] = settings.get_int_setting("STIM_SEED", start.seed)
        data["data_mode"] = settings.get_str_setting("STIM_DATA_MODE", start.data_mode)
        data["data_base"] = settings.get_int_setting("STIM_DATA_BASE", start.data_base)
        data["data_stride"] = settings.get_int_setting(
            "STIM_DATA_STRIDE", start.data_stride
        )
        data["valid_probability"] = settings.get_float_setting(
            "STIM_VALID_PROB", start.valid_probability
        )
        return cast(Self, cls.model_validate(data))
