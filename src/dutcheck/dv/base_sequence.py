# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dutcheck/dv/base_sequence.py

"""Stimulus sequence fed by the seeded StimulusGenerator."""

from __future__ import annotations

import logging
from typing import Generic, Type, TypeVar, cast

import pyuvm

from dutcheck.core import StimulusGenerator, Transaction

from . import utils_dv
from .base_item import BaseItem
from .base_sequencer import BaseSequencer

T = TypeVar("T", bound=BaseItem)

GENERATOR_KEY = "stimulus_generator"


class BaseSequence(pyuvm.uvm_sequence, Generic[T]):
    """Plays the generator's transactions through the sequencer, in order.

    Execution flow:
        1. body_pre(): fetch the StimulusGenerator from config_db
           ("stimulus_generator", published by the env) and produce the
           transaction list for the profile's count and seed
        2. per transaction:
           make_item -> start_item -> set_item_inputs -> generator.issue
           -> finish_item
        3. body_post(): generator.finish(), which starts the drain

    issue() runs before finish_item so the scoreboard holds the expected
    entry before the DUT can possibly respond. finish_item returns only
    after the driver's item_done, i.e. after the DUT sampled the request,
    so item n+1 never overtakes item n.

    The concrete item type is resolved through the factory once per body,
    so a BaseItem type override applies to every item.
    """

    def __init__(self, name: str = "seq") -> None:
        super().__init__(name)
        self.logger: logging.Logger = logging.getLogger(f"uvm.{name}")
        utils_dv.configure_non_component_logger(self.logger)
        self.sequencer: BaseSequencer  # pyuvm sets this in start()
        self.generator: StimulusGenerator | None = None
        self.transactions: list[Transaction] = []
        self._item_class_constructor: Type[T] | None = None

    @property
    def seq_len(self) -> int:
        return len(self.transactions)

    async def body(self) -> None:
        self.logger.debug("BaseSequence body begin")
        await self.body_pre()
        gen = self.generator
        assert gen is not None, "body_pre did not bind a generator"
        sample_item = pyuvm.uvm_factory().create_object_by_type(BaseItem, name="item_type_lookup")
        self._item_class_constructor = cast(Type[T], type(sample_item))
        make = self.make_item
        set_inputs = self.set_item_inputs
        for i, tr in enumerate(self.transactions):
            item = make(i)
            await self.start_item(item)
            await set_inputs(item, tr)
            gen.issue(tr)
            await self.finish_item(item)
        await self.body_post()
        self.logger.debug("BaseSequence body end: %d item(s)", self.seq_len)

    async def body_pre(self) -> None:
        self.logger.debug("BaseSequence body_pre begin")
        gen = utils_dv.uvm_config_db_get(self.sequencer, GENERATOR_KEY)
        if not isinstance(gen, StimulusGenerator):
            raise TypeError(
                f"config_db[{GENERATOR_KEY!r}] is {type(gen).__name__}, "
                "expected StimulusGenerator"
            )
        self.generator = gen
        self.transactions = gen.produce()
        self.logger.info(
            "Stimulus: %d transaction(s), seed=%d, data_mode=%s",
            len(self.transactions),
            gen.profile.seed,
            gen.profile.data_mode,
        )
        self.logger.debug("BaseSequence body_pre end")

    def make_item(self, index: int) -> T:
        if self._item_class_constructor is None:
            create = pyuvm.uvm_factory().create_object_by_type
            return cast(T, create(BaseItem, name=f"tr{index}"))
        return self._item_class_constructor(f"tr{index}")

    async def set_item_inputs(self, item: T, tr: Transaction) -> None:
        """Attach the transaction; subclasses may add bench-specific fields."""
        item.tr = tr

    async def body_post(self) -> None:
        self.logger.debug("BaseSequence body_post begin")
        if self.generator is not None:
            self.generator.finish()
        self.logger.debug("BaseSequence body_post end")
