"""Adaptive Order Splitting

Breaks a parent order into jittered child orders whose count and spacing
depend on the current market regime:
- Informed flow on our side: many small children, spread out
- Informed flow against us: few children, executed quickly
- High volatility: many children, executed quickly
- Normal: a moderate number at a moderate pace

Child sizes and schedule offsets are randomized to make the execution
footprint harder to detect. The random source and clock are injectable
so that schedules can be reproduced in tests.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, replace

import numpy as np

from splitguard.config.settings import AdverseSelectionConfig
from splitguard.core.types import MarketState, OrderId, OrderSide
from splitguard.execution.order import ChildOrder, ParentOrder

logger = logging.getLogger(__name__)

TIME_JITTER_PCT = 0.2  # +/- fraction of the base interval


@dataclass(frozen=True)
class SplitPlan:
    """Number of children and spacing chosen for a parent order"""
    num_splits: int
    base_interval_ms: int


class AdaptiveSplitter:
    """Regime-aware parent order splitter"""

    def __init__(self,
                 config: AdverseSelectionConfig,
                 rng: np.random.Generator | None = None,
                 clock: Callable[[], float] = time.time):
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng()
        self.clock = clock

    def plan(self, side: OrderSide, market_state: MarketState) -> SplitPlan:
        cfg = self.config

        if market_state == MarketState.BUYER_INFORMED:
            informed_side = OrderSide.BUY
        elif market_state == MarketState.SELLER_INFORMED:
            informed_side = OrderSide.SELL
        else:
            informed_side = None

        if market_state == MarketState.HIGH_VOLATILITY:
            num_splits, interval = cfg.max_splits, cfg.min_split_interval_ms
        elif informed_side is None:
            num_splits, interval = cfg.max_splits // 2, cfg.mid_split_interval_ms
        elif side == informed_side:
            num_splits, interval = cfg.max_splits, cfg.max_split_interval_ms
        else:
            num_splits, interval = cfg.max_splits // 3, cfg.min_split_interval_ms

        # Integer division can yield zero for small max_splits
        return SplitPlan(num_splits=max(1, num_splits), base_interval_ms=interval)

    def split(self, parent: ParentOrder, market_state: MarketState) -> list[ChildOrder]:
        """Split parent into child orders scheduled from now.

        The child quantities always sum to the parent quantity, and the
        children are never more numerous than the units available.
        """
        parent.validate()

        total = int(parent.quantity)
        plan = self.plan(parent.side, market_state)
        num_splits = min(plan.num_splits, total)

        quantities = self._child_quantities(total, num_splits)
        now_ms = int(self.clock() * 1000)
        offsets = self._schedule_offsets(num_splits, plan.base_interval_ms)

        children = []
        for index, (quantity, offset) in enumerate(zip(quantities, offsets)):
            insert_at = now_ms + offset
            order = replace(
                parent.order,
                id=OrderId(f"{parent.id}-{index}"),
                quantity=quantity,
                timestamp=insert_at,
            )
            children.append(ChildOrder(
                order=order,
                strategy_id=parent.strategy_id,
                parent_id=parent.id,
                insert_at=insert_at,
            ))

        logger.info(
            f"Split {parent.id} ({parent.side.value} {parent.quantity}) into {len(children)} "
            f"children under {market_state.value}, base interval {plan.base_interval_ms}ms"
        )
        return children

    def _child_quantities(self, total: int, num_splits: int) -> list[int]:
        base_quantity = total // num_splits
        variation = self.config.size_variation_pct
        remaining = total
        quantities = []

        for i in range(num_splits):
            if i == num_splits - 1:
                quantity = remaining
            else:
                factor = self.rng.uniform(1.0 - variation, 1.0 + variation)
                quantity = max(1, int(base_quantity * factor))
                # Leave at least one unit for every child still to come
                quantity = min(quantity, remaining - (num_splits - 1 - i))
            quantities.append(quantity)
            remaining -= quantity

        return quantities

    def _schedule_offsets(self, num_splits: int, base_interval_ms: int) -> list[int]:
        offsets = []
        for i in range(num_splits):
            if i == 0:
                offsets.append(0)  # first child goes immediately
                continue
            jitter = self.rng.uniform(-TIME_JITTER_PCT, TIME_JITTER_PCT) * base_interval_ms
            offsets.append(max(0, int(base_interval_ms * i + jitter)))
        return offsets
