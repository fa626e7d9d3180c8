"""Market Regime Estimation

Derives microstructure signals from the rolling market window:
- Order-flow imbalance between the two most recent order-book snapshots
- Relative price impact of the latest trade
- Abnormal trade size versus the mean size in the window

These feed a priority-ordered regime classifier and a separate
adverse-selection trigger gated by a cooldown.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import numpy as np

from splitguard.config.settings import AdverseSelectionConfig
from splitguard.core.types import MarketState
from splitguard.market.window import MarketWindow

logger = logging.getLogger(__name__)

MIN_BOOKS_FOR_IMBALANCE = 2
MIN_TRADES_FOR_IMPACT = 2
MIN_TRADES_FOR_SIZE_CHECK = 10


@dataclass
class RegimeReading:
    """Point-in-time output of the estimator"""
    state: MarketState
    imbalance: float        # [-1, 1], positive = buy pressure
    price_impact: float     # relative, unsigned
    abnormal_size: bool
    in_cooldown: bool
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "imbalance": self.imbalance,
            "price_impact": self.price_impact,
            "abnormal_size": self.abnormal_size,
            "in_cooldown": self.in_cooldown,
            "timestamp": self.timestamp.isoformat(),
        }


class MarketRegimeEstimator:
    """Classifies market state and detects adverse selection from a MarketWindow."""

    def __init__(self,
                 window: MarketWindow,
                 config: AdverseSelectionConfig,
                 clock: Callable[[], float] = time.time):
        self.window = window
        self.config = config
        self.clock = clock

        self.market_state = MarketState.NORMAL
        self.last_trigger_time: float | None = None

    def order_flow_imbalance(self) -> float:
        """Normalized net change in bid vs ask volume; 0.0 on short history."""
        if self.window.book_count < MIN_BOOKS_FOR_IMBALANCE:
            return 0.0

        previous, current = self.window.last_books(2)
        delta_bid = current.bid_volume - previous.bid_volume
        delta_ask = current.ask_volume - previous.ask_volume

        total_change = abs(delta_bid) + abs(delta_ask)
        if total_change == 0:
            return 0.0
        return (delta_bid - delta_ask) / total_change

    def is_abnormal_trade_size(self) -> bool:
        if self.window.trade_count < MIN_TRADES_FOR_SIZE_CHECK:
            return False

        sizes = np.array([t.size for t in self.window.trades], dtype=float)
        mean_size = float(np.mean(sizes))
        return bool(sizes[-1] > mean_size * self.config.trade_size_threshold)

    def price_impact(self) -> float:
        if self.window.trade_count < MIN_TRADES_FOR_IMPACT:
            return 0.0

        previous, latest = self.window.last_trades(2)
        if previous.price == 0:
            return 0.0
        return abs(latest.price - previous.price) / previous.price

    def classify(self, imbalance: float | None = None, impact: float | None = None) -> MarketState:
        """Pure classification; first matching rule wins."""
        if imbalance is None:
            imbalance = self.order_flow_imbalance()
        if impact is None:
            impact = self.price_impact()

        if abs(imbalance) > self.config.imbalance_threshold:
            return MarketState.BUYER_INFORMED if imbalance > 0 else MarketState.SELLER_INFORMED
        if impact > 2 * self.config.price_impact_threshold:
            return MarketState.HIGH_VOLATILITY
        return MarketState.NORMAL

    def update_market_state(self) -> MarketState:
        """Reclassify from the current window; called on every order-book update."""
        new_state = self.classify()
        if new_state != self.market_state:
            logger.info(f"Market state changed: {self.market_state.value} -> {new_state.value}")
        self.market_state = new_state
        return new_state

    def in_cooldown(self, now: float | None = None) -> bool:
        if self.last_trigger_time is None:
            return False
        if now is None:
            now = self.clock()
        return (now - self.last_trigger_time) < self.config.cooldown_period

    def adverse_selection_conditions(self) -> bool:
        """Raw trigger condition, ignoring the cooldown."""
        impact = self.price_impact()
        if impact <= self.config.price_impact_threshold:
            return False

        if abs(self.order_flow_imbalance()) > self.config.imbalance_threshold:
            return True
        return self.is_abnormal_trade_size()

    def check_adverse_selection(self, now: float | None = None) -> bool:
        """Return True and start the cooldown when a new trigger fires."""
        if now is None:
            now = self.clock()

        if self.in_cooldown(now):
            return False
        if not self.adverse_selection_conditions():
            return False

        self.last_trigger_time = now
        logger.info(
            f"Adverse selection detected: imbalance={self.order_flow_imbalance():.3f}, "
            f"impact={self.price_impact():.5f}, state={self.market_state.value}"
        )
        return True

    def snapshot(self) -> RegimeReading:
        imbalance = self.order_flow_imbalance()
        impact = self.price_impact()
        return RegimeReading(
            state=self.market_state,
            imbalance=imbalance,
            price_impact=impact,
            abnormal_size=self.is_abnormal_trade_size(),
            in_cooldown=self.in_cooldown(),
            timestamp=datetime.fromtimestamp(self.clock(), tz=timezone.utc),
        )

    def reset(self) -> None:
        self.market_state = MarketState.NORMAL
        self.last_trigger_time = None
