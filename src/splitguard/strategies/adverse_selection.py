"""Adverse Selection Strategy

Monitors order flow, trade sizes and price impact for signs of trading
against better-informed participants, manages the resulting position risk
and splits parent orders according to the detected regime.

All mutable state (market window, position, regime, cooldown) lives on one
instance per instrument. Wrap the whole instance behind a single owner if it
is shared across threads.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

import numpy as np

from splitguard.config.settings import AdverseSelectionConfig
from splitguard.core.events import ExecutionNotice, OrderBookSnapshot, Ticker, Trade
from splitguard.core.types import MarketState, StrategyId
from splitguard.execution.order import ChildOrder, ParentOrder
from splitguard.execution.splitter import AdaptiveSplitter
from splitguard.market.window import MarketWindow
from splitguard.monitoring.metrics import MetricsRegistry
from splitguard.regime.estimator import MarketRegimeEstimator, RegimeReading
from splitguard.risk.ledger import Position, PositionLedger
from splitguard.strategies.base import OrderSplitStrategy, Strategy
from splitguard.strategies.signals import SignalGenerator, TradeSignal

logger = logging.getLogger(__name__)


class AdverseSelectionStrategy(Strategy, OrderSplitStrategy):
    def __init__(self,
                 strategy_id: StrategyId = StrategyId("adverse_selection"),
                 config: AdverseSelectionConfig | None = None,
                 rng: np.random.Generator | None = None,
                 clock: Callable[[], float] = time.time,
                 metrics: MetricsRegistry | None = None):
        super().__init__(strategy_id)
        self.config = config or AdverseSelectionConfig()
        self.clock = clock

        self.window = MarketWindow(window_size=self.config.window_size)
        self.estimator = MarketRegimeEstimator(self.window, self.config, clock=clock)
        self.ledger = PositionLedger()
        self.signal_generator = SignalGenerator(self.config, clock=clock)
        self.splitter = AdaptiveSplitter(self.config, rng=rng, clock=clock)

        self.metrics = metrics or MetricsRegistry()
        self._signals = self.metrics.counter("signals", "Trading signals emitted")
        self._triggers = self.metrics.counter("adverse_selection_triggers", "Adverse selection triggers fired")
        self._splits = self.metrics.counter("parent_orders_split", "Parent orders split")
        self._children = self.metrics.counter("child_orders", "Child orders produced")
        self._executions = self.metrics.counter("executions", "Execution notices applied")
        self._cancels = self.metrics.counter("cancellations", "Cancellation notices received")
        self._position_gauge = self.metrics.gauge("position_size", "Signed position size")
        self._imbalance_gauge = self.metrics.gauge("order_flow_imbalance", "Latest order-flow imbalance")

        logger.info(f"AdverseSelectionStrategy {strategy_id} initialized")

    @property
    def market_state(self) -> MarketState:
        return self.estimator.market_state

    @property
    def position(self) -> Position:
        return self.ledger.position

    def on_trade(self, trade: Trade) -> None:
        self.window.add_trade(trade)
        self.ledger.mark(trade.price)

    def on_order_book(self, book: OrderBookSnapshot) -> None:
        self.window.add_order_book(book)
        self.estimator.update_market_state()
        self._imbalance_gauge.set(self.estimator.order_flow_imbalance())

    def on_ticker(self, ticker: Ticker) -> None:
        self.ledger.mark(ticker.last)

    def on_order_executed(self, notice: ExecutionNotice) -> None:
        self.ledger.on_execution(notice.side, notice.quantity, notice.price)
        self._executions.inc()
        self._position_gauge.set(self.position.size)

    def on_order_cancelled(self, notice: ExecutionNotice) -> None:
        # Cancelled quantity never traded; the position is unchanged
        logger.info(f"Order {notice.order_id} cancelled ({notice.side.value} {notice.quantity})")
        self._cancels.inc()

    def _check_trigger(self) -> bool:
        fired = self.estimator.check_adverse_selection()
        if fired:
            self._triggers.inc()
        return fired

    def generate_signal(self) -> TradeSignal | None:
        signal = self.signal_generator.generate(
            position=self.position,
            price=self.window.last_price,
            adverse_selection=self._check_trigger,
            imbalance=self.estimator.order_flow_imbalance(),
        )
        if signal is not None:
            self._signals.inc()
            logger.info(f"Signal {signal.side.value} {signal.quantity} {signal.order_type.value}: {signal.reason}")
        return signal

    def split(self, parent: ParentOrder) -> list[ChildOrder]:
        children = self.splitter.split(parent, self.market_state)
        self._splits.inc()
        self._children.inc(len(children))
        return children

    def regime(self) -> RegimeReading:
        return self.estimator.snapshot()

    def reset(self) -> None:
        self.window.clear()
        self.estimator.reset()
        self.ledger.reset()
        self._position_gauge.set(0.0)
        self._imbalance_gauge.set(0.0)
        logger.info(f"Strategy {self.strategy_id} reset")
