from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from splitguard.core.errors import StrategyStateError
from splitguard.core.events import ExecutionNotice, OrderBookSnapshot, Ticker, Trade
from splitguard.core.types import ExecutionStatus, MarketState, StrategyId, StrategyState
from splitguard.execution.order import ChildOrder, ParentOrder
from splitguard.strategies.signals import TradeSignal

logger = logging.getLogger(__name__)

MarketEvent = Trade | OrderBookSnapshot | Ticker


class OrderSplitStrategy(ABC):
    """Anything that can break a parent order into child orders."""

    @abstractmethod
    def split(self, parent: ParentOrder) -> list[ChildOrder]:
        pass


class Strategy(ABC):
    """Synchronous strategy with an explicit lifecycle.

    Each event is processed to completion before the next one; instances
    hold no locks and must be owned by a single caller.
    """

    def __init__(self, strategy_id: StrategyId):
        self.strategy_id = strategy_id
        self.state = StrategyState.IDLE

    @property
    def is_active(self) -> bool:
        return self.state == StrategyState.RUNNING

    def start(self) -> None:
        if self.state != StrategyState.IDLE:
            raise StrategyStateError(f"Strategy {self.strategy_id} cannot start from {self.state.value}")
        self._transition(StrategyState.RUNNING)

    def pause(self) -> None:
        if self.state != StrategyState.RUNNING:
            raise StrategyStateError(f"Strategy {self.strategy_id} cannot pause from {self.state.value}")
        self._transition(StrategyState.PAUSED)

    def resume(self) -> None:
        if self.state != StrategyState.PAUSED:
            raise StrategyStateError(f"Strategy {self.strategy_id} cannot resume from {self.state.value}")
        self._transition(StrategyState.RUNNING)

    def stop(self) -> None:
        self._transition(StrategyState.IDLE)

    def fail(self, error: Exception) -> None:
        logger.error(f"Strategy {self.strategy_id} failed: {error}")
        self._transition(StrategyState.ERROR)

    def _transition(self, new_state: StrategyState) -> None:
        if new_state != self.state:
            logger.info(f"Strategy {self.strategy_id}: {self.state.value} -> {new_state.value}")
        self.state = new_state

    def process(self, event: MarketEvent | ExecutionNotice) -> TradeSignal | None:
        """Feed one event; a signal is only generated while running."""
        if isinstance(event, Trade):
            self.on_trade(event)
        elif isinstance(event, OrderBookSnapshot):
            self.on_order_book(event)
        elif isinstance(event, Ticker):
            self.on_ticker(event)
        elif isinstance(event, ExecutionNotice):
            if event.status == ExecutionStatus.CANCELLED:
                self.on_order_cancelled(event)
            else:
                self.on_order_executed(event)
            return None
        else:
            raise TypeError(f"Unsupported event type: {type(event).__name__}")

        if not self.is_active:
            return None
        try:
            return self.generate_signal()
        except Exception as e:
            self.fail(e)
            raise

    @property
    @abstractmethod
    def market_state(self) -> MarketState:
        pass

    @abstractmethod
    def on_trade(self, trade: Trade) -> None:
        pass

    @abstractmethod
    def on_order_book(self, book: OrderBookSnapshot) -> None:
        pass

    def on_ticker(self, ticker: Ticker) -> None:
        pass

    @abstractmethod
    def on_order_executed(self, notice: ExecutionNotice) -> None:
        pass

    def on_order_cancelled(self, notice: ExecutionNotice) -> None:
        pass

    @abstractmethod
    def generate_signal(self) -> TradeSignal | None:
        pass

    @abstractmethod
    def reset(self) -> None:
        pass
