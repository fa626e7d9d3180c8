"""End-to-end tests for the adverse selection strategy"""

from datetime import datetime, timezone

import pytest

from splitguard.core.errors import StrategyStateError
from splitguard.core.events import ExecutionNotice, Ticker
from splitguard.core.types import (
    ExecutionStatus,
    MarketState,
    OrderId,
    OrderSide,
    OrderType,
    StrategyId,
    StrategyState,
)
from splitguard.strategies.adverse_selection import AdverseSelectionStrategy
from splitguard.strategies.signals import FOLLOWING_INFORMED_FLOW, STOP_LOSS


@pytest.fixture
def strategy(config, rng, clock):
    return AdverseSelectionStrategy(StrategyId("as-test"), config=config, rng=rng, clock=clock)


def fill(side, quantity, price):
    return ExecutionNotice(order_id=OrderId("exec-1"), side=side, quantity=quantity, price=price)


class TestLifecycle:

    @pytest.mark.integration
    def test_transitions(self, strategy):
        assert strategy.state == StrategyState.IDLE
        strategy.start()
        assert strategy.is_active
        strategy.pause()
        assert strategy.state == StrategyState.PAUSED
        strategy.resume()
        assert strategy.state == StrategyState.RUNNING
        strategy.stop()
        assert strategy.state == StrategyState.IDLE

    @pytest.mark.integration
    def test_illegal_transitions(self, strategy):
        with pytest.raises(StrategyStateError):
            strategy.pause()
        with pytest.raises(StrategyStateError):
            strategy.resume()
        strategy.start()
        with pytest.raises(StrategyStateError):
            strategy.start()

    @pytest.mark.integration
    def test_idle_strategy_updates_state_but_emits_nothing(self, strategy, make_book, make_trade):
        for event in (make_book(100, 100), make_book(150, 50), make_trade(100.0), make_trade(100.5)):
            assert strategy.process(event) is None

        assert strategy.market_state == MarketState.BUYER_INFORMED
        assert strategy.window.trade_count == 2

    @pytest.mark.integration
    def test_error_state_on_failure(self, strategy, make_trade, monkeypatch):
        strategy.start()

        def broken(**kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(strategy.signal_generator, "generate", broken)
        with pytest.raises(RuntimeError):
            strategy.process(make_trade(100.0))
        assert strategy.state == StrategyState.ERROR

    @pytest.mark.integration
    def test_unsupported_event(self, strategy):
        with pytest.raises(TypeError):
            strategy.process("not an event")


class TestSignalFlow:

    @pytest.mark.integration
    def test_follow_informed_flow_then_stop_out(self, strategy, make_book, make_trade, clock):
        strategy.start()

        assert strategy.process(make_book(100, 100)) is None
        assert strategy.process(make_book(150, 50)) is None
        assert strategy.market_state == MarketState.BUYER_INFORMED

        assert strategy.process(make_trade(100.0)) is None
        signal = strategy.process(make_trade(100.5))
        assert signal is not None
        assert signal.side == OrderSide.BUY
        assert signal.order_type == OrderType.LIMIT
        assert signal.quantity == strategy.config.max_position_size
        assert signal.reason == FOLLOWING_INFORMED_FLOW
        assert signal.timestamp == datetime.fromtimestamp(clock.now, tz=timezone.utc)

        # Same conditions inside the cooldown do not re-fire
        clock.advance(5)
        assert strategy.process(make_trade(101.0)) is None
        assert strategy.metrics.counter("adverse_selection_triggers").value == 1

        strategy.process(fill(OrderSide.BUY, 1.0, 100.5))
        assert strategy.position.size == 1.0
        assert strategy.position.reference_price == 100.5

        signal = strategy.process(make_trade(98.0))
        assert signal.side == OrderSide.SELL
        assert signal.order_type == OrderType.MARKET
        assert signal.quantity == 1.0
        assert signal.reason == STOP_LOSS

    @pytest.mark.integration
    def test_cancellation_leaves_position(self, strategy):
        strategy.start()
        strategy.process(fill(OrderSide.BUY, 2.0, 100.0))
        notice = ExecutionNotice(order_id=OrderId("exec-2"), side=OrderSide.SELL, quantity=2.0,
                                 price=101.0, status=ExecutionStatus.CANCELLED)
        assert strategy.process(notice) is None
        assert strategy.position.size == 2.0
        assert strategy.metrics.counter("cancellations").value == 1

    @pytest.mark.integration
    def test_ticker_marks_position(self, strategy):
        strategy.process(fill(OrderSide.SELL, 2.0, 100.0))
        strategy.process(Ticker(symbol="BTC/USD", bid=98.9, ask=99.1, last=99.0))
        assert strategy.position.unrealized_pnl == pytest.approx(2.0)


class TestSplitting:

    @pytest.mark.integration
    def test_split_follows_market_state(self, strategy, make_book, make_parent):
        normal = strategy.split(make_parent(quantity=1000))
        assert len(normal) == 2

        strategy.on_order_book(make_book(100, 100))
        strategy.on_order_book(make_book(150, 50))
        assert strategy.market_state == MarketState.BUYER_INFORMED

        buys = strategy.split(make_parent(quantity=1000, side=OrderSide.BUY))
        sells = strategy.split(make_parent(quantity=1000, side=OrderSide.SELL))
        assert len(buys) == 5
        assert len(sells) == 1
        assert sum(c.quantity for c in buys) == 1000
        assert strategy.metrics.counter("child_orders").value == 8

    @pytest.mark.integration
    def test_reset(self, strategy, make_book, make_trade):
        strategy.start()
        for event in (make_book(100, 100), make_book(150, 50), make_trade(100.0), make_trade(100.5)):
            strategy.process(event)
        strategy.process(fill(OrderSide.BUY, 1.0, 100.5))

        strategy.reset()
        assert strategy.position.is_flat
        assert strategy.position.reference_price is None
        assert strategy.market_state == MarketState.NORMAL
        assert strategy.window.trade_count == 0
        assert strategy.estimator.last_trigger_time is None
        assert strategy.regime().state == MarketState.NORMAL
