import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


class FakeClock:
    """Manually advanced wall clock (seconds since epoch)."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def config():
    from splitguard.config.settings import AdverseSelectionConfig
    return AdverseSelectionConfig()


@pytest.fixture
def make_parent():
    """Factory for parent orders with sensible defaults."""
    from splitguard.core.types import OrderSide, OrderType, StrategyId
    from splitguard.execution.order import Order, ParentOrder

    def _make(quantity=1000, side=OrderSide.BUY, order_id="parent-1", **overrides):
        fields = dict(
            id=order_id,
            quantity=quantity,
            symbol="BTC/USD",
            side=side,
            order_type=OrderType.LIMIT,
            price=50_000.0,
            timestamp=1_700_000_000_000,
            exchange="BINANCE",
        )
        fields.update(overrides)
        return ParentOrder(order=Order(**fields), strategy_id=StrategyId("test-strategy"))

    return _make


def _book(bid_volume: float, ask_volume: float, bid: float = 99.9, ask: float = 100.1):
    """Single-level order book with the given aggregate volumes."""
    from splitguard.core.events import OrderBookSnapshot
    return OrderBookSnapshot(bids=[(bid, bid_volume)], asks=[(ask, ask_volume)])


def _trade(price: float, size: float = 1.0, side=None):
    from splitguard.core.events import Trade
    from splitguard.core.types import OrderSide
    return Trade(price=price, size=size, side=side or OrderSide.BUY)


@pytest.fixture
def make_book():
    return _book


@pytest.fixture
def make_trade():
    return _trade
