from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from splitguard.core.types import ExecutionStatus, OrderId, OrderSide, Symbol


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Trade:
    price: float
    size: float
    side: OrderSide
    timestamp: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class OrderBookSnapshot:
    bids: tuple[tuple[float, float], ...]
    asks: tuple[tuple[float, float], ...]
    timestamp: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        # Accept any sequence of levels but store immutable tuples
        object.__setattr__(self, "bids", tuple((float(p), float(s)) for p, s in self.bids))
        object.__setattr__(self, "asks", tuple((float(p), float(s)) for p, s in self.asks))

    @property
    def bid_volume(self) -> float:
        return sum(size for _, size in self.bids)

    @property
    def ask_volume(self) -> float:
        return sum(size for _, size in self.asks)

    @property
    def best_bid(self) -> float | None:
        return self.bids[0][0] if self.bids else None

    @property
    def best_ask(self) -> float | None:
        return self.asks[0][0] if self.asks else None

    @property
    def mid(self) -> float | None:
        if self.best_bid is None or self.best_ask is None:
            return None
        return (self.best_bid + self.best_ask) / 2.0


@dataclass(frozen=True)
class Ticker:
    symbol: Symbol
    bid: float
    ask: float
    last: float
    volume: float = 0.0
    timestamp: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class ExecutionNotice:
    """Execution or cancellation notification from the venue adapter."""
    order_id: OrderId
    side: OrderSide
    quantity: float
    price: float
    status: ExecutionStatus = ExecutionStatus.FILLED
    timestamp: datetime = field(default_factory=utc_now)
