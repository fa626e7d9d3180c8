from .errors import (
    ConfigurationError,
    InvalidExecutionError,
    InvalidOrderError,
    SplitguardError,
    StrategyStateError,
)
from .events import ExecutionNotice, OrderBookSnapshot, Ticker, Trade
from .types import (
    ExecutionStatus,
    MarketState,
    OrderId,
    OrderSide,
    OrderType,
    ProductType,
    StrategyId,
    StrategyState,
    TimeInForce,
)

__all__ = [
    "ConfigurationError",
    "ExecutionNotice",
    "ExecutionStatus",
    "InvalidExecutionError",
    "InvalidOrderError",
    "MarketState",
    "OrderBookSnapshot",
    "OrderId",
    "OrderSide",
    "OrderType",
    "ProductType",
    "SplitguardError",
    "StrategyId",
    "StrategyState",
    "StrategyStateError",
    "Ticker",
    "TimeInForce",
    "Trade",
]
