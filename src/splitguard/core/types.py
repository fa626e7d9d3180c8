from __future__ import annotations

from enum import Enum
from typing import NewType, TypeAlias

OrderId = NewType('OrderId', str)
StrategyId = NewType('StrategyId', str)
Symbol: TypeAlias = str
Venue: TypeAlias = str
EpochMillis: TypeAlias = int


class OrderSide(Enum):
    BUY = "BUY"
    SELL = "SELL"


class OrderType(Enum):
    MARKET = "MARKET"
    LIMIT = "LIMIT"


class ProductType(Enum):
    SPOT = "SPOT"
    FUTURES = "FUTURES"
    OPTIONS = "OPTIONS"
    SWAP = "SWAP"
    CFD = "CFD"


class TimeInForce(Enum):
    GTC = "GTC"  # good till cancelled
    IOC = "IOC"  # immediate or cancel
    GTD = "GTD"  # good till date
    FOK = "FOK"  # fill or kill


class OptionType(Enum):
    CALL = "CALL"
    PUT = "PUT"


class AssetClass(Enum):
    STOCK = "STOCK"
    BOND = "BOND"
    COMMODITY = "COMMODITY"
    CURRENCY = "CURRENCY"
    CRYPTO = "CRYPTO"
    ETF = "ETF"
    MUTUAL_FUND = "MUTUAL_FUND"
    INDEX = "INDEX"
    EQUITY = "EQUITY"
    DERIVATIVE = "DERIVATIVE"


class MarketState(Enum):
    """Discrete market regime; exactly one is active at a time."""
    NORMAL = "NORMAL"
    BUYER_INFORMED = "BUYER_INFORMED"
    SELLER_INFORMED = "SELLER_INFORMED"
    HIGH_VOLATILITY = "HIGH_VOLATILITY"


class StrategyState(Enum):
    IDLE = "IDLE"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"
    ERROR = "ERROR"


class ExecutionStatus(Enum):
    FILLED = "FILLED"
    CANCELLED = "CANCELLED"
