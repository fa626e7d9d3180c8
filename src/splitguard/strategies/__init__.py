from .adverse_selection import AdverseSelectionStrategy
from .base import MarketEvent, OrderSplitStrategy, Strategy
from .signals import SignalGenerator, TradeSignal

__all__ = [
    "AdverseSelectionStrategy",
    "MarketEvent",
    "OrderSplitStrategy",
    "SignalGenerator",
    "Strategy",
    "TradeSignal",
]
