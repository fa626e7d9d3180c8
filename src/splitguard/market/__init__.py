from .window import TRADE_HISTORY_SIZE, MarketWindow

__all__ = ["MarketWindow", "TRADE_HISTORY_SIZE"]
