from .order import CFD, ChildOrder, Futures, Options, Order, ParentOrder, Spot, Swap
from .splitter import AdaptiveSplitter, SplitPlan

__all__ = [
    "AdaptiveSplitter",
    "CFD",
    "ChildOrder",
    "Futures",
    "Options",
    "Order",
    "ParentOrder",
    "SplitPlan",
    "Spot",
    "Swap",
]
