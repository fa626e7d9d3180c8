from __future__ import annotations

from collections import deque

from splitguard.core.events import OrderBookSnapshot, Trade

TRADE_HISTORY_SIZE = 100


class MarketWindow:
    """Bounded FIFO history of trades and order-book snapshots.

    Entries are kept in arrival order; the caller is expected to deliver them
    already time-ordered. Once full, each append evicts the oldest entry.
    """

    def __init__(self, window_size: int = 20, trade_capacity: int = TRADE_HISTORY_SIZE):
        self.window_size = window_size
        self.trade_capacity = trade_capacity
        self._trades: deque[Trade] = deque(maxlen=trade_capacity)
        self._books: deque[OrderBookSnapshot] = deque(maxlen=window_size)

    def add_trade(self, trade: Trade) -> None:
        self._trades.append(trade)

    def add_order_book(self, book: OrderBookSnapshot) -> None:
        self._books.append(book)

    @property
    def trades(self) -> tuple[Trade, ...]:
        return tuple(self._trades)

    @property
    def order_books(self) -> tuple[OrderBookSnapshot, ...]:
        return tuple(self._books)

    @property
    def trade_count(self) -> int:
        return len(self._trades)

    @property
    def book_count(self) -> int:
        return len(self._books)

    @property
    def latest_trade(self) -> Trade | None:
        return self._trades[-1] if self._trades else None

    @property
    def last_price(self) -> float | None:
        return self._trades[-1].price if self._trades else None

    def last_trades(self, n: int) -> list[Trade]:
        if n <= 0:
            return []
        return list(self._trades)[-n:]

    def last_books(self, n: int) -> list[OrderBookSnapshot]:
        if n <= 0:
            return []
        return list(self._books)[-n:]

    def clear(self) -> None:
        self._trades.clear()
        self._books.clear()
