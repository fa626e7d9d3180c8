from __future__ import annotations

import logging
from dataclasses import dataclass

from splitguard.core.errors import InvalidExecutionError
from splitguard.core.types import OrderSide

logger = logging.getLogger(__name__)

SIZE_EPSILON = 1e-9


@dataclass
class Position:
    size: float = 0.0                    # positive = long, negative = short
    reference_price: float | None = None
    realized_pnl: float = 0.0
    unrealized_pnl: float = 0.0

    @property
    def is_long(self) -> bool:
        return self.size > 0

    @property
    def is_short(self) -> bool:
        return self.size < 0

    @property
    def is_flat(self) -> bool:
        return self.size == 0


class PositionLedger:
    """Signed position with a single weighted-average reference price.

    Adding to a position (or opening from flat) blends the execution price
    into the reference price. Reducing leaves the reference untouched.
    Crossing through zero resets the reference to the crossing execution's
    price and discards the previous basis; realized PnL is not derived here.
    """

    def __init__(self):
        self.position = Position()
        self._mark_price: float | None = None

    def on_execution(self, side: OrderSide, quantity: float, price: float) -> Position:
        if quantity <= 0:
            raise InvalidExecutionError(f"Execution quantity must be positive, got {quantity}")
        if price <= 0:
            raise InvalidExecutionError(f"Execution price must be positive, got {price}")

        pos = self.position
        old_size = pos.size

        if side == OrderSide.BUY:
            if old_size < 0:
                pos.size = self._snap(old_size + quantity)
                if pos.size >= 0:
                    pos.reference_price = price
            else:
                pos.size = self._snap(old_size + quantity)
                pos.reference_price = self._blend(old_size, quantity, price)
        else:
            if old_size > 0:
                pos.size = self._snap(old_size - quantity)
                if pos.size <= 0:
                    pos.reference_price = price
            else:
                pos.size = self._snap(old_size - quantity)
                pos.reference_price = self._blend(old_size, quantity, price)

        if (old_size > 0 > pos.size) or (old_size < 0 < pos.size):
            logger.info(f"Position flipped {old_size} -> {pos.size}, reference reset to {price}")
        logger.debug(f"Execution {side.value} {quantity}@{price}: size={pos.size}, ref={pos.reference_price}")

        self.mark(self._mark_price if self._mark_price is not None else price)
        return pos

    @staticmethod
    def _snap(size: float) -> float:
        # Fractional closes leave float residue; anything this small is flat
        return 0.0 if abs(size) < SIZE_EPSILON else size

    def _blend(self, old_size: float, quantity: float, price: float) -> float:
        prior_ref = self.position.reference_price or 0.0
        new_abs = abs(old_size) + quantity
        return (abs(old_size) * prior_ref + quantity * price) / new_abs

    def mark(self, price: float) -> float:
        """Revalue unrealized PnL at price."""
        self._mark_price = price
        pos = self.position
        if pos.is_flat or pos.reference_price is None:
            pos.unrealized_pnl = 0.0
        else:
            pos.unrealized_pnl = pos.size * (price - pos.reference_price)
        return pos.unrealized_pnl

    def pnl_pct(self, price: float) -> float | None:
        """Return of the open position at price, positive when in profit."""
        pos = self.position
        if pos.is_flat or not pos.reference_price:
            return None
        change = (price - pos.reference_price) / pos.reference_price
        return change if pos.is_long else -change

    def reset(self) -> None:
        self.position = Position()
        self._mark_price = None
